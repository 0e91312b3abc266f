from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # core
    ENV: str = "dev"
    APP_TITLE: str = "BaraaCRM"
    LOG_LEVEL: str = "INFO"

    # remote CRM API (fixed /api prefix is part of the base address)
    CRM_API_URL: str = "https://localhost:7005/api"
    CRM_API_TIMEOUT_SECONDS: float = 15.0
    # Local dev backends usually run with a self-signed certificate
    CRM_API_VERIFY_TLS: bool = True

    # theme
    DEFAULT_THEME: str = "light"
    THEME_SWITCHABLE: bool = True
    THEME_STATE_PATH: str = ".crm_admin_theme.json"

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache
def get_settings() -> Settings:
    return Settings()
