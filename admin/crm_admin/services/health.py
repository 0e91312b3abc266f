from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal

from .crm_api import CrmApiClient

logger = logging.getLogger(__name__)


@dataclass
class HealthCheckResult:
    status: Literal["success", "error"]
    message: str
    details: Any = None

    def to_dict(self) -> dict:
        out: dict = {"status": self.status, "message": self.message}
        if self.details is not None:
            out["details"] = repr(self.details)
        return out


async def check_api_health(api: CrmApiClient) -> HealthCheckResult:
    """Check the backend is reachable by listing companies, the simplest endpoint."""
    try:
        await api.companies.get_all()
    except Exception as e:
        return HealthCheckResult(
            status="error",
            message=f"Backend connection failed: {e}",
            details=e,
        )

    return HealthCheckResult(
        status="success",
        message="Backend API is connected and responding",
    )


async def log_api_health(api: CrmApiClient) -> HealthCheckResult:
    logger.info("Checking backend API connection")
    result = await check_api_health(api)
    if result.status == "success":
        logger.info(result.message)
    else:
        logger.error(result.message, extra={"status": getattr(result.details, "status", None)})
    return result
