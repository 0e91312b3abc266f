import asyncio
from contextlib import asynccontextmanager, suppress
from typing import Callable, Optional

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exception_handlers import http_exception_handler

from .core.config import get_settings
from .core.logging import configure_logging
from .api.deps import render
from .api.routes_dashboard import router as dashboard_router
from .api.routes_companies import router as companies_router
from .api.routes_branches import router as branches_router
from .api.routes_employees import router as employees_router
from .api.routes_contacts import router as contacts_router
from .api.routes_system import router as system_router
from .services.crm_api import CrmApiClient
from .services.health import log_api_health
from .services.theme import ThemeState, get_theme_state


def create_app(
    api_factory: Optional[Callable[[], CrmApiClient]] = None,
    theme_state: Optional[ThemeState] = None,
) -> FastAPI:
    """
    Build the admin console.

    - ``api_factory`` creates the shared CRM client at startup (defaults to
      one configured from settings); it is closed on shutdown.
    - ``theme_state`` defaults to the process-wide instance.
    """
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.crm_api = (api_factory or CrmApiClient)()
        app.state.theme_state = theme_state or get_theme_state()
        probe = None
        if settings.ENV.lower() == "dev":
            # Runs alongside startup; an unreachable backend only produces a log line
            probe = asyncio.create_task(log_api_health(app.state.crm_api))
        try:
            yield
        finally:
            if probe is not None and not probe.done():
                probe.cancel()
                with suppress(asyncio.CancelledError):
                    await probe
            await app.state.crm_api.aclose()

    app = FastAPI(title=f"{settings.APP_TITLE} Admin", lifespan=lifespan)

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code != 404:
            return await http_exception_handler(request, exc)
        return render(request, "not_found.html", title="Page not found", status_code=404)

    app.include_router(dashboard_router)
    app.include_router(companies_router)
    app.include_router(branches_router)
    app.include_router(employees_router)
    app.include_router(contacts_router)
    app.include_router(system_router)
    return app


app = create_app()
