from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, List
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from ..core.config import get_settings
from ..schemas.crm import ContactType
from ..services.crm_api import CrmApiClient
from ..services.pages import CONTACT_FILTERS
from ..services.theme import ThemeState
from ..services.view_state import Notification

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals.update(
    contact_filters=CONTACT_FILTERS,
    contact_types=[t.value for t in ContactType],
)

NAV_ITEMS = [
    {"label": "Dashboard", "href": "/"},
    {"label": "Companies", "href": "/companies"},
    {"label": "Branches", "href": "/branches"},
    {"label": "Employees", "href": "/employees"},
    {"label": "Contacts", "href": "/contacts"},
]

TOAST_LEVELS = ("success", "error")


def get_api(request: Request) -> CrmApiClient:
    return request.app.state.crm_api


def get_theme(request: Request) -> ThemeState:
    return request.app.state.theme_state


def toasts_from_query(request: Request) -> List[Notification]:
    """Toast carried across a post/redirect/get round trip."""
    message = request.query_params.get("toast")
    if not message:
        return []
    level = request.query_params.get("level", "success")
    if level not in TOAST_LEVELS:
        level = "success"
    return [Notification(level, message)]


def redirect_with_toast(url: str, notifications: Iterable[Notification] = ()) -> RedirectResponse:
    # Only the last notification survives the redirect, as with a toast
    last = None
    for last in notifications:
        pass
    if last is not None:
        sep = "&" if "?" in url else "?"
        url = f"{url}{sep}{urlencode({'toast': last.message, 'level': last.level})}"
    return RedirectResponse(url, status_code=303)


def render(
    request: Request,
    template: str,
    *,
    title: str | None = None,
    description: str | None = None,
    notifications: Iterable[Notification] = (),
    status_code: int = 200,
    **context: Any,
) -> HTMLResponse:
    theme = get_theme(request)
    return templates.TemplateResponse(
        request,
        template,
        {
            "app_title": get_settings().APP_TITLE,
            "nav_items": NAV_ITEMS,
            "current_path": request.url.path,
            "title": title,
            "description": description,
            "theme": theme.current,
            "theme_switchable": theme.switchable,
            "notifications": [*toasts_from_query(request), *notifications],
            **context,
        },
        status_code=status_code,
    )
