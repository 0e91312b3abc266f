from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import HTMLResponse, RedirectResponse

from ..services.view_state import ResourceView
from .deps import redirect_with_toast, render


@dataclass(frozen=True)
class PageSpec:
    """Static description of one resource page."""

    path: str
    template: str
    title: str
    description: str
    # Query parameters that survive create/delete round trips (e.g. a list filter)
    carry: Tuple[str, ...] = ()


def carried_query(request: Request, page: PageSpec) -> str:
    params = {k: request.query_params[k] for k in page.carry if request.query_params.get(k)}
    return urlencode(params)


def list_url(request: Request, page: PageSpec) -> str:
    query = carried_query(request, page)
    return f"{page.path}?{query}" if query else page.path


async def show_list(
    request: Request,
    view: ResourceView,
    page: PageSpec,
) -> HTMLResponse:
    """Render the list, opening the create dialog when ``?new=1`` is given."""
    try:
        await view.refresh()
        if request.query_params.get("new") == "1":
            view.open_dialog()
        return _render_view(request, view, page)
    finally:
        view.close()


async def handle_create(
    request: Request,
    view: ResourceView,
    page: PageSpec,
) -> HTMLResponse | RedirectResponse:
    form = await request.form()
    try:
        if await view.submit_create(form, refresh=False):
            return redirect_with_toast(list_url(request, page), view.notifications)
        # Failed create: dialog stays open with the entered values
        await view.refresh()
        return _render_view(request, view, page, status_code=400)
    finally:
        view.close()


def confirm_delete(request: Request, entity: str, item_id: int, page: PageSpec) -> HTMLResponse:
    """Destructive-action confirmation; the POST below only acts on confirm=yes."""
    query = carried_query(request, page)
    action = f"{page.path}/{item_id}/delete"
    return render(
        request,
        "confirm_delete.html",
        title=page.title,
        description=page.description,
        entity=entity.lower(),
        item_id=item_id,
        action=f"{action}?{query}" if query else action,
        cancel_href=list_url(request, page),
    )


async def handle_delete(
    request: Request,
    view: ResourceView,
    item_id: int,
    page: PageSpec,
) -> RedirectResponse:
    form = await request.form()
    confirmed = form.get("confirm") == "yes"
    try:
        await view.delete(item_id, confirmed=confirmed, refresh=False)
        return redirect_with_toast(list_url(request, page), view.notifications)
    finally:
        view.close()


def _render_view(
    request: Request,
    view: ResourceView,
    page: PageSpec,
    status_code: int = 200,
) -> HTMLResponse:
    return render(
        request,
        page.template,
        title=page.title,
        description=page.description,
        notifications=view.notifications,
        status_code=status_code,
        view=view,
        page=page,
        carried=carried_query(request, page),
        list_href=list_url(request, page),
    )
