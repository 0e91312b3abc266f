from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from ..services.crm_api import CrmApiClient
from ..services.pages import FILTER_ALL, ContactsView
from .deps import get_api
from .pages import PageSpec, confirm_delete, handle_create, handle_delete, show_list

router = APIRouter(tags=["contacts"])

PAGE = PageSpec(
    path="/contacts",
    template="contacts.html",
    title="Contacts",
    description="Manage your customer contacts and leads",
    carry=("type",),
)


@router.get("/contacts", response_class=HTMLResponse)
async def list_contacts(
    request: Request,
    type: str = FILTER_ALL,
    api: CrmApiClient = Depends(get_api),
):
    # Filtering is client-side over the full listing; see ContactsView.visible_items
    view = ContactsView(api, filter_type=type)
    return await show_list(request, view, PAGE)


@router.post("/contacts")
async def create_contact(request: Request, api: CrmApiClient = Depends(get_api)):
    return await handle_create(request, ContactsView(api), PAGE)


@router.get("/contacts/{contact_id}/delete", response_class=HTMLResponse)
def confirm_delete_contact(request: Request, contact_id: int):
    return confirm_delete(request, ContactsView.entity, contact_id, PAGE)


@router.post("/contacts/{contact_id}/delete")
async def delete_contact(request: Request, contact_id: int, api: CrmApiClient = Depends(get_api)):
    return await handle_delete(request, ContactsView(api), contact_id, PAGE)

