from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from ..services.crm_api import CrmApiClient
from ..services.pages import CompaniesView
from .deps import get_api
from .pages import PageSpec, confirm_delete, handle_create, handle_delete, show_list

router = APIRouter(tags=["companies"])

PAGE = PageSpec(
    path="/companies",
    template="companies.html",
    title="Companies",
    description="Manage your business companies and organizations",
)


@router.get("/companies", response_class=HTMLResponse)
async def list_companies(request: Request, api: CrmApiClient = Depends(get_api)):
    return await show_list(request, CompaniesView(api), PAGE)


@router.post("/companies")
async def create_company(request: Request, api: CrmApiClient = Depends(get_api)):
    return await handle_create(request, CompaniesView(api), PAGE)


@router.get("/companies/{company_id}/delete", response_class=HTMLResponse)
def confirm_delete_company(request: Request, company_id: int):
    return confirm_delete(request, CompaniesView.entity, company_id, PAGE)


@router.post("/companies/{company_id}/delete")
async def delete_company(request: Request, company_id: int, api: CrmApiClient = Depends(get_api)):
    return await handle_delete(request, CompaniesView(api), company_id, PAGE)
