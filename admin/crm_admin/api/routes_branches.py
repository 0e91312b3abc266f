from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from ..services.crm_api import CrmApiClient
from ..services.pages import BranchesView
from .deps import get_api
from .pages import PageSpec, confirm_delete, handle_create, handle_delete, show_list

router = APIRouter(tags=["branches"])

PAGE = PageSpec(
    path="/branches",
    template="branches.html",
    title="Branches",
    description="Manage your company branch locations",
)


@router.get("/branches", response_class=HTMLResponse)
async def list_branches(request: Request, api: CrmApiClient = Depends(get_api)):
    return await show_list(request, BranchesView(api), PAGE)


@router.post("/branches")
async def create_branch(request: Request, api: CrmApiClient = Depends(get_api)):
    return await handle_create(request, BranchesView(api), PAGE)


@router.get("/branches/{branch_id}/delete", response_class=HTMLResponse)
def confirm_delete_branch(request: Request, branch_id: int):
    return confirm_delete(request, BranchesView.entity, branch_id, PAGE)


@router.post("/branches/{branch_id}/delete")
async def delete_branch(request: Request, branch_id: int, api: CrmApiClient = Depends(get_api)):
    return await handle_delete(request, BranchesView(api), branch_id, PAGE)
