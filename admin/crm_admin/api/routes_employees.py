from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from ..services.crm_api import CrmApiClient
from ..services.pages import EmployeesView
from .deps import get_api
from .pages import PageSpec, confirm_delete, handle_create, handle_delete, show_list

router = APIRouter(tags=["employees"])

PAGE = PageSpec(
    path="/employees",
    template="employees.html",
    title="Employees",
    description="Manage your team members across branches",
)


@router.get("/employees", response_class=HTMLResponse)
async def list_employees(request: Request, api: CrmApiClient = Depends(get_api)):
    return await show_list(request, EmployeesView(api), PAGE)


@router.post("/employees")
async def create_employee(request: Request, api: CrmApiClient = Depends(get_api)):
    return await handle_create(request, EmployeesView(api), PAGE)


@router.get("/employees/{employee_id}/delete", response_class=HTMLResponse)
def confirm_delete_employee(request: Request, employee_id: int):
    return confirm_delete(request, EmployeesView.entity, employee_id, PAGE)


@router.post("/employees/{employee_id}/delete")
async def delete_employee(request: Request, employee_id: int, api: CrmApiClient = Depends(get_api)):
    return await handle_delete(request, EmployeesView(api), employee_id, PAGE)
