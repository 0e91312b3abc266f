from __future__ import annotations

from typing import Any, List

from ..schemas.crm import (
    Branch,
    Company,
    Contact,
    ContactType,
    CreateBranchDto,
    CreateCompanyDto,
    CreateContactDto,
    CreateEmployeeDto,
    Employee,
)
from .lookups import (
    UNNAMED_BRANCH,
    UNNAMED_COMPANY,
    BranchInfo,
    Option,
    coerce_id,
    company_name,
    employee_branch_info,
    selectable,
)
from .view_state import ResourceView

FILTER_ALL = "All"
CONTACT_FILTERS = (FILTER_ALL,) + tuple(t.value for t in ContactType)

CONTACT_TYPE_BADGES = {
    ContactType.LEAD.value: "badge-lead",
    ContactType.CUSTOMER.value: "badge-customer",
    ContactType.PARTNER.value: "badge-partner",
}
DEFAULT_BADGE = "badge-default"


class CompaniesView(ResourceView[Company]):
    entity = "Company"
    plural = "companies"
    sources = ("companies",)
    create_dto = CreateCompanyDto
    empty_form = {
        "name": "",
        "address": "",
        "phone_number": "",
        "email": "",
        "country": "",
        "city": "",
    }


class BranchesView(ResourceView[Branch]):
    entity = "Branch"
    plural = "branches"
    sources = ("branches", "companies")
    create_dto = CreateBranchDto
    parent_field = "company_id"
    parent_prompt = "Please select a company"
    empty_form = {
        "company_id": "",
        "name": "",
        "address": "",
        "phone_number": "",
        "email": "",
        "city": "",
        "country": "",
    }

    @property
    def company_options(self) -> List[Option]:
        return selectable(self.collections["companies"], UNNAMED_COMPANY)

    def company_name(self, branch: Branch) -> str:
        return company_name(self.indexes["companies"], branch.company_id)


class EmployeesView(ResourceView[Employee]):
    entity = "Employee"
    plural = "employees"
    sources = ("employees", "branches", "companies")
    create_dto = CreateEmployeeDto
    parent_field = "branch_id"
    parent_prompt = "Please select a branch"
    empty_form = {
        "branch_id": "",
        "first_name": "",
        "last_name": "",
        "email": "",
        "phone_number": "",
        "job_title": "",
    }

    @property
    def branch_options(self) -> List[Option]:
        return selectable(self.collections["branches"], UNNAMED_BRANCH)

    def branch_info(self, employee: Employee) -> BranchInfo:
        return employee_branch_info(self.indexes["branches"], self.indexes["companies"], employee)


class ContactsView(ResourceView[Contact]):
    entity = "Contact"
    plural = "contacts"
    sources = ("contacts", "companies")
    create_dto = CreateContactDto
    parent_field = "company_id"
    parent_prompt = "Please select a company"
    empty_form = {
        "company_id": "",
        "first_name": "",
        "last_name": "",
        "email": "",
        "phone_number": "",
        "job_title": "",
        "contact_type": ContactType.CUSTOMER.value,
        "address": "",
        "city": "",
        "country": "",
    }

    def __init__(self, api: Any, filter_type: str = FILTER_ALL) -> None:
        super().__init__(api)
        self.filter_type = FILTER_ALL
        self.set_filter(filter_type)

    def set_filter(self, filter_type: str | None) -> None:
        # Unknown filters fall back to showing everything
        self.filter_type = filter_type if filter_type in CONTACT_FILTERS else FILTER_ALL

    @property
    def visible_items(self) -> List[Contact]:
        if self.filter_type == FILTER_ALL:
            return self.items
        return filter_by_type(self.items, self.filter_type)

    @property
    def rendered_items(self) -> List[Contact]:
        return [c for c in self.visible_items if coerce_id(c.id) is not None]

    @property
    def company_options(self) -> List[Option]:
        return selectable(self.collections["companies"], UNNAMED_COMPANY)

    def company_name(self, contact: Contact) -> str:
        return company_name(self.indexes["companies"], contact.company_id)

    @staticmethod
    def badge_class(contact_type: str) -> str:
        return CONTACT_TYPE_BADGES.get(contact_type, DEFAULT_BADGE)


def filter_by_type(contacts: List[Contact], contact_type: ContactType | str) -> List[Contact]:
    """Client-side equivalent of ``GET /contact/type/{type}``."""
    value = ContactType(contact_type).value
    return [c for c in contacts if c.contact_type == value]
