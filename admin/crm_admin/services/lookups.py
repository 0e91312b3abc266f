from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterable, List, Optional, TypeVar

from ..schemas.crm import Branch, Company, Contact, Employee

UNKNOWN_COMPANY = "Unknown Company"
UNKNOWN_BRANCH = "Unknown Branch"
UNNAMED_COMPANY = "Unnamed Company"
UNNAMED_BRANCH = "Unnamed Branch"

T = TypeVar("T")


def coerce_id(value: Any) -> Optional[int]:
    """
    Parse an identifier from a record field or a form value.

    Returns a positive int, or None for anything malformed (blank, non-numeric,
    fractional, zero, negative, bool).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        return int(value) if value > 0 else None
    if isinstance(value, str):
        value = value.strip()
        if not value or not value.isdecimal():
            return None
        parsed = int(value)
        return parsed if parsed > 0 else None
    return None


class IdIndex(Generic[T]):
    """
    Read-through lookup keyed by id over an already-fetched collection.

    Built once per fetch; records with a malformed id are left out. Lookups
    with a malformed key simply miss.
    """

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._by_id: Dict[int, T] = {}
        for item in items:
            key = coerce_id(getattr(item, "id", None))
            if key is not None:
                self._by_id.setdefault(key, item)

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, key: Any) -> bool:
        return self.get(key) is not None

    def get(self, key: Any) -> Optional[T]:
        parsed = coerce_id(key)
        if parsed is None:
            return None
        return self._by_id.get(parsed)


def company_name(companies: IdIndex[Company], company_id: Any) -> str:
    company = companies.get(company_id)
    return (company.name if company else "") or UNKNOWN_COMPANY


def branch_company_name(companies: IdIndex[Company], branch: Branch) -> str:
    return company_name(companies, branch.company_id)


def contact_company_name(companies: IdIndex[Company], contact: Contact) -> str:
    return company_name(companies, contact.company_id)


@dataclass(frozen=True)
class BranchInfo:
    branch_name: str
    company_name: str


def employee_branch_info(
    branches: IdIndex[Branch],
    companies: IdIndex[Company],
    employee: Employee,
) -> BranchInfo:
    """Resolve Employee -> Branch -> Company, degrading each hop independently."""
    branch = branches.get(employee.branch_id)
    if branch is None:
        return BranchInfo(UNKNOWN_BRANCH, UNKNOWN_COMPANY)
    return BranchInfo(
        branch_name=branch.name or UNKNOWN_BRANCH,
        company_name=company_name(companies, branch.company_id),
    )


@dataclass(frozen=True)
class Option:
    value: int
    label: str


def selectable(items: Iterable[Any], fallback_label: str) -> List[Option]:
    """Form choices for a parent list; records with a malformed id are dropped."""
    options: List[Option] = []
    for item in items:
        key = coerce_id(getattr(item, "id", None))
        if key is None:
            continue
        options.append(Option(key, getattr(item, "name", "") or fallback_label))
    return options
