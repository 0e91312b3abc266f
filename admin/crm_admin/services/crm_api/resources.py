from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ...schemas.crm import (
    Branch,
    Company,
    Contact,
    ContactType,
    CreateBranchDto,
    CreateCompanyDto,
    CreateContactDto,
    CreateEmployeeDto,
    Employee,
    UpdateBranchDto,
    UpdateCompanyDto,
    UpdateContactDto,
    UpdateEmployeeDto,
)

if TYPE_CHECKING:
    from .client import CrmApiClient

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)


class ResourceApi(Generic[R]):
    """
    Method table for one REST resource family (``/{path}``, ``/{path}/{id}``).

    Subclasses only declare the path, the record model and the DTO types.
    """

    path: ClassVar[str]
    model: ClassVar[Type[BaseModel]]
    create_dto: ClassVar[Type[BaseModel]]
    update_dto: ClassVar[Type[BaseModel]]

    def __init__(self, client: "CrmApiClient") -> None:
        self._client = client

    @property
    def name(self) -> str:
        return self.path.strip("/")

    def _parse_one(self, data: Any) -> Optional[R]:
        if data is None:
            return None
        return self.model.model_validate(data)  # type: ignore[return-value]

    def _parse_list(self, data: Any) -> List[R]:
        # Anything but a JSON array is treated as an empty listing
        if not isinstance(data, list):
            if data is not None:
                logger.warning(
                    "Expected a list from %s, got %s",
                    self.path,
                    type(data).__name__,
                    extra={"resource": self.name},
                )
            return []

        items: List[R] = []
        for raw in data:
            try:
                items.append(self.model.model_validate(raw))  # type: ignore[arg-type]
            except ValidationError as e:
                logger.warning(
                    "Skipping malformed %s record: %s",
                    self.name,
                    e.errors()[:1],
                    extra={"resource": self.name},
                )
        return items

    def _coerce(self, dto: Any, dto_type: Type[BaseModel]) -> BaseModel:
        if isinstance(dto, dto_type):
            return dto
        return dto_type.model_validate(dto)

    async def _list(self, path: str) -> List[R]:
        return self._parse_list(await self._client.request("GET", path))

    async def get_all(self) -> List[R]:
        return await self._list(self.path)

    async def get_by_id(self, id: int) -> Optional[R]:
        return self._parse_one(await self._client.request("GET", f"{self.path}/{id}"))

    async def create(self, dto: Any) -> Optional[R]:
        payload = self._coerce(dto, self.create_dto)
        data = await self._client.request("POST", self.path, json=payload.to_wire())
        return self._parse_one(data)

    async def update(self, id: int, dto: Any) -> Optional[R]:
        """PUT a partial DTO. Returns None when the backend answers without a body."""
        payload = self._coerce(dto, self.update_dto)
        data = await self._client.request("PUT", f"{self.path}/{id}", json=payload.to_wire())
        return self._parse_one(data)

    async def delete(self, id: int) -> None:
        await self._client.request("DELETE", f"{self.path}/{id}")


class CompanyApi(ResourceApi[Company]):
    path = "/company"
    model = Company
    create_dto = CreateCompanyDto
    update_dto = UpdateCompanyDto


class BranchApi(ResourceApi[Branch]):
    path = "/branch"
    model = Branch
    create_dto = CreateBranchDto
    update_dto = UpdateBranchDto


class EmployeeApi(ResourceApi[Employee]):
    path = "/employee"
    model = Employee
    create_dto = CreateEmployeeDto
    update_dto = UpdateEmployeeDto

    async def get_by_branch(self, branch_id: int) -> List[Employee]:
        return await self._list(f"{self.path}/branch/{branch_id}")


class ContactApi(ResourceApi[Contact]):
    path = "/contact"
    model = Contact
    create_dto = CreateContactDto
    update_dto = UpdateContactDto

    async def get_by_company(self, company_id: int) -> List[Contact]:
        return await self._list(f"{self.path}/company/{company_id}")

    async def get_by_type(self, contact_type: ContactType | str) -> List[Contact]:
        # Closed enumeration: raises ValueError before any request is made
        contact_type = ContactType(contact_type)
        return await self._list(f"{self.path}/type/{contact_type.value}")
