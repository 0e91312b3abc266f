# admin/crm_admin/schemas/crm.py
import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, PositiveInt, field_validator, model_validator
from pydantic.alias_generators import to_camel

MAX_NAME_LEN = 200


class ContactType(str, enum.Enum):
    LEAD = "Lead"
    CUSTOMER = "Customer"
    PARTNER = "Partner"


# Wire format is camelCase (phoneNumber, companyId, isActive, ...)
_WIRE = dict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Records (as returned by the backend)
# ---------------------------------------------------------------------------

class _Record(BaseModel):
    """
    Base for records read from the backend.

    Records are trusted as received: ids and foreign keys are kept even when
    malformed (any JSON type, zero, negative) so a single bad row never breaks
    a whole listing. Lookups decide what is usable.
    """

    id: Any = None
    is_active: bool = True
    created_at: str | None = None
    updated_at: str | None = None

    model_config = ConfigDict(extra="ignore", **_WIRE)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # null text fields fall back to their defaults
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Company(_Record):
    name: str = ""
    address: str = ""
    phone_number: str = ""
    email: str = ""
    country: str = ""
    city: str = ""


class Branch(_Record):
    company_id: Any = None
    name: str = ""
    address: str = ""
    phone_number: str = ""
    email: str = ""
    city: str = ""
    country: str = ""


class Employee(_Record):
    branch_id: Any = None
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone_number: str = ""
    job_title: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Contact(_Record):
    company_id: Any = None
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone_number: str = ""
    job_title: str = ""
    contact_type: str = ""
    address: str = ""
    city: str = ""
    country: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


# ---------------------------------------------------------------------------
# Create DTOs (backend assigns id, isActive and timestamps)
# ---------------------------------------------------------------------------

class _Dto(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, **_WIRE)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class CreateCompanyDto(_Dto):
    name: str
    address: str
    phone_number: str
    email: str
    country: str
    city: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v:
            raise ValueError("name must not be empty")
        if len(v) > MAX_NAME_LEN:
            raise ValueError(f"name must be at most {MAX_NAME_LEN} characters")
        return v


class CreateBranchDto(_Dto):
    company_id: PositiveInt
    name: str
    address: str
    phone_number: str
    email: str
    city: str
    country: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v:
            raise ValueError("name must not be empty")
        if len(v) > MAX_NAME_LEN:
            raise ValueError(f"name must be at most {MAX_NAME_LEN} characters")
        return v


class CreateEmployeeDto(_Dto):
    branch_id: PositiveInt
    first_name: str
    last_name: str
    email: str
    phone_number: str
    job_title: str


class CreateContactDto(_Dto):
    company_id: PositiveInt
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone_number: str = ""
    job_title: str = ""
    contact_type: ContactType = ContactType.CUSTOMER
    address: str = ""
    city: str = ""
    country: str = ""

    def to_wire(self) -> dict:
        # Contacts are sent with every field, defaults included
        return self.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Partial update DTOs (only fields explicitly set are sent)
# ---------------------------------------------------------------------------

class UpdateCompanyDto(_Dto):
    name: str | None = None
    address: str | None = None
    phone_number: str | None = None
    email: str | None = None
    country: str | None = None
    city: str | None = None


class UpdateBranchDto(_Dto):
    company_id: PositiveInt | None = None
    name: str | None = None
    address: str | None = None
    phone_number: str | None = None
    email: str | None = None
    city: str | None = None
    country: str | None = None


class UpdateEmployeeDto(_Dto):
    branch_id: PositiveInt | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone_number: str | None = None
    job_title: str | None = None


class UpdateContactDto(_Dto):
    company_id: PositiveInt | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone_number: str | None = None
    job_title: str | None = None
    contact_type: ContactType | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
