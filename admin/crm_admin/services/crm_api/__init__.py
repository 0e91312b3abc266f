from .errors import ApiError, NETWORK_ERROR_STATUS, ServerError, TransportError
from .client import CrmApiClient
from .resources import BranchApi, CompanyApi, ContactApi, EmployeeApi, ResourceApi

__all__ = [
    "ApiError",
    "ServerError",
    "TransportError",
    "NETWORK_ERROR_STATUS",
    "CrmApiClient",
    "ResourceApi",
    "CompanyApi",
    "BranchApi",
    "EmployeeApi",
    "ContactApi",
]
