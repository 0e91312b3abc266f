# admin/crm_admin/services/crm_api/client.py

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import httpx

from .errors import ServerError, TransportError
from .resources import BranchApi, CompanyApi, ContactApi, EmployeeApi
from ...core.config import get_settings

logger = logging.getLogger(__name__)


class CrmApiClient:
    """
    Async client for the CRM REST API.

    - One shared ``httpx.AsyncClient`` per instance; use ``async with`` or
      call ``aclose()``.
    - ``request()`` is the only place that talks HTTP. The per-resource
      method tables (``companies``, ``branches``, ``employees``,
      ``contacts``) are thin wrappers around it.
    - No retries, no caching: every failure is raised to the caller as an
      ``ApiError`` subclass.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        verify: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        settings = get_settings()
        self.base_url: str = (base_url or settings.CRM_API_URL).rstrip("/")
        self.timeout: float = float(
            timeout if timeout is not None else settings.CRM_API_TIMEOUT_SECONDS
        )

        self._http = httpx.AsyncClient(
            timeout=self.timeout,
            verify=settings.CRM_API_VERIFY_TLS if verify is None else verify,
            transport=transport,
            follow_redirects=True,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

        self.companies = CompanyApi(self)
        self.branches = BranchApi(self)
        self.employees = EmployeeApi(self)
        self.contacts = ContactApi(self)

    async def __aenter__(self) -> "CrmApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Issue ``method`` against ``base_url + path`` and return the decoded JSON body.

        Returns None for an empty success body (e.g. 204 on DELETE).

        Raises:
            ServerError: the backend responded with a non-2xx status. ``data``
                holds the decoded error body, or ``{}`` if it was not JSON.
            TransportError: no usable response (connection failure, timeout,
                undecodable success body).
        """
        url = f"{self.base_url}{path}"
        log_extra = {"method": method, "path": path}
        _t0 = time.monotonic()

        try:
            resp = await self._http.request(method, url, json=json)
        except httpx.HTTPError as e:
            logger.error(
                "CRM API %s %s failed without a response: %s",
                method,
                path,
                e,
                extra={**log_extra, "duration_ms": _elapsed_ms(_t0)},
            )
            raise TransportError(data=e) from e

        log_extra.update(status=resp.status_code, duration_ms=_elapsed_ms(_t0))

        if not resp.is_success:
            data = _error_payload(resp)
            logger.warning(
                "CRM API %s %s returned %s",
                method,
                path,
                resp.status_code,
                extra=log_extra,
            )
            raise ServerError(resp.status_code, f"API Error: {resp.reason_phrase}", data)

        logger.debug("CRM API %s %s ok", method, path, extra=log_extra)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            logger.error(
                "CRM API %s %s returned an undecodable body",
                method,
                path,
                extra=log_extra,
            )
            raise TransportError(data=e) from e


def _error_payload(resp: httpx.Response) -> Any:
    """Best-effort decode of an error body; never raises."""
    if not resp.content:
        return {}
    try:
        return resp.json()
    except ValueError:
        return {}


def _elapsed_ms(t0: float) -> int:
    return int((time.monotonic() - t0) * 1000)
