from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Generic, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .crm_api import ApiError, CrmApiClient, ResourceApi
from .lookups import IdIndex, coerce_id

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)


@dataclass(frozen=True)
class Notification:
    level: str  # "success" | "error"
    message: str


class FormError(ValueError):
    """A create form failed the local checks; ``message`` is user-facing."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ResourceView(Generic[R]):
    """
    State of one resource page: Loading -> Loaded (empty or not), plus a create dialog.

    - ``refresh()`` fetches the page's own list and its parent lists
      concurrently and rebuilds the id indexes once per fetch.
    - Every refresh takes a generation token; results from a superseded
      refresh, or arriving after ``close()``, are discarded.
    - Mutations never touch ``items`` directly: success triggers a full
      re-fetch, failure leaves the list as it was.
    """

    entity: ClassVar[str]                 # "Branch"
    plural: ClassVar[str]                 # "branches"
    # First entry is the page's own resource; the rest are parent lists
    sources: ClassVar[Tuple[str, ...]]
    create_dto: ClassVar[Type[BaseModel]]
    empty_form: ClassVar[Dict[str, Any]]
    # Required foreign key on the create form, and the prompt when it is missing
    parent_field: ClassVar[Optional[str]] = None
    parent_prompt: ClassVar[str] = ""

    def __init__(self, api: CrmApiClient) -> None:
        self.api = api
        self.loading: bool = True
        self.items: List[R] = []
        self.is_dialog_open: bool = False
        self.form: Dict[str, Any] = dict(self.empty_form)
        self.notifications: List[Notification] = []
        self.last_error: Optional[ApiError] = None

        self.collections: Dict[str, List[Any]] = {name: [] for name in self.sources}
        self.indexes: Dict[str, IdIndex[Any]] = {name: IdIndex() for name in self.sources}

        self._generation = 0
        self._inflight: Optional[asyncio.Future] = None
        self._closed = False

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    @property
    def resource(self) -> ResourceApi:
        return getattr(self.api, self.sources[0])

    @property
    def view_name(self) -> str:
        return self.plural

    @property
    def is_empty(self) -> bool:
        return not self.loading and not self.items

    @property
    def rendered_items(self) -> List[R]:
        """Items that can be shown as cards (a usable id is needed for actions)."""
        return [item for item in self.items if coerce_id(getattr(item, "id", None)) is not None]

    def notify(self, level: str, message: str) -> None:
        self.notifications.append(Notification(level, message))

    def open_dialog(self) -> None:
        self.is_dialog_open = True

    def close_dialog(self) -> None:
        self.is_dialog_open = False

    def _is_stale(self, token: int) -> bool:
        return self._closed or token != self._generation

    # ------------------------------------------------------------------
    # loading
    # ------------------------------------------------------------------

    async def _fetch(self) -> Dict[str, List[Any]]:
        results = await asyncio.gather(
            *(getattr(self.api, name).get_all() for name in self.sources)
        )
        return dict(zip(self.sources, results))

    def _apply(self, data: Mapping[str, List[Any]]) -> None:
        for name in self.sources:
            items = list(data.get(name) or [])
            self.collections[name] = items
            self.indexes[name] = IdIndex(items)
        self.items = self.collections[self.sources[0]]

    async def refresh(self) -> bool:
        """Re-fetch everything the page shows. Returns True if the result was applied."""
        if self._closed:
            return False

        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()

        self._generation += 1
        token = self._generation
        self.loading = True

        task = asyncio.ensure_future(self._fetch())
        self._inflight = task
        try:
            data = await task
        except asyncio.CancelledError:
            if self._is_stale(token):
                return False
            raise
        except ApiError as e:
            if self._is_stale(token):
                return False
            logger.error(
                "Failed to fetch data: %s",
                e,
                extra={"view": self.view_name, "status": e.status},
            )
            self.last_error = e
            self.notify("error", f"Failed to load {self.plural}")
            self.loading = False
            return False
        finally:
            if self._inflight is task:
                self._inflight = None

        if self._is_stale(token):
            logger.debug("Discarding stale fetch", extra={"view": self.view_name})
            return False

        self._apply(data)
        self.loading = False
        return True

    def close(self) -> None:
        """Detach the view: cancel in-flight work and ignore anything that arrives later."""
        self._closed = True
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self._inflight = None

    # ------------------------------------------------------------------
    # mutations
    # ------------------------------------------------------------------

    def build_dto(self, form: Mapping[str, Any]) -> BaseModel:
        values = dict(form)
        if self.parent_field is not None:
            parent_id = coerce_id(values.get(self.parent_field))
            if parent_id is None:
                raise FormError(self.parent_prompt)
            values[self.parent_field] = parent_id
        return self.create_dto.model_validate(values)

    async def submit_create(self, form: Mapping[str, Any], refresh: bool = True) -> bool:
        """
        Validate and POST the create form.

        On success the form is cleared, the dialog closed and (unless
        ``refresh`` is False, e.g. when the caller redirects) the list re-fetched.
        On failure the dialog stays open with the entered values.
        """
        entity_lower = self.entity.lower()
        self.is_dialog_open = True
        self.form = {
            **self.empty_form,
            **{k: v for k, v in form.items() if k in self.empty_form},
        }

        try:
            dto = self.build_dto(self.form)
        except FormError as e:
            self.notify("error", e.message)
            return False
        except ValidationError as e:
            logger.info(
                "Rejected %s form: %s",
                entity_lower,
                e.errors()[:1],
                extra={"view": self.view_name},
            )
            self.notify("error", f"Failed to create {entity_lower}")
            return False

        try:
            await self.resource.create(dto)
        except ApiError as e:
            logger.error(
                "Failed to create %s: %s",
                entity_lower,
                e,
                extra={"view": self.view_name, "status": e.status},
            )
            self.last_error = e
            self.notify("error", f"Failed to create {entity_lower}")
            return False

        self.notify("success", f"{self.entity} created successfully")
        self.form = dict(self.empty_form)
        self.is_dialog_open = False
        if refresh:
            await self.refresh()
        return True

    async def delete(self, id: Any, confirmed: bool = False, refresh: bool = True) -> bool:
        """Delete after an explicit confirmation; nothing is sent without it."""
        if not confirmed:
            return False

        entity_lower = self.entity.lower()
        try:
            await self.resource.delete(id)
        except ApiError as e:
            logger.error(
                "Failed to delete %s %s: %s",
                entity_lower,
                id,
                e,
                extra={"view": self.view_name, "status": e.status},
            )
            self.last_error = e
            self.notify("error", f"Failed to delete {entity_lower}")
            return False

        self.notify("success", f"{self.entity} deleted successfully")
        if refresh:
            await self.refresh()
        return True
