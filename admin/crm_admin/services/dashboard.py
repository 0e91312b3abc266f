from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .crm_api import ApiError, CrmApiClient
from .view_state import Notification

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Metric:
    key: str      # attribute on CrmApiClient
    label: str
    href: str
    css: str


METRICS: List[Metric] = [
    Metric("companies", "Companies", "/companies", "metric-companies"),
    Metric("branches", "Branches", "/branches", "metric-branches"),
    Metric("employees", "Employees", "/employees", "metric-employees"),
    Metric("contacts", "Contacts", "/contacts", "metric-contacts"),
]


@dataclass
class DashboardMetrics:
    counts: Dict[str, Optional[int]] = field(default_factory=dict)
    failed: List[str] = field(default_factory=list)
    loading: bool = True

    def count(self, key: str) -> Optional[int]:
        return self.counts.get(key)

    @property
    def failed_labels(self) -> List[str]:
        labels = {m.key: m.label for m in METRICS}
        return [labels.get(key, key) for key in self.failed]

    @property
    def notifications(self) -> List[Notification]:
        if not self.failed:
            return []
        return [
            Notification(
                "error",
                "Failed to load dashboard metrics: " + ", ".join(self.failed_labels),
            )
        ]


async def fetch_dashboard_metrics(api: CrmApiClient) -> DashboardMetrics:
    """
    Fan out one list fetch per metric and reduce each to a count.

    Failures are isolated per metric: a failed fetch leaves its count at None
    and is listed in ``failed``; the other counts are still produced.
    """
    tasks: Dict[str, asyncio.Task] = {
        m.key: asyncio.create_task(getattr(api, m.key).get_all()) for m in METRICS
    }

    metrics = DashboardMetrics()
    for key, task in tasks.items():
        try:
            items = await task
        except ApiError as e:
            logger.warning(
                "Dashboard metric '%s' failed: %s",
                key,
                e,
                extra={"metric": key, "status": e.status},
            )
            metrics.counts[key] = None
            metrics.failed.append(key)
            continue
        metrics.counts[key] = len(items)

    metrics.loading = False
    return metrics
