from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from ..services.crm_api import CrmApiClient
from ..services.dashboard import METRICS, fetch_dashboard_metrics
from .deps import get_api, render

router = APIRouter(tags=["dashboard"])


@router.get("/", response_class=HTMLResponse)
async def dashboard(request: Request, api: CrmApiClient = Depends(get_api)):
    metrics = await fetch_dashboard_metrics(api)
    return render(
        request,
        "dashboard.html",
        title="Dashboard",
        description="Welcome to BaraaCRM. Here's an overview of your business data.",
        notifications=metrics.notifications,
        metrics=metrics,
        metric_cards=METRICS,
    )
