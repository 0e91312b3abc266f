from urllib.parse import urlparse

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse

from ..services.crm_api import CrmApiClient
from ..services.health import check_api_health
from ..services.theme import ThemeState
from .deps import get_api, get_theme

router = APIRouter(tags=["system"])


@router.get("/health/api")
async def api_health(api: CrmApiClient = Depends(get_api)):
    """
    Backend reachability probe (development aid, not linked from the UI).

    Always answers 200 so it can be polled; the payload carries the outcome.
    """
    result = await check_api_health(api)
    return JSONResponse(result.to_dict())


@router.post("/theme")
def toggle_theme(request: Request, theme: ThemeState = Depends(get_theme)):
    theme.toggle()
    return RedirectResponse(_same_site_referer(request), status_code=303)


def _same_site_referer(request: Request) -> str:
    # Only redirect back to a path on this site
    referer = request.headers.get("referer")
    if not referer:
        return "/"
    parsed = urlparse(referer)
    if parsed.netloc and parsed.netloc != request.url.netloc:
        return "/"
    path = parsed.path or "/"
    return f"{path}?{parsed.query}" if parsed.query else path
