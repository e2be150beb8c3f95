from fastapi import APIRouter, Depends, status, Request
from fastapi.responses import RedirectResponse
from shortlink_app.services.url_service import URLService
from shortlink_app.dependencies import get_url_service

router = APIRouter(tags=["redirect"])


@router.get("/{shortcode}")
async def redirect_to_original_url(
    shortcode: str,
    request: Request,
    url_service: URLService = Depends(get_url_service)
):
    """
    Redirect to the original URL.

    Flow:
    1. Resolve the shortcode (404 unknown, 410 expired)
    2. Append a click event to the ledger (in memory, before responding)
    3. Redirect with 302

    Log events are only queued here; the log worker ships them later,
    so the redirect never waits on the log service.
    """
    referrer = request.headers.get("referer") or request.headers.get("referrer")
    client_address = request.client.host if request.client else None

    original_url = await url_service.redirect(
        shortcode,
        referrer=referrer,
        client_address=client_address
    )

    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
