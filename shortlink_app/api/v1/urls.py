from fastapi import APIRouter, Depends, status
from shortlink_app.schemas.url import URLCreate, URLCreateResponse, URLStatsResponse
from shortlink_app.services.url_service import URLService
from shortlink_app.dependencies import get_url_service

router = APIRouter(prefix="/shorturls", tags=["shorturls"])


@router.post("", response_model=URLCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_short_url(
    url_data: URLCreate,
    url_service: URLService = Depends(get_url_service)
):
    """
    Create a new short URL.

    400 on missing/invalid url or validity, 409 if the requested
    shortcode is taken.
    """
    record = await url_service.create_short_url(
        url_data.url,
        validity=url_data.validity,
        shortcode=url_data.shortcode
    )
    return URLCreateResponse.from_record(record)


@router.get("/{shortcode}", response_model=URLStatsResponse)
async def get_url_stats(
    shortcode: str,
    url_service: URLService = Depends(get_url_service)
):
    """Statistics and click history for a short URL (404 unknown, 410 expired)"""
    stats = await url_service.get_stats(shortcode)
    return URLStatsResponse.from_stats(stats)
