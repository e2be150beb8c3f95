from pydantic import BaseModel, Field, ConfigDict, StrictInt, StrictFloat, field_serializer
from pydantic.alias_generators import to_camel
from typing import List, Optional, Union
from datetime import datetime
from shortlink_app.config import settings
from shortlink_app.models.click import ClickEvent
from shortlink_app.models.url import ShortUrlRecord
from shortlink_app.utils.clock import to_iso


def build_short_link(shortcode: str) -> str:
    return f"{settings.base_url.rstrip('/')}/{shortcode}"


class CamelModel(BaseModel):
    """Responses use camelCase keys; FastAPI serializes response models by alias"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class URLCreate(BaseModel):
    """
    Request body for POST /shorturls.

    Fields are loose on purpose: URL format and validity range are checked
    by the registry so that direct callers get the same errors. Strict
    number types keep "30" or true from passing as a validity.
    """
    url: Optional[str] = Field(None, description="The original URL to be shortened")
    validity: Optional[Union[StrictInt, StrictFloat]] = Field(
        None, description="Minutes until the short link expires (default 30)"
    )
    shortcode: Optional[str] = Field(None, description="Requested shortcode")


class URLCreateResponse(CamelModel):
    short_link: str
    expiry: datetime

    @field_serializer("expiry")
    def serialize_expiry(self, value: datetime) -> str:
        return to_iso(value)

    @classmethod
    def from_record(cls, record: ShortUrlRecord) -> "URLCreateResponse":
        return cls(short_link=build_short_link(record.shortcode), expiry=record.expires_at)


class ClickData(CamelModel):
    timestamp: datetime
    referrer: str
    location: str

    @field_serializer("timestamp")
    def serialize_timestamp(self, value: datetime) -> str:
        return to_iso(value)


class URLStats(BaseModel):
    """Statistics for one shortcode, as composed by URLService"""
    shortcode: str
    original_url: str
    created_at: datetime
    expires_at: datetime
    total_clicks: int
    clicks: List[ClickEvent]


class URLStatsResponse(CamelModel):
    short_link: str
    expiry: datetime
    original_url: str
    creation_date: datetime
    total_clicks: int
    click_data: List[ClickData]

    @field_serializer("expiry", "creation_date")
    def serialize_dates(self, value: datetime) -> str:
        return to_iso(value)

    @classmethod
    def from_stats(cls, stats: URLStats) -> "URLStatsResponse":
        return cls(
            short_link=build_short_link(stats.shortcode),
            expiry=stats.expires_at,
            original_url=stats.original_url,
            creation_date=stats.created_at,
            total_clicks=stats.total_clicks,
            click_data=[
                ClickData(timestamp=c.timestamp, referrer=c.referrer, location=c.location)
                for c in stats.clicks
            ],
        )


class HealthResponse(BaseModel):
    status: str
    timestamp: str
