from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ShortUrlRecord(BaseModel):
    """
    A shortened URL held by the code registry.

    Records are frozen: created once at allocation, never updated or deleted.
    Whether a record is active is derived from expires_at at read time.
    """

    id: str = Field(..., description="Opaque unique identifier (UUID4)")
    original_url: str = Field(..., description="Destination exactly as submitted")
    shortcode: str
    created_at: datetime
    expires_at: datetime
    validity_minutes: float

    model_config = ConfigDict(frozen=True)

    def is_expired(self, now: datetime) -> bool:
        """Expired strictly after expires_at; the boundary instant is still active"""
        return now > self.expires_at
