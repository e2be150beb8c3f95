from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

DIRECT_REFERRER = "Direct"


class ClickEvent(BaseModel):
    """
    One recorded visit to a short link.

    Appended to the click ledger by the redirect endpoint before the
    302 response is returned.
    """

    timestamp: datetime = Field(..., description="When the redirect was accepted")
    referrer: str = Field(DIRECT_REFERRER, description="HTTP referer, or 'Direct'")
    location: str = Field(..., description="Coarse region tag (e.g. US, IN)")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "timestamp": "2025-10-29T10:30:00.000Z",
                "referrer": "https://twitter.com",
                "location": "US"
            }
        }
    )
