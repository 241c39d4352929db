"""
Publisher request/response schemas
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional

from newsdesk.models.publisher import Publisher


class PublisherCreateSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    logo: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"name": "Daily Ledger", "logo": "https://example.com/ledger.png"}
        }
    )


class PublisherResponse(Publisher):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)
