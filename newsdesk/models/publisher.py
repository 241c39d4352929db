"""
Publisher model and Firestore conversion helpers
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class Publisher(BaseModel):
    publisher_id: str = Field(..., alias="_id")
    name: str
    logo: Optional[str] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)


def firestore_publisher_to_model(doc: dict, doc_id: str) -> Publisher:
    return Publisher.model_validate({**doc, "_id": doc_id})
