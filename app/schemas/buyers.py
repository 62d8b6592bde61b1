from typing import Any

from pydantic import BaseModel, Field

from app.canonical.v1.buyer import BuyerCanonicalV1, DuplicateGroupV1


class BuyersPageOut(BaseModel):
    count: int
    data: list[BuyerCanonicalV1]
    raw: list[Any] = Field(default_factory=list, description="Upstream records as received, for debugging.")


class BuyersAllOut(BaseModel):
    total: int
    pages_processed: int
    per_page: int
    search: str | None = None
    data: list[BuyerCanonicalV1]


class BuyerDuplicatesOut(BaseModel):
    total: int
    pages_processed: int
    groups: list[DuplicateGroupV1]
