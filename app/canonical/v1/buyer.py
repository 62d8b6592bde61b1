from __future__ import annotations

from pydantic import BaseModel, Field, computed_field


BuyerId = int | str


class BuyerCanonicalV1(BaseModel):
    """
    Canonical buyer used for duplicate comparison.
    Company data is never inlined; only company_id is carried.
    """
    id: BuyerId | None = None
    name: str = ""
    phones: list[str] = Field(default_factory=list, description="Normalized phones, first-seen order.")
    emails: list[str] = Field(default_factory=list, description="Lowercased, trimmed emails, first-seen order.")
    company_id: BuyerId | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def dedupe_keys(self) -> list[str]:
        return [f"tel:{p}" for p in self.phones] + [f"email:{e}" for e in self.emails]


class DuplicateGroupV1(BaseModel):
    key: str
    ids: list[BuyerId | None]
