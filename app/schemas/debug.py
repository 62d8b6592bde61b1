from typing import Any

from pydantic import BaseModel


class KeyCrmProbeOut(BaseModel):
    page1_count: int
    page1_meta: Any = None
    page2_count: int
    page2_meta: Any = None
    page1_sample: list[Any]


class PageProbe(BaseModel):
    page: int
    count: int
    has_data: bool


class PagesProbeOut(BaseModel):
    pages_tested: list[PageProbe]
    total_unique_buyers: int
