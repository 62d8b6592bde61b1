from typing import Any

from pydantic import BaseModel


class CompaniesAllOut(BaseModel):
    total: int
    cached: int
    pages_processed: int
    data: list[Any]


class CacheClearOut(BaseModel):
    cleared: int
