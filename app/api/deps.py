from fastapi import Request

from app.core.config import Settings
from app.services.company_cache import CompanyCache
from app.services.keycrm_client import KeyCrmClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_keycrm(request: Request) -> KeyCrmClient:
    return request.app.state.keycrm


def get_company_cache(request: Request) -> CompanyCache:
    return request.app.state.company_cache


def parse_max(value: str | None, default: int) -> int:
    # Anything that is not a positive integer falls back to the default
    try:
        n = int(value) if value is not None else 0
    except ValueError:
        return default
    return n if n > 0 else default
