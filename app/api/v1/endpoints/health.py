from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.api.deps import get_company_cache, get_settings
from app.core.config import Settings
from app.schemas.health import HealthOut
from app.services.company_cache import CompanyCache

router = APIRouter()


def mask_secret(value: str, *, visible: int = 4) -> str:
    if len(value) <= visible * 2:
        return "*" * len(value)
    return f"{value[:visible]}...{value[-visible:]}"


@router.get("/", response_model=HealthOut)
async def health(
    settings: Settings = Depends(get_settings),
    cache: CompanyCache = Depends(get_company_cache),
) -> HealthOut:
    key = settings.keycrm_api_key.get_secret_value() if settings.keycrm_api_key else ""
    return HealthOut(
        keycrm_api_key_configured=bool(key),
        keycrm_api_key_length=len(key),
        keycrm_api_key_preview=mask_secret(key) if key else None,
        cache_size=cache.size(),
        timestamp=datetime.now(timezone.utc),
    )
