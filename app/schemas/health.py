from datetime import datetime

from pydantic import BaseModel


class HealthOut(BaseModel):
    status: str = "ok"
    keycrm_api_key_configured: bool
    keycrm_api_key_length: int
    keycrm_api_key_preview: str | None = None
    cache_size: int
    timestamp: datetime
