from fastapi import APIRouter

from app.api.v1.endpoints.health import router as health_router
from app.api.v1.endpoints.buyers import router as buyers_router
from app.api.v1.endpoints.companies import router as companies_router
from app.api.v1.endpoints.debug import router as debug_router


# Paths are served at the root; the browser client calls /buyers, /companies/... directly
router = APIRouter()
router.include_router(health_router, tags=["health"])
router.include_router(buyers_router, tags=["buyers"])
router.include_router(companies_router, tags=["companies"])
router.include_router(debug_router, tags=["debug"])
