from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.api.v1.router import router as v1_router
from app.core.config import Settings, settings as default_settings
from app.core.errors import KeyCrmError
from app.core.telemetry import setup_telemetry
from app.services.company_cache import CompanyCache
from app.services.keycrm_client import KeyCrmClient


log = logging.getLogger(__name__)


async def _http_error(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


async def _keycrm_error(request: Request, exc: KeyCrmError) -> JSONResponse:
    log.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    log.exception("%s %s crashed", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc) or type(exc).__name__})


def create_app(
    settings: Settings | None = None,
    *,
    keycrm: KeyCrmClient | None = None,
    company_cache: CompanyCache | None = None,
) -> FastAPI:
    settings = settings or default_settings

    if keycrm is None:
        keycrm = KeyCrmClient(
            api_key=settings.keycrm_api_key.get_secret_value() if settings.keycrm_api_key else None,
            base_url=settings.keycrm_base_url,
            timeout_seconds=settings.keycrm_timeout_seconds,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not keycrm.configured:
            log.warning("KEYCRM_API_KEY is not set; upstream calls will fail")
        yield
        await keycrm.aclose()

    app = FastAPI(title="KeyCRM Leads Proxy", version="0.1.0", lifespan=lifespan)

    # One cache and one upstream client per app instance
    app.state.settings = settings
    app.state.keycrm = keycrm
    app.state.company_cache = company_cache if company_cache is not None else CompanyCache()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        allow_credentials=True,
    )
    app.add_exception_handler(HTTPException, _http_error)
    app.add_exception_handler(KeyCrmError, _keycrm_error)
    app.add_exception_handler(Exception, _unhandled_error)

    setup_telemetry(app, settings)
    app.include_router(v1_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=default_settings.log_level)
    log.info("starting on http://%s:%d", default_settings.host, default_settings.port)
    uvicorn.run(app, host=default_settings.host, port=default_settings.port)
