import json

import httpx
import pytest

from app.core.config import Settings
from app.main import create_app
from app.services.company_cache import CompanyCache
from app.services.keycrm_client import KeyCrmClient


BASE_URL = "https://keycrm.test/v1"


class FakeKeyCrm:
    """
    Minimal stand-in for the KeyCRM OpenAPI served through httpx.MockTransport.
    Buyers and companies are paginated with the requested per_page.
    """

    def __init__(self):
        self.buyers: list[dict] = []
        self.companies: list[dict] = []
        self.requests: list[httpx.Request] = []
        self.fail_status: int | None = None
        self.fail_on_page: int | None = None

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def _page(self, items: list[dict], request: httpx.Request) -> list[dict]:
        page = int(request.url.params.get("page", "1"))
        per_page = int(request.url.params.get("per_page", "15"))
        start = (page - 1) * per_page
        return items[start:start + per_page]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.headers.get("Authorization") != "Bearer test-key":
            return httpx.Response(401, json={"message": "Unauthenticated."})
        if self.fail_status is not None:
            return httpx.Response(self.fail_status, json={"message": "Too Many Requests"})
        if self.fail_on_page is not None and request.url.params.get("page") == str(self.fail_on_page):
            return httpx.Response(500, json={"message": "Server Error"})

        path = request.url.path.removeprefix("/v1")
        if path == "/buyer":
            data = self._page(self.buyers, request)
            return httpx.Response(200, json={"data": data, "meta": {"current_page": request.url.params.get("page", "1")}})
        if path == "/companies":
            return httpx.Response(200, json={"data": self._page(self.companies, request)})
        if path.startswith("/companies/"):
            company_id = path.rsplit("/", 1)[-1]
            for c in self.companies:
                if str(c["id"]) == company_id:
                    return httpx.Response(200, content=json.dumps(c))
            return httpx.Response(404, json={"message": "Not found"})
        return httpx.Response(404, json={"error": "unknown route"})


@pytest.fixture
def upstream() -> FakeKeyCrm:
    return FakeKeyCrm()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        keycrm_api_key="test-key",
        keycrm_base_url=BASE_URL,
        buyers_page_delay_seconds=0,
        companies_page_delay_seconds=0,
    )


@pytest.fixture
def keycrm(upstream: FakeKeyCrm) -> KeyCrmClient:
    return KeyCrmClient(api_key="test-key", base_url=BASE_URL, transport=httpx.MockTransport(upstream.handler))


@pytest.fixture
def company_cache() -> CompanyCache:
    return CompanyCache()


@pytest.fixture
async def client(test_settings, keycrm, company_cache):
    """
    HTTP client against a fresh app wired to the fake upstream.
    """
    app = create_app(test_settings, keycrm=keycrm, company_cache=company_cache)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await keycrm.aclose()
