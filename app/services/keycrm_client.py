from __future__ import annotations

import json
import logging
import time
from typing import Any, Literal, Mapping, Sequence

import httpx

from app.core.errors import ConfigurationError, UpstreamError


log = logging.getLogger(__name__)

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]
QueryParams = Mapping[str, Any] | Sequence[tuple[str, Any]]


def _error_message(parsed: Any, resp: httpx.Response) -> str:
    if isinstance(parsed, dict):
        msg = parsed.get("message") or parsed.get("error")
        if msg:
            return str(msg)
    return resp.reason_phrase or f"HTTP {resp.status_code}"


class KeyCrmClient:
    """
    Thin async wrapper around the KeyCRM OpenAPI.

    - Uses one AsyncClient instance (connection pooling).
    - Does NOT retry; any failure aborts the caller's operation.
    - Returns parsed JSON (None for an empty body) or raises UpstreamError.
    """

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str = "https://openapi.keycrm.app/v1",
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = api_key or None
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds), transport=transport)

    @property
    def configured(self) -> bool:
        return self._api_key is not None

    async def aclose(self) -> None:
        await self._client.aclose()

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self._base_url}{path}"

    async def call(
        self,
        path: str,
        method: HttpMethod = "GET",
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        params: QueryParams | None = None,
    ) -> Any:
        if not self._api_key:
            raise ConfigurationError("KEYCRM_API_KEY is not configured")

        # Merge headers (caller wins)
        h = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        if headers:
            h.update(dict(headers))

        content = json.dumps(body) if body is not None else None

        started = time.perf_counter()
        try:
            resp = await self._client.request(
                method=method,
                url=self.url_for(path),
                headers=h,
                params=params,
                content=content,
            )
        except httpx.RequestError as e:
            # DNS errors, connection refused, TLS, timeouts
            log.warning("keycrm %s %s failed: %s", method, path, e)
            raise UpstreamError(method=method, path=path, status_code=None, message=str(e) or type(e).__name__) from e

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        log.debug("keycrm %s %s -> %d (%d ms)", method, path, resp.status_code, elapsed_ms)

        text = resp.text
        parsed: Any = None
        parse_error: ValueError | None = None
        if text:
            try:
                parsed = json.loads(text)
            except ValueError as e:
                parse_error = e

        if not resp.is_success:
            raise UpstreamError(
                method=method,
                path=path,
                status_code=resp.status_code,
                message=_error_message(parsed, resp),
            )

        if parse_error is not None:
            raise UpstreamError(
                method=method,
                path=path,
                status_code=resp.status_code,
                message=f"invalid JSON in response: {parse_error}",
            ) from parse_error

        return parsed
