"""Remote Menu Source: fetches and decodes the remote catalog over HTTPS.

Invariants:
    - fetch() never raises: every failure becomes FetchResult.failed(...)
    - Transport errors, non-2xx responses and timeouts -> NetworkFailure
    - Malformed JSON and schema mismatches -> DecodeFailure
    - No retry here; retry policy belongs to the sync orchestrator
    - A bounded timeout always applies (timeout expiry is a NetworkFailure)

Design Decisions:
    - httpx.AsyncClient injected or owned: tests pass a MockTransport client,
      production owns one client for the process lifetime (closed via aclose)
    - pydantic validation over hand-written decoding: unknown keys ignored by the schema
"""

import json
import logging

import httpx
from pydantic import ValidationError

from littlelemon.core.errors import (
    DecodeFailure, ErrorContext, MenuCacheError, NetworkFailure,
)
from littlelemon.core.menu_items import FetchResult
from littlelemon.schemas.menu import RemoteMenuPayload

logger = logging.getLogger(__name__)


class RemoteMenuSource:
    """Single fixed endpoint catalog client."""

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.url = url
        self.timeout_seconds = timeout_seconds
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            follow_redirects=True,
        )

    async def fetch(self) -> FetchResult:
        """Fetch the catalog. Returns items or an explicit failure, never raises."""
        try:
            payload = await self._fetch_payload()
        except MenuCacheError as e:
            logger.warning(
                e.message,
                extra={"error_code": e.code, "url": self.url},
            )
            return FetchResult.failed(e)

        logger.info(
            "Menu fetched",
            extra={"url": self.url, "item_count": len(payload.menu)},
        )
        return FetchResult.success(payload.menu)

    async def _fetch_payload(self) -> RemoteMenuPayload:
        ctx = ErrorContext(url=self.url)
        try:
            response = await self._client.get(
                self.url, timeout=self.timeout_seconds,
            )
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise NetworkFailure(
                f"timed out after {self.timeout_seconds}s ({type(e).__name__})",
                timed_out=True, context=ctx,
            )
        except httpx.HTTPStatusError as e:
            ctx.status_code = e.response.status_code
            raise NetworkFailure(
                f"HTTP {e.response.status_code}", context=ctx,
            )
        except httpx.HTTPError as e:
            raise NetworkFailure(str(e) or type(e).__name__, context=ctx)

        return self._decode(response, ctx)

    def _decode(
        self, response: httpx.Response, ctx: ErrorContext,
    ) -> RemoteMenuPayload:
        """Decode the response body. The catalog is served as text/plain, so
        the content-type header is not trusted."""
        try:
            body = json.loads(response.content)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            ctx.debug_info = {"body_prefix": response.text[:200]}
            raise DecodeFailure(f"malformed JSON ({e})", context=ctx)
        try:
            return RemoteMenuPayload.model_validate(body)
        except ValidationError as e:
            ctx.debug_info = {"errors": e.errors(include_url=False)[:5]}
            raise DecodeFailure(
                f"{e.error_count()} schema error(s)", context=ctx,
            )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
