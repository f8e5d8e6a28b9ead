"""httpx client for the territory store: retries, rate limiting and listing cache."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage, FilterPolicy
from hishel import Response as HishelCacheResponse
from hishel._policies import BaseFilter
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._types import HeaderTypes, QueryParamTypes, URLTypes

    from pixelsync.config.http_resilience import (
        RateLimit,
        ResilienceConfig,
        ResponseCacheConfig,
        RetryPolicy,
    )

log = getLogger(__name__)


class RequestOptions(TypedDict, total=False):
    params: QueryParamTypes | None
    json: object
    headers: HeaderTypes | None


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        backoff_jitter=policy.backoff_jitter,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=tuple(policy.allowed_methods),
        status_forcelist=tuple(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
    )


class ResilientClient:
    """Async client for one round of store calls.

    Retries and backoff live in the transport, so every call made through the
    client is retried the same way. The limiter spaces out calls issued by
    concurrent reconciliations. Callers that open a client per call pass in a
    limiter made once with ``build_limiter`` so all those clients share it.
    When the config carries a response cache, GET answers with status 200 are
    kept locally for its TTL.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        limiter: AsyncLimiter | None = None,
    ) -> None:
        self.config = config
        self._limiter = limiter if limiter is not None else build_limiter(config.ratelimit)
        retry_transport = RetryTransport(transport=transport, retry=build_retry(config.retry))
        headers = dict(config.default_headers) if config.default_headers else {}

        if config.cache is None:
            self._client = httpx.AsyncClient(
                base_url=config.base_url,
                timeout=config.timeout_seconds,
                headers=headers,
                transport=retry_transport,
            )
        else:
            self._client = AsyncCacheClient(
                base_url=config.base_url,
                timeout=config.timeout_seconds,
                headers=headers,
                transport=retry_transport,
                storage=_build_cache_storage(config.cache),
                policy=FilterPolicy(response_filters=[_SuccessfulResponseFilter()]),
            )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def put(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def request(
        self, method: str, url: URLTypes, **kwargs: Unpack[RequestOptions]
    ) -> httpx.Response:
        if self._limiter is None:
            response = await self._client.request(method, url, **kwargs)
        else:
            async with self._limiter:
                response = await self._client.request(method, url, **kwargs)
        log.debug("%s %s %s -> %s", self.config.name, method, url, response.status_code)
        return response


class _SuccessfulResponseFilter(BaseFilter[HishelCacheResponse]):
    """Only plain 200 answers are worth serving from the local cache."""

    def needs_body(self) -> bool:
        return False

    def apply(self, item: HishelCacheResponse, body: bytes | None) -> bool:  # noqa: ARG002
        return item.status_code == httpx.codes.OK


def build_limiter(ratelimit: RateLimit | None) -> AsyncLimiter | None:
    if ratelimit is None:
        return None
    return AsyncLimiter(ratelimit.max_calls, ratelimit.per_seconds)


def _build_cache_storage(config: ResponseCacheConfig) -> AsyncSqliteStorage:
    config.database_path.parent.mkdir(parents=True, exist_ok=True)
    return AsyncSqliteStorage(
        database_path=str(config.database_path),
        default_ttl=config.ttl_seconds,
    )
