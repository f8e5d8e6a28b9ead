"""HTTP client for the authoritative territory store."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from pixelsync.adapters.http_resilience import ResilientClient, build_limiter
from pixelsync.domain.ports import RemoteStoreError, TransientStoreError

from .schema import CanvasIdsPayload, CanvasPayload, TerritoryListPayload, TerritoryPayload
from .translator import (
    canvas_from_payload,
    canvas_to_payload,
    territory_from_payload,
    territory_to_payload,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from aiolimiter import AsyncLimiter

    from pixelsync.config.http_resilience import ResilienceConfig
    from pixelsync.config.store import RemoteStoreConfig
    from pixelsync.domain.model import PixelCanvas, Sovereignty, Territory

    type ClientFactory = Callable[[ResilienceConfig, AsyncLimiter | None], ResilientClient]

log = getLogger(__name__)


class HttpTerritoryStore:
    """``TerritoryStore`` over the store's JSON API.

    404 means "no such record" and reads as ``None``. Timeouts, network errors
    and 5xx answers (after the transport's own retries) raise
    ``TransientStoreError``. Listing queries go through the caching client.
    Each call opens its own client, but record and listing calls each share
    one rate limiter for the life of the store.
    """

    def __init__(
        self,
        *,
        config: RemoteStoreConfig,
        grid_size: int = 64,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        self._grid_size = grid_size
        self._client_factory = client_factory or _open_client
        self._record_limiter = build_limiter(config.resilience.ratelimit)
        self._listing_limiter = build_limiter(config.listing_resilience.ratelimit)

    async def get_territory(self, territory_id: str) -> Territory | None:
        payload = await self._get_json(f"territories/{quote(territory_id, safe='')}")
        if payload is None:
            return None
        return territory_from_payload(_validate(TerritoryPayload, payload))

    async def set_territory(self, territory: Territory) -> None:
        await self._put_json(
            f"territories/{quote(territory.id, safe='')}",
            territory_to_payload(territory).model_dump(mode="json", by_alias=True),
        )

    async def get_canvas(self, territory_id: str) -> PixelCanvas | None:
        payload = await self._get_json(f"canvases/{quote(territory_id, safe='')}")
        if payload is None:
            return None
        return canvas_from_payload(_validate(CanvasPayload, payload), grid_size=self._grid_size)

    async def set_canvas(self, canvas: PixelCanvas) -> None:
        await self._put_json(
            f"canvases/{quote(canvas.territory_id, safe='')}",
            canvas_to_payload(canvas).model_dump(mode="json", by_alias=True),
        )

    async def query_territories(self, sovereignties: Iterable[Sovereignty]) -> list[Territory]:
        params = {"sovereignty": ",".join(sorted(str(value) for value in sovereignties))}
        payload = await self._get_json("territories", params=params, listing=True)
        if payload is None:
            return []
        listing = _validate(TerritoryListPayload, payload)
        return [territory_from_payload(item) for item in listing.items]

    async def query_canvases_with_content(self) -> list[str]:
        payload = await self._get_json("canvases", params={"hasContent": "true"}, listing=True)
        if payload is None:
            return []
        return list(_validate(CanvasIdsPayload, payload).territory_ids)

    async def _get_json(
        self,
        path: str,
        *,
        params: dict[str, str] | None = None,
        listing: bool = False,
    ) -> dict[str, Any] | None:
        if listing:
            client = self._client_factory(self._config.listing_resilience, self._listing_limiter)
        else:
            client = self._client_factory(self._config.resilience, self._record_limiter)
        async with client:
            try:
                response = await client.get(path, params=params)
            except httpx.HTTPError as exc:
                raise TransientStoreError(f"GET {path} failed: {exc}") from exc
            if response.status_code == httpx.codes.NOT_FOUND:
                return None
            _raise_for_status(response, path)
            try:
                body = response.json()
            except ValueError as exc:
                raise RemoteStoreError(f"Unreadable payload for {path}") from exc
        if not isinstance(body, dict):
            raise RemoteStoreError(f"Unexpected payload for {path}")
        return body

    async def _put_json(self, path: str, body: dict[str, Any]) -> None:
        async with self._client_factory(self._config.resilience, self._record_limiter) as client:
            try:
                response = await client.put(path, json=body)
            except httpx.HTTPError as exc:
                raise TransientStoreError(f"PUT {path} failed: {exc}") from exc
        _raise_for_status(response, path)
        log.debug("Stored %s", path)


def _open_client(config: ResilienceConfig, limiter: AsyncLimiter | None) -> ResilientClient:
    return ResilientClient(config, limiter=limiter)


def _raise_for_status(response: httpx.Response, path: str) -> None:
    if response.status_code >= httpx.codes.INTERNAL_SERVER_ERROR:
        raise TransientStoreError(f"{path}: store answered {response.status_code}")
    if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
        raise TransientStoreError(f"{path}: rate limited")
    if response.is_error:
        raise RemoteStoreError(f"{path}: store answered {response.status_code}")


def _validate[TModel: BaseModel](
    model: type[TModel], payload: dict[str, Any]
) -> TModel:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise RemoteStoreError(f"Invalid {model.__name__}: {exc}") from exc
