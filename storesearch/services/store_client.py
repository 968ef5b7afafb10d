"""Catalog search and artwork download over HTTP."""

from __future__ import annotations

from collections import OrderedDict
from functools import lru_cache
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from storesearch.config import StoreApiSettings, get_settings
from storesearch.domain.models import SearchQuery, StoreItem
from storesearch.logging import logger
from storesearch.services.exceptions import DecodeError, NetworkError
from storesearch.services.query_builder import build_search_params


class SearchResponse(BaseModel):
    result_count: int = Field(default=0, alias="resultCount")
    results: list[dict[str, Any]] = Field(default_factory=list)


class ImageCache:
    """In-memory LRU of artwork bytes keyed by URL."""

    def __init__(self, max_entries: int = 256) -> None:
        self._max_entries = max_entries
        self._entries: OrderedDict[str, bytes] = OrderedDict()

    def get(self, url: str) -> bytes | None:
        data = self._entries.get(url)
        if data is not None:
            self._entries.move_to_end(url)
        return data

    def put(self, url: str, data: bytes) -> None:
        self._entries[url] = data
        self._entries.move_to_end(url)
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, url: object) -> bool:
        return url in self._entries

    def __len__(self) -> int:
        return len(self._entries)


@lru_cache
def get_image_cache() -> ImageCache:
    """Return the process-wide artwork cache."""

    return ImageCache(max_entries=get_settings().image_cache.max_entries)


class StoreItemClient:
    """Fetch store items per query and artwork bytes per URL."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: StoreApiSettings | None = None,
        image_cache: ImageCache | None = None,
    ) -> None:
        self._client = http_client
        self._settings = settings or get_settings().api
        self._images = image_cache if image_cache is not None else get_image_cache()

    async def fetch_items(self, query: SearchQuery) -> list[StoreItem]:
        params = build_search_params(
            query,
            lang=self._settings.lang,
            limit=self._settings.result_limit,
        )
        try:
            response = await self._client.get(
                str(self._settings.base_url),
                params=params,
                timeout=self._settings.request_timeout_seconds,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code if exc.response is not None else "unknown"
            raise NetworkError(
                f"Search request failed ({status_code}) for {query.scope.title}"
            ) from exc
        except httpx.RequestError as exc:
            raise NetworkError(f"Search request failed: {exc}") from exc

        try:
            payload = SearchResponse.model_validate(response.json())
            items = [StoreItem.from_record(record) for record in payload.results]
        except (ValueError, ValidationError) as exc:
            raise DecodeError(
                f"Search response for {query.scope.title} could not be decoded"
            ) from exc

        logger.debug(
            "search_results_decoded",
            term=query.term,
            scope=query.scope.value,
            count=len(items),
        )
        return items

    def cached_image(self, url: str) -> bytes | None:
        return self._images.get(url)

    async def fetch_image(self, url: str) -> bytes:
        cached = self._images.get(url)
        if cached is not None:
            return cached

        try:
            response = await self._client.get(
                url, timeout=self._settings.request_timeout_seconds
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code if exc.response is not None else "unknown"
            raise NetworkError(f"Image request failed ({status_code}): {url}") from exc
        except httpx.RequestError as exc:
            raise NetworkError(f"Image request failed: {exc}") from exc

        data = response.content
        self._images.put(url, data)
        return data


__all__ = ["ImageCache", "SearchResponse", "StoreItemClient", "get_image_cache"]
