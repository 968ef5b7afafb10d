"""Debounced, cancellable fan-out search across catalog scopes."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from functools import partial
from typing import Mapping, Protocol, Sequence

from storesearch.config import StoreSearchSettings, get_settings
from storesearch.domain.models import SearchQuery, SearchScope, SectionSnapshot, StoreItem
from storesearch.logging import logger
from storesearch.services.aggregator import ResultAggregator
from storesearch.services.exceptions import ServiceError
from storesearch.services.image_tasks import ImageTaskRegistry, RowKey


class SnapshotRenderer(Protocol):
    async def apply_snapshot(self, snapshot: SectionSnapshot) -> None: ...

    async def reconfigure_item(self, item_id: int) -> None: ...


class StoreClient(Protocol):
    async def fetch_items(self, query: SearchQuery) -> Sequence[StoreItem]: ...

    async def fetch_image(self, url: str) -> bytes: ...

    def cached_image(self, url: str) -> bytes | None: ...


@dataclass(slots=True)
class _Surface:
    renderer: SnapshotRenderer
    images: ImageTaskRegistry


class SearchOrchestrator:
    """Drive searches from UI events and feed snapshots to renderers.

    All state lives on the event loop that calls into the orchestrator. Child
    fetches run concurrently but only touch shared state between awaits, and
    snapshot application is serialized through a single lock.
    """

    def __init__(
        self,
        client: StoreClient,
        renderers: Mapping[str, SnapshotRenderer],
        settings: StoreSearchSettings | None = None,
    ) -> None:
        self._client = client
        self._settings = settings or get_settings()
        self._surfaces = {
            name: _Surface(renderer=renderer, images=ImageTaskRegistry(client, name=name))
            for name, renderer in renderers.items()
        }
        self._aggregator = ResultAggregator()
        self._apply_lock = asyncio.Lock()

        self._term = ""
        self._scope = SearchScope.ALL
        self._debounce_task: asyncio.Task[None] | None = None
        self._search_task: asyncio.Task[None] | None = None

    @property
    def live_query(self) -> tuple[str, SearchScope]:
        """Term and scope as currently shown by the search bar."""

        return self._term, self._scope

    @property
    def snapshot(self) -> SectionSnapshot:
        return self._aggregator.snapshot

    @property
    def items(self) -> list[StoreItem]:
        return self._aggregator.items

    @property
    def search_task(self) -> asyncio.Task[None] | None:
        return self._search_task

    def image_registry(self, surface: str) -> ImageTaskRegistry:
        return self._surfaces[surface].images

    def item(self, item_id: int) -> StoreItem | None:
        return self._aggregator.get(item_id)

    def image_for_item(self, item_id: int) -> bytes | None:
        item = self._aggregator.get(item_id)
        if item is None or not item.artwork_url:
            return None
        return self._client.cached_image(item.artwork_url)

    def on_search_input_changed(self, term: str, scope: SearchScope) -> None:
        self._term = term
        self._scope = scope
        if self._debounce_task is not None:
            self._debounce_task.cancel()
        self._debounce_task = asyncio.create_task(self._debounce())

    def on_scope_changed(self, scope: SearchScope) -> None:
        self.on_search_input_changed(self._term, scope)

    def on_row_visible(self, surface: str, row_key: RowKey, item_id: int) -> None:
        """Start loading artwork for a row that still shows its placeholder."""

        item = self._aggregator.get(item_id)
        if item is None or not item.artwork_url:
            return
        if self._client.cached_image(item.artwork_url) is not None:
            return
        target = self._surfaces[surface]
        target.images.request(
            row_key,
            item.artwork_url,
            partial(target.renderer.reconfigure_item, item_id),
        )

    def fetch_matching_items(self) -> None:
        term = self._term
        scope = self._scope

        self._aggregator.reset()
        for target in self._surfaces.values():
            target.images.cancel_all()

        if self._search_task is not None:
            self._search_task.cancel()
        self._search_task = asyncio.create_task(self._search(term, scope))

    async def wait_until_idle(self) -> None:
        """Wait for pending debounce, search and artwork work to settle."""

        while True:
            pending = [
                task
                for task in (self._debounce_task, self._search_task)
                if task is not None and not task.done()
            ]
            if not pending:
                break
            await asyncio.wait(pending)
        for target in self._surfaces.values():
            await target.images.wait_until_idle()

    async def close(self) -> None:
        tasks = [task for task in (self._debounce_task, self._search_task) if task is not None]
        for task in tasks:
            task.cancel()
        for target in self._surfaces.values():
            target.images.cancel_all()
        if tasks:
            await asyncio.wait(tasks)
        self._debounce_task = None
        self._search_task = None

    async def _debounce(self) -> None:
        await asyncio.sleep(self._settings.debounce_seconds)
        self._debounce_task = None
        self.fetch_matching_items()

    async def _search(self, term: str, scope: SearchScope) -> None:
        try:
            if not term:
                async with self._apply_lock:
                    await self._apply(self._aggregator.snapshot)
                return
            owner = asyncio.current_task()
            async with asyncio.TaskGroup() as group:
                for concrete_scope in scope.expand():
                    group.create_task(
                        self._fetch_scope(SearchQuery(term=term, scope=concrete_scope), owner)
                    )
        except Exception:
            logger.exception("search_failed", term=term, scope=scope.value)
        finally:
            if self._search_task is asyncio.current_task():
                self._search_task = None

    async def _fetch_scope(self, query: SearchQuery, owner: asyncio.Task | None) -> None:
        try:
            items = await self._client.fetch_items(query)
        except ServiceError as exc:
            logger.warning(
                "scope_fetch_failed",
                term=query.term,
                scope=query.scope.value,
                error_type=exc.__class__.__name__,
                error=str(exc),
            )
            return
        except Exception:
            logger.exception("scope_fetch_failed", term=query.term, scope=query.scope.value)
            return

        async with self._apply_lock:
            # A superseded search must not write into the reset aggregator.
            if owner is not self._search_task:
                return
            if not self._is_current(query):
                logger.debug(
                    "stale_results_discarded",
                    term=query.term,
                    scope=query.scope.value,
                    count=len(items),
                )
                return
            snapshot = self._aggregator.append_and_regroup(items)
            await self._apply(snapshot)

    def _is_current(self, query: SearchQuery) -> bool:
        if query.term != self._term:
            return False
        return self._scope is SearchScope.ALL or query.scope is self._scope

    async def _apply(self, snapshot: SectionSnapshot) -> None:
        for target in self._surfaces.values():
            await target.renderer.apply_snapshot(snapshot)
        logger.debug(
            "snapshot_applied",
            sections=snapshot.section_titles,
            items=len(snapshot.item_ids),
        )


__all__ = ["SearchOrchestrator", "SnapshotRenderer", "StoreClient"]
