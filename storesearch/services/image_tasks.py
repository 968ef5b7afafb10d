"""Per-row bookkeeping of in-flight artwork downloads."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Hashable, Protocol

from storesearch.logging import logger
from storesearch.services.exceptions import NetworkError

RowKey = Hashable
OnLoaded = Callable[[], Awaitable[None]]


class ImageFetcher(Protocol):
    async def fetch_image(self, url: str) -> bytes: ...


class ImageTaskRegistry:
    """Keyed map of image tasks for one rendering surface.

    At most one task is live per row key: a new request for a key cancels the
    task it replaces. Finished tasks remove their own entry, but only while
    the entry still points at them.
    """

    def __init__(self, fetcher: ImageFetcher, *, name: str = "images") -> None:
        self._fetcher = fetcher
        self._name = name
        self._tasks: dict[RowKey, asyncio.Task[None]] = {}

    @property
    def active_keys(self) -> list[RowKey]:
        return list(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, row_key: object) -> bool:
        return row_key in self._tasks

    def request(self, row_key: RowKey, image_url: str, on_loaded: OnLoaded) -> asyncio.Task[None]:
        self.cancel(row_key)
        task = asyncio.create_task(self._load(row_key, image_url, on_loaded))
        self._tasks[row_key] = task
        return task

    def cancel(self, row_key: RowKey) -> None:
        task = self._tasks.pop(row_key, None)
        if task is not None:
            task.cancel()

    def cancel_all(self) -> None:
        tasks, self._tasks = self._tasks, {}
        for task in tasks.values():
            task.cancel()
        if tasks:
            logger.debug("image_tasks_cancelled", registry=self._name, count=len(tasks))

    async def wait_until_idle(self) -> None:
        while True:
            pending = [task for task in self._tasks.values() if not task.done()]
            if not pending:
                return
            await asyncio.wait(pending)

    async def _load(self, row_key: RowKey, image_url: str, on_loaded: OnLoaded) -> None:
        try:
            await self._fetcher.fetch_image(image_url)
        except NetworkError as exc:
            logger.warning(
                "image_fetch_failed",
                registry=self._name,
                row=repr(row_key),
                url=image_url,
                error=str(exc),
            )
            self._discard(row_key)
            return
        except Exception:
            logger.exception(
                "image_fetch_failed", registry=self._name, row=repr(row_key), url=image_url
            )
            self._discard(row_key)
            return

        try:
            await on_loaded()
        except Exception:
            logger.exception("image_reconfigure_failed", registry=self._name, row=repr(row_key))
        finally:
            self._discard(row_key)

    def _discard(self, row_key: RowKey) -> None:
        if self._tasks.get(row_key) is asyncio.current_task():
            del self._tasks[row_key]


__all__ = ["ImageTaskRegistry", "ImageFetcher", "RowKey", "OnLoaded"]
