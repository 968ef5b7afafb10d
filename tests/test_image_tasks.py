"""Per-row artwork task registry."""

from __future__ import annotations

import asyncio

import pytest

from fakes import FakeStoreClient, wait_until
from storesearch.services.image_tasks import ImageTaskRegistry

URL = "https://img.example/1.jpg"


class Reconfigure:
    def __init__(self) -> None:
        self.calls = 0

    async def __call__(self) -> None:
        self.calls += 1


@pytest.mark.asyncio
async def test_successful_load_notifies_and_removes_entry():
    fetcher = FakeStoreClient()
    registry = ImageTaskRegistry(fetcher)
    on_loaded = Reconfigure()

    registry.request((0, 0), URL, on_loaded)
    assert (0, 0) in registry
    await registry.wait_until_idle()

    assert on_loaded.calls == 1
    assert len(registry) == 0
    assert fetcher.image_calls == [URL]


@pytest.mark.asyncio
async def test_second_request_for_same_row_replaces_first():
    fetcher = FakeStoreClient()
    fetcher.image_gates[URL] = asyncio.Event()
    registry = ImageTaskRegistry(fetcher)
    first_loaded = Reconfigure()
    second_loaded = Reconfigure()

    first = registry.request((0, 0), URL, first_loaded)
    await wait_until(lambda: fetcher.image_calls)
    second = registry.request((0, 0), URL, second_loaded)

    assert registry.active_keys == [(0, 0)]
    assert len(registry) == 1

    fetcher.image_gates[URL].set()
    await asyncio.wait([first, second])

    assert first.cancelled()
    assert first_loaded.calls == 0
    assert second_loaded.calls == 1
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_failed_load_keeps_placeholder_and_removes_entry():
    fetcher = FakeStoreClient()
    fetcher.failing_images.add(URL)
    registry = ImageTaskRegistry(fetcher)
    on_loaded = Reconfigure()

    task = registry.request((1, 2), URL, on_loaded)
    await asyncio.wait([task])

    assert not task.cancelled()
    assert task.exception() is None
    assert on_loaded.calls == 0
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_cancel_all_cancels_every_task():
    fetcher = FakeStoreClient()
    fetcher.image_gates[URL] = asyncio.Event()
    registry = ImageTaskRegistry(fetcher)
    on_loaded = Reconfigure()

    tasks = [registry.request((0, row), URL, on_loaded) for row in range(3)]
    registry.cancel_all()
    await asyncio.wait(tasks)

    assert all(task.cancelled() for task in tasks)
    assert len(registry) == 0
    assert on_loaded.calls == 0


@pytest.mark.asyncio
async def test_rows_are_tracked_independently():
    fetcher = FakeStoreClient()
    other = "https://img.example/2.jpg"
    fetcher.image_gates[URL] = asyncio.Event()
    registry = ImageTaskRegistry(fetcher)

    blocked = registry.request((0, 0), URL, Reconfigure())
    done = Reconfigure()
    registry.request((0, 1), other, done)
    await wait_until(lambda: done.calls == 1)

    assert registry.active_keys == [(0, 0)]
    registry.cancel((0, 0))
    await asyncio.wait([blocked])
    assert blocked.cancelled()
    assert len(registry) == 0


class BrokenFetcher:
    async def fetch_image(self, url: str) -> bytes:
        raise ValueError(f"bad url: {url}")


@pytest.mark.asyncio
async def test_unexpected_fetch_error_is_logged_and_entry_removed():
    registry = ImageTaskRegistry(BrokenFetcher())
    on_loaded = Reconfigure()

    task = registry.request((0, 0), URL, on_loaded)
    await asyncio.wait([task])

    assert task.exception() is None
    assert on_loaded.calls == 0
    assert len(registry) == 0
