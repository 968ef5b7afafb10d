"""Accumulate fetched items and group them into rendered sections."""

from __future__ import annotations

from typing import Iterable, Sequence

from storesearch.domain.models import SearchScope, Section, SectionSnapshot, StoreItem

SECTION_ORDER: tuple[SearchScope, ...] = (
    SearchScope.APPS,
    SearchScope.BOOKS,
    SearchScope.MUSIC,
    SearchScope.MOVIES,
)


def create_sectioned_snapshot(items: Sequence[StoreItem]) -> SectionSnapshot:
    """Group ``items`` into sections in fixed category order.

    Pure function of the item list: the same input always produces an equal
    snapshot, whatever order scopes were fetched in. Categories without items
    are omitted, as are items whose kind maps to no category.
    """

    grouped: dict[SearchScope, list[int]] = {scope: [] for scope in SECTION_ORDER}
    for item in items:
        scope = item.scope
        if scope in grouped:
            grouped[scope].append(item.id)

    return SectionSnapshot(
        sections=tuple(
            Section(title=scope.title, item_ids=tuple(grouped[scope]))
            for scope in SECTION_ORDER
            if grouped[scope]
        )
    )


class ResultAggregator:
    """Running item list for the current search plus its latest snapshot."""

    def __init__(self) -> None:
        self._items: list[StoreItem] = []
        self._by_id: dict[int, StoreItem] = {}
        self._snapshot = SectionSnapshot()

    @property
    def items(self) -> list[StoreItem]:
        return list(self._items)

    @property
    def snapshot(self) -> SectionSnapshot:
        return self._snapshot

    def get(self, item_id: int) -> StoreItem | None:
        return self._by_id.get(item_id)

    def reset(self) -> None:
        self._items = []
        self._by_id = {}
        self._snapshot = SectionSnapshot()

    def append_and_regroup(self, new_items: Iterable[StoreItem]) -> SectionSnapshot:
        for item in new_items:
            # IDs stay unique across every scope of one search.
            if item.id in self._by_id:
                continue
            self._items.append(item)
            self._by_id[item.id] = item
        self._snapshot = create_sectioned_snapshot(self._items)
        return self._snapshot


__all__ = ["ResultAggregator", "create_sectioned_snapshot", "SECTION_ORDER"]
