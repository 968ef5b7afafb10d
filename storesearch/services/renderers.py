"""Renderer that writes snapshots to the structured log."""

from __future__ import annotations

from storesearch.domain.models import SectionSnapshot
from storesearch.logging import logger


class LoggingRenderer:
    """Stand-in rendering surface for headless runs."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.last_snapshot = SectionSnapshot()
        self.reconfigured: list[int] = []

    async def apply_snapshot(self, snapshot: SectionSnapshot) -> None:
        self.last_snapshot = snapshot
        logger.info(
            "render_snapshot",
            surface=self.name,
            sections=[
                {"title": title, "items": len(item_ids)}
                for title, item_ids in snapshot.as_pairs()
            ],
        )

    async def reconfigure_item(self, item_id: int) -> None:
        self.reconfigured.append(item_id)
        logger.info("render_reconfigure", surface=self.name, item_id=item_id)


__all__ = ["LoggingRenderer"]
