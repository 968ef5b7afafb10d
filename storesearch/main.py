"""Application entrypoint: run one search against the live catalog."""

from __future__ import annotations

import asyncio
import sys
from typing import Sequence

import httpx

from storesearch.config import StoreSearchSettings, get_settings
from storesearch.domain.models import SearchScope
from storesearch.logging import configure_logging, logger
from storesearch.services.orchestrator import SearchOrchestrator
from storesearch.services.renderers import LoggingRenderer
from storesearch.services.store_client import StoreItemClient

SURFACES = ("table", "grid")
USAGE = "usage: python -m storesearch.main TERM [all|movies|music|apps|books]"


def parse_args(argv: Sequence[str]) -> tuple[str, SearchScope]:
    if not argv:
        raise SystemExit(USAGE)
    term = argv[0]
    if len(argv) < 2:
        return term, SearchScope.ALL
    try:
        return term, SearchScope(argv[1].lower())
    except ValueError:
        raise SystemExit(USAGE) from None


async def run_search(
    term: str,
    scope: SearchScope,
    *,
    http_client: httpx.AsyncClient,
    settings: StoreSearchSettings,
) -> dict[str, LoggingRenderer]:
    renderers = {name: LoggingRenderer(name) for name in SURFACES}
    client = StoreItemClient(http_client, settings=settings.api)
    orchestrator = SearchOrchestrator(client, renderers, settings=settings)
    try:
        orchestrator.on_search_input_changed(term, scope)
        await orchestrator.wait_until_idle()
        for row, item_id in enumerate(orchestrator.snapshot.item_ids):
            orchestrator.on_row_visible("table", row, item_id)
        await orchestrator.wait_until_idle()
    finally:
        await orchestrator.close()
    return renderers


async def main(argv: Sequence[str] | None = None) -> None:
    settings = get_settings()
    configure_logging(environment=settings.environment)
    term, scope = parse_args(sys.argv[1:] if argv is None else argv)

    logger.info("search_starting", environment=settings.environment, term=term, scope=scope.value)
    async with httpx.AsyncClient(follow_redirects=True) as http_client:
        renderers = await run_search(term, scope, http_client=http_client, settings=settings)
    logger.info("search_finished", sections=renderers["table"].last_snapshot.as_pairs())


if __name__ == "__main__":
    asyncio.run(main())
