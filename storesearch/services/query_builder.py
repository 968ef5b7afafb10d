"""Translate a search query into catalog endpoint parameters."""

from __future__ import annotations

from storesearch.domain.models import SearchQuery

DEFAULT_LANG = "en_us"
DEFAULT_LIMIT = 30


def build_search_params(
    query: SearchQuery,
    *,
    lang: str = DEFAULT_LANG,
    limit: int = DEFAULT_LIMIT,
) -> dict[str, str]:
    return {
        "term": query.term,
        "media": query.scope.media_type,
        "lang": lang,
        "limit": str(limit),
    }


__all__ = ["build_search_params", "DEFAULT_LANG", "DEFAULT_LIMIT"]
