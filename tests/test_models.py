"""Scopes, query parameters and item decoding."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from storesearch.domain.models import SearchQuery, SearchScope, StoreItem
from storesearch.services.query_builder import build_search_params


def test_all_scope_expands_to_four_concrete_scopes():
    assert SearchScope.ALL.expand() == (
        SearchScope.APPS,
        SearchScope.BOOKS,
        SearchScope.MOVIES,
        SearchScope.MUSIC,
    )


@pytest.mark.parametrize(
    "scope",
    [SearchScope.APPS, SearchScope.BOOKS, SearchScope.MOVIES, SearchScope.MUSIC],
)
def test_concrete_scope_expands_to_itself(scope):
    assert scope.expand() == (scope,)


def test_scope_titles_and_media_types():
    assert [scope.title for scope in SearchScope] == ["All", "Movies", "Music", "Apps", "Books"]
    assert [scope.media_type for scope in SearchScope] == [
        "all",
        "movie",
        "music",
        "software",
        "ebook",
    ]


def test_build_search_params():
    query = SearchQuery(term="swift", scope=SearchScope.APPS)

    assert build_search_params(query) == {
        "term": "swift",
        "media": "software",
        "lang": "en_us",
        "limit": "30",
    }
    assert build_search_params(query, lang="de_de", limit=10)["limit"] == "10"


def test_query_requires_term():
    with pytest.raises(ValidationError):
        SearchQuery(term="", scope=SearchScope.MUSIC)


def test_queries_compare_by_value():
    assert SearchQuery(term="a", scope=SearchScope.MUSIC) == SearchQuery(
        term="a", scope=SearchScope.MUSIC
    )
    assert SearchQuery(term="a", scope=SearchScope.MUSIC) != SearchQuery(
        term="a", scope=SearchScope.MOVIES
    )


def test_item_from_record_prefers_track_fields():
    item = StoreItem.from_record(
        {
            "kind": "feature-movie",
            "trackId": 5,
            "collectionId": 9,
            "trackName": "Heat",
            "collectionName": "Collection",
            "artistName": "Michael Mann",
            "longDescription": "A heist.",
            "artworkUrl100": "https://img.example/5.jpg",
        }
    )

    assert item.id == 5
    assert item.name == "Heat"
    assert item.description == "A heist."
    assert item.scope is SearchScope.MOVIES


def test_items_are_immutable():
    item = StoreItem(id=1, kind="song", name="x")

    with pytest.raises(ValidationError):
        item.name = "y"
