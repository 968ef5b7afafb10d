"""Pydantic models shared across service and rendering layers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SearchScope(Enum):
    ALL = "all"
    MOVIES = "movies"
    MUSIC = "music"
    APPS = "apps"
    BOOKS = "books"

    @property
    def title(self) -> str:
        return _SCOPE_TITLES[self]

    @property
    def media_type(self) -> str:
        return _SCOPE_MEDIA_TYPES[self]

    def expand(self) -> tuple[SearchScope, ...]:
        """Concrete scopes fetched for this scope; ``ALL`` fans out to four."""

        if self is SearchScope.ALL:
            return (
                SearchScope.APPS,
                SearchScope.BOOKS,
                SearchScope.MOVIES,
                SearchScope.MUSIC,
            )
        return (self,)


_SCOPE_TITLES = {
    SearchScope.ALL: "All",
    SearchScope.MOVIES: "Movies",
    SearchScope.MUSIC: "Music",
    SearchScope.APPS: "Apps",
    SearchScope.BOOKS: "Books",
}

_SCOPE_MEDIA_TYPES = {
    SearchScope.ALL: "all",
    SearchScope.MOVIES: "movie",
    SearchScope.MUSIC: "music",
    SearchScope.APPS: "software",
    SearchScope.BOOKS: "ebook",
}

# Kind tokens reported by the catalog, mapped to the section they render in.
KIND_SCOPES: dict[str, SearchScope] = {
    "software": SearchScope.APPS,
    "mac-software": SearchScope.APPS,
    "ebook": SearchScope.BOOKS,
    "song": SearchScope.MUSIC,
    "album": SearchScope.MUSIC,
    "feature-movie": SearchScope.MOVIES,
}


class StoreItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    kind: str
    name: str
    artist: str = ""
    description: str = ""
    artwork_url: str | None = None

    @property
    def scope(self) -> SearchScope | None:
        return KIND_SCOPES.get(self.kind)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> StoreItem:
        """Build an item from a raw catalog record.

        Albums come back as collections without a ``kind`` and without a
        ``trackId``; their collection fields are used instead.
        """

        collection_type = record.get("collectionType", "")
        if isinstance(collection_type, str):
            collection_type = collection_type.lower()
        return cls.model_validate(
            {
                "id": record.get("trackId") or record.get("collectionId"),
                "kind": record.get("kind") or collection_type,
                "name": record.get("trackName") or record.get("collectionName"),
                "artist": record.get("artistName") or "",
                "description": (
                    record.get("description")
                    or record.get("shortDescription")
                    or record.get("longDescription")
                    or ""
                ),
                "artwork_url": record.get("artworkUrl100") or record.get("artworkUrl60"),
            }
        )


class SearchQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    term: str = Field(min_length=1)
    scope: SearchScope


@dataclass(frozen=True, slots=True)
class Section:
    title: str
    item_ids: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class SectionSnapshot:
    sections: tuple[Section, ...] = ()

    @property
    def section_titles(self) -> list[str]:
        return [section.title for section in self.sections]

    @property
    def item_ids(self) -> list[int]:
        return [item_id for section in self.sections for item_id in section.item_ids]

    def is_empty(self) -> bool:
        return not self.sections

    def as_pairs(self) -> list[tuple[str, list[int]]]:
        return [(section.title, list(section.item_ids)) for section in self.sections]


__all__ = [
    "KIND_SCOPES",
    "SearchQuery",
    "SearchScope",
    "Section",
    "SectionSnapshot",
    "StoreItem",
]
