"""Catalog infrastructure - in-memory reference catalog."""

from hifi_player.infrastructure.catalog.memory_catalog import (
    CatalogLibrary,
    InMemoryCatalog,
    PlaylistPage,
    stream_uri_for,
)

__all__ = [
    "CatalogLibrary",
    "InMemoryCatalog",
    "PlaylistPage",
    "stream_uri_for",
]
