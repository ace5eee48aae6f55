"""
Application Queries (Read Side)

Catalog reads answered directly to the caller. Queries never touch the
playback state.
"""

from hifi_player.application.queries.catalog_queries import CatalogQueryService

__all__ = [
    "CatalogQueryService",
]
