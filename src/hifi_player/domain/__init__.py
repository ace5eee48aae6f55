"""
Domain Layer

Contains pure player logic organized by bounded contexts:
- shared/: Cross-cutting types, messages and exceptions
- music/: Tracks, track lists, commands, notifications and navigation rules
"""

from hifi_player.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
