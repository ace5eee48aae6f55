#!/usr/bin/env python3
"""Main entry point for the hi-fi player."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from hifi_player.domain.music import actions
from hifi_player.domain.music.notifications import (
    ErrorNotification,
    LoadingNotification,
    StatusNotification,
)
from hifi_player.domain.music.value_objects import PlaybackState
from hifi_player.domain.shared.exceptions import DomainError
from hifi_player.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from hifi_player.config.container import Container

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.warning(
            "Could not load %s, falling back to basic config", _LOGGING_CONFIG_PATH
        )
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    logging.getLogger().setLevel(resolved_level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hifi-player",
        description="Play an album, playlist, track or stream URI from the configured catalog.",
    )
    parser.add_argument("--log-level", help="Override LOG_LEVEL for this run")

    sub = parser.add_subparsers(dest="command", required=True)

    album = sub.add_parser("album", help="Play an album")
    album.add_argument("album_id")

    playlist = sub.add_parser("playlist", help="Play a playlist")
    playlist.add_argument("playlist_id", type=int)

    track = sub.add_parser("track", help="Play a single track")
    track.add_argument("track_id", type=int)

    uri = sub.add_parser("uri", help="Play a stream URI directly")
    uri.add_argument("uri")

    search = sub.add_parser("search", help="Search the catalog and list the results")
    search.add_argument("query")

    return parser


def action_for(args: argparse.Namespace) -> actions.Action:
    match args.command:
        case "album":
            return actions.PlayAlbum(album_id=args.album_id)
        case "playlist":
            return actions.PlayPlaylist(playlist_id=args.playlist_id)
        case "track":
            return actions.PlayTrack(track_id=args.track_id)
        case "uri":
            return actions.PlayUri(uri=args.uri)
    raise ValueError(f"No playback action for command {args.command!r}")


async def play(container: Container, action: actions.Action) -> int:
    """Play until the track list stops; 1 if playback could not start."""
    subscription = container.notification_hub.subscribe()
    await container.initialize()
    exit_code = 0

    try:
        await container.controls.send(action)
        async for notification in subscription:
            match notification:
                case ErrorNotification():
                    exit_code = 1
                case LoadingNotification(is_loading=False, target_state=target) if (
                    target.is_idle
                ):
                    break
                case StatusNotification(state=PlaybackState.STOPPED):
                    break
    finally:
        subscription.close()
        await container.shutdown()
    return exit_code


async def search(container: Container, query: str) -> int:
    results = await container.catalog_queries.search(query)
    for album in results.albums:
        artist = album.artist.name if album.artist else "unknown artist"
        print(f"album    {album.selection_key:<16} {album.title} ({artist})")
    for track in results.tracks:
        duration = track.duration_formatted
        print(f"track    {track.selection_key:<16} {track.display_title} [{duration}]")
    for playlist in results.playlists:
        print(f"playlist {playlist.id:<16} {playlist.title}")
    for artist in results.artists:
        print(f"artist   {artist.id:<16} {artist.name}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    from hifi_player.config.settings import get_settings

    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(args.log_level or settings.log_level)

    logger = logging.getLogger(__name__)
    logger.info(LogTemplates.APP_STARTING.format(environment=settings.environment))

    from hifi_player.config.container import create_container

    container = create_container(settings)

    try:
        if args.command == "search":
            code = asyncio.run(search(container, args.query))
        else:
            code = asyncio.run(play(container, action_for(args)))
        logger.info(LogTemplates.APP_STOPPED)
        return code
    except KeyboardInterrupt:
        logger.info(LogTemplates.APP_KEYBOARD_INTERRUPT)
        return 0
    except DomainError as e:
        logger.error(LogTemplates.APP_FATAL_ERROR, e.message)
        return 1
    except Exception as e:
        logger.exception(LogTemplates.APP_FATAL_ERROR, e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
