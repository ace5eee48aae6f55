"""Dependency Injection Container

Manages the player's dependency graph, providing lazy initialization and
lifecycle management for the engine services and the collaborator adapters.
Components are created on-demand and shared by everything that needs them,
so the command bus and notification hub are handed out explicitly rather
than reached through module globals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.interfaces.audio_backend import AudioBackend
    from ..application.interfaces.catalog import CatalogClient
    from ..application.queries.catalog_queries import CatalogQueryService
    from ..application.services.command_bus import CommandBus, Controls
    from ..application.services.notification_hub import NotificationHub
    from ..application.services.notification_logger import NotificationLogger
    from ..application.services.playback_controller import PlaybackController
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed. Tests may assign
    the private slots (``_catalog``, ``_audio_backend``) before first access
    to swap in fakes.
    """

    settings: Settings

    # Channels
    _command_bus: CommandBus | None = None
    _controls: Controls | None = None
    _notification_hub: NotificationHub | None = None

    # Collaborator adapters
    _catalog: CatalogClient | None = None
    _audio_backend: AudioBackend | None = None

    # Application services
    _catalog_queries: CatalogQueryService | None = None
    _playback_controller: PlaybackController | None = None
    _notification_logger: NotificationLogger | None = None

    # === Channels ===

    @property
    def command_bus(self) -> CommandBus:
        if self._command_bus is None:
            from ..application.services.command_bus import CommandBus

            self._command_bus = CommandBus(self.settings.player.command_bus_capacity)
        return self._command_bus

    @property
    def controls(self) -> Controls:
        """Get the producer handle shared by every command source."""
        if self._controls is None:
            from ..application.services.command_bus import Controls

            self._controls = Controls(self.command_bus)
        return self._controls

    @property
    def notification_hub(self) -> NotificationHub:
        if self._notification_hub is None:
            from ..application.services.notification_hub import NotificationHub

            self._notification_hub = NotificationHub(
                buffer_size=self.settings.player.subscriber_buffer
            )
        return self._notification_hub

    # === Adapters ===

    @property
    def catalog(self) -> CatalogClient:
        """Get the catalog client (configured library file, else the bundled sample)."""
        if self._catalog is None:
            from ..infrastructure.catalog.memory_catalog import InMemoryCatalog

            catalog_settings = self.settings.catalog
            if catalog_settings.library_path is not None:
                self._catalog = InMemoryCatalog.from_file(
                    catalog_settings.library_path,
                    latency_ms=catalog_settings.latency_ms,
                    page_size=catalog_settings.page_size,
                )
            else:
                self._catalog = InMemoryCatalog.sample(
                    latency_ms=catalog_settings.latency_ms,
                    page_size=catalog_settings.page_size,
                )
        return self._catalog

    @property
    def audio_backend(self) -> AudioBackend:
        if self._audio_backend is None:
            from ..infrastructure.audio.simulated_backend import (
                SimulatedAudioBackend,
                SimulatedBackendConfig,
            )

            backend_settings = self.settings.backend
            self._audio_backend = SimulatedAudioBackend(
                SimulatedBackendConfig(
                    tick_seconds=backend_settings.tick_seconds,
                    buffer_steps=backend_settings.buffer_steps,
                    time_scale=backend_settings.time_scale,
                )
            )
        return self._audio_backend

    # === Application Services ===

    @property
    def catalog_queries(self) -> CatalogQueryService:
        if self._catalog_queries is None:
            from ..application.queries.catalog_queries import CatalogQueryService

            self._catalog_queries = CatalogQueryService(
                catalog=self.catalog,
                search_limit=self.settings.player.search_limit,
                cache_ttl=self.settings.player.query_cache_ttl_seconds,
            )
        return self._catalog_queries

    @property
    def playback_controller(self) -> PlaybackController:
        if self._playback_controller is None:
            from ..application.services.playback_controller import PlaybackController

            self._playback_controller = PlaybackController(
                bus=self.command_bus,
                hub=self.notification_hub,
                catalog=self.catalog,
                backend=self.audio_backend,
                queries=self.catalog_queries,
                jump_seconds=self.settings.player.jump_seconds,
                audio_quality=self.settings.player.audio_quality,
            )
        return self._playback_controller

    @property
    def notification_logger(self) -> NotificationLogger:
        if self._notification_logger is None:
            from ..application.services.notification_logger import NotificationLogger

            self._notification_logger = NotificationLogger(hub=self.notification_hub)
        return self._notification_logger

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Attach the logging observer and start the controller task."""
        self.notification_logger.start()
        self.playback_controller.start()

    async def shutdown(self) -> None:
        """Quit the player if it is still running and release resources."""
        if self._playback_controller is not None and self._playback_controller.is_running:
            if not self.command_bus.is_closed:
                await self.controls.quit()
            await self._playback_controller.wait_closed()

        if self._notification_hub is not None:
            self._notification_hub.close()
            await self._notification_hub.join()

        try:
            if self._notification_logger is not None:
                self._notification_logger.stop()
        except Exception as exc:
            logger.warning("Failed stopping notification logger: %r", exc)


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
