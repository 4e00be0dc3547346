"""Stable public API for building tooling on top of downlinkctl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

import asyncio

from downlinkctl.core.config_store import ConfigStore, FileBackend, MemoryBackend, SettingsBackend
from downlinkctl.core.errors import (
    ApplicationError,
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
    DispatchError,
    DownlinkctlError,
    DownlinkValidationError,
    MalformedPayloadError,
    TransportError,
)
from downlinkctl.core.model import (
    DispatchResult,
    DownlinkRequest,
    InsertMode,
    Priority,
    Settings,
    Status,
    StatusVariant,
    SubmissionContext,
)
from downlinkctl.core.service import DownlinkService
from downlinkctl.transports.base import Dispatcher

__all__ = [
    "DownlinkctlError",
    "DownlinkValidationError",
    "MalformedPayloadError",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "DispatchError",
    "TransportError",
    "ApplicationError",
    "DispatchResult",
    "DownlinkRequest",
    "InsertMode",
    "Priority",
    "Settings",
    "Status",
    "StatusVariant",
    "SubmissionContext",
    "FileBackend",
    "MemoryBackend",
    "SettingsBackend",
    "Client",
]


class Client:
    """Public client for interacting with downlinkctl core capabilities.

    A `Client` instance wraps the settings store, the submission pipeline and
    the last status behind a stable API intended for third-party tools
    (GUI/TUI/services/scripts). Settings are kept in memory unless a backend
    such as `FileBackend` is given.
    """

    def __init__(
        self,
        *,
        backend: SettingsBackend | None = None,
        dispatcher: Dispatcher | None = None,
    ) -> None:
        self._service = DownlinkService(store=ConfigStore(backend), dispatcher=dispatcher)

    @property
    def status(self) -> Status:
        return self._service.status

    @property
    def is_configured(self) -> bool:
        return self._service.is_configured

    def save_settings(
        self,
        *,
        server: str | None = None,
        app_name: str | None = None,
        end_device_name: str | None = None,
    ) -> Status:
        return self._service.save_settings(
            server=server,
            app_name=app_name,
            end_device_name=end_device_name,
        )

    def set_api_key(self, value: str) -> None:
        self._service.set_api_key(value)

    def reset_api_key(self) -> None:
        self._service.reset_api_key()

    async def asend_downlink(
        self,
        payload_hex: str,
        *,
        f_port: int = 1,
        priority: Priority | str = Priority.NORMAL,
        insert_mode: InsertMode | str = InsertMode.REPLACE,
        confirmed: bool = False,
    ) -> Status:
        return await self._service.submit(
            payload_hex,
            f_port=f_port,
            priority=priority,
            insert_mode=insert_mode,
            confirmed=confirmed,
        )

    def send_downlink(
        self,
        payload_hex: str,
        *,
        f_port: int = 1,
        priority: Priority | str = Priority.NORMAL,
        insert_mode: InsertMode | str = InsertMode.REPLACE,
        confirmed: bool = False,
    ) -> Status:
        return asyncio.run(
            self.asend_downlink(
                payload_hex,
                f_port=f_port,
                priority=priority,
                insert_mode=insert_mode,
                confirmed=confirmed,
            )
        )
