"""Service layer used by CLI and future UI frontends."""

from __future__ import annotations

import logging

from downlinkctl.core.config_store import ConfigStore
from downlinkctl.core.errors import DownlinkValidationError
from downlinkctl.core.model import (
    InsertMode,
    Priority,
    Settings,
    Status,
    SubmissionContext,
)
from downlinkctl.core.request_builder import build_request
from downlinkctl.core.status import StatusReporter
from downlinkctl.core.validation import validate
from downlinkctl.transports.base import Dispatcher
from downlinkctl.transports.http import HttpDispatchClient

LOGGER = logging.getLogger(__name__)


class DownlinkService:
    """Runs the submit pipeline and the settings save actions.

    Submissions are not serialized: a second ``submit`` may start while an
    earlier one is still awaiting the server.
    """

    def __init__(
        self,
        *,
        store: ConfigStore | None = None,
        dispatcher: Dispatcher | None = None,
        reporter: StatusReporter | None = None,
    ) -> None:
        self.store = store or ConfigStore()
        self.dispatcher = dispatcher or HttpDispatchClient()
        self.reporter = reporter or StatusReporter()

    @property
    def status(self) -> Status:
        return self.reporter.current

    @property
    def settings(self) -> Settings:
        return self.store.get()

    @property
    def is_configured(self) -> bool:
        return self.store.is_configured()

    async def submit(
        self,
        payload_hex: str,
        *,
        f_port: int = 1,
        priority: Priority | str = Priority.NORMAL,
        insert_mode: InsertMode | str = InsertMode.REPLACE,
        confirmed: bool = False,
    ) -> Status:
        try:
            context = SubmissionContext(
                settings=self.store.get(),
                f_port=f_port,
                priority=priority,
                insert_mode=insert_mode,
                confirmed=confirmed,
                payload_hex=payload_hex,
            )
            validate(context)
            request = build_request(context)
        except DownlinkValidationError as exc:
            LOGGER.info("Submission rejected: %s", exc)
            return self.reporter.validation_failed(str(exc))

        LOGGER.debug("Dispatching %r", request)
        result = await self.dispatcher.send(request.url, request.headers, request.body)
        if result.error is not None:
            return self.reporter.dispatch_failed(result.error)
        return self.reporter.dispatch_succeeded(result.status_code)

    def save_settings(
        self,
        *,
        server: str | None = None,
        app_name: str | None = None,
        end_device_name: str | None = None,
    ) -> Status:
        self.store.update(server=server, app_name=app_name, end_device_name=end_device_name)
        return self.reporter.settings_saved()

    def set_api_key(self, value: str) -> None:
        self.store.update(api_key=value)

    def reset_api_key(self) -> None:
        self.store.reset_secret()
