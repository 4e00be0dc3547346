"""Last user-visible status of the submission pipeline."""

from __future__ import annotations

import logging

from downlinkctl.core.errors import ApplicationError, DispatchError
from downlinkctl.core.model import Status, StatusVariant

INITIAL_MESSAGE = "Fill in the necessary information and send the downlink."
SAVED_MESSAGE = "TTS settings saved! Now please save the dashboard!"
LOGGER = logging.getLogger(__name__)


class StatusReporter:
    def __init__(self) -> None:
        self._current = Status(StatusVariant.INFO, INITIAL_MESSAGE)

    @property
    def current(self) -> Status:
        return self._current

    def report(self, variant: StatusVariant, message: str) -> Status:
        self._current = Status(variant, message)
        LOGGER.debug("status -> %s: %s", variant.value, message)
        return self._current

    def validation_failed(self, message: str) -> Status:
        return self.report(StatusVariant.ERROR, message)

    def settings_saved(self) -> Status:
        return self.report(StatusVariant.WARNING, SAVED_MESSAGE)

    def dispatch_succeeded(self, status_code: int | None) -> Status:
        return self.report(StatusVariant.SUCCESS, f"Success: {status_code}")

    def dispatch_failed(self, error: DispatchError) -> Status:
        if isinstance(error, ApplicationError):
            detail = f"HTTP error {error.status_code}"
        else:
            detail = str(error) or error.__class__.__name__
        return self.report(StatusVariant.ERROR, f"Error: {detail}")
