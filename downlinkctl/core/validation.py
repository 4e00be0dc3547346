"""Ordered fail-fast checks run before any downlink is dispatched."""

from __future__ import annotations

from collections.abc import Callable

from downlinkctl.core.codec import is_hex
from downlinkctl.core.errors import DownlinkValidationError
from downlinkctl.core.model import SubmissionContext

Check = tuple[Callable[[SubmissionContext], bool], str]


def _filled(value: str | None) -> bool:
    return bool(value and value.strip())


CHECKS: tuple[Check, ...] = (
    (lambda ctx: _filled(ctx.settings.server), "TTN server is empty!"),
    (lambda ctx: _filled(ctx.settings.api_key), "API key is empty!"),
    (lambda ctx: _filled(ctx.settings.app_name), "Application name is empty!"),
    (lambda ctx: _filled(ctx.settings.end_device_name), "End device name is empty!"),
    (lambda ctx: ctx.payload_hex != "", "Payload is empty!"),
    (lambda ctx: is_hex(ctx.payload_hex), "Payload must be a hex value."),
    (lambda ctx: len(ctx.payload_hex) % 2 == 0, "Payload must be a complete hex value"),
)


def validate(context: SubmissionContext) -> None:
    """Raise ``DownlinkValidationError`` for the first failing check, in order."""
    for predicate, message in CHECKS:
        if not predicate(context):
            raise DownlinkValidationError(message)
