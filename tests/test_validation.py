from __future__ import annotations

import pytest

from downlinkctl.core.errors import DownlinkValidationError
from downlinkctl.core.model import Settings, SubmissionContext
from downlinkctl.core.validation import CHECKS, validate

VALID = Settings(
    server="https://eu1.cloud.thethings.network",
    api_key="NNSXS.SECRET",
    app_name="my-app",
    end_device_name="my-device",
)


def _context(payload_hex: str = "0A1B", **settings: str) -> SubmissionContext:
    base = {
        "server": VALID.server,
        "api_key": VALID.api_key,
        "app_name": VALID.app_name,
        "end_device_name": VALID.end_device_name,
    }
    base.update(settings)
    return SubmissionContext(settings=Settings(**base), payload_hex=payload_hex)


@pytest.mark.parametrize(
    ("context", "message"),
    [
        (_context(server="   "), "TTN server is empty!"),
        (_context(api_key=""), "API key is empty!"),
        (_context(app_name=""), "Application name is empty!"),
        (_context(end_device_name=" "), "End device name is empty!"),
        (_context(payload_hex=""), "Payload is empty!"),
        (_context(payload_hex="0G"), "Payload must be a hex value."),
        (_context(payload_hex="0A1"), "Payload must be a complete hex value"),
    ],
)
def test_each_check_has_its_own_message(context: SubmissionContext, message: str) -> None:
    with pytest.raises(DownlinkValidationError) as exc:
        validate(context)
    assert str(exc.value) == message


def test_earlier_checks_take_precedence() -> None:
    with pytest.raises(DownlinkValidationError) as exc:
        validate(_context(server="", api_key="", payload_hex="xyz"))
    assert str(exc.value) == "TTN server is empty!"

    with pytest.raises(DownlinkValidationError) as exc:
        validate(_context(payload_hex="abc"))
    assert str(exc.value) == "Payload must be a complete hex value"

    with pytest.raises(DownlinkValidationError) as exc:
        validate(_context(payload_hex="abz"))
    assert str(exc.value) == "Payload must be a hex value."


def test_valid_context_passes() -> None:
    assert validate(_context(payload_hex="deadBEEF")) is None


def test_check_order_is_fixed() -> None:
    assert [message for _, message in CHECKS] == [
        "TTN server is empty!",
        "API key is empty!",
        "Application name is empty!",
        "End device name is empty!",
        "Payload is empty!",
        "Payload must be a hex value.",
        "Payload must be a complete hex value",
    ]
