from __future__ import annotations

import pytest

from downlinkctl.core.errors import DownlinkValidationError
from downlinkctl.core.model import DownlinkRequest, InsertMode, Priority, Settings, SubmissionContext


@pytest.mark.parametrize("f_port", [0, 224, -1, 1000])
def test_f_port_out_of_range_rejected(f_port: int) -> None:
    with pytest.raises(DownlinkValidationError):
        SubmissionContext(settings=Settings(), f_port=f_port)


@pytest.mark.parametrize("f_port", [1, 100, 223])
def test_f_port_bounds_accepted(f_port: int) -> None:
    assert SubmissionContext(settings=Settings(), f_port=f_port).f_port == f_port


def test_non_integer_f_port_rejected() -> None:
    with pytest.raises(DownlinkValidationError):
        SubmissionContext(settings=Settings(), f_port="1")  # type: ignore[arg-type]


def test_enum_strings_are_coerced() -> None:
    context = SubmissionContext(settings=Settings(), priority="HIGHEST", insert_mode="push")
    assert context.priority is Priority.HIGHEST
    assert context.insert_mode is InsertMode.PUSH


@pytest.mark.parametrize(("field", "value"), [("priority", "URGENT"), ("insert_mode", "append")])
def test_unknown_enum_values_rejected(field: str, value: str) -> None:
    with pytest.raises(DownlinkValidationError) as exc:
        SubmissionContext(settings=Settings(), **{field: value})
    assert "Allowed:" in str(exc.value)


def test_labels() -> None:
    assert Priority.BELOW_NORMAL.label == "Below normal"
    assert InsertMode.PUSH.label == "Push to downlink queue"
    assert InsertMode.REPLACE.label == "Replace downlink queue"


def test_secret_never_in_repr() -> None:
    settings = Settings(api_key="NNSXS.SECRET")
    assert "NNSXS.SECRET" not in repr(settings)
    assert settings.is_configured

    request = DownlinkRequest(url="https://x", headers={"Authorization": "Bearer NNSXS.SECRET"}, body={})
    assert "NNSXS.SECRET" not in repr(request)
