"""Core data models used across the store, pipeline, and CLI."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from downlinkctl.core.errors import DispatchError, DownlinkValidationError

DEFAULT_SERVER = "https://eu1.cloud.thethings.network"
MIN_F_PORT = 1
MAX_F_PORT = 223
_API_KEY_RE = re.compile(r"[\x21-\x7e]*")


class Priority(str, Enum):
    LOWEST = "LOWEST"
    LOW = "LOW"
    BELOW_NORMAL = "BELOW_NORMAL"
    NORMAL = "NORMAL"
    ABOVE_NORMAL = "ABOVE_NORMAL"
    HIGH = "HIGH"
    HIGHEST = "HIGHEST"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").capitalize()


class InsertMode(str, Enum):
    PUSH = "push"
    REPLACE = "replace"

    @property
    def label(self) -> str:
        if self is InsertMode.PUSH:
            return "Push to downlink queue"
        return "Replace downlink queue"


class StatusVariant(str, Enum):
    INFO = "info"
    ERROR = "error"
    WARNING = "warning"
    SUCCESS = "success"


@dataclass(frozen=True)
class Settings:
    server: str = DEFAULT_SERVER
    api_key: str = field(default="", repr=False)
    app_name: str = ""
    end_device_name: str = ""

    @property
    def is_configured(self) -> bool:
        return self.api_key != ""


def normalize_api_key(value: str) -> str:
    """Strip surrounding whitespace and require a header-safe token.

    The error message never includes the key itself.
    """
    key = value.strip()
    if _API_KEY_RE.fullmatch(key) is None:
        raise DownlinkValidationError(
            "API key must contain only printable ASCII characters without spaces"
        )
    return key


@dataclass(frozen=True)
class SubmissionContext:
    """Settings plus the per-submit downlink fields.

    Built fresh for every submit attempt and never persisted. FPort and the
    enumerated fields are checked on construction; everything else is left
    to the validation chain.
    """

    settings: Settings
    f_port: int = MIN_F_PORT
    priority: Priority = Priority.NORMAL
    insert_mode: InsertMode = InsertMode.REPLACE
    confirmed: bool = False
    payload_hex: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.f_port, bool) or not isinstance(self.f_port, int):
            raise DownlinkValidationError(f"FPort must be an integer, got {self.f_port!r}")
        if not MIN_F_PORT <= self.f_port <= MAX_F_PORT:
            raise DownlinkValidationError(
                f"FPort must be between {MIN_F_PORT} and {MAX_F_PORT}, got {self.f_port}"
            )
        object.__setattr__(self, "priority", _coerce(Priority, self.priority, "priority"))
        object.__setattr__(self, "insert_mode", _coerce(InsertMode, self.insert_mode, "insert mode"))


def _coerce(enum_cls: type[Enum], value: Any, context: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise DownlinkValidationError(
            f"Unsupported {context} '{value}'. Allowed: {allowed}"
        ) from None


@dataclass(frozen=True)
class DownlinkRequest:
    url: str
    headers: dict[str, str]
    body: dict[str, Any]

    def __repr__(self) -> str:
        redacted = {
            key: ("Bearer ***" if key == "Authorization" else value)
            for key, value in self.headers.items()
        }
        return f"DownlinkRequest(url={self.url!r}, headers={redacted!r}, body={self.body!r})"


@dataclass(frozen=True)
class Status:
    variant: StatusVariant
    message: str


@dataclass(frozen=True)
class DispatchResult:
    status_code: int | None = None
    error: DispatchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
