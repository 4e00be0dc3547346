"""Domain-specific errors for downlinkctl."""

from __future__ import annotations


class DownlinkctlError(Exception):
    """Base error for downlinkctl."""


class DownlinkValidationError(DownlinkctlError):
    """Raised when submission input is missing or malformed."""


class MalformedPayloadError(DownlinkValidationError):
    """Raised when a payload string cannot be decoded as hex bytes."""


class ConfigError(DownlinkctlError):
    """Base configuration error."""


class ConfigLoadError(ConfigError):
    """Raised when the persisted configuration cannot be read or written."""


class ConfigValidationError(ConfigError):
    """Raised when the persisted configuration does not conform to schema."""


class DispatchError(DownlinkctlError):
    """Base dispatch error."""


class TransportError(DispatchError):
    """Raised when the network server could not be reached."""


class ApplicationError(DispatchError):
    """Raised when the network server answered with a non-2xx status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP error {status_code}")
        self.status_code = status_code
