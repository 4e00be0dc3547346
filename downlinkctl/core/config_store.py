"""Connection settings store and its persistence backends."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import replace
from importlib import resources
from pathlib import Path
from typing import Any, Protocol

import yaml
from jsonschema import ValidationError, validators

from downlinkctl.core.errors import ConfigError, ConfigLoadError, ConfigValidationError
from downlinkctl.core.model import Settings, normalize_api_key

LOGGER = logging.getLogger(__name__)

# Settings field -> persisted document key.
DOCUMENT_KEYS = {
    "server": "targetTTNServer",
    "api_key": "targetAPIkey",
    "app_name": "targetAppName",
    "end_device_name": "targetEndDeviceName",
}
SECRET_KEY = DOCUMENT_KEYS["api_key"]
SETTINGS_FILE = "settings.yaml"
SECRET_FILE = "api_key"


class SettingsBackend(Protocol):
    def load(self) -> dict[str, str]:
        """Return the persisted document, or an empty mapping."""

    def save(self, document: dict[str, str]) -> None:
        """Persist the full document."""


class MemoryBackend:
    def __init__(self, document: dict[str, str] | None = None) -> None:
        self.document = dict(document or {})
        self.saves = 0

    def load(self) -> dict[str, str]:
        return dict(self.document)

    def save(self, document: dict[str, str]) -> None:
        self.document = dict(document)
        self.saves += 1


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != "tag:yaml.org,2002:bool"
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


def _load_schema_validator() -> Any:
    schema_text = resources.files("downlinkctl.schemas").joinpath("settings.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def default_config_dir() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "downlinkctl"


def _replace_file(path: Path, text: str) -> None:
    """Write owner-only ``text`` next to ``path`` and rename it into place."""
    tmp_path = path.with_name(f".{path.name}.tmp")
    fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


class FileBackend:
    """YAML settings file plus a separate owner-only file for the API key."""

    def __init__(self, directory: Path | None = None) -> None:
        self.directory = directory or default_config_dir()

    @property
    def settings_path(self) -> Path:
        return self.directory / SETTINGS_FILE

    @property
    def secret_path(self) -> Path:
        return self.directory / SECRET_FILE

    def load(self) -> dict[str, str]:
        document = self._read_settings()
        if self.secret_path.exists():
            try:
                document[SECRET_KEY] = self.secret_path.read_text(encoding="utf-8").strip()
            except OSError as exc:
                raise ConfigLoadError(f"Could not read API key file {self.secret_path}: {exc}") from exc
        return document

    def save(self, document: dict[str, str]) -> None:
        public = {key: value for key, value in document.items() if key != SECRET_KEY}
        secret = document.get(SECRET_KEY, "")
        # Secret first: a failed save must leave settings.yaml untouched.
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            if secret:
                _replace_file(self.secret_path, secret)
            elif self.secret_path.exists():
                self.secret_path.unlink()
            _replace_file(self.settings_path, yaml.safe_dump(public, sort_keys=False))
        except OSError as exc:
            raise ConfigLoadError(f"Could not write settings to {self.directory}: {exc}") from exc

    def _read_settings(self) -> dict[str, str]:
        if not self.settings_path.exists():
            return {}
        try:
            content = self.settings_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigLoadError(f"Could not read settings file {self.settings_path}: {exc}") from exc

        try:
            loaded = yaml.load(content, Loader=UniqueKeyLoader)
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"Invalid YAML in {self.settings_path}: {exc}") from exc

        if loaded is None:
            return {}
        if not isinstance(loaded, dict):
            raise ConfigValidationError(f"Settings file {self.settings_path} must contain a mapping at root")

        try:
            _load_schema_validator().validate(loaded)
        except ValidationError as exc:
            path = ".".join(str(p) for p in exc.path)
            where = f" ({path})" if path else ""
            raise ConfigValidationError(
                f"Schema validation failed for {self.settings_path}{where}: {exc.message}"
            ) from exc
        return dict(loaded)


def settings_from_document(document: dict[str, str]) -> Settings:
    values = {
        name: document[key]
        for name, key in DOCUMENT_KEYS.items()
        if document.get(key) is not None
    }
    return Settings(**values)


def settings_to_document(settings: Settings) -> dict[str, str]:
    return {key: getattr(settings, name) for name, key in DOCUMENT_KEYS.items()}


class ConfigStore:
    """Holds the connection settings and delegates persistence to a backend.

    The API key is a write-only slot: callers may replace or reset it, but
    only ``is_configured()`` is meant for display.
    """

    def __init__(self, backend: SettingsBackend | None = None) -> None:
        self.backend = backend if backend is not None else MemoryBackend()
        self._settings = settings_from_document(self.backend.load())

    def get(self) -> Settings:
        return self._settings

    def update(self, **partial: str | None) -> Settings:
        unknown = sorted(set(partial) - set(DOCUMENT_KEYS))
        if unknown:
            raise ConfigError(f"Unknown settings field(s): {', '.join(unknown)}")
        changed = {name: value for name, value in partial.items() if value is not None}
        if "api_key" in changed:
            changed["api_key"] = normalize_api_key(changed["api_key"])
        settings = replace(self._settings, **changed)
        self.backend.save(settings_to_document(settings))
        self._settings = settings
        LOGGER.info(
            "Saved settings (%s)",
            ", ".join(name for name in sorted(changed)) or "no changes",
        )
        return settings

    def is_configured(self) -> bool:
        return self._settings.is_configured

    def reset_secret(self) -> Settings:
        settings = self.update(api_key="")
        LOGGER.info("API key reset")
        return settings
