"""Configuration handling for bookimport."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

STORAGE_ROOT_ENV = "BOOKIMPORT_STORAGE_ROOT"


class ConfigurationError(RuntimeError):
    """Raised when configuration values are missing or invalid."""


@dataclass(frozen=True)
class WebSettings:
    """Bind address of the HTTP API."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass(frozen=True)
class Settings:
    """High level settings controlling the importer behavior."""

    storage_root: Path | None = None
    cleanup_on_failure: bool = True
    web: WebSettings = field(default_factory=WebSettings)

    def require_storage_root(self) -> Path:
        if self.storage_root is None:
            raise ConfigurationError(
                "No storage root configured. Set [paths].storage_root, "
                f"pass --storage-root or export {STORAGE_ROOT_ENV}."
            )
        return self.storage_root

    @classmethod
    def from_mapping(cls, data: dict[str, Any], *, base_path: Path | None = None) -> "Settings":
        base_path = base_path or Path.cwd()

        raw_paths = data.get("paths", {})
        if not isinstance(raw_paths, dict):
            raise ConfigurationError("'paths' section must be a mapping")

        storage_root: Path | None = None
        if "storage_root" in raw_paths:
            storage_root = _resolve_path(
                raw_paths["storage_root"], field="storage_root", base_path=base_path
            )

        options = data.get("options", {})
        if not isinstance(options, dict):
            raise ConfigurationError("'options' section must be a mapping")
        cleanup_on_failure = _read_bool(options, "cleanup_on_failure", default=True)

        web_data = data.get("web", {})
        if not isinstance(web_data, dict):
            raise ConfigurationError("'web' section must be a mapping")
        host = web_data.get("host", WebSettings.host)
        if not isinstance(host, str) or not host.strip():
            raise ConfigurationError("Configuration value 'host' must be a non-empty string")
        port = _read_int(web_data, "port", default=WebSettings.port, minimum=1, maximum=65535)

        return cls(
            storage_root=storage_root,
            cleanup_on_failure=cleanup_on_failure,
            web=WebSettings(host=host.strip(), port=port),
        )


def _resolve_path(value: Any, *, field: str, base_path: Path) -> Path:
    if not isinstance(value, (str, Path)) or not str(value).strip():
        raise ConfigurationError(f"Path '{field}' must be a non-empty string")
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = (base_path / path).resolve()
    return path


def _read_int(
    data: dict[str, Any],
    key: str,
    *,
    default: int,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int:
    value = data.get(key, default)
    if isinstance(value, bool):
        raise ConfigurationError(f"Configuration value '{key}' must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Configuration value '{key}' must be an integer") from exc
    if minimum is not None and number < minimum:
        raise ConfigurationError(f"Configuration value '{key}' must be >= {minimum}")
    if maximum is not None and number > maximum:
        raise ConfigurationError(f"Configuration value '{key}' must be <= {maximum}")
    return number


def _read_bool(data: dict[str, Any], key: str, *, default: bool = False) -> bool:
    if key not in data:
        return default
    value = data[key]
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "y", "on"}:
            return True
        if normalized in {"0", "false", "no", "n", "off"}:
            return False
    raise ConfigurationError(f"Cannot interpret value '{value!r}' for '{key}' as boolean")


def load_settings(config_file: Path | None, *, required: bool = True) -> Settings:
    """Load configuration from a TOML file.

    With ``required=False`` a missing file yields default settings. The storage
    root falls back to the ``BOOKIMPORT_STORAGE_ROOT`` environment variable.
    """

    if config_file is None or not config_file.exists():
        if required:
            if config_file is None:
                raise ConfigurationError("No configuration file supplied")
            raise FileNotFoundError(f"Configuration file '{config_file}' does not exist")
        settings = Settings()
    else:
        try:
            with config_file.open("rb") as fh:
                data = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"Invalid TOML in '{config_file}': {exc}") from exc
        settings = Settings.from_mapping(data, base_path=config_file.parent)

    if settings.storage_root is None:
        env_root = os.environ.get(STORAGE_ROOT_ENV, "").strip()
        if env_root:
            settings = Settings(
                storage_root=_resolve_path(env_root, field=STORAGE_ROOT_ENV, base_path=Path.cwd()),
                cleanup_on_failure=settings.cleanup_on_failure,
                web=settings.web,
            )
    return settings


__all__ = [
    "ConfigurationError",
    "STORAGE_ROOT_ENV",
    "Settings",
    "WebSettings",
    "load_settings",
]
