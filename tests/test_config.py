from __future__ import annotations

from pathlib import Path

import pytest

from bookimport.config import (
    STORAGE_ROOT_ENV,
    ConfigurationError,
    Settings,
    load_settings,
)


def write_config(tmp_path: Path, content: str) -> Path:
    config_path = tmp_path / "bookimport.toml"
    config_path.write_text(content, encoding="utf-8")
    return config_path


def test_load_settings(tmp_path: Path) -> None:
    config_path = write_config(
        tmp_path,
        """
[paths]
storage_root = "./library"

[options]
cleanup_on_failure = "no"

[web]
host = "0.0.0.0"
port = 9090
"""
    )

    settings = load_settings(config_path)
    assert isinstance(settings, Settings)
    assert settings.storage_root == (config_path.parent / "library").resolve()
    assert settings.cleanup_on_failure is False
    assert settings.web.host == "0.0.0.0"
    assert settings.web.port == 9090


def test_defaults_when_sections_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(STORAGE_ROOT_ENV, raising=False)
    settings = load_settings(write_config(tmp_path, ""))

    assert settings.storage_root is None
    assert settings.cleanup_on_failure is True
    assert settings.web.port == 8080
    with pytest.raises(ConfigurationError):
        settings.require_storage_root()


@pytest.mark.parametrize(
    "content",
    [
        "[web]\nport = 0\n",
        "[web]\nport = \"http\"\n",
        "[options]\ncleanup_on_failure = \"maybe\"\n",
        "paths = \"library\"\n",
        "[paths]\nstorage_root = \"\"\n",
        "[paths\n",
    ],
)
def test_invalid_config_raises(tmp_path: Path, content: str) -> None:
    with pytest.raises(ConfigurationError):
        load_settings(write_config(tmp_path, content))


def test_missing_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(STORAGE_ROOT_ENV, raising=False)
    missing = tmp_path / "absent.toml"

    with pytest.raises(FileNotFoundError):
        load_settings(missing)
    assert load_settings(missing, required=False) == Settings()


def test_environment_storage_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(STORAGE_ROOT_ENV, str(tmp_path / "env-library"))

    settings = load_settings(tmp_path / "absent.toml", required=False)
    assert settings.storage_root == tmp_path / "env-library"


def test_config_file_wins_over_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(STORAGE_ROOT_ENV, str(tmp_path / "env-library"))
    config_path = write_config(tmp_path, "[paths]\nstorage_root = \"./library\"\n")

    assert load_settings(config_path).storage_root == (tmp_path / "library").resolve()
