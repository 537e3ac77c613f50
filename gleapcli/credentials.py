"""Persistent storage of the API key and project ID."""

from __future__ import annotations

import json
import os
from pathlib import Path

from platformdirs import user_config_dir

from .errors import ConfigError

_APP_NAME = "gleap-cli"
_FILE_NAME = "credentials.json"


def credentials_path() -> Path:
    """Default location of the stored credentials file."""
    return Path(user_config_dir(_APP_NAME)) / _FILE_NAME


def store_credentials(api_key: str, project_id: str, path: Path | None = None) -> None:
    """Save the API key and project ID as one entry readable only by the owner."""
    target = Path(path) if path is not None else credentials_path()
    payload = json.dumps({"api_key": api_key, "project_id": project_id})
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(payload)
        os.chmod(target, 0o600)
    except OSError as exc:
        raise ConfigError(f"Failed to store credentials: {exc}") from exc


def load_credentials(path: Path | None = None) -> tuple[str, str]:
    """Return the stored (api_key, project_id)."""
    target = Path(path) if path is not None else credentials_path()
    try:
        text = target.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read credentials: {exc}") from exc
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise ConfigError(f"Failed to parse credentials: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError("Failed to parse credentials: expected an object")
    api_key = data.get("api_key")
    project_id = data.get("project_id")
    if not isinstance(api_key, str) or not isinstance(project_id, str):
        raise ConfigError(
            "Failed to parse credentials: api_key and project_id must be strings"
        )
    return api_key, project_id


def delete_credentials(path: Path | None = None) -> None:
    """Remove stored credentials; succeeds when none are stored."""
    target = Path(path) if path is not None else credentials_path()
    try:
        target.unlink()
    except FileNotFoundError:
        return
    except OSError as exc:
        raise ConfigError(f"Failed to delete credentials: {exc}") from exc