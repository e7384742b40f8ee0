"""Layered ``.env`` loading for the demo application."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping
import os

from dotenv import dotenv_values, load_dotenv

__all__ = [
    "EnvironmentSettings",
    "load_environment_settings",
    "log_configuration_snapshot",
]

_SENSITIVE_MARKERS = ("SECRET", "PASSWORD", "TOKEN", "KEY")


@dataclass(frozen=True)
class EnvironmentSettings:
    """Environment name plus the values read from the layered ``.env`` files."""

    name: str
    loaded_files: tuple[str, ...]
    file_values: Mapping[str, str]

    def get(self, key: str, default: str | None = None) -> str | None:
        value = os.getenv(key)
        if value is None:
            value = self.file_values.get(key)
        return default if value is None else value


def load_environment_settings(
    *, env: str | None = None, project_root: str | Path | None = None
) -> EnvironmentSettings:
    """Load ``.env``, ``.env.local``, ``.env.<env>`` and ``.env.<env>.local``; later files win."""

    root = Path(project_root or Path.cwd())
    name = (env or os.getenv("APP_ENV") or os.getenv("FLASK_ENV") or "").strip() or "development"
    slug = name.lower()

    loaded_files: list[str] = []
    file_values: dict[str, str] = {}
    for filename in (".env", ".env.local", f".env.{slug}", f".env.{slug}.local"):
        candidate = root / filename
        if not candidate.is_file():
            continue
        load_dotenv(candidate, override=True)
        loaded_files.append(str(candidate))
        file_values.update(
            {key: value for key, value in dotenv_values(candidate).items() if value is not None}
        )

    return EnvironmentSettings(name=name, loaded_files=tuple(loaded_files), file_values=file_values)


def log_configuration_snapshot(
    *,
    logger: Any,
    settings: EnvironmentSettings,
    config: Mapping[str, Any],
    keys_of_interest: Iterable[str],
) -> None:
    """Log the selected configuration keys, masking anything that looks like a credential."""

    snapshot = {}
    for key in keys_of_interest:
        if key not in config:
            continue
        sensitive = any(marker in key.upper() for marker in _SENSITIVE_MARKERS)
        snapshot[key] = "***" if sensitive else config[key]
    logger.info(
        "Runtime configuration initialised",
        extra={
            "environment": settings.name,
            "env_files": list(settings.loaded_files),
            "config_snapshot": snapshot,
        },
    )
