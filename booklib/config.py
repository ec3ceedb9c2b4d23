"""Configuration for the library and its CLI.

Settings are a flat YAML mapping with three keys (``data_dir``,
``native_host``, ``flat_quota_bytes``). Files are read from the user config
directory and then the working directory, an explicit ``--config`` file is
read last, and ``BOOKLIB_*`` environment variables override everything.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

SETTING_KEYS = ("data_dir", "native_host", "flat_quota_bytes")

ENV_OVERRIDES = {
    "BOOKLIB_DATA_DIR": "data_dir",
    "BOOKLIB_NATIVE_HOST": "native_host",
    "BOOKLIB_FLAT_QUOTA": "flat_quota_bytes",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class LibrarySettings:
    """Settings consumed by the local host and the library facade."""

    data_dir: Path
    native_host: bool = False
    flat_quota_bytes: int | None = None

    @classmethod
    def from_mapping(cls, config: dict[str, Any]) -> "LibrarySettings":
        """Build settings from a merged configuration dictionary.

        Raises:
            ValueError: If ``flat_quota_bytes`` is not an integer.
        """
        data_dir = config.get("data_dir")
        return cls(
            data_dir=Path(data_dir).expanduser() if data_dir else default_data_dir(),
            native_host=_as_bool(config.get("native_host", False)),
            flat_quota_bytes=_as_quota(config.get("flat_quota_bytes")),
        )


def default_data_dir() -> Path:
    """Default data directory under XDG data home."""
    xdg_data_home = Path(
        os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
    )
    return xdg_data_home / "booklib"


def config_paths() -> list[Path]:
    """Default config files, lowest precedence first."""
    xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return [
        xdg_config_home / "booklib" / "config.yaml",
        Path(".booklib.yaml"),
        Path("booklib.yaml"),
    ]


def read_config_file(path: Path) -> dict[str, Any]:
    """Read the settings mapping from a YAML file.

    Unknown keys are logged and dropped.

    Raises:
        ValueError: If the file is unreadable, not YAML or not a mapping.
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Cannot read {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping of settings")

    unknown = sorted(set(data) - set(SETTING_KEYS))
    if unknown:
        logger.warning(f"Ignoring unknown settings in {path}: {', '.join(unknown)}")
    return {key: data[key] for key in SETTING_KEYS if key in data}


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Collect settings from config files and the environment.

    Broken default files are skipped with a warning; an explicit ``path``
    must be valid.

    Raises:
        ValueError: If ``path`` cannot be read.
    """
    config: dict[str, Any] = {}
    for candidate in config_paths():
        if not candidate.exists():
            continue
        try:
            config.update(read_config_file(candidate))
        except ValueError as e:
            logger.warning(f"Skipping config file: {e}")

    if path is not None:
        config.update(read_config_file(path))

    for variable, key in ENV_OVERRIDES.items():
        if value := os.environ.get(variable):
            config[key] = value
    return config


def load_settings(path: Path | None = None) -> LibrarySettings:
    """Load configuration and build settings."""
    return LibrarySettings.from_mapping(load_config(path))


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


def _as_quota(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"flat_quota_bytes must be an integer, got {value!r}") from e
