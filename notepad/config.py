import json
import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from notepad.error_handling import ConfigurationError
from notepad.logging_config import configure_logging
from notepad.storage.base import NoteStorage

load_dotenv()

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).parent.parent
DEFAULT_LOG_DIR = BASE_DIR / "logs"
SETTINGS_FILE = "settings.json"

# Current settings schema version
CURRENT_VERSION = 1

DEFAULT_SETTINGS: Dict[str, Any] = {
    "version": CURRENT_VERSION,
    "storage": "json",
    "data_path": "notes.json",
    "db_path": "notes.db",
    "slot": "notes",
    "feedback_window_ms": 500,
    "clipboard": "system",
    "logging": {
        "console_level": "INFO",
        "file_level": "DEBUG",
        "log_file": "notepad.log",
        "log_format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        "date_format": "%Y-%m-%d %H:%M:%S",
        "max_file_size": 10485760,  # 10 MB
        "backup_count": 5,
        "propagate": False
    }
}

STORAGE_BACKENDS = ("json", "sqlite", "memory")


def _merge_settings(target: Dict[str, Any], source: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in source.items():
        if key in target and isinstance(target[key], dict) and isinstance(value, dict):
            _merge_settings(target[key], value)
        else:
            target[key] = value
    return target


def _migrate_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    """
    Bring an older settings document up to the current version.

    Version 0 files (no version key) stored the feedback window in seconds.
    """
    version = settings.get("version", 0)
    if version < 1 and "feedback_window" in settings:
        settings["feedback_window_ms"] = int(float(settings.pop("feedback_window")) * 1000)
    settings["version"] = CURRENT_VERSION
    logger.info(f"Migrated settings from version {version} to {CURRENT_VERSION}")
    return settings


def load_settings(base_dir: Optional[Path] = None, configure: bool = False) -> Dict[str, Any]:
    """
    Load settings from settings.json merged over the defaults.

    Environment overrides:
    - NOTEPAD_STORAGE = json | sqlite | memory
    - NOTEPAD_DATA_PATH (file for the json backend)
    - NOTEPAD_DB_PATH (database for the sqlite backend)
    - NOTEPAD_FEEDBACK_MS (confirmation display window)

    Args:
        base_dir: Directory holding settings.json and relative data paths
        configure: Whether to apply the logging section right away

    Returns:
        Dictionary containing the effective settings
    """
    base_dir = Path(base_dir) if base_dir else BASE_DIR
    settings = deepcopy(DEFAULT_SETTINGS)
    settings_path = base_dir / SETTINGS_FILE

    if settings_path.exists():
        try:
            with open(settings_path, "r", encoding="utf-8") as f:
                stored = json.load(f)
            if not isinstance(stored, dict):
                raise ValueError("settings file must contain a JSON object")
            if stored.get("version", 0) < CURRENT_VERSION:
                stored = _migrate_settings(stored)
            _merge_settings(settings, stored)
        except (OSError, ValueError) as e:
            logger.error(f"Error loading settings from {settings_path}: {e}")

    if os.getenv("NOTEPAD_STORAGE"):
        settings["storage"] = os.getenv("NOTEPAD_STORAGE").lower()
    if os.getenv("NOTEPAD_DATA_PATH"):
        settings["data_path"] = os.getenv("NOTEPAD_DATA_PATH")
    if os.getenv("NOTEPAD_DB_PATH"):
        settings["db_path"] = os.getenv("NOTEPAD_DB_PATH")
    if os.getenv("NOTEPAD_FEEDBACK_MS"):
        try:
            settings["feedback_window_ms"] = int(os.getenv("NOTEPAD_FEEDBACK_MS"))
        except ValueError:
            logger.error(f"Ignoring invalid NOTEPAD_FEEDBACK_MS={os.getenv('NOTEPAD_FEEDBACK_MS')!r}")

    settings["base_dir"] = str(base_dir)
    if configure:
        configure_logging_from_settings(settings)
    return settings


def configure_logging_from_settings(settings: Dict[str, Any]) -> None:
    """
    Configure the logging system based on the application settings.

    Args:
        settings: Dictionary containing the application settings
    """
    logging_config = settings.get("logging", {})

    log_dir = logging_config.get("log_dir")
    if log_dir:
        log_dir = Path(log_dir)
    else:
        log_dir = DEFAULT_LOG_DIR

    configure_logging(
        config={
            "console_level": logging_config.get("console_level", "INFO"),
            "file_level": logging_config.get("file_level", "DEBUG"),
            "log_file": logging_config.get("log_file", "notepad.log"),
            "log_format": logging_config.get("log_format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            "date_format": logging_config.get("date_format", "%Y-%m-%d %H:%M:%S"),
            "max_file_size": logging_config.get("max_file_size", 10 * 1024 * 1024),  # 10 MB
            "backup_count": logging_config.get("backup_count", 5),
            "propagate": logging_config.get("propagate", False)
        },
        log_dir=log_dir
    )


def resolve_data_path(settings: Dict[str, Any], key: str = "data_path") -> Path:
    path = Path(settings.get(key, DEFAULT_SETTINGS[key]))
    if not path.is_absolute():
        path = Path(settings.get("base_dir", BASE_DIR)) / path
    return path


def get_storage(settings: Dict[str, Any]) -> NoteStorage:
    """
    Return the storage backend named in the settings.

    Raises:
        ConfigurationError: If the backend name is unknown
    """
    backend = settings.get("storage", "json")

    if backend == "json":
        from notepad.storage.json_file import JsonFileStorage
        return JsonFileStorage(resolve_data_path(settings))
    elif backend == "sqlite":
        from notepad.storage.sqlite import SQLiteStorage
        return SQLiteStorage(resolve_data_path(settings, "db_path"), slot=settings.get("slot", "notes"))
    elif backend == "memory":
        from notepad.storage.memory import MemoryStorage
        return MemoryStorage()
    raise ConfigurationError(
        f"Unknown storage backend {backend!r}",
        details={"supported": list(STORAGE_BACKENDS)},
    )
