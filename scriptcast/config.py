"""Settings file, API key lookup and input validation."""

import json
import logging
import os
import re

from scriptcast.constants import API_KEY_ENV, API_KEY_MIN_LENGTH, CONFIG_ENV, CONFIG_PATH

logger = logging.getLogger(__name__)

_INVALID_FILE_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1F]')


def config_path() -> str:
    return os.environ.get(CONFIG_ENV) or CONFIG_PATH


def load_config(path: str | None = None) -> dict:
    """Read the JSON settings file.

    Returns an empty dict if the file is missing or malformed.
    """
    path = path or config_path()
    if not os.path.exists(path):
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError:
        logger.warning("Malformed config file: %s, ignoring it", path)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict, path: str | None = None) -> str:
    """Write the settings file, creating its directory. Returns the path."""
    path = path or config_path()
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    return path


def validate_api_key(api_key: str | None) -> bool:
    return bool(api_key) and len(api_key) >= API_KEY_MIN_LENGTH


def validate_file_name(file_name: str | None) -> bool:
    """Non-empty and free of characters the filesystem rejects."""
    return bool(file_name) and not _INVALID_FILE_CHARS.search(file_name)


class ApiKeyProvider:
    """Read-only access to the configured Google API key.

    The environment variable wins over the settings file.
    """

    def __init__(self, path: str | None = None, environ: dict | None = None) -> None:
        self.path = path
        self.environ = os.environ if environ is None else environ

    def get(self) -> str | None:
        key = self.environ.get(API_KEY_ENV, "").strip()
        if key:
            return key
        key = str(load_config(self.path).get("google_api_key", "")).strip()
        return key or None

    def set(self, api_key: str) -> str:
        """Validate and persist a key. Returns the settings file path."""
        api_key = api_key.strip()
        if not validate_api_key(api_key):
            raise ValueError("API key looks invalid (too short)")
        data = load_config(self.path)
        data["google_api_key"] = api_key
        return save_config(data, self.path)
