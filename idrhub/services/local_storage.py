"""JSON-file backed key/value store for small client preferences."""

import json
import logging
import os
from typing import Optional
from idrhub.utils.config import AppConfig

logger = logging.getLogger(__name__)


class LocalStorage:
    """String values under string keys, persisted to one JSON file."""

    def __init__(self, path: str = AppConfig.COOKIE_CONSENT_PATH):
        self.path = path

    def _load(self) -> dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable local storage file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f)
