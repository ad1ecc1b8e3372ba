"""
clueai/client/preferences.py

Theme preference, persisted under its own key next to the history.
"""

from enum import Enum

from clueai.client.storage import KeyValueStorage, StorageError
from clueai.core.logging import get_logger

logger = get_logger(__name__)

THEME_KEY = "clueai-theme"


class ThemeMode(str, Enum):
    DARK = "dark"
    LIGHT = "light"


DEFAULT_THEME = ThemeMode.DARK


class ThemePreference:
    """Loads the stored theme once; anything unrecognised means the default."""

    def __init__(self, storage: KeyValueStorage, default: ThemeMode = DEFAULT_THEME) -> None:
        self._storage = storage
        self._theme = self._load(default)

    @property
    def theme(self) -> ThemeMode:
        return self._theme

    def _load(self, default: ThemeMode) -> ThemeMode:
        try:
            stored = self._storage.read(THEME_KEY)
        except StorageError as exc:
            logger.warning("theme_load_failed", error=str(exc))
            return default
        try:
            return ThemeMode(stored)
        except ValueError:
            return default

    def set(self, theme: ThemeMode | str) -> ThemeMode:
        self._theme = ThemeMode(theme)
        try:
            self._storage.write(THEME_KEY, self._theme.value)
        except StorageError as exc:
            logger.warning("theme_save_failed", error=str(exc))
        return self._theme

    def toggle(self) -> ThemeMode:
        return self.set(ThemeMode.LIGHT if self._theme is ThemeMode.DARK else ThemeMode.DARK)
