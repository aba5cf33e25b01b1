"""Player profile persisted through ``QSettings``."""

from __future__ import annotations

from PySide6.QtCore import QSettings

from blitz_app.constants.about import APP_NAME, APP_ORGANIZATION

_USERNAME_KEY = "mathblitz_username"


class ProfileStore:
    """Keeps the display name used when publishing scores."""

    def __init__(self, settings: QSettings | None = None) -> None:
        self._settings = settings or QSettings(APP_ORGANIZATION, APP_NAME)

    @property
    def username(self) -> str:
        value = self._settings.value(_USERNAME_KEY, "")
        return str(value) if value else ""

    @property
    def has_username(self) -> bool:
        return bool(self.username.strip())

    @property
    def needs_username_prompt(self) -> bool:
        return not self.has_username

    def set_username(self, name: str) -> str:
        """Store the trimmed ``name`` and return it."""
        cleaned = name.strip()
        self._settings.setValue(_USERNAME_KEY, cleaned)
        self._settings.sync()
        return cleaned
