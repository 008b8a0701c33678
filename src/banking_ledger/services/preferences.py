from typing import Optional

from banking_ledger.domain.enums import Theme
from banking_ledger.logging_setup import get_logger
from banking_ledger.repositories.base import KeyValueStore

THEME_KEY = "banking-dashboard-theme"

logger = get_logger(__name__)


class ThemePreferences:
    """
    Light/dark theme choice, kept in local storage.

    A stored choice wins; otherwise the system preference is used when
    given, and light is the default.
    """

    def __init__(self, store: KeyValueStore, prefers_dark: bool = False):
        self.store = store
        self._theme = self._load() or (Theme.DARK if prefers_dark else Theme.LIGHT)

    @property
    def theme(self) -> Theme:
        return self._theme

    @property
    def is_dark(self) -> bool:
        return self._theme == Theme.DARK

    def toggle(self) -> Theme:
        """Switch theme and persist the new choice"""
        self.set_theme(Theme.LIGHT if self.is_dark else Theme.DARK)
        return self._theme

    def set_theme(self, theme: Theme) -> None:
        self._theme = theme
        try:
            self.store.set(THEME_KEY, theme.value)
        except Exception as e:
            logger.warning("Could not save theme preference: %s", e)

    def _load(self) -> Optional[Theme]:
        try:
            raw = self.store.get(THEME_KEY)
        except Exception as e:
            logger.warning("Could not read theme preference: %s", e)
            return None

        if raw is None:
            return None
        try:
            return Theme(raw)
        except ValueError:
            return None
