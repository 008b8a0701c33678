import pytest

from banking_ledger.domain.enums import Theme
from banking_ledger.services.preferences import THEME_KEY, ThemePreferences


@pytest.mark.unit
class TestThemePreferences:

    def test_defaults_to_light(self, memory_store):
        assert ThemePreferences(memory_store).theme == Theme.LIGHT

    def test_system_preference_used_when_nothing_stored(self, memory_store):
        assert ThemePreferences(memory_store, prefers_dark=True).is_dark

    def test_stored_choice_wins(self, memory_store):
        memory_store.set(THEME_KEY, "light")

        prefs = ThemePreferences(memory_store, prefers_dark=True)

        assert prefs.theme == Theme.LIGHT

    def test_unknown_stored_value_is_ignored(self, memory_store):
        memory_store.set(THEME_KEY, "sepia")

        assert ThemePreferences(memory_store).theme == Theme.LIGHT

    def test_toggle_persists(self, memory_store):
        prefs = ThemePreferences(memory_store)

        assert prefs.toggle() == Theme.DARK
        assert memory_store.get(THEME_KEY) == "dark"
        assert ThemePreferences(memory_store).is_dark

        prefs.toggle()
        assert memory_store.get(THEME_KEY) == "light"

    def test_storage_errors_are_not_raised(self, mocker):
        store = mocker.Mock()
        store.get.side_effect = OSError("locked")
        store.set.side_effect = OSError("locked")

        prefs = ThemePreferences(store)
        prefs.toggle()

        assert prefs.is_dark
