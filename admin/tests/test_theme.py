"""
Tests for theme.py - process-wide theme state with a persisted copy
"""
import json

import pytest

from crm_admin.services.theme import ThemeState


class TestThemeState:
    """Tests for ThemeState initialisation and its single writer."""

    def test_missing_file_uses_default(self, tmp_path):
        state = ThemeState(tmp_path / "theme.json", default="dark")

        assert state.current == "dark"

    def test_set_theme_persists(self, tmp_path):
        path = tmp_path / "theme.json"
        state = ThemeState(path)

        state.set_theme("dark")

        assert state.current == "dark"
        assert json.loads(path.read_text()) == {"theme": "dark"}

    def test_theme_survives_new_instance(self, tmp_path):
        path = tmp_path / "theme.json"
        ThemeState(path).set_theme("dark")

        assert ThemeState(path).current == "dark"

    def test_toggle(self, tmp_path):
        state = ThemeState(tmp_path / "theme.json")

        assert state.toggle() == "dark"
        assert state.toggle() == "light"

    def test_toggle_disabled(self, tmp_path):
        path = tmp_path / "theme.json"
        state = ThemeState(path, switchable=False)

        assert state.toggle() == "light"
        assert not path.exists()

    def test_unknown_theme_rejected_without_writing(self, tmp_path):
        path = tmp_path / "theme.json"
        state = ThemeState(path)

        with pytest.raises(ValueError):
            state.set_theme("purple")

        assert state.current == "light"
        assert not path.exists()

    @pytest.mark.parametrize("content", ["not json", '{"theme": "purple"}', '["dark"]'])
    def test_unreadable_file_uses_default(self, tmp_path, content):
        path = tmp_path / "theme.json"
        path.write_text(content)

        assert ThemeState(path).current == "light"

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "theme.json"

        ThemeState(path).set_theme("dark")

        assert path.exists()
