from __future__ import annotations

import json
import logging
import threading
from functools import lru_cache
from pathlib import Path

from ..core.config import get_settings

logger = logging.getLogger(__name__)

THEMES = ("light", "dark")


class ThemeState:
    """
    Process-wide theme preference.

    Initialised from the persisted file (or the default when missing or
    unreadable). ``set_theme`` is the only writer: it updates the persisted
    copy and the in-memory value together.
    """

    def __init__(self, path: str | Path, default: str = "light", switchable: bool = True) -> None:
        if default not in THEMES:
            raise ValueError(f"Unknown theme: {default}")
        self.path = Path(path)
        self.default = default
        self.switchable = switchable
        self._lock = threading.Lock()
        self._current = self._load()

    @property
    def current(self) -> str:
        return self._current

    def _load(self) -> str:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return self.default
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable theme file %s: %s", self.path, e)
            return self.default

        theme = raw.get("theme") if isinstance(raw, dict) else None
        return theme if theme in THEMES else self.default

    def set_theme(self, theme: str) -> str:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme}")
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps({"theme": theme}), encoding="utf-8")
            self._current = theme
        logger.info("Theme set to %s", theme)
        return theme

    def toggle(self) -> str:
        if not self.switchable:
            return self._current
        return self.set_theme("dark" if self._current == "light" else "light")


@lru_cache
def get_theme_state() -> ThemeState:
    settings = get_settings()
    return ThemeState(
        settings.THEME_STATE_PATH,
        default=settings.DEFAULT_THEME,
        switchable=settings.THEME_SWITCHABLE,
    )


def reset_theme_state() -> None:
    """Drop the cached process-wide state (used when settings change)."""
    get_theme_state.cache_clear()
