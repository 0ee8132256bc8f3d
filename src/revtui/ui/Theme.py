# revtui/ui/Theme.py
"""Theme.py
========================
The style provider: turns the ``[colors]`` configuration table into curses
attributes for titles, borders, selected rows and file status letters.

Colors are given as curses names ("cyan") or as ``#rrggbb`` strings, which
are mapped to the nearest xterm-256 index on terminals that support it.
When colors cannot be initialised (no color support, or curses not started)
the theme falls back to monochrome attributes.
"""

import curses
import logging
from typing import Any

from revtui.utils.utils import hex_to_xterm

logger = logging.getLogger("revtui")

COLOR_NAMES: dict[str, int] = {
    "black": curses.COLOR_BLACK,
    "red": curses.COLOR_RED,
    "green": curses.COLOR_GREEN,
    "yellow": curses.COLOR_YELLOW,
    "blue": curses.COLOR_BLUE,
    "magenta": curses.COLOR_MAGENTA,
    "cyan": curses.COLOR_CYAN,
    "white": curses.COLOR_WHITE,
}

STATUS_COLOR_KEYS = {
    "A": "status_added",
    "M": "status_modified",
    "T": "status_modified",
    "D": "status_deleted",
    "R": "status_renamed",
    "C": "status_renamed",
}

# Color pair numbers are allocated from here to stay clear of other users.
PAIR_BASE = 40


class Theme:
    """Curses attributes derived from the configuration, with monochrome fallback."""

    def __init__(self, config: dict[str, Any]) -> None:
        self.colors_config: dict[str, Any] = config.get("colors", {})
        self.attrs: dict[str, int] = {}
        self._init_colors()

    def _resolve_color(self, spec: Any) -> int:
        if isinstance(spec, int):
            return spec
        spec = str(spec).strip().lower()
        if spec.startswith("#"):
            if getattr(curses, "COLORS", 8) >= 256:
                return hex_to_xterm(spec)
            return curses.COLOR_WHITE
        return COLOR_NAMES.get(spec, -1)

    def _init_colors(self) -> None:
        """Initializes color pairs, degrading to monochrome on ``curses.error``."""
        try:
            if not curses.has_colors():
                raise curses.error("terminal has no color support")
            curses.use_default_colors()
            for n, (name, spec) in enumerate(sorted(self.colors_config.items())):
                pair = PAIR_BASE + n
                if name == "selection":
                    curses.init_pair(pair, curses.COLOR_WHITE, self._resolve_color(spec))
                    self.attrs[name] = curses.color_pair(pair) | curses.A_BOLD
                else:
                    curses.init_pair(pair, self._resolve_color(spec), -1)
                    self.attrs[name] = curses.color_pair(pair)
            logger.debug("Theme initialised with %d color pairs.", len(self.attrs))
        except curses.error as e:
            logger.debug(f"Theme falling back to monochrome attributes: {e}")
            self.attrs = {
                "title": curses.A_BOLD,
                "border": curses.A_NORMAL,
                "selection": curses.A_REVERSE,
                "commit_hash": curses.A_BOLD,
            }

    def title(self, focused: bool) -> int:
        if focused:
            return self.attrs.get("title", curses.A_NORMAL) | curses.A_BOLD
        return curses.A_DIM

    def block(self, focused: bool) -> int:
        if focused:
            return self.attrs.get("border", curses.A_NORMAL) | curses.A_BOLD
        return curses.A_DIM

    def text(self, selected: bool, focused: bool) -> int:
        if not selected:
            return curses.A_NORMAL
        if focused:
            return self.attrs.get("selection", curses.A_REVERSE)
        return curses.A_UNDERLINE

    def item_status(self, status: str) -> int:
        key = STATUS_COLOR_KEYS.get(status)
        return self.attrs.get(key, curses.A_NORMAL) if key else curses.A_NORMAL

    def commit_hash(self) -> int:
        return self.attrs.get("commit_hash", curses.A_BOLD)
