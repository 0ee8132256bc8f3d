# revtui/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
The KeyBinder decides which semantic action (``move_down``, ``exit_popup``,
``copy_path``...) a key press stands for, independently of literal key
codes. Components ask ``key_match(key, "move_down")`` instead of comparing
against ``curses.KEY_DOWN`` themselves.

Key Features:
- Loads the ``[keybindings]`` configuration table, accepting a single spec,
  a list of specs, or a ``"a|b"`` string per action.
- Decodes human-readable specs ("ctrl+q", "shift+h", "pagedown", "f1") into
  curses key codes, and Alt chords into logical ``"alt-x"`` strings.
- Reads keys from the terminal, turning ESC-prefixed CSI/SS3 sequences into
  the same codes.
- Renders short key labels for the command bar.
"""

import curses
import logging
import re
from typing import Any, Optional

from revtui.utils.logging_config import KEY_LOGGER
from revtui.utils.utils import DEFAULT_CONFIG

KeySpec = int | str

KEY_LABELS: dict[str, str] = {
    "up": "↑",
    "down": "↓",
    "left": "←",
    "right": "→",
    "enter": "⏎",
    "esc": "esc",
    "tab": "⇥",
    "pageup": "pgup",
    "pagedown": "pgdn",
}


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Maps key codes to semantic actions and reads keys from curses.

    Attributes:
        config: Application configuration; only ``["keybindings"]`` is read.
        stdscr: Window used by ``get_key_input`` when none is given.
        key_specs (dict): Action name to the specs as written in the config.
        keybindings (dict): Action name to the list of decoded key codes.
    """

    # Normalized escape sequences, without the leading ESC.
    ESCAPE_SEQUENCE_MAP: dict[str, str] = {
        "[A": "up", "[B": "down", "[C": "right", "[D": "left",
        "OA": "up", "OB": "down", "OC": "right", "OD": "left",
        "[H": "home", "[F": "end", "OH": "home", "OF": "end",
        "[1~": "home", "[4~": "end",
        "[2~": "insert", "[3~": "delete", "[5~": "pageup", "[6~": "pagedown",
        "[Z": "shift+tab",
        "OP": "f1", "OQ": "f2", "OR": "f3", "OS": "f4",
        "[11~": "f1", "[12~": "f2", "[13~": "f3", "[14~": "f4",
        "[15~": "f5", "[17~": "f6", "[18~": "f7", "[19~": "f8",
        "[20~": "f9", "[21~": "f10", "[23~": "f11", "[24~": "f12",
    }

    def __init__(self, config: dict[str, Any], stdscr: Optional[Any] = None) -> None:
        self.config = config
        self.stdscr = stdscr
        self.key_specs: dict[str, list[KeySpec]] = {}
        self.keybindings = self._load_keybindings()

    def _load_keybindings(self) -> dict[str, list[KeySpec]]:
        """Parses the configured bindings on top of the embedded defaults.

        Returns:
            dict[str, list[int | str]]: Action name to decoded key codes.
            Actions whose specs all fail to parse are left unbound.
        """
        merged: dict[str, Any] = dict(DEFAULT_CONFIG["keybindings"])
        merged.update(self.config.get("keybindings", {}))

        parsed: dict[str, list[KeySpec]] = {}
        for action, value in merged.items():
            if not value and value != 0:
                logging.debug("Keybinding for action %r is disabled or empty.", action)
                continue

            if isinstance(value, list):
                specs: list[KeySpec] = value
            elif isinstance(value, str) and "|" in value:
                specs = [s.strip() for s in value.split("|")]
            else:
                specs = [value]

            codes: list[KeySpec] = []
            for spec in specs:
                try:
                    code = self._decode_keystring(spec)
                except ValueError as e:
                    logging.error(
                        "Error parsing keybinding item %r for action %r: %s. "
                        "This specific binding for the action will be ignored.",
                        spec, action, e,
                    )
                    continue
                if code not in codes:
                    codes.append(code)

            if codes:
                parsed[action] = codes
                self.key_specs[action] = specs
            else:
                logging.warning(
                    "No valid key codes found for action %r after parsing. It will not be bound.",
                    action,
                )

        logging.debug("Loaded keybindings (action -> key codes): %s", parsed)
        return parsed

    def _decode_keystring(self, key_input: KeySpec) -> KeySpec:
        """Decodes a key specification into a curses key code or an ``alt-`` string.

        Args:
            key_input: A spec such as ``"ctrl+q"``, ``"shift+h"``, ``"alt+x"``,
                ``"pagedown"``, a single character, or an integer key code.

        Returns:
            int | str: The key code, or a logical ``"alt-..."`` identifier.

        Raises:
            ValueError: If the spec is empty, of the wrong type, or uses an
                unknown base key or modifier.
        """
        if isinstance(key_input, int):
            return key_input
        if not isinstance(key_input, str):
            raise ValueError(f"Invalid key_input type: {type(key_input)}. Expected str or int.")

        s = key_input.strip().lower()
        if not s:
            raise ValueError("Key string cannot be empty.")

        parts = [p.strip() for p in s.split("+")]
        if "alt" in parts[:-1] or s.startswith("alt-"):
            base = parts[-1] if not s.startswith("alt-") else s[4:]
            return f"alt-{base}"

        named_keys_map: dict[str, int] = {
            "left": curses.KEY_LEFT,
            "right": curses.KEY_RIGHT,
            "up": curses.KEY_UP,
            "down": curses.KEY_DOWN,
            "home": curses.KEY_HOME,
            "end": getattr(curses, "KEY_END", curses.KEY_LL),
            "pageup": curses.KEY_PPAGE,
            "pgup": curses.KEY_PPAGE,
            "pagedown": curses.KEY_NPAGE,
            "pgdn": curses.KEY_NPAGE,
            "delete": curses.KEY_DC,
            "del": curses.KEY_DC,
            "backspace": curses.KEY_BACKSPACE,
            "insert": curses.KEY_IC,
            "tab": 9,
            "shift+tab": getattr(curses, "KEY_BTAB", 353),
            "enter": curses.KEY_ENTER,
            "return": curses.KEY_ENTER,
            "space": ord(" "),
            "esc": 27,
            "escape": 27,
        }
        named_keys_map.update(
            {f"f{i}": getattr(curses, f"KEY_F{i}", 264 + i) for i in range(1, 13)}
        )

        if s in named_keys_map:
            return named_keys_map[s]

        base_key_str = parts[-1]
        modifiers = set(parts[:-1])

        if base_key_str in named_keys_map:
            base_code = named_keys_map[base_key_str]
        elif len(base_key_str) == 1:
            base_code = ord(base_key_str)
        else:
            raise ValueError(f"Unknown base key '{base_key_str}' in '{key_input}'")

        if "ctrl" in modifiers:
            modifiers.remove("ctrl")
            if len(base_key_str) == 1 and "a" <= base_key_str <= "z":
                base_code = ord(base_key_str) - ord("a") + 1

        if "shift" in modifiers:
            modifiers.remove("shift")
            if len(base_key_str) == 1 and "a" <= base_key_str <= "z":
                base_code = ord(base_key_str.upper())

        if modifiers:
            raise ValueError(f"Unknown or unhandled modifiers {sorted(modifiers)} in '{key_input}'")
        return base_code

    def key_match(self, key: Any, action: str) -> bool:
        """True if ``key`` is bound to ``action``."""
        if isinstance(key, str) and len(key) == 1:
            key = ord(key)
        return key in self.keybindings.get(action, ())

    def lookup(self, key_spec: KeySpec) -> Optional[str]:
        """Finds the action bound to a key spec or code, or None."""
        try:
            decoded_key = self._decode_keystring(key_spec)
        except ValueError:
            return None
        for action_name, key_list in self.keybindings.items():
            if decoded_key in key_list:
                return action_name
        return None

    def key_label(self, action: str) -> str:
        """Short label of the first key bound to ``action`` for the command bar."""
        specs = self.key_specs.get(action)
        if not specs:
            return "?"
        spec = specs[0]
        if isinstance(spec, int):
            return str(spec)
        s = spec.strip().lower()
        if s in KEY_LABELS:
            return KEY_LABELS[s]
        if s.startswith("shift+") and len(s) == 7:
            return s[-1].upper()
        return s

    def get_key_input(self, window: Optional[Any] = None) -> int | str:
        """Read a single key or key sequence from the terminal with robust ESC parsing.

        Returns:
            int | str:
            - curses key code (int) for known keys,
            - "alt-<char>" for Alt/Meta chords,
            - 27 for a lone ESC,
            - curses.ERR when no key arrived before the timeout.
        """
        target = window or self.stdscr
        try:
            ch = target.getch()
            if ch != 27:
                if ch != curses.ERR:
                    KEY_LOGGER.debug("key %r", ch)
                return ch

            seq = ""
            target.nodelay(True)
            try:
                while True:
                    nx = target.getch()
                    if nx == curses.ERR:
                        break
                    seq += chr(nx) if 0 <= nx <= 255 else f"<{nx}>"
            finally:
                target.nodelay(False)
                target.timeout(100)

            if not seq:
                KEY_LOGGER.debug("key ESC")
                return 27
            if seq[0] == "\x1b":
                seq = seq[1:]

            if len(seq) == 1 and seq.isprintable():
                KEY_LOGGER.debug("key alt-%s", seq.lower())
                return f"alt-{seq.lower()}"

            mapped = self.ESCAPE_SEQUENCE_MAP.get(seq)
            if not mapped:
                cleaned = "".join(re.findall(r"[\[O0-9;~A-Za-z]", seq))
                mapped = self.ESCAPE_SEQUENCE_MAP.get(cleaned)
            if mapped:
                code = self._decode_keystring(mapped)
                KEY_LOGGER.debug("key ESC %r -> %r", seq, code)
                return code

            logging.warning("get_key_input: unknown escape sequence: ESC + %r", seq)
            return 27
        except curses.error:
            return curses.ERR
