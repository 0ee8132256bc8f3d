# revtui/utils/utils.py
"""
revtui.utils.utils
==================

Core helper functions shared by the whole application.

Key functionalities include:
- Robust Configuration Loading: an embedded default configuration is merged
  with user settings read from `~/.config/revtui/config.toml`, so the viewer
  always starts even when the user file is missing or broken.
- Safe Subprocess Execution: a wrapper around `subprocess.run` used for every
  git invocation.
- Helper Utilities: recursive dictionary merging and hex color conversion
  for the theme.
"""

import logging
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml

logger = logging.getLogger("revtui")

# --- Constants ---
WHITE_FG_IDX = 255
USER_CONFIG_PATH = Path.home() / ".config" / "revtui" / "config.toml"

# Embedded fallback configuration. Every section may be overridden by the user file.
DEFAULT_CONFIG: Dict[str, Any] = {
    "keybindings": {
        "move_up": ["up", "k"],
        "move_down": ["down", "j"],
        "tree_collapse": ["left", "h"],
        "tree_expand": ["right", "l"],
        "home": ["home", "g"],
        "end": ["end", "shift+g"],
        "page_up": ["pageup"],
        "page_down": ["pagedown"],
        "exit_popup": ["esc"],
        "open_commit": ["enter", 10, 13],
        "mark_commit": ["m"],
        "copy_path": ["y"],
        "file_history": ["shift+h"],
        "toggle_focus": ["tab"],
        "help": ["?", "f1"],
        "quit": ["q", "ctrl+q"],
    },
    "colors": {
        "title": "cyan",
        "border": "green",
        "selection": "blue",
        "commit_hash": "magenta",
        "status_added": "green",
        "status_modified": "yellow",
        "status_deleted": "red",
        "status_renamed": "magenta",
    },
    "git": {"log_limit": 500, "timeout": 10},
    "logging": {
        "log_file": "revtui.log",
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
    },
}


# --- Helper Functions ---

def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Loads the embedded defaults and merges the user's TOML file on top of them.

    Args:
        path: Explicit configuration file. Defaults to `~/.config/revtui/config.toml`.

    Returns:
        The merged configuration dictionary. Parse errors are logged and the
        defaults are returned unchanged.
    """
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    user_config_path = path or USER_CONFIG_PATH
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except Exception as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    return final_config


def safe_run(cmd: List[str], **kwargs: Any) -> subprocess.CompletedProcess:
    """
    Executes a command safely, capturing output and handling common exceptions.
    """
    try:
        return subprocess.run(
            cmd, capture_output=True, text=True, check=False,
            encoding="utf-8", errors="replace", **kwargs,
        )
    except FileNotFoundError as e:
        logger.error(f"Command not found: {cmd[0]!r}", exc_info=True)
        return subprocess.CompletedProcess(cmd, 127, stdout="", stderr=str(e))
    except subprocess.TimeoutExpired as e:
        logger.warning(f"Command timed out: {' '.join(cmd)}")
        return subprocess.CompletedProcess(cmd, -9, stdout=e.stdout or "", stderr=e.stderr or "")
    except Exception as e:
        logger.exception(f"An unexpected error occurred while running command: {' '.join(cmd)}")
        return subprocess.CompletedProcess(cmd, -1, stdout="", stderr=str(e))


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def hex_to_xterm(hex_color: str) -> int:
    """
    Converts a hexadecimal color string to the nearest xterm-256 color index.
    """
    hex_color = hex_color.lstrip("#")
    if len(hex_color) != 6:
        return WHITE_FG_IDX
    try:
        r, g, b = (int(hex_color[i:i+2], 16) for i in (0, 2, 4))
    except ValueError:
        return WHITE_FG_IDX

    if r == g == b:
        if r < 8: return 16
        if r > 248: return 231
        return round(((r - 8) / 247) * 24) + 232

    return int(
        16
        + (36 * round(r / 255 * 5))
        + (6 * round(g / 255 * 5))
        + round(b / 255 * 5)
    )
