"""Persistent GUI configuration (wavepeaks.config.json).

The file lives in the user's preferences directory::

    Windows : %APPDATA%\\wavepeaks\\wavepeaks.config.json
    macOS   : ~/Library/Application Support/wavepeaks/wavepeaks.config.json
    Linux   : $XDG_CONFIG_HOME/wavepeaks/wavepeaks.config.json
              (defaults to ~/.config/wavepeaks/wavepeaks.config.json)

and holds three sections::

    {
        "cache": { ... },     # PeakCache tuning (see wavepeakslib.config)
        "view":  { ... },     # mode, log scale, vertical scale, pan speed
        "gui":   { ... },     # window-only settings
    }

It is written with every default on first launch.  Afterwards it is read
back on top of the current defaults, so keys added in newer versions get
their default value.  An unreadable file, or one whose ``cache``/``view``
values fail validation, is kept as ``*.bak`` and replaced.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import platform
from typing import Any

from wavepeakslib.config import (
    build_structured_defaults,
    validate_structured_config,
)

log = logging.getLogger(__name__)

CONFIG_FILENAME = "wavepeaks.config.json"
APP_DIRNAME = "wavepeaks"

_GUI_DEFAULTS: dict[str, Any] = {
    "last_directory": "",
    "waveform_color": "#44aa44",
    "playhead_color": "#ffffff",
    "follow_playhead": False,
}

_VALIDATED_SECTIONS = ("cache", "view")


def _config_dir() -> str:
    home = os.path.expanduser("~")
    system = platform.system()
    if system == "Windows":
        base = os.environ.get("APPDATA") or home
    elif system == "Darwin":
        base = os.path.join(home, "Library", "Application Support")
    else:
        base = os.environ.get("XDG_CONFIG_HOME") or os.path.join(home, ".config")
    return os.path.join(base, APP_DIRNAME)


def config_path() -> str:
    """Full path of the GUI config file for this platform."""
    return os.path.join(_config_dir(), CONFIG_FILENAME)


def build_defaults() -> dict[str, Any]:
    defaults = build_structured_defaults()
    defaults["gui"] = copy.deepcopy(_GUI_DEFAULTS)
    return defaults


def load_config() -> dict[str, Any]:
    """Return the structured GUI config, creating or repairing the file."""
    path = config_path()
    defaults = build_defaults()

    if not os.path.isfile(path):
        log.info("Creating config file %s", path)
        save_config(defaults)
        return defaults

    stored = _read(path)
    if stored is None:
        return _replace_corrupt(path, defaults)

    merged = _overlay(defaults, stored)
    errors = validate_structured_config(merged)
    if errors:
        log.warning("Invalid config values (%s), resetting cache/view",
                    "; ".join(f"{e.key}: {e.message}" for e in errors))
        defaults["gui"] = merged["gui"]
        return _replace_corrupt(path, defaults)

    if merged != stored:
        save_config(merged)
    return merged


def save_config(config: dict[str, Any]) -> str:
    """Write *config* to :func:`config_path` and return that path."""
    path = config_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=4, ensure_ascii=False)
        f.write("\n")
    log.debug("Config saved to %s", path)
    return path


def _read(path: str) -> dict[str, Any] | None:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        log.warning("Cannot read config %s: %s", path, exc)
        return None
    if not isinstance(data, dict):
        log.warning("Config root is %s, expected an object",
                    type(data).__name__)
        return None
    return data


def _overlay(defaults: dict[str, Any], stored: dict[str, Any]) -> dict[str, Any]:
    """Copy of *defaults* with the stored values applied.

    Only known ``cache``/``view`` keys are taken over; the ``gui`` section
    is taken as is.
    """
    merged = copy.deepcopy(defaults)
    for name in _VALIDATED_SECTIONS:
        section = stored.get(name)
        if isinstance(section, dict):
            merged[name].update(
                (k, v) for k, v in section.items() if k in merged[name])
    gui = stored.get("gui")
    if isinstance(gui, dict):
        merged["gui"].update(gui)
    return merged


def _replace_corrupt(path: str, replacement: dict[str, Any]) -> dict[str, Any]:
    backup = path + ".bak"
    try:
        os.replace(path, backup)
        log.info("Kept previous config as %s", backup)
    except OSError as exc:
        log.warning("Cannot back up %s: %s", path, exc)
    save_config(replacement)
    return copy.deepcopy(replacement)
