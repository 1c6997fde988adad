#!/usr/bin/env python3
"""
settings.py - Settings for B64View: defaults < b64view.ini < command line.

b64view.ini format:
    [b64view]
    feedback_ms = 2000       # how long "Copied!"/"Failed" stays on the button
    watch = false            # import clipboard changes automatically
    poll = 0.5               # clipboard poll interval in seconds
    log_db = b64view.db      # mirror the activity log to SQLite (blank = off)
    log_lines = 300          # lines kept in the in-window log pane
"""

import argparse
import configparser
from dataclasses import dataclass, fields, replace
from pathlib import Path

INI_NAME = "b64view.ini"
SECTION  = "b64view"


class SettingsError(Exception):
    """Raised when b64view.ini holds a value of the wrong type."""


@dataclass(frozen=True)
class Settings:
    feedback_ms: int = 2000
    watch: bool = False
    poll: float = 0.5
    log_db: str = ""
    log_lines: int = 300
    initial_input: str = ""


_INI_KEYS = ("feedback_ms", "watch", "poll", "log_db", "log_lines")


def load_ini(path) -> configparser.ConfigParser:
    """Load the ini file if it exists; a missing file yields an empty config."""
    cfg = configparser.ConfigParser()
    ini_path = Path(path)
    if ini_path.exists():
        cfg.read(ini_path, encoding="utf-8")
    return cfg


def settings_from_ini(cfg: configparser.ConfigParser, base: Settings = None) -> Settings:
    settings = base or Settings()
    if not cfg.has_section(SECTION):
        return settings

    types = {f.name: f.type for f in fields(Settings)}
    values = {}
    for key in _INI_KEYS:
        if not cfg.has_option(SECTION, key):
            continue
        kind = types[key]
        try:
            if kind is bool:
                values[key] = cfg.getboolean(SECTION, key)
            elif kind is int:
                values[key] = cfg.getint(SECTION, key)
            elif kind is float:
                values[key] = cfg.getfloat(SECTION, key)
            else:
                values[key] = cfg.get(SECTION, key).strip()
        except ValueError as exc:
            raise SettingsError(f"[{SECTION}] {key}: {exc}") from exc

    settings = replace(settings, **values)
    _validate(settings)
    return settings


def _validate(settings: Settings):
    if settings.feedback_ms < 0:
        raise SettingsError(f"feedback_ms must be >= 0, got {settings.feedback_ms}")
    if settings.poll <= 0:
        raise SettingsError(f"poll must be > 0, got {settings.poll}")
    if settings.log_lines < 1:
        raise SettingsError(f"log_lines must be >= 1, got {settings.log_lines}")


def build_parser(default_config: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Decode Base64 text and show it as formatted JSON."
    )
    parser.add_argument("--config", "-c", default=default_config,
                        help=f"Settings file (default: {default_config}).")
    parser.add_argument("--watch", "-w", action="store_true", default=None,
                        help="Load clipboard changes into the input automatically.")
    parser.add_argument("--poll", "-p", type=float, default=None,
                        help="Clipboard poll interval in seconds (default: 0.5).")
    parser.add_argument("--log-db", "-l", default=None,
                        help="Mirror the activity log to this SQLite file.")
    parser.add_argument("--input", "-i", default=None,
                        help="Base64 text to decode on launch.")
    return parser


def load_settings(argv=None, default_config: str = None) -> Settings:
    """Resolve settings from defaults, the ini file and the command line."""
    if default_config is None:
        default_config = str(Path(__file__).parent / INI_NAME)
    args = build_parser(default_config).parse_args(argv)

    settings = settings_from_ini(load_ini(args.config))

    overrides = {}
    if args.watch is not None:
        overrides["watch"] = args.watch
    if args.poll is not None:
        overrides["poll"] = args.poll
    if args.log_db is not None:
        overrides["log_db"] = args.log_db
    if args.input is not None:
        overrides["initial_input"] = args.input

    settings = replace(settings, **overrides)
    _validate(settings)
    return settings
