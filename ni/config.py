"""
Configuration loading for the ni editor.

Settings live in ~/ni/config/ni.conf as simple `key=value` lines. A missing file
means defaults; unknown keys and bad values are logged and skipped.
"""
import os
from dataclasses import dataclass

from ni import logger

CONFIG_PATH = os.path.expanduser("~/ni/config/ni.conf")


@dataclass
class Config:
    tab_stop: int = 4
    log_file: str = logger.LOG_FILE_PATH
    welcome_message: str = "Welcome"


def _parse_tab_stop(value: str) -> int:
    tab_stop = int(value)
    if tab_stop < 1:
        raise ValueError(f"tab_stop must be at least 1, got {tab_stop}")
    return tab_stop


_PARSERS = {
    "tab_stop": _parse_tab_stop,
    "log_file": str,
    "welcome_message": str,
}


def config_path() -> str:
    """Return the config file path, honouring the NI_CONFIG override."""
    return os.environ.get("NI_CONFIG") or CONFIG_PATH


def parse_config(lines) -> Config:
    """Build a Config from an iterable of `key=value` lines."""
    config = Config()
    for lineno, raw in enumerate(lines, 1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            logger.log(f"config line {lineno}: expected key=value, got '{line}'")
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        parser = _PARSERS.get(key)
        if parser is None:
            logger.log(f"config line {lineno}: unknown key '{key}'")
            continue
        try:
            setattr(config, key, parser(value.strip()))
        except ValueError as e:
            logger.log(f"config line {lineno}: bad value for '{key}': {e}")
    return config


def load_config(path: str = None) -> Config:
    """
    Load settings from `path` (default: config_path()).
    If the file does not exist or cannot be read, defaults are returned.
    """
    path = path or config_path()
    if not os.path.isfile(path):
        return Config()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return parse_config(f)
    except OSError as e:
        logger.log(f"could not read config {path}: {e}")
        return Config()
