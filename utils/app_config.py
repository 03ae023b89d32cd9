"""Pre-DB bootstrap configuration. Zero imports from the rest of the app except constants.

Stores preferences that must be known before opening the DB (data folder,
log level, display currency). Config lives in ~/.student_money/config.json.
"""
import json
import logging
import os
from pathlib import Path

from utils.constants import DEFAULT_CURRENCY

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".student_money"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULTS = {
    "data_folder": None,
    "log_level": "INFO",
    "currency": DEFAULT_CURRENCY,
}


def load_config() -> dict:
    """Returns defaults merged with the file; never raises."""
    config = dict(DEFAULTS)
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except FileNotFoundError:
        return config
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", CONFIG_FILE, exc)
        return config
    if isinstance(stored, dict):
        config.update(stored)
    return config


def save_config(config: dict) -> bool:
    """Creates the config dir if needed; atomic write via .tmp + os.replace()."""
    tmp = CONFIG_FILE.with_suffix(".tmp")
    try:
        CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, CONFIG_FILE)
        return True
    except OSError as exc:
        logger.warning("Could not save config %s: %s", CONFIG_FILE, exc)
        tmp.unlink(missing_ok=True)
        return False


def get_data_folder() -> str | None:
    return load_config().get("data_folder")


def set_data_folder(path: str | None) -> bool:
    config = load_config()
    config["data_folder"] = path
    return save_config(config)


def get_log_level() -> int:
    name = str(load_config().get("log_level") or "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def get_currency() -> str:
    return load_config().get("currency") or DEFAULT_CURRENCY
