# config_manager.py
import json
import logging
from pathlib import Path

from . import error as E

logger = logging.getLogger(__name__)

config_json = Path(__file__).resolve().parent.parent / "config.json"
ui_strings = Path(__file__).resolve().parent.parent / "ui_strings.json"

# Used for every key that is missing from config.json (or when the file is unreadable)
DEFAULT_SETTINGS = {
    "darkmode": False,
    "debug": False,
    "decimal_places": 2,
    "step": 1,
    "allow_expressions": True,
    "copy_on_commit": False,
}

# Lower bounds for the integer settings, enforced by the settings dialog
MINIMUM_VALUES = {
    "decimal_places": 0,
    "step": 1,
}


def _read_json(path):
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.warning("%s%s (%s)", E.ERROR_MESSAGES["5000"], path, e)
        return {}


def load_setting_value(key_value, path=None):
    """Return one setting, or the full settings dict for key_value == "all"."""
    settings_dict = dict(DEFAULT_SETTINGS)
    settings_dict.update(_read_json(path or config_json))

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)


def load_setting_description(key_value, path=None):
    descriptions = _read_json(path or ui_strings)

    if key_value == "all":
        return descriptions

    else:
        return descriptions.get(key_value, key_value)


def validate_setting(key_value, value):
    """Return value if it is acceptable for key_value, else raise ValueError."""
    default = DEFAULT_SETTINGS.get(key_value)
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise ValueError(f"'{value}' is not True or False.")
        return value

    if isinstance(default, int):
        new_value = int(value)
        minimum = MINIMUM_VALUES.get(key_value)
        if minimum is not None and new_value < minimum:
            raise ValueError(f"'{new_value}' is too small. Minimum is {minimum}.")
        return new_value

    return value


def save_setting(settings_dict, path=None):
    target = path or config_json
    try:
        with open(target, 'w', encoding='utf-8') as f:
            json.dump(settings_dict, f, indent=4)
            return settings_dict

    except (OSError, TypeError) as e:
        logger.error("%s%s (%s)", E.ERROR_MESSAGES["5001"], target, e)
        return {}
