import os

from splineiges import SETTINGS_DIR
from splineiges.utils.read_write_files import load_data

# Each entry maps a setting name to [description, default value]
settings_descriptions = load_data(os.path.join(SETTINGS_DIR, "defaults.json"))

_overrides = {}


def get_setting(key: str):
    """Returns the value of a setting: the in-process override if one was set, otherwise the default"""
    if key in _overrides:
        return _overrides[key]
    if key not in settings_descriptions:
        raise KeyError(f"Unknown setting: {key}. Available settings: {list(settings_descriptions.keys())}")
    return settings_descriptions[key][1]


def set_setting(key: str, value: object):
    if key not in settings_descriptions:
        raise KeyError(f"Unknown setting: {key}. Available settings: {list(settings_descriptions.keys())}")
    _overrides[key] = value


def reset_settings():
    """Removes all the in-process overrides"""
    _overrides.clear()
