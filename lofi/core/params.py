"""
Param lookup utilities for nested config dicts.
Supports dotted keys ("effects.vinyl_noise") so overrides can be partial at any depth.
"""
from typing import Any

from lofi.core.errors import ConfigError


def get_param(params: dict, name: str, default: Any = None) -> Any:
    """
    Read a value from params, supporting dotted keys for nested dicts.
    E.g. get_param(p, "format.sample_rate", 44100) -> p["format"]["sample_rate"] or default.
    If any intermediate key is missing or not a dict, returns default.
    """
    if not params or not name:
        return default
    keys = name.split(".")
    current = params
    for key in keys[:-1]:
        next_val = current.get(key)
        if next_val is None or not isinstance(next_val, dict):
            return default
        current = next_val
    return current.get(keys[-1], default)


def to_int(value: Any, name: str) -> int:
    """
    Coerce to int. Integral floats (e.g. 44100.0 from JSON) are accepted;
    anything else raises ConfigError naming the key.
    """
    if isinstance(value, bool):
        raise ConfigError(name, f"expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ConfigError(name, f"expected an integer, got {value!r}")


def to_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise ConfigError(name, f"expected a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(name, f"expected a number, got {value!r}")


def get_int(params: dict, name: str, default: Any = None) -> int:
    return to_int(get_param(params, name, default), name)


def get_float(params: dict, name: str, default: Any = None) -> float:
    return to_float(get_param(params, name, default), name)
