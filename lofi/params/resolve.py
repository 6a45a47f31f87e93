"""
Config resolution: deep-merge TRACK_DEFAULTS with incoming overrides, then build and validate
an immutable TrackConfig. Incoming values override defaults at any nesting level.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from lofi.core.errors import ConfigError
from lofi.core.params import get_float, get_int, get_param, to_float, to_int
from lofi.core.types import EffectParams, FormatParams, TrackConfig
from lofi.params.canonical_defaults import TRACK_DEFAULTS

logger = logging.getLogger(__name__)


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dicts. override values take precedence.
    Returns a new dict (does not mutate inputs).
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def merge_params(params: Optional[dict] = None) -> Dict[str, Any]:
    """Defaults with overrides applied, still as a plain dict (for debug dumps)."""
    return _deep_merge(TRACK_DEFAULTS, params or {})


def _get_list(params: dict, name: str) -> list:
    raw = get_param(params, name)
    if not isinstance(raw, (list, tuple)):
        raise ConfigError(name, f"expected a list, got {raw!r}")
    return list(raw)


def _get_int_tuple(params: dict, name: str) -> Tuple[int, ...]:
    return tuple(to_int(v, name) for v in _get_list(params, name))


def resolve_config(params: Optional[dict] = None) -> TrackConfig:
    """
    Resolve a TrackConfig by:
    1. Starting from TRACK_DEFAULTS
    2. Merging incoming params onto it (user params override defaults)
    3. Coercing JSON values (e.g. 8000.0 -> 8000) and validating every field

    Raises ConfigError before any generation work when a value is invalid.
    """
    merged = merge_params(params)

    fmt = FormatParams(
        sample_rate=get_int(merged, "format.sample_rate"),
        bit_depth=get_int(merged, "format.bit_depth"),
        channels=get_int(merged, "format.channels"),
    )
    effects = EffectParams(
        bit_crush_bits=get_int(merged, "effects.bit_crush_bits"),
        downsample_factor=get_float(merged, "effects.downsample_factor"),
        vinyl_noise=get_float(merged, "effects.vinyl_noise"),
        distortion=get_float(merged, "effects.distortion"),
        low_pass_hz=get_float(merged, "effects.low_pass_hz"),
        high_pass_hz=get_float(merged, "effects.high_pass_hz"),
        stateful_filter=get_param(merged, "effects.stateful_filter", False),
    )
    bass_range = _get_list(merged, "bass_range_hz")
    if len(bass_range) != 2:
        raise ConfigError("bass_range_hz", f"expected [low, high], got {bass_range!r}")

    config = TrackConfig(
        format=fmt,
        duration=get_float(merged, "duration"),
        bpm=get_float(merged, "bpm"),
        time_signature=_get_int_tuple(merged, "time_signature"),
        melody_pattern=_get_int_tuple(merged, "melody_pattern"),
        bass_range_hz=tuple(to_float(v, "bass_range_hz") for v in bass_range),
        effects=effects,
    )
    logger.debug("Resolved config: %s", config)
    return config
