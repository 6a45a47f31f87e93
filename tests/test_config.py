"""
Tests for lofi/params: defaults snapshot, partial overrides, validation at the config boundary.
Run from project root: python -m pytest tests/test_config.py -v
"""
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import dataclasses
import json

import pytest
from lofi.core.errors import ConfigError
from lofi.core.params import get_param
from lofi.core.types import FormatParams, TrackConfig
from lofi.params import TRACK_DEFAULTS, merge_params, resolve_config


def test_defaults_snapshot():
    cfg = resolve_config({})
    assert cfg.format.sample_rate == 244100
    assert cfg.format.bit_depth == 16
    assert cfg.format.channels == 2
    assert cfg.duration == 10.0
    assert cfg.bpm == 64.0
    assert cfg.time_signature == (32, 4)
    assert cfg.melody_pattern == (0, 1, 1, 4, 7, 2, 34, 23, 1, 2, 3)
    assert cfg.bass_range_hz == (40.0, 200.0)
    assert cfg.effects.bit_crush_bits == 16
    assert cfg.effects.downsample_factor == 2.0
    assert cfg.effects.vinyl_noise == 0.01
    assert cfg.effects.distortion == 0.05
    assert cfg.effects.low_pass_hz == 6500.0
    assert cfg.effects.high_pass_hz == 100.0
    assert cfg.effects.stateful_filter is False


def test_partial_override_keeps_siblings():
    cfg = resolve_config({"format": {"sample_rate": 8000}, "effects": {"vinyl_noise": 0.0}})
    assert cfg.format.sample_rate == 8000
    assert cfg.format.bit_depth == 16
    assert cfg.format.channels == 2
    assert cfg.effects.vinyl_noise == 0.0
    assert cfg.effects.distortion == 0.05


def test_merge_does_not_mutate_defaults():
    merged = merge_params({"format": {"channels": 1}})
    assert merged["format"]["channels"] == 1
    assert TRACK_DEFAULTS["format"]["channels"] == 2


def test_json_style_numbers_coerced():
    cfg = resolve_config({"format": {"sample_rate": 8000.0}, "time_signature": [4.0, 4.0]})
    assert cfg.format.sample_rate == 8000
    assert isinstance(cfg.format.sample_rate, int)
    assert cfg.time_signature == (4, 4)


def test_config_is_immutable():
    cfg = resolve_config({})
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.duration = 1.0


def test_derived_timing():
    cfg = resolve_config({"format": {"sample_rate": 8000}, "bpm": 60, "time_signature": [4, 4], "duration": 1})
    assert cfg.samples_per_beat == 8000.0
    assert cfg.samples_per_measure == 32000.0
    assert cfg.total_samples == 8000.0


def test_format_params_derived_sizes():
    fmt = FormatParams(sample_rate=44100, bit_depth=24, channels=2)
    assert fmt.bytes_per_sample == 3
    assert fmt.block_align == 6
    assert fmt.byte_rate == 264600


@pytest.mark.parametrize(
    "overrides,field",
    [
        ({"format": {"sample_rate": 0}}, "format.sample_rate"),
        ({"format": {"sample_rate": -8000}}, "format.sample_rate"),
        ({"format": {"sample_rate": 8000.5}}, "format.sample_rate"),
        ({"format": {"bit_depth": 0}}, "format.bit_depth"),
        ({"format": {"bit_depth": 12}}, "format.bit_depth"),
        ({"format": {"bit_depth": 64}}, "format.bit_depth"),
        ({"format": {"channels": 0}}, "format.channels"),
        ({"duration": 0}, "duration"),
        ({"duration": -1.0}, "duration"),
        ({"bpm": 0}, "bpm"),
        ({"time_signature": [4]}, "time_signature"),
        ({"time_signature": [4, 0]}, "time_signature"),
        ({"melody_pattern": []}, "melody_pattern"),
        ({"melody_pattern": "0,2,4"}, "melody_pattern"),
        ({"bass_range_hz": [200.0, 40.0]}, "bass_range_hz"),
        ({"effects": {"downsample_factor": 0}}, "effects.downsample_factor"),
        ({"effects": {"vinyl_noise": -0.1}}, "effects.vinyl_noise"),
        ({"effects": {"bit_crush_bits": 0}}, "effects.bit_crush_bits"),
        ({"effects": {"stateful_filter": "false"}}, "effects.stateful_filter"),
        ({"duration": float("inf")}, "duration"),
        ({"duration": float("nan")}, "duration"),
        ({"duration": 1e308}, "duration"),
        ({"bpm": float("nan")}, "bpm"),
        ({"bpm": float("inf")}, "bpm"),
        ({"bpm": 1e-310}, "bpm"),
        ({"format": {"sample_rate": float("inf")}}, "format.sample_rate"),
        ({"effects": {"downsample_factor": float("inf")}}, "effects.downsample_factor"),
        ({"effects": {"low_pass_hz": float("nan")}}, "effects.low_pass_hz"),
        ({"effects": {"vinyl_noise": float("nan")}}, "effects.vinyl_noise"),
        ({"effects": {"distortion": float("inf")}}, "effects.distortion"),
        ({"bass_range_hz": [40.0, float("inf")]}, "bass_range_hz"),
        ({"bass_range_hz": [float("nan"), 200.0]}, "bass_range_hz"),
    ],
)
def test_invalid_config_rejected(overrides, field):
    with pytest.raises(ConfigError) as exc:
        resolve_config(overrides)
    assert exc.value.field == field
    assert isinstance(exc.value, ValueError)


def test_track_config_direct_validation():
    with pytest.raises(ConfigError):
        TrackConfig(
            format=FormatParams(sample_rate=8000),
            duration=1.0,
            bpm=60.0,
            time_signature=(4, 4),
            melody_pattern=(),
        )


def test_get_param_dotted():
    params = {"effects": {"vinyl_noise": 0.2}, "duration": 3}
    assert get_param(params, "effects.vinyl_noise") == 0.2
    assert get_param(params, "duration") == 3
    assert get_param(params, "effects.missing", "x") == "x"
    assert get_param(params, "duration.nested", 5) == 5


def test_json_non_finite_literals_rejected():
    """json.loads accepts Infinity/NaN; they must stop at the config boundary."""
    for text in ('{"duration": Infinity}', '{"bpm": NaN}', '{"duration": NaN}'):
        with pytest.raises(ConfigError):
            resolve_config(json.loads(text))


def test_stateful_filter_accepts_json_bool():
    assert resolve_config({"effects": {"stateful_filter": True}}).effects.stateful_filter is True
    assert resolve_config({"effects": {"stateful_filter": False}}).effects.stateful_filter is False
