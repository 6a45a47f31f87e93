import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

import torch

from lofi.core.errors import ConfigError

# Container encoding packs samples through int64; keep the float quantizer exact.
MAX_BIT_DEPTH = 32


def _is_finite_number(value) -> bool:
    return not isinstance(value, bool) and isinstance(value, (int, float)) and math.isfinite(value)


def _require_positive(name: str, value) -> None:
    if not _is_finite_number(value) or value <= 0:
        raise ConfigError(name, f"must be a finite positive number, got {value!r}")


def _require_non_negative(name: str, value) -> None:
    if not _is_finite_number(value) or value < 0:
        raise ConfigError(name, f"must be a finite non-negative number, got {value!r}")


@dataclass(frozen=True)
class FormatParams:
    """Output PCM format. Fixed for one render."""
    sample_rate: int
    bit_depth: int = 16
    channels: int = 1

    def __post_init__(self):
        if isinstance(self.sample_rate, bool) or not isinstance(self.sample_rate, int) or self.sample_rate <= 0:
            raise ConfigError("format.sample_rate", f"must be a positive integer, got {self.sample_rate!r}")
        if (
            isinstance(self.bit_depth, bool)
            or not isinstance(self.bit_depth, int)
            or self.bit_depth <= 0
            or self.bit_depth % 8 != 0
        ):
            raise ConfigError("format.bit_depth", f"must be a positive multiple of 8, got {self.bit_depth!r}")
        if self.bit_depth > MAX_BIT_DEPTH:
            raise ConfigError("format.bit_depth", f"must be at most {MAX_BIT_DEPTH}, got {self.bit_depth}")
        if isinstance(self.channels, bool) or not isinstance(self.channels, int) or self.channels < 1:
            raise ConfigError("format.channels", f"must be an integer >= 1, got {self.channels!r}")

    @property
    def bytes_per_sample(self) -> int:
        return self.bit_depth // 8

    @property
    def block_align(self) -> int:
        return self.channels * self.bytes_per_sample

    @property
    def byte_rate(self) -> int:
        return self.sample_rate * self.block_align


@dataclass(frozen=True)
class EffectParams:
    """Lo-fi chain settings: bit-crush -> downsample (gain) -> vinyl noise -> distortion -> filter."""
    bit_crush_bits: int = 16
    downsample_factor: float = 2.0
    vinyl_noise: float = 0.01
    distortion: float = 0.05
    low_pass_hz: float = 6500.0
    high_pass_hz: float = 100.0
    stateful_filter: bool = False

    def __post_init__(self):
        if isinstance(self.bit_crush_bits, bool) or not isinstance(self.bit_crush_bits, int) or self.bit_crush_bits < 1:
            raise ConfigError("effects.bit_crush_bits", f"must be an integer >= 1, got {self.bit_crush_bits!r}")
        _require_positive("effects.downsample_factor", self.downsample_factor)
        _require_positive("effects.low_pass_hz", self.low_pass_hz)
        _require_positive("effects.high_pass_hz", self.high_pass_hz)
        _require_non_negative("effects.vinyl_noise", self.vinyl_noise)
        _require_non_negative("effects.distortion", self.distortion)
        if not isinstance(self.stateful_filter, bool):
            raise ConfigError("effects.stateful_filter", f"must be true or false, got {self.stateful_filter!r}")


@dataclass(frozen=True)
class TrackConfig:
    """Everything one render needs. Built by resolve_config; immutable afterwards."""
    format: FormatParams
    duration: float
    bpm: float
    time_signature: Tuple[int, int]
    melody_pattern: Tuple[int, ...]
    bass_range_hz: Tuple[float, float] = (40.0, 200.0)
    effects: EffectParams = field(default_factory=EffectParams)

    def __post_init__(self):
        _require_positive("duration", self.duration)
        _require_positive("bpm", self.bpm)
        if not math.isfinite(self.total_samples):
            raise ConfigError("duration", f"duration x sample rate overflows, got {self.duration!r}")
        if not math.isfinite(self.samples_per_beat):
            raise ConfigError("bpm", f"beat length overflows, got {self.bpm!r}")
        ts = tuple(self.time_signature)
        if len(ts) != 2 or any(isinstance(v, bool) or not isinstance(v, int) or v <= 0 for v in ts):
            raise ConfigError("time_signature", f"must be two positive integers, got {self.time_signature!r}")
        pattern = tuple(self.melody_pattern)
        if not pattern:
            raise ConfigError("melody_pattern", "must not be empty")
        if any(isinstance(v, bool) or not isinstance(v, int) for v in pattern):
            raise ConfigError("melody_pattern", f"must contain integers only, got {self.melody_pattern!r}")
        low, high = self.bass_range_hz
        if not (_is_finite_number(low) and _is_finite_number(high)) or low < 0 or high < low:
            raise ConfigError("bass_range_hz", f"must be an ordered, finite, non-negative range, got {self.bass_range_hz!r}")
        # Frozen: normalise sequences through object.__setattr__.
        object.__setattr__(self, "time_signature", ts)
        object.__setattr__(self, "melody_pattern", pattern)
        object.__setattr__(self, "bass_range_hz", (float(low), float(high)))

    @property
    def beats_per_measure(self) -> int:
        return self.time_signature[0]

    @property
    def beat_unit(self) -> int:
        return self.time_signature[1]

    @property
    def samples_per_beat(self) -> float:
        return (60.0 / self.bpm) * self.format.sample_rate

    @property
    def samples_per_measure(self) -> float:
        return self.samples_per_beat * self.beats_per_measure

    @property
    def total_samples(self) -> float:
        """Time-cursor limit (duration x sample_rate); not necessarily an integer."""
        return self.duration * self.format.sample_rate


@dataclass
class TrackRender:
    samples: torch.Tensor  # int64, channel-interleaved
    config: TrackConfig
    frames: int
    beats: int
    measures: int
    seed: Optional[int] = None
