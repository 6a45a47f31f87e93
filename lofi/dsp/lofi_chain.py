"""
Fixed lo-fi degradation chain: bit-crush -> downsample -> vinyl noise -> distortion -> frequency filter.
Order is part of the sound and is not configurable; only the stage amounts are.
"""
from typing import Tuple

import torch
import torchaudio.functional as F
import numpy as np

from lofi.core.types import EffectParams
from lofi.dsp.noise import Noise
from lofi.dsp.quantize import round_half_up


class LoFiChain:
    """
    All stages work on float64 tensors of any length. Only vinyl noise consumes randomness.
    """

    @staticmethod
    def bit_crush(x: torch.Tensor, bits: int) -> torch.Tensor:
        """Snap to a 2^(bits-1) step grid: round(x * m) / m."""
        m = 2.0 ** (bits - 1)
        return round_half_up(x * m) / m

    @staticmethod
    def downsample(x: torch.Tensor, factor: float) -> torch.Tensor:
        """
        Gain scale by 1 / factor. The sample rate is left untouched; the lo-fi character
        this stage contributes is the level drop ahead of the noise floor.
        """
        return x * (1.0 / factor)

    @staticmethod
    def vinyl_noise(x: torch.Tensor, level: float, generator: torch.Generator) -> torch.Tensor:
        return x + Noise.uniform(x.shape[-1], level, generator)

    @staticmethod
    def distort(x: torch.Tensor, level: float) -> torch.Tensor:
        """x * (1 + level * sin(pi * x))."""
        return x * (1.0 + level * torch.sin(x * np.pi))

    @staticmethod
    def one_pole_coefficients(cutoff_hz: float, sample_rate: int) -> Tuple[float, float]:
        """
        Returns (gain, feedback) for y[n] = gain * x[n] + feedback * y[n-1].
        feedback = exp(-2*pi*fc/sr), gain = (1 - feedback) / 2.
        """
        feedback = float(np.exp(-2 * np.pi * cutoff_hz / sample_rate))
        return (1.0 - feedback) / 2.0, feedback

    @classmethod
    def _one_pole(cls, x: torch.Tensor, cutoff_hz: float, sample_rate: int, stateful: bool) -> torch.Tensor:
        gain, feedback = cls.one_pole_coefficients(cutoff_hz, sample_rate)
        if not stateful:
            # y[n-1] is always 0: the recursion collapses to a per-sample gain.
            return gain * x
        a = torch.tensor([1.0, -feedback], dtype=x.dtype)
        b = torch.tensor([gain, 0.0], dtype=x.dtype)
        return F.lfilter(x, a, b, clamp=False)

    @classmethod
    def filter_frequencies(
        cls,
        x: torch.Tensor,
        sample_rate: int,
        low_pass_hz: float,
        high_pass_hz: float,
        stateful: bool = False,
    ) -> torch.Tensor:
        """
        Low-pass stage then high-pass stage, both one-pole sections.
        stateful=False reproduces the memoryless form (each sample filtered from zero state);
        stateful=True carries y[n-1] across the whole signal.
        """
        low_passed = cls._one_pole(x, low_pass_hz, sample_rate, stateful)
        return cls._one_pole(low_passed, high_pass_hz, sample_rate, stateful)

    @classmethod
    def process(
        cls,
        x: torch.Tensor,
        effects: EffectParams,
        sample_rate: int,
        generator: torch.Generator,
    ) -> torch.Tensor:
        """Run the full chain on a mono float signal."""
        x = x.to(torch.float64)
        x = cls.bit_crush(x, effects.bit_crush_bits)
        x = cls.downsample(x, effects.downsample_factor)
        x = cls.vinyl_noise(x, effects.vinyl_noise, generator)
        x = cls.distort(x, effects.distortion)
        x = cls.filter_frequencies(
            x,
            sample_rate,
            effects.low_pass_hz,
            effects.high_pass_hz,
            stateful=effects.stateful_filter,
        )
        return x
