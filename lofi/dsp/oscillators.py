"""
Oscillator generators addressed by absolute sample index.
Phase is derived from the global time cursor (t = n / sample_rate), so a voice whose
frequency changes per beat stays aligned to track time rather than restarting at 0.
"""

import torch
import numpy as np


class Oscillator:
    @staticmethod
    def time_axis(start: int, count: int, sample_rate: int) -> torch.Tensor:
        """Elapsed seconds for sample indices [start, start + count). float64."""
        return torch.arange(start, start + count, dtype=torch.float64) / sample_rate

    @staticmethod
    def sine(frequency, t: torch.Tensor) -> torch.Tensor:
        """
        sin(2*pi*f*t).

        Args:
            frequency: Frequency (Hz) - scalar, or a tensor the same length as t for
                per-sample frequency (piecewise-constant per beat)
            t: Time axis in seconds (see time_axis)
        """
        return torch.sin(2 * np.pi * frequency * t)
