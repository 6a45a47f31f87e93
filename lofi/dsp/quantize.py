"""
PCM quantization shared by the track generator and the WAV encoder.
Rounding is half-up (floor(x + 0.5)), not round-half-to-even.
"""
import torch


def round_half_up(x: torch.Tensor) -> torch.Tensor:
    return torch.floor(x + 0.5)


def max_sample_value(bit_depth: int) -> int:
    """Largest positive PCM value for a bit depth. The range is symmetric: [-max, max]."""
    return 2 ** (bit_depth - 1) - 1


def quantize(samples: torch.Tensor, bit_depth: int) -> torch.Tensor:
    """
    Float samples (~[-1, 1]) -> int64 PCM values clamped to [-max, max].
    Out-of-range input (e.g. distortion overshoot) saturates instead of wrapping.
    """
    max_value = max_sample_value(bit_depth)
    x = samples.to(torch.float64)
    q = round_half_up(x * max_value)
    q = torch.clamp(q, -max_value, max_value)
    return q.to(torch.int64)


def clamp_pcm(samples: torch.Tensor, bit_depth: int) -> torch.Tensor:
    """Clamp already-quantized integer samples to the representable symmetric range."""
    max_value = max_sample_value(bit_depth)
    return torch.clamp(samples.to(torch.int64), -max_value, max_value)
