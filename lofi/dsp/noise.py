import torch


class Noise:
    @staticmethod
    def uniform(num_samples: int, level: float, generator: torch.Generator) -> torch.Tensor:
        """Uniform noise in [-level, level). Drawn from the caller's generator so renders are seedable."""
        u = torch.rand(num_samples, generator=generator, dtype=torch.float64)
        return (u * 2 - 1) * level

    @staticmethod
    def uniform_range(num_samples: int, low: float, high: float, generator: torch.Generator) -> torch.Tensor:
        """Uniform draws in [low, high)."""
        u = torch.rand(num_samples, generator=generator, dtype=torch.float64)
        return u * (high - low) + low
