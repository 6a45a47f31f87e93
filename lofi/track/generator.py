"""
Lo-fi track generator: bass + melody voices on a beat grid, run through the lo-fi chain.
Each beat picks a random bass frequency and the next melody step; both hold for the whole beat.
"""
import logging
import math
from typing import List, Optional, Tuple

import torch

from lofi.core.types import TrackConfig, TrackRender
from lofi.dsp.lofi_chain import LoFiChain
from lofi.dsp.noise import Noise
from lofi.dsp.oscillators import Oscillator
from lofi.dsp.quantize import quantize

logger = logging.getLogger(__name__)

BASS_GAIN = 0.5
MELODY_GAIN = 0.3


def melody_frequency(step: int) -> float:
    """Pattern step -> Hz. Linear: 100 Hz per step above 400 Hz."""
    return step * 100.0 + 400.0


class LoFiTrackGenerator:
    def __init__(self, config: TrackConfig):
        self.config = config

    @property
    def frames_per_beat(self) -> int:
        """
        Frames emitted per beat: ceil(samples_per_beat / beat_unit), at least 1.
        Matches a loop counting i = 0, 1, ... while i < samples_per_beat / beat_unit.
        """
        return max(1, math.ceil(self.config.samples_per_beat / self.config.beat_unit))

    def beat_schedule(self) -> Tuple[List[int], int]:
        """
        Walks the time cursor one beat at a time until it reaches duration * sample_rate.
        Returns (beat position within its measure for every emitted beat, completed measures).
        """
        cfg = self.config
        frames = self.frames_per_beat
        limit = cfg.total_samples

        positions: List[int] = []
        cursor = 0
        beat_count = 0
        measure_count = 0
        while cursor < limit:
            positions.append(beat_count)
            cursor += frames
            beat_count += 1
            if beat_count == cfg.beats_per_measure:
                beat_count = 0
                measure_count += 1
        return positions, measure_count

    def melody_steps(self, positions: List[int]) -> List[int]:
        """Pattern value for each beat: index (beat position + 1) mod pattern length."""
        pattern = self.config.melody_pattern
        return [pattern[(pos + 1) % len(pattern)] for pos in positions]

    def synthesize(self, generator: torch.Generator) -> Tuple[torch.Tensor, int, int]:
        """
        Mono float mix (before the lo-fi chain).
        Returns (mix, beats, measures).
        """
        cfg = self.config
        sr = cfg.format.sample_rate
        frames = self.frames_per_beat

        positions, measures = self.beat_schedule()
        beats = len(positions)
        low, high = cfg.bass_range_hz

        bass_hz = Noise.uniform_range(beats, low, high, generator)
        melody_hz = torch.tensor(
            [melody_frequency(s) for s in self.melody_steps(positions)], dtype=torch.float64
        )

        # Frequencies are piecewise constant: expand one value per beat to one per frame.
        bass_per_frame = bass_hz.repeat_interleave(frames)
        melody_per_frame = melody_hz.repeat_interleave(frames)
        t = Oscillator.time_axis(0, beats * frames, sr)

        bass_wave = Oscillator.sine(bass_per_frame, t)
        melody_wave = Oscillator.sine(melody_per_frame, t)
        mix = bass_wave * BASS_GAIN + melody_wave * MELODY_GAIN
        return mix, beats, measures

    def render(self, seed: Optional[int] = None, generator: Optional[torch.Generator] = None) -> TrackRender:
        """
        Render the full track in memory.

        Args:
            seed: Seeds a private torch.Generator. Ignored when generator is given.
            generator: Random source for bass frequencies and vinyl noise.

        Returns:
            TrackRender with int64 PCM samples interleaved across channels
            (every channel carries the same value for a frame).
        """
        cfg = self.config
        if generator is not None:
            seed = None
        else:
            generator = torch.Generator()
            if seed is None:
                seed = generator.seed()
            else:
                generator.manual_seed(seed)

        mix, beats, measures = self.synthesize(generator)
        processed = LoFiChain.process(mix, cfg.effects, cfg.format.sample_rate, generator)
        pcm = quantize(processed, cfg.format.bit_depth)

        channels = cfg.format.channels
        samples = pcm.repeat_interleave(channels) if channels > 1 else pcm

        frames = pcm.shape[-1]
        logger.info(
            "Generated %d frames (%d beats, %d measures) at %d Hz x %d ch",
            frames, beats, measures, cfg.format.sample_rate, channels,
        )
        return TrackRender(
            samples=samples,
            config=cfg,
            frames=frames,
            beats=beats,
            measures=measures,
            seed=seed,
        )
