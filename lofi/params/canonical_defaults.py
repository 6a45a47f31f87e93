"""
Canonical track defaults: single source for generation constants.
resolve_config deep-merges user overrides onto this dict, so partial overrides keep every other value.
"""
from typing import Any, Dict

TRACK_DEFAULTS: Dict[str, Any] = {
    "format": {
        "sample_rate": 244100,  # Hz
        "bit_depth": 16,
        "channels": 2,  # 1 = mono, 2 = stereo (identical channels)
    },
    "duration": 10.0,  # seconds
    "bpm": 64.0,
    "time_signature": [32, 4],  # beats per measure, note value of one beat
    "melody_pattern": [0, 1, 1, 4, 7, 2, 34, 23, 1, 2, 3],
    "bass_range_hz": [40.0, 200.0],
    "effects": {
        "bit_crush_bits": 16,
        "downsample_factor": 2.0,
        "vinyl_noise": 0.01,  # 0..1
        "distortion": 0.05,  # 0..1
        "low_pass_hz": 6500.0,
        "high_pass_hz": 100.0,
        "stateful_filter": False,
    },
}
