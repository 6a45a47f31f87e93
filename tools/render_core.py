"""
Core rendering utilities with debug outputs and fingerprinting.
Used by the canonical render.py tool and the render tests.
"""
import sys
import os
import json
import hashlib
import logging
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Tuple

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import numpy as np

from lofi.core.io import AudioIO, DEFAULT_FILENAME
from lofi.dsp.quantize import max_sample_value
from lofi.export.wav import decode_samples, encode_wav, parse_wav_header
from lofi.params.resolve import merge_params, resolve_config
from lofi.track.generator import LoFiTrackGenerator

logger = logging.getLogger(__name__)


def _get_git_hash() -> str:
    """Get short git commit hash."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            cwd=os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except (OSError, subprocess.SubprocessError):
        pass
    return "unknown"


def compute_fingerprint(buffer: bytes) -> Dict:
    """Fingerprint a container: SHA256 of the bytes, plus peak/RMS of the decoded PCM (full scale = 1.0)."""
    header = parse_wav_header(buffer)
    pcm = decode_samples(buffer).astype(np.float64)
    full_scale = float(max_sample_value(header["bits_per_sample"]))

    sha256 = hashlib.sha256(buffer).hexdigest()
    if pcm.size == 0:
        return {"sha256": sha256, "peak": 0.0, "rms": 0.0, "samples": 0}

    x = pcm / full_scale
    return {
        "sha256": sha256,
        "peak": float(np.max(np.abs(x))),
        "rms": float(np.sqrt(np.mean(x ** 2) + 1e-12)),
        "samples": int(pcm.size),
    }


def render_track(
    params: Optional[dict],
    output_dir: Path,
    filename: str = DEFAULT_FILENAME,
    seed: Optional[int] = None,
    debug: bool = False,
    script_name: str = "unknown",
) -> Tuple[bytes, Dict]:
    """
    Resolve config, render, encode and write one track.

    Args:
        params: Partial config overrides (None = defaults)
        output_dir: Directory for the WAV (and debug JSON)
        filename: Output file name
        seed: Random seed (None = random)
        debug: Save <stem>.resolved.json alongside the WAV
        script_name: Name of calling script (for debug JSON)

    Returns:
        Tuple of (container_bytes, debug_info_dict)

    Raises:
        ConfigError: params are invalid (nothing is generated or written).
        OSError: the file could not be written.
    """
    input_params = params.copy() if params else {}

    # Step 1: Resolve (validates before any sample work)
    config = resolve_config(input_params)

    # Step 2: Render + encode
    render = LoFiTrackGenerator(config).render(seed=seed)
    fmt = config.format
    buffer = encode_wav(render.samples, fmt.sample_rate, fmt.bit_depth, fmt.channels)

    # Step 3: Write
    wav_path = AudioIO.write_bytes(buffer, Path(output_dir) / filename)

    fingerprint = compute_fingerprint(buffer)
    debug_info = {
        "script_name": script_name,
        "timestamp": datetime.now().isoformat(),
        "git_hash": _get_git_hash(),
        "seed": render.seed,
        "input_params": input_params,
        "resolved_params": merge_params(input_params),
        "frames": render.frames,
        "beats": render.beats,
        "measures": render.measures,
        "fingerprint": fingerprint,
        "wav_path": str(wav_path),
    }

    if debug:
        json_path = Path(output_dir) / f"{Path(filename).stem}.resolved.json"
        with open(json_path, "w") as f:
            json.dump(debug_info, f, indent=2, default=str)
        debug_info["json_path"] = str(json_path)

    return buffer, debug_info

