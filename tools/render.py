#!/usr/bin/env python3
"""
Render a lo-fi track to a WAV file.

Usage:
    python tools/render.py [params_json] [options]

With no arguments renders the default track to ./random_lofi_track.wav.

Options:
    --seed <int>          Fixed seed (default: random)
    --output <path>       Output WAV path (default: random_lofi_track.wav)
    --debug               Save <name>.resolved.json with config, seed and fingerprint
"""
import sys
import os
import json
import logging
import argparse
from pathlib import Path

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from tools.render_core import render_track
from lofi.core.errors import ConfigError
from lofi.core.io import DEFAULT_FILENAME

logger = logging.getLogger("lofi")


def cmd_render(args) -> int:
    if args.params_json:
        with open(args.params_json, "r") as f:
            params = json.load(f)
    else:
        params = {}

    output = Path(args.output)
    try:
        _, debug_info = render_track(
            params=params,
            output_dir=output.parent,
            filename=output.name,
            seed=args.seed,
            debug=args.debug,
            script_name="render.py",
        )
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    fp = debug_info["fingerprint"]
    print(f"\n=== Render Complete ===")
    print(f"Output: {debug_info['wav_path']}")
    print(f"Seed: {debug_info['seed']}")
    print(f"Frames: {debug_info['frames']} ({debug_info['beats']} beats, {debug_info['measures']} measures)")
    print(f"Fingerprint SHA256: {fp['sha256'][:16]}...")
    print(f"Peak: {fp['peak']:.4f}, RMS: {fp['rms']:.4f}")
    if args.debug:
        print(f"Debug JSON: {debug_info['json_path']}")
    return 0


def main(argv=None) -> int:
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description="Render a lo-fi track to WAV")
    parser.add_argument("params_json", nargs="?", help="JSON file with config overrides (optional)")
    parser.add_argument("--seed", type=int, default=None, help="Fixed seed (default: random)")
    parser.add_argument("--output", type=str, default=DEFAULT_FILENAME, help="Output WAV path")
    parser.add_argument("--debug", action="store_true", help="Save resolved.json next to the WAV")
    args = parser.parse_args(argv)

    return cmd_render(args)


if __name__ == "__main__":
    sys.exit(main())
