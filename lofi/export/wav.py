"""
Canonical 44-byte RIFF/WAVE (linear PCM) container encoder.
Samples are written as little-endian two's-complement integers of bit_depth / 8 bytes,
including 8-bit (signed, symmetric range [-127, 127]).
"""
import logging
import struct
from typing import Any, Dict

import numpy as np
import torch

from lofi.core.errors import ConfigError
from lofi.core.types import FormatParams
from lofi.dsp.quantize import clamp_pcm, quantize

logger = logging.getLogger(__name__)

HEADER_SIZE = 44
FMT_CHUNK_SIZE = 16
MAX_U16 = 0xFFFF
MAX_U32 = 0xFFFFFFFF
PCM_FORMAT = 1

# RIFF id, RIFF size, WAVE, "fmt ", fmt size, format, channels, rate, byte rate, block align, bits, "data", data size
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


def _to_pcm(samples: Any, bit_depth: int) -> np.ndarray:
    """Flatten to int64 PCM. Float input is quantized; integer input is only clamped."""
    x = torch.as_tensor(samples).reshape(-1)
    if x.is_floating_point():
        pcm = quantize(x, bit_depth)
    else:
        pcm = clamp_pcm(x, bit_depth)
    return pcm.cpu().numpy()


def encode_header(sample_count: int, fmt: FormatParams) -> bytes:
    """Raises ConfigError when a field does not fit its 16- or 32-bit slot (e.g. data over 4 GiB)."""
    data_size = sample_count * fmt.bytes_per_sample
    if HEADER_SIZE - 8 + data_size > MAX_U32:
        raise ConfigError("data_size", f"{data_size} bytes of samples exceed the 4 GiB RIFF limit")
    if fmt.sample_rate > MAX_U32 or fmt.byte_rate > MAX_U32:
        raise ConfigError("format.sample_rate", f"byte rate {fmt.byte_rate} does not fit a 32-bit field")
    if fmt.channels > MAX_U16 or fmt.block_align > MAX_U16:
        raise ConfigError("format.channels", f"block align {fmt.block_align} does not fit a 16-bit field")
    return _HEADER.pack(
        b"RIFF",
        HEADER_SIZE - 8 + data_size,
        b"WAVE",
        b"fmt ",
        FMT_CHUNK_SIZE,
        PCM_FORMAT,
        fmt.channels,
        fmt.sample_rate,
        fmt.byte_rate,
        fmt.block_align,
        fmt.bit_depth,
        b"data",
        data_size,
    )


def encode_wav(samples: Any, sample_rate: int, bit_depth: int, channels: int) -> bytes:
    """
    Serialize interleaved samples into a WAV container.

    Args:
        samples: Interleaved samples (torch tensor, numpy array or sequence). Integer samples
            are taken as already-quantized PCM; float samples are quantized here.
        sample_rate: Hz
        bit_depth: Positive multiple of 8 (max 32)
        channels: >= 1

    Returns:
        bytes of length 44 + sample_count * bit_depth / 8.

    Raises:
        ConfigError: bit depth, channel count or sample rate is invalid, or a header field overflows.
    """
    fmt = FormatParams(sample_rate=sample_rate, bit_depth=bit_depth, channels=channels)
    pcm = _to_pcm(samples, bit_depth)
    if pcm.size % channels != 0:
        logger.warning("Sample count %d is not a multiple of %d channels", pcm.size, channels)

    header = encode_header(pcm.size, fmt)
    width = fmt.bytes_per_sample
    # Little-endian int64 bytes truncated to `width` keep the two's-complement value.
    data = pcm.astype("<i8").view(np.uint8).reshape(-1, 8)[:, :width].tobytes()

    buffer = header + data
    logger.debug("Encoded %d samples into %d-byte container", pcm.size, len(buffer))
    return buffer


def parse_wav_header(buffer: bytes) -> Dict[str, Any]:
    """Decode the fixed 44-byte header. Raises ValueError if it is not a canonical PCM header."""
    if len(buffer) < HEADER_SIZE:
        raise ValueError(f"buffer too short for WAV header: {len(buffer)} bytes")
    (
        riff, chunk_size, wave, fmt_id, fmt_size, audio_format, channels,
        sample_rate, byte_rate, block_align, bits_per_sample, data_id, data_size,
    ) = _HEADER.unpack_from(buffer, 0)
    if riff != b"RIFF" or wave != b"WAVE" or fmt_id != b"fmt " or data_id != b"data":
        raise ValueError("not a canonical RIFF/WAVE PCM header")
    return {
        "chunk_size": chunk_size,
        "subchunk1_size": fmt_size,
        "audio_format": audio_format,
        "channels": channels,
        "sample_rate": sample_rate,
        "byte_rate": byte_rate,
        "block_align": block_align,
        "bits_per_sample": bits_per_sample,
        "subchunk2_size": data_size,
    }


def decode_samples(buffer: bytes) -> np.ndarray:
    """Data section back to int64 PCM (interleaved), using the header's sample width."""
    header = parse_wav_header(buffer)
    width = header["bits_per_sample"] // 8
    raw = np.frombuffer(buffer, dtype=np.uint8, offset=HEADER_SIZE, count=header["subchunk2_size"])
    raw = raw.reshape(-1, width)
    # Sign-extend to 8 bytes, then reinterpret as little-endian int64.
    fill = np.where(raw[:, -1:] & 0x80, 0xFF, 0x00).astype(np.uint8)
    padded = np.concatenate([raw, np.repeat(fill, 8 - width, axis=1)], axis=1)
    return np.ascontiguousarray(padded).view("<i8").reshape(-1).astype(np.int64)
