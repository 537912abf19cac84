"""
Canonical PCM WAV output.

Every chunk gets a fresh 44-byte RIFF/WAVE header with a single `fmt ` and a
single `data` subchunk, followed by the chunk's packet payloads verbatim.
"""

import struct
from typing import Sequence

from pipeline.errors import OutputCreateError, OutputWriteError
from pipeline.models import FormatParameters

WAV_HEADER_SIZE = 44
MAX_DATA_SIZE = 0xFFFFFFFF - 36
U16_MAX = 0xFFFF
U32_MAX = 0xFFFFFFFF

# RIFF id, RIFF size, WAVE, fmt id, fmt size, format tag, channels,
# sample rate, byte rate, block align, bits per sample, data id, data size
_HEADER_STRUCT = struct.Struct("<4sI4s4sIHHIIHH4sI")


def build_wav_header(params: FormatParameters, data_size: int) -> bytes:
    """
    Build a 44-byte PCM WAV header for `data_size` bytes of sample data.

    Args:
        params: sample rate, channel count and bit depth of the payload
        data_size: exact byte length of the payload that follows the header

    Returns:
        44 header bytes, all integers little-endian
    """
    _check_field("data_size", data_size, MAX_DATA_SIZE)
    _check_field("channels", params.channels, U16_MAX)
    _check_field("sample_rate", params.sample_rate, U32_MAX)
    _check_field("byte_rate", params.byte_rate, U32_MAX)
    _check_field("block_align", params.block_align, U16_MAX)
    _check_field("bits_per_sample", params.bits_per_sample, U16_MAX)

    return _HEADER_STRUCT.pack(
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        16,              # fmt subchunk size for PCM
        1,               # PCM
        params.channels,
        params.sample_rate,
        params.byte_rate,
        params.block_align,
        params.bits_per_sample,
        b"data",
        data_size,
    )


def write_wav_chunk(
    output_path: str,
    params: FormatParameters,
    payloads: Sequence[bytes],
) -> int:
    """
    Write header plus payloads to `output_path` and return the bytes written.

    The data size goes into the header before any sample bytes, so it is
    summed up front. A failure halfway leaves a truncated file behind.
    """
    data_size = sum(len(payload) for payload in payloads)
    header = build_wav_header(params, data_size)

    try:
        out = open(output_path, "wb")
    except OSError as exc:
        raise OutputCreateError(f"Cannot create output file {output_path}: {exc}") from exc

    with out:
        try:
            out.write(header)
            for payload in payloads:
                out.write(payload)
            out.flush()
        except OSError as exc:
            raise OutputWriteError(f"Failed writing {output_path}: {exc}") from exc

    return WAV_HEADER_SIZE + data_size



def _check_field(name: str, value: int, limit: int) -> None:
    if value < 0 or value > limit:
        raise ValueError(f"{name} {value} does not fit in a WAV header")
