"""RIFF/WAV chunk utilities for wavetable files.

This module builds and walks the minimal chunk layout used for exported
wavetables: a RIFF/WAVE header, a 16-byte ``fmt `` chunk and a ``data`` chunk,
with no other chunks.
"""

import struct
from dataclasses import dataclass
from typing import BinaryIO

# FourCC identifiers
RIFF_ID = b"RIFF"
WAVE_ID = b"WAVE"
FMT_ID = b"fmt "
DATA_ID = b"data"

# Audio format codes
WAVE_FORMAT_PCM = 1
WAVE_FORMAT_IEEE_FLOAT = 3

HEADER_SIZE = 44
FMT_CHUNK_SIZE = 16


class RiffError(Exception):
    """Error reading or writing RIFF files."""


@dataclass(frozen=True)
class FmtChunk:
    audio_format: int
    num_channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int


def read_chunk_header(f: BinaryIO) -> tuple[bytes, int]:
    """Read a RIFF chunk header (FourCC + size).

    Args:
        f: File handle positioned at the start of a chunk.

    Returns:
        Tuple of (chunk_id, chunk_size).

    Raises:
        RiffError: If the header cannot be read.
    """
    header = f.read(8)
    if len(header) < 8:
        raise RiffError("Unexpected end of file reading chunk header")

    chunk_id = header[:4]
    chunk_size = struct.unpack("<I", header[4:8])[0]
    return chunk_id, chunk_size


def read_riff_header(f: BinaryIO) -> int:
    """Validate the RIFF/WAVE header and return the total file size it declares."""
    riff_header = f.read(12)
    if len(riff_header) < 12:
        raise RiffError("File too small to be a valid WAV file")

    if riff_header[:4] != RIFF_ID:
        raise RiffError("Not a RIFF file")

    if riff_header[8:12] != WAVE_ID:
        raise RiffError("Not a WAVE file")

    return struct.unpack("<I", riff_header[4:8])[0] + 8


def read_chunks(f: BinaryIO) -> dict[bytes, bytes]:
    """Read every chunk of a RIFF/WAVE stream into a FourCC -> payload map.

    Later chunks with a repeated FourCC are ignored.

    Raises:
        RiffError: If the header is invalid or a chunk is truncated.
    """
    file_size = read_riff_header(f)
    chunks: dict[bytes, bytes] = {}

    while f.tell() < file_size:
        try:
            chunk_id, chunk_size = read_chunk_header(f)
        except RiffError:
            break

        payload = f.read(chunk_size)
        if len(payload) < chunk_size:
            raise RiffError(f"Chunk {chunk_id!r} truncated: expected {chunk_size} bytes")
        chunks.setdefault(chunk_id, payload)

        # Word alignment padding
        if chunk_size % 2:
            f.seek(1, 1)

    return chunks


def parse_fmt_chunk(fmt_data: bytes) -> FmtChunk:
    """Decode the fields of a ``fmt `` chunk payload.

    Raises:
        RiffError: If the payload is shorter than 16 bytes.
    """
    if len(fmt_data) < FMT_CHUNK_SIZE:
        raise RiffError("fmt chunk too small")

    return FmtChunk(*struct.unpack("<HHIIHH", fmt_data[:FMT_CHUNK_SIZE]))


def build_float_wav(samples: bytes, sample_rate: int, num_channels: int = 1) -> bytes:
    """Build a complete 32-bit IEEE float WAV file around raw sample bytes.

    Layout is the canonical 44-byte header followed by the samples:

        RIFF <36 + data_size> WAVE
        fmt  <16> format=3 channels rate byte_rate block_align bits=32
        data <data_size> samples...

    Args:
        samples: Little-endian float32 sample data.
        sample_rate: The sample rate in Hz.
        num_channels: Number of interleaved channels.

    Returns:
        The complete WAV file as bytes.
    """
    bits_per_sample = 32
    bytes_per_sample = bits_per_sample // 8
    byte_rate = sample_rate * num_channels * bytes_per_sample
    block_align = num_channels * bytes_per_sample
    data_size = len(samples)

    wav = bytearray()

    # RIFF header
    wav.extend(RIFF_ID)
    wav.extend(struct.pack("<I", 36 + data_size))
    wav.extend(WAVE_ID)

    # fmt chunk
    wav.extend(FMT_ID)
    wav.extend(struct.pack("<I", FMT_CHUNK_SIZE))
    wav.extend(
        struct.pack(
            "<HHIIHH",
            WAVE_FORMAT_IEEE_FLOAT,
            num_channels,
            sample_rate,
            byte_rate,
            block_align,
            bits_per_sample,
        )
    )

    # data chunk
    wav.extend(DATA_ID)
    wav.extend(struct.pack("<I", data_size))
    wav.extend(samples)

    return bytes(wav)
