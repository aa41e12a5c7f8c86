"""
RIFF/WAVE container header for 16-bit PCM mono audio
This module packs and unpacks the 44-byte canonical WAV header field by field
"""

import struct
from dataclasses import dataclass
from typing import Tuple

import numpy as np

HEADER_SIZE = 44
FMT_SUBCHUNK_SIZE = 16
PCM_FORMAT = 1

# ChunkSize is 36 + data size and must fit in 32 bits
MAX_DATA_SIZE = 0xFFFFFFFF - 36

# (name, struct code) in file order; every multi-byte field is little-endian
HEADER_FIELDS = (
    ("chunk_id", "4s"),
    ("chunk_size", "I"),
    ("format", "4s"),
    ("subchunk1_id", "4s"),
    ("subchunk1_size", "I"),
    ("audio_format", "H"),
    ("num_channels", "H"),
    ("sample_rate", "I"),
    ("byte_rate", "I"),
    ("block_align", "H"),
    ("bits_per_sample", "H"),
    ("subchunk2_id", "4s"),
    ("subchunk2_size", "I"),
)


class WaveFormatError(ValueError):
    """Raised when bytes do not hold a header this module can describe"""


@dataclass(frozen=True)
class WaveHeader:
    subchunk2_size: int
    sample_rate: int = 44100
    num_channels: int = 1
    bits_per_sample: int = 16
    audio_format: int = PCM_FORMAT
    subchunk1_size: int = FMT_SUBCHUNK_SIZE

    @classmethod
    def for_data_size(cls, data_size: int, **fmt) -> "WaveHeader":
        """Header describing ``data_size`` bytes of sample data"""
        if data_size < 0:
            raise WaveFormatError(f"Data size cannot be negative: {data_size}")
        if data_size > MAX_DATA_SIZE:
            raise WaveFormatError(
                f"Data size {data_size} exceeds the {MAX_DATA_SIZE} bytes a WAV header can declare"
            )
        return cls(subchunk2_size=data_size, **fmt)

    @classmethod
    def for_sample_count(cls, num_samples: int, **fmt) -> "WaveHeader":
        num_channels = fmt.get("num_channels", cls.num_channels)
        bits_per_sample = fmt.get("bits_per_sample", cls.bits_per_sample)
        block_align = num_channels * bits_per_sample // 8
        return cls.for_data_size(num_samples * block_align, **fmt)

    @property
    def bytes_per_sample(self) -> int:
        return self.bits_per_sample // 8

    @property
    def block_align(self) -> int:
        return self.num_channels * self.bytes_per_sample

    @property
    def byte_rate(self) -> int:
        return self.sample_rate * self.block_align

    @property
    def chunk_size(self) -> int:
        # 4 + (8 + SubChunk1Size) + (8 + SubChunk2Size)
        return 4 + (8 + self.subchunk1_size) + (8 + self.subchunk2_size)

    @property
    def num_samples(self) -> int:
        return self.subchunk2_size // self.block_align

    def pack(self) -> bytes:
        """
        Serialize the header

        Each field is written at its documented offset and width, so the
        result does not depend on any platform structure packing.

        Returns:
            the 44 header bytes
        """
        values = {
            "chunk_id": b"RIFF",
            "chunk_size": self.chunk_size,
            "format": b"WAVE",
            "subchunk1_id": b"fmt ",
            "subchunk1_size": self.subchunk1_size,
            "audio_format": self.audio_format,
            "num_channels": self.num_channels,
            "sample_rate": self.sample_rate,
            "byte_rate": self.byte_rate,
            "block_align": self.block_align,
            "bits_per_sample": self.bits_per_sample,
            "subchunk2_id": b"data",
            "subchunk2_size": self.subchunk2_size,
        }
        return b"".join(
            struct.pack("<" + code, values[name]) for name, code in HEADER_FIELDS
        )

    @classmethod
    def unpack(cls, data: bytes) -> "WaveHeader":
        """
        Parse the first 44 bytes of a WAV file

        Args:
            data: at least HEADER_SIZE bytes

        Returns:
            the decoded header

        Raises:
            WaveFormatError: if the data is short or a tag or size field is wrong
        """
        if len(data) < HEADER_SIZE:
            raise WaveFormatError(
                f"Header needs {HEADER_SIZE} bytes, got {len(data)}"
            )

        fields = {}
        offset = 0
        for name, code in HEADER_FIELDS:
            fmt = "<" + code
            (fields[name],) = struct.unpack_from(fmt, data, offset)
            offset += struct.calcsize(fmt)

        for name, tag in (("chunk_id", b"RIFF"), ("format", b"WAVE"),
                          ("subchunk1_id", b"fmt "), ("subchunk2_id", b"data")):
            if fields[name] != tag:
                raise WaveFormatError(f"Expected {tag!r} in {name}, found {fields[name]!r}")

        header = cls(
            subchunk2_size=fields["subchunk2_size"],
            sample_rate=fields["sample_rate"],
            num_channels=fields["num_channels"],
            bits_per_sample=fields["bits_per_sample"],
            audio_format=fields["audio_format"],
            subchunk1_size=fields["subchunk1_size"],
        )

        # Derived fields must agree with what was stored
        for name in ("chunk_size", "byte_rate", "block_align"):
            if fields[name] != getattr(header, name):
                raise WaveFormatError(
                    f"Inconsistent {name}: stored {fields[name]}, expected {getattr(header, name)}"
                )
        return header


def read_wave(path) -> Tuple[WaveHeader, np.ndarray]:
    """
    Read a 16-bit PCM WAV file written by this project

    Args:
        path: file to read

    Returns:
        (header, int16 samples)

    Raises:
        WaveFormatError: if the header is bad or the data length disagrees with it
    """
    with open(path, "rb") as f:
        raw = f.read()

    header = WaveHeader.unpack(raw)
    if header.bits_per_sample != 16:
        raise WaveFormatError(f"Only 16-bit samples are supported, got {header.bits_per_sample}")

    data = raw[HEADER_SIZE:]
    if len(data) != header.subchunk2_size:
        raise WaveFormatError(
            f"Header declares {header.subchunk2_size} data bytes but file holds {len(data)}"
        )
    return header, np.frombuffer(data, dtype="<i2")
