"""
DTMF (Dual-Tone Multi-Frequency) Tone Generator
This module turns a phone number into 16-bit PCM samples and WAV files
"""

import enum
import logging
import math
import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from wave_header import HEADER_SIZE, WaveFormatError, WaveHeader

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100
NUM_CHANNELS = 1
BYTES_PER_SAMPLE = 2
AMPLITUDE = 16382  # two summed sines stay inside int16

MIN_TONE_DURATION = 0.1
MAX_TONE_DURATION = 1.0

PAUSE_SYMBOL = '-'
VALID_SYMBOLS = "0123456789#*" + PAUSE_SYMBOL

# (upper, lower) frequency pair in Hz for each keypad symbol
DTMF_FREQUENCIES: Dict[str, Tuple[int, int]] = {
    '1': (1209, 697), '2': (1336, 697), '3': (1477, 697),
    '4': (1209, 770), '5': (1336, 770), '6': (1477, 770),
    '7': (1209, 852), '8': (1336, 852), '9': (1477, 852),
    '*': (1209, 941), '0': (1336, 941), '#': (1477, 941),
}
SILENCE = (0, 0)


def dtmf_frequencies(symbol: str) -> Tuple[int, int]:
    """
    Look up the frequency pair for a dial symbol

    Args:
        symbol: one character of a phone number

    Returns:
        (upper, lower) in Hz; (0, 0) for '-' or anything not on the keypad
    """
    return DTMF_FREQUENCIES.get(symbol, SILENCE)


def upper_frequency(symbol: str) -> int:
    return dtmf_frequencies(symbol)[0]


def lower_frequency(symbol: str) -> int:
    return dtmf_frequencies(symbol)[1]


def find_invalid_symbols(digits: str) -> List[str]:
    """Characters of ``digits`` outside VALID_SYMBOLS, in order of first appearance"""
    invalid = []
    for ch in digits:
        if ch not in VALID_SYMBOLS and ch not in invalid:
            invalid.append(ch)
    return invalid


def is_valid_number(digits: str) -> bool:
    return isinstance(digits, str) and not find_invalid_symbols(digits)


def samples_per_tone(duration: float) -> int:
    return math.floor(SAMPLE_RATE * duration)


class ErrorKind(enum.Enum):
    INVALID_DIGITS = "invalid_digits"
    INVALID_DURATION = "invalid_duration"
    IO_ERROR = "io_error"


class DTMFError(Exception):
    kind: ErrorKind


class InvalidDigitsError(DTMFError):
    kind = ErrorKind.INVALID_DIGITS


class InvalidDurationError(DTMFError):
    kind = ErrorKind.INVALID_DURATION


class WaveWriteError(DTMFError):
    kind = ErrorKind.IO_ERROR


def validate_number(digits) -> str:
    if not isinstance(digits, str):
        raise InvalidDigitsError(f"Phone number must be text, got {type(digits).__name__}")
    invalid = find_invalid_symbols(digits)
    if invalid:
        raise InvalidDigitsError(
            f"Invalid phone number {digits!r}: unsupported symbol(s) {''.join(invalid)!r}"
        )
    return digits


def validate_duration(duration) -> float:
    if isinstance(duration, (str, bytes, bool)):
        raise InvalidDurationError(f"Tone length must be a number, got {duration!r}")
    try:
        duration = float(duration)
    except (TypeError, ValueError):
        raise InvalidDurationError(f"Tone length must be a number, got {duration!r}") from None

    # NaN fails both comparisons
    if not MIN_TONE_DURATION <= duration <= MAX_TONE_DURATION:
        raise InvalidDurationError(
            f"Tone length must be within range [{MIN_TONE_DURATION}, {MAX_TONE_DURATION}], got {duration}"
        )
    return duration


class DTMFGenerator:
    def __init__(self, tone_duration=0.2):
        """
        Initialize DTMF generator

        Args:
            tone_duration: Duration of each tone (seconds), within [0.1, 1.0]

        Raises:
            InvalidDurationError: if the duration is out of range
        """
        self.tone_duration = validate_duration(tone_duration)
        self.samples_per_tone = samples_per_tone(self.tone_duration)

        # Sample index shared by every tone; phase restarts at 0 for each symbol
        self._n = np.arange(self.samples_per_tone, dtype=np.float64)

    def generate_tone(self, symbol: str) -> np.ndarray:
        """
        Generate the samples for a single dial symbol

        Args:
            symbol: The digit or symbol ('0'-'9', '*', '#', '-')

        Returns:
            int16 numpy array of samples_per_tone samples
        """
        freq_upper, freq_lower = dtmf_frequencies(symbol)
        logger.debug("Tone %r: %d Hz + %d Hz", symbol, freq_upper, freq_lower)

        wave_upper = np.sin(2 * np.pi * self._n * freq_upper / SAMPLE_RATE)
        wave_lower = np.sin(2 * np.pi * self._n * freq_lower / SAMPLE_RATE)

        combined_wave = np.rint(AMPLITUDE * (wave_upper + wave_lower))
        info = np.iinfo(np.int16)
        return np.clip(combined_wave, info.min, info.max).astype("<i2")

    def generate_sequence(self, digits: str) -> np.ndarray:
        """
        Generate back-to-back tones for a phone number

        Args:
            digits: validated phone number

        Returns:
            int16 numpy array holding every tone in input order, without gaps
        """
        buffer = np.empty(len(digits) * self.samples_per_tone, dtype="<i2")
        for tone_index, symbol in enumerate(digits):
            start = tone_index * self.samples_per_tone
            buffer[start:start + self.samples_per_tone] = self.generate_tone(symbol)
        return buffer

    def to_wave_bytes(self, digits: str) -> bytes:
        """Complete WAV file contents for ``digits``"""
        validate_number(digits)
        fmt = dict(sample_rate=SAMPLE_RATE, num_channels=NUM_CHANNELS,
                   bits_per_sample=BYTES_PER_SAMPLE * 8)

        # Refuse numbers the 32-bit size fields cannot describe before synthesizing
        try:
            WaveHeader.for_sample_count(len(digits) * self.samples_per_tone, **fmt)
        except WaveFormatError as e:
            raise InvalidDigitsError(f"Phone number too long for a WAV file: {e}") from e

        data = self.generate_sequence(digits).tobytes()
        # Size comes from the real buffer, never from a duration estimate
        header = WaveHeader.for_data_size(len(data), **fmt)
        return header.pack() + data

    def write(self, output_path, digits: str) -> int:
        """
        Write the WAV file for ``digits``

        Args:
            output_path: file to create or truncate
            digits: phone number

        Returns:
            number of samples written

        Raises:
            InvalidDigitsError: if ``digits`` holds an unsupported symbol
            WaveWriteError: if the path is not a file path, or the file cannot
                be opened or fully written
        """
        # An int would be taken as an already open file descriptor
        if not isinstance(output_path, (str, os.PathLike)):
            raise WaveWriteError(
                f"Output path must be text or a path, got {type(output_path).__name__}"
            )

        wave_bytes = self.to_wave_bytes(digits)
        try:
            with open(output_path, "wb") as f:
                written = f.write(wave_bytes)
        except (OSError, ValueError) as e:
            raise WaveWriteError(f"Cannot create and/or write to {output_path}: {e}") from e

        if written != len(wave_bytes):
            raise WaveWriteError(
                f"Short write to {output_path}: {written} of {len(wave_bytes)} bytes"
            )
        return (len(wave_bytes) - HEADER_SIZE) // BYTES_PER_SAMPLE


@dataclass(frozen=True)
class SynthesisResult:
    path: str
    error: Optional[ErrorKind] = None
    message: str = ""
    num_samples: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self):
        return self.ok


def synthesize(output_path, tone_duration, digits) -> SynthesisResult:
    """
    Write a WAV file of DTMF tones for a phone number

    The number and duration are both checked before anything touches the
    filesystem. Errors are reported in the result, never raised.

    Args:
        output_path: file to create or overwrite
        tone_duration: seconds per symbol, within [0.1, 1.0]
        digits: phone number made of 0-9, '#', '*' and '-' (pause)

    Returns:
        SynthesisResult, truthy on success
    """
    path = str(output_path)
    try:
        validate_number(digits)
        generator = DTMFGenerator(tone_duration)
        num_samples = generator.write(output_path, digits)
    except (InvalidDigitsError, InvalidDurationError) as e:
        logger.warning("Rejected request for %s: %s", path, e)
        return SynthesisResult(path=path, error=e.kind, message=str(e))
    except WaveWriteError as e:
        logger.error("%s", e)
        return SynthesisResult(path=path, error=e.kind, message=str(e))

    logger.info("Wrote %d tone(s), %d samples to %s", len(digits), num_samples, path)
    return SynthesisResult(path=path, message=f"Wrote {path}", num_samples=num_samples)
