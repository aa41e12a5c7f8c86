"""
Play DTMF tones on the default audio output device
"""

import asyncio
import logging

import numpy as np
import pyaudio

from dtmf_generator import NUM_CHANNELS, SAMPLE_RATE, DTMFGenerator, validate_number

logger = logging.getLogger(__name__)


class TonePlayer:
    def __init__(self, tone_duration=0.2):
        """
        Initialize tone player

        Args:
            tone_duration: Duration of each tone (seconds)
        """
        self.generator = DTMFGenerator(tone_duration)
        self.p = pyaudio.PyAudio()

        # Open audio stream
        self.stream = self.p.open(
            format=pyaudio.paInt16,
            channels=NUM_CHANNELS,
            rate=SAMPLE_RATE,
            output=True,
        )

    def play_samples(self, samples: np.ndarray):
        """Blocking write of int16 samples to the stream"""
        self.stream.write(samples.astype("<i2").tobytes())

    async def play_tone(self, symbol: str):
        """
        Asynchronously play a DTMF tone

        Args:
            symbol: The digit or symbol to play
        """
        validate_number(symbol)
        tone = self.generator.generate_tone(symbol)
        await asyncio.to_thread(self.play_samples, tone)

    async def play_sequence(self, digits: str):
        """
        Play a phone number exactly as it is written to file

        Args:
            digits: String of digits/symbols to play
        """
        validate_number(digits)
        logger.info("Playing %r", digits)
        samples = self.generator.generate_sequence(digits)
        await asyncio.to_thread(self.play_samples, samples)

    def close(self):
        """Close the audio stream and PyAudio"""
        if hasattr(self, 'stream'):
            self.stream.close()
            del self.stream
        if hasattr(self, 'p'):
            self.p.terminate()
            del self.p

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def __del__(self):
        """Cleanup when object is destroyed"""
        self.close()
