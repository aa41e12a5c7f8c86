"""tone_player module tests"""

from unittest.mock import patch

import numpy as np
import pytest

pytest.importorskip("pyaudio")

from dtmf_generator import DTMFGenerator, InvalidDigitsError  # noqa: E402
from tone_player import TonePlayer  # noqa: E402


class TestTonePlayer:
    """TonePlayer class tests"""

    def test_init_opens_stream(self) -> None:
        with patch('tone_player.pyaudio.PyAudio') as mock_pyaudio:
            player = TonePlayer(0.1)
            mock_pyaudio.return_value.open.assert_called_once()
            kwargs = mock_pyaudio.return_value.open.call_args.kwargs
            assert kwargs["channels"] == 1
            assert kwargs["rate"] == 44100
            assert kwargs["output"] is True
            player.close()

    @pytest.mark.asyncio
    async def test_play_tone(self) -> None:
        with patch('tone_player.pyaudio.PyAudio') as mock_pyaudio:
            stream = mock_pyaudio.return_value.open.return_value
            player = TonePlayer(0.1)
            await player.play_tone('5')

            expected = DTMFGenerator(0.1).generate_tone('5').tobytes()
            stream.write.assert_called_once_with(expected)
            player.close()

    @pytest.mark.asyncio
    async def test_play_sequence_matches_file_samples(self) -> None:
        with patch('tone_player.pyaudio.PyAudio') as mock_pyaudio:
            stream = mock_pyaudio.return_value.open.return_value
            player = TonePlayer(0.1)
            await player.play_sequence("1-#")

            written = stream.write.call_args.args[0]
            expected = DTMFGenerator(0.1).generate_sequence("1-#")
            np.testing.assert_array_equal(np.frombuffer(written, dtype="<i2"), expected)
            player.close()

    @pytest.mark.asyncio
    async def test_play_rejects_invalid(self) -> None:
        with patch('tone_player.pyaudio.PyAudio') as mock_pyaudio:
            stream = mock_pyaudio.return_value.open.return_value
            player = TonePlayer(0.1)
            with pytest.raises(InvalidDigitsError):
                await player.play_sequence("12a")
            stream.write.assert_not_called()
            player.close()

    def test_close(self) -> None:
        with patch('tone_player.pyaudio.PyAudio') as mock_pyaudio:
            stream = mock_pyaudio.return_value.open.return_value
            with TonePlayer(0.1):
                pass
            stream.close.assert_called_once()
            mock_pyaudio.return_value.terminate.assert_called_once()
