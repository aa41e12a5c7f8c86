"""dtmf_app command line tests"""

import logging
from unittest.mock import patch

import pytest

import dtmf_app
from wave_header import read_wave

real_setup_logger = dtmf_app.setup_logger


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("dtmf_app.setup_logger") as mock_setup:
        yield mock_setup


class TestMain:
    """main function"""

    def test_success(self, tmp_path, capsys) -> None:
        out = tmp_path / "out.wav"
        assert dtmf_app.main([str(out), "0.3", "123"]) == 0

        header, samples = read_wave(out)
        assert header.subchunk2_size == len(samples) * 2
        assert "3 tones" in capsys.readouterr().out

    def test_invalid_number(self, tmp_path, capsys) -> None:
        out = tmp_path / "out.wav"
        assert dtmf_app.main([str(out), "0.3", "12a"]) == 1
        assert "Invalid phone number" in capsys.readouterr().err
        assert not out.exists()

    def test_invalid_duration(self, tmp_path, capsys) -> None:
        out = tmp_path / "out.wav"
        assert dtmf_app.main([str(out), "1.5", "123"]) == 1
        assert "Tone length" in capsys.readouterr().err
        assert not out.exists()

    def test_wrong_argument_count(self, tmp_path) -> None:
        with pytest.raises(SystemExit) as exc:
            dtmf_app.main([str(tmp_path / "out.wav"), "0.3"])
        assert exc.value.code == 2

    def test_non_numeric_duration(self, tmp_path) -> None:
        with pytest.raises(SystemExit) as exc:
            dtmf_app.main([str(tmp_path / "out.wav"), "long", "123"])
        assert exc.value.code == 2

    def test_log_options_forwarded(self, tmp_path, no_logging_setup) -> None:
        dtmf_app.main([str(tmp_path / "o.wav"), "0.1", "1",
                       "--log-level", "DEBUG", "--log-file", "x.log"])
        no_logging_setup.assert_called_once_with("DEBUG", "x.log")

    def test_play(self, tmp_path) -> None:
        with patch("dtmf_app.play_number") as mock_play:
            assert dtmf_app.main([str(tmp_path / "o.wav"), "0.2", "9#", "--play"]) == 0
        mock_play.assert_called_once_with(0.2, "9#")

    def test_play_not_attempted_on_failure(self, tmp_path) -> None:
        with patch("dtmf_app.play_number") as mock_play:
            assert dtmf_app.main([str(tmp_path / "o.wav"), "0.2", "9x", "--play"]) == 1
        mock_play.assert_not_called()

    def test_play_failure(self, tmp_path, capsys) -> None:
        with patch("dtmf_app.play_number", side_effect=OSError("no output device")):
            assert dtmf_app.main([str(tmp_path / "o.wav"), "0.2", "1", "--play"]) == 1
        assert "no output device" in capsys.readouterr().err


class TestSetupLogger:
    """setup_logger function"""

    def test_writes_log_file(self, tmp_path) -> None:
        log_file = tmp_path / "logs" / "dtmf.log"
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            real_setup_logger("INFO", str(log_file))
            logging.getLogger("dtmf_generator").info("hello")
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

        assert "dtmf_generator - INFO - hello" in log_file.read_text(encoding="utf-8")
