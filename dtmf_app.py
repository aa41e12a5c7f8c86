"""
Command line front end: write a phone number as a WAV file of DTMF tones

    dtmf-wav out.wav 0.3 1-800-555-0199
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from dtmf_generator import MAX_TONE_DURATION, MIN_TONE_DURATION, synthesize

logger = logging.getLogger(__name__)


def setup_logger(log_level: str = "WARNING", log_file: Optional[str] = None) -> None:
    """
    Configure root logging for the command line tool

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_file: optional file to log to in addition to stderr
    """
    handlers = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dtmf-wav",
        description="Generate a WAV file of DTMF tones for a phone number",
    )
    parser.add_argument("output", help="WAV file to create or overwrite")
    parser.add_argument(
        "duration",
        type=float,
        help=f"Length of each tone in seconds, {MIN_TONE_DURATION} to {MAX_TONE_DURATION}",
    )
    parser.add_argument(
        "number",
        help="Phone number made of 0-9, '*', '#' and '-' (silent pause)",
    )
    parser.add_argument(
        "--play",
        action="store_true",
        help="Also play the tones on the default output device (needs PyAudio)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )
    parser.add_argument("--log-file", help="Also write log records to this file")

    parser.epilog = """
    EXAMPLE USAGE:

        dtmf-wav out.wav 0.3 123
        dtmf-wav call.wav 0.15 "1-800-555-0199#" --play
    """
    parser.formatter_class = argparse.RawDescriptionHelpFormatter
    return parser


def play_number(duration: float, number: str) -> None:
    from tone_player import TonePlayer

    with TonePlayer(duration) as player:
        asyncio.run(player.play_sequence(number))


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(args.log_level, args.log_file)

    result = synthesize(args.output, args.duration, args.number)
    if not result:
        print(result.message, file=sys.stderr)
        return 1

    print(f"{result.message} ({len(args.number)} tones, {result.num_samples} samples)")

    if args.play:
        try:
            play_number(args.duration, args.number)
        except (ImportError, OSError) as e:
            logger.error("Playback failed: %s", e)
            print(f"Playback failed: {e}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
