#!/usr/bin/env python3
"""
WebLook
Capture screenshots and GIF recordings of web pages.
Main entry point for the application.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Core imports
from core.capture_pipeline import CaptureRequest, CapturePipeline
from core.errors import CaptureError, DriverNotFound

# Utilities
from utils import config
from utils.output_sink import default_output
from utils.progress import ProgressReporter
from utils.viewport import parse_viewport

def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return number

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="weblook",
        description="Capture screenshots and recordings of web pages",
    )
    parser.add_argument(
        "url",
        nargs="?",
        help=f"URL to capture (default: {config.DEFAULT_URL}, or read from piped stdin)",
    )
    parser.add_argument(
        "-o", "--output",
        help="Output file path, or - for stdout (default: weblook.png or weblook.gif)",
    )
    parser.add_argument(
        "-w", "--wait",
        type=non_negative_int,
        default=config.DEFAULT_WAIT,
        help=f"Wait time before capture in seconds (default: {config.DEFAULT_WAIT})",
    )
    parser.add_argument(
        "-r", "--record",
        type=non_negative_int,
        nargs="?",
        const=config.DEFAULT_RECORD_SECONDS,
        help=f"Create a recording instead of a screenshot, value is length in seconds "
             f"(default: {config.DEFAULT_RECORD_SECONDS})",
    )
    parser.add_argument(
        "-s", "--size",
        default=config.DEFAULT_SIZE,
        help=f"Viewport size as WIDTHxHEIGHT (default: {config.DEFAULT_SIZE})",
    )
    parser.add_argument(
        "-j", "--js",
        help="Execute custom JavaScript before capture",
    )
    parser.add_argument(
        "--console-log",
        help="Save browser console messages to this file",
    )
    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Enable debug output",
    )
    return parser

def resolve_url(url: Optional[str]) -> str:
    """Use the positional URL, else a piped one from stdin, else the default."""
    if url is None and not sys.stdin.isatty():
        piped = sys.stdin.read().strip()
        if piped:
            return piped
    return url or config.DEFAULT_URL

def build_request(args: argparse.Namespace) -> CaptureRequest:
    is_recording = args.record is not None
    return CaptureRequest(
        url=resolve_url(args.url),
        viewport=parse_viewport(args.size),
        wait=args.wait,
        script=args.js,
        record_seconds=args.record,
        sink=default_output(args.output, is_recording),
        console_log=Path(args.console_log) if args.console_log else None,
    )

def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        request = build_request(args)
        reporter = None if request.sink.is_stdout else ProgressReporter(debug=args.debug)
        CapturePipeline(reporter=reporter, debug=args.debug).run(request)
    except DriverNotFound as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.guidance:
            print(e.guidance, file=sys.stderr)
        return 1
    except CaptureError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130
    return 0

if __name__ == "__main__":
    sys.exit(main())
