"""
Progress Module
Colored terminal progress for interactive captures.

Everything goes to stderr so image bytes on stdout stay untouched. In debug
mode the output is plain lines that sit alongside the log records.
"""

import sys
from typing import Optional, TextIO

from colorama import Fore, Style, just_fix_windows_console

RAINBOW = (Fore.RED, Fore.YELLOW, Fore.GREEN, Fore.CYAN, Fore.BLUE, Fore.MAGENTA)
BAR_WIDTH = 30


def _bar(position: int, total: int, width: int = BAR_WIDTH) -> str:
    if total <= 0:
        return "#" * width
    filled = min(width, int(width * position / total))
    if filled >= width:
        return "#" * width
    return "#" * filled + ">" + "-" * (width - filled - 1)


class ProgressReporter:
    def __init__(self, debug: bool = False, stream: Optional[TextIO] = None):
        self.debug = debug
        self.stream = stream or sys.stderr
        just_fix_windows_console()

    def _emit(self, text: str, end: str = "\n") -> None:
        self.stream.write(text + end)
        self.stream.flush()

    def banner(self, url: str, record_seconds: Optional[int]) -> None:
        if self.debug:
            return
        self._emit(f"{Fore.CYAN}{Style.BRIGHT}Starting WebLook...{Style.RESET_ALL}")
        if record_seconds is None:
            self._emit(f"{Fore.YELLOW}• Taking screenshot of {url}{Style.RESET_ALL}")
        else:
            self._emit(f"{Fore.YELLOW}• Recording {url} for {record_seconds} seconds{Style.RESET_ALL}")

    def countdown_started(self, message: str, seconds: int) -> None:
        if self.debug:
            self._emit(f"Waiting for {seconds} seconds...")
        else:
            self._emit(f"Page loaded. Waiting for {seconds} seconds...")

    def countdown_tick(self, message: str, second: int, total: int) -> None:
        if self.debug:
            return
        color = RAINBOW[second % len(RAINBOW)]
        self._emit(f"\r{color}{message}{Style.RESET_ALL} [{_bar(second, total)}] {second}/{total}s", end="")

    def countdown_finished(self, message: str) -> None:
        if not self.debug:
            self._emit(f"\r{Fore.GREEN}{message} complete!{Style.RESET_ALL}" + " " * BAR_WIDTH)

    def recording_started(self, seconds: int) -> None:
        self._emit(f"Starting recording for {seconds} seconds...")

    def recording_tick(self, second: int, total: int) -> None:
        if self.debug:
            return
        color = RAINBOW[(second - 1) % len(RAINBOW)]
        self._emit(f"\r{color}Recording{Style.RESET_ALL} [{_bar(second, total)}] {second}/{total}s", end="")

    def recording_finished(self) -> None:
        if self.debug:
            self._emit("Recording complete. Creating GIF...")
        else:
            self._emit(f"\r{Fore.GREEN}Recording complete!{Style.RESET_ALL}" + " " * BAR_WIDTH)
            self._emit(f"{Fore.CYAN}{Style.BRIGHT}Creating GIF...{Style.RESET_ALL}")

    def capturing(self) -> None:
        if not self.debug:
            self._emit(f"{Fore.CYAN}{Style.BRIGHT}Taking screenshot...{Style.RESET_ALL}")

    def saved(self, kind: str, destination: str) -> None:
        if self.debug:
            self._emit(f"{kind} saved to {destination}")
        else:
            self._emit(f"{Fore.GREEN}✓ {Style.BRIGHT}{kind} saved to {destination}{Style.RESET_ALL}")
