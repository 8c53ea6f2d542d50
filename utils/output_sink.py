"""
Output Sink Module
Where capture results go: a file, or the process's standard output.
"""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import config


@dataclass(frozen=True)
class OutputSink:
    path: Optional[Path] = None  # None means standard output

    @property
    def is_stdout(self) -> bool:
        return self.path is None

    @classmethod
    def from_argument(cls, value: str) -> "OutputSink":
        if value == config.STDOUT_MARKER:
            return cls(None)
        return cls(Path(value))

    def write(self, data: bytes) -> None:
        if self.is_stdout:
            sys.stdout.buffer.write(data)
            sys.stdout.buffer.flush()
        else:
            self.path.write_bytes(data)

    def describe(self) -> str:
        return "standard output" if self.is_stdout else str(self.path)


def default_output(output: Optional[str], is_recording: bool) -> OutputSink:
    """Resolve the -o argument, falling back to weblook.png / weblook.gif."""
    if output is None:
        output = config.DEFAULT_RECORDING_PATH if is_recording else config.DEFAULT_SCREENSHOT_PATH
    return OutputSink.from_argument(output)
