"""
Viewport Module
Parses WIDTHxHEIGHT viewport specifications.
"""

import re
from dataclasses import dataclass
from typing import Dict

from core.errors import MalformedViewportSpec

_SIZE_PATTERN = re.compile(r"([0-9]+)x([0-9]+)")


@dataclass(frozen=True)
class Viewport:
    width: int
    height: int

    def as_dict(self) -> Dict[str, int]:
        """Viewport in the shape Playwright expects."""
        return {"width": self.width, "height": self.height}

    def __str__(self):
        return f"{self.width}x{self.height}"


def parse_viewport(spec: str) -> Viewport:
    """
    Parse a viewport string such as ``1280x720``.

    Both numbers must be positive integers written in plain decimal digits.
    Anything else raises MalformedViewportSpec.
    """
    match = _SIZE_PATTERN.fullmatch(spec) if isinstance(spec, str) else None
    if not match:
        raise MalformedViewportSpec(
            f"Invalid viewport size format {spec!r}. Expected WIDTHxHEIGHT"
        )
    width, height = int(match.group(1)), int(match.group(2))
    if width <= 0 or height <= 0:
        raise MalformedViewportSpec(
            f"Viewport dimensions must be positive, got {width}x{height}"
        )
    return Viewport(width, height)
