"""
Frame Capturer Module
Takes single lossless still frames from a browser session.
"""

import logging

from PIL import Image, UnidentifiedImageError
from playwright.sync_api import Error as PlaywrightError

from visual.frame import Frame
from .errors import FrameCaptureFailed

logger = logging.getLogger(__name__)


class FrameCapturer:
    def capture(self, session) -> bytes:
        """Return the current viewport as PNG bytes, exactly as the browser produced them."""
        try:
            return session.screenshot_png()
        except PlaywrightError as e:
            raise FrameCaptureFailed("Failed to capture a frame", cause=e) from e

    def capture_frame(self, session, index: int) -> Frame:
        data = self.capture(session)
        try:
            return Frame.from_png(index, data)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise FrameCaptureFailed(f"Could not decode frame {index}", cause=e) from e
