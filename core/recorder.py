"""
Recorder Module
Captures a timed sequence of frames at a fixed rate.
"""

import logging
import time
from typing import Callable, List, Optional

from utils import config
from visual.frame import Frame
from .frame_capturer import FrameCapturer

logger = logging.getLogger(__name__)


class Recorder:
    def __init__(self, capturer: Optional[FrameCapturer] = None,
                 sleep: Callable[[float], None] = time.sleep,
                 reporter=None):
        self.capturer = capturer or FrameCapturer()
        self._sleep = sleep
        self.reporter = reporter

    def record(self, session, total_seconds: int,
               frames_per_second: int = config.FRAMES_PER_SECOND) -> List[Frame]:
        """
        Capture ``total_seconds * frames_per_second`` frames.

        Each capture is followed by a ``1 / frames_per_second`` pause so the
        sequence tracks wall-clock time instead of driver throughput. The
        first failed capture aborts the recording; there is no short result.
        """
        total_frames = total_seconds * frames_per_second
        frame_delay = 1.0 / frames_per_second
        logger.info(f"Recording {total_frames} frames over {total_seconds}s")

        if self.reporter is not None:
            self.reporter.recording_started(total_seconds)

        frames: List[Frame] = []
        for i in range(total_frames):
            frames.append(self.capturer.capture_frame(session, i))
            if self.reporter is not None and i % frames_per_second == 0:
                self.reporter.recording_tick(i // frames_per_second + 1, total_seconds)
            self._sleep(frame_delay)

        if self.reporter is not None:
            self.reporter.recording_finished()
        logger.debug(f"Recorded {len(frames)} frames")
        return frames
