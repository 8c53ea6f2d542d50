"""
Capture Pipeline Module
Coordinates driver, session, navigation and capture for one run.

States advance in one direction only:

    IDLE -> DRIVER_STARTING -> SESSION_OPENING -> NAVIGATING -> [SCRIPT_RUNNING]
         -> CAPTURING -> [ENCODING] -> FINALIZING -> DONE

and any of them can end in FAILED. The session and the driver process are
released on every path; cleanup never replaces the error being reported.
"""

import logging
import time
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import urlparse

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from utils import config
from utils.output_sink import OutputSink
from utils.viewport import Viewport
from visual.animation_encoder import AnimationEncoder
from .driver_supervisor import DriverSupervisor
from .errors import InvalidTargetAddress, SessionSetupFailed
from .frame_capturer import FrameCapturer
from .navigation import NavigationController
from .recorder import Recorder
from .session_factory import SessionFactory

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    IDLE = "idle"
    DRIVER_STARTING = "driver_starting"
    SESSION_OPENING = "session_opening"
    NAVIGATING = "navigating"
    SCRIPT_RUNNING = "script_running"
    CAPTURING = "capturing"
    ENCODING = "encoding"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class CaptureRequest:
    url: str
    viewport: Viewport
    wait: float = config.DEFAULT_WAIT
    script: Optional[str] = None
    record_seconds: Optional[int] = None
    sink: OutputSink = field(default_factory=OutputSink)
    console_log: Optional[Path] = None

    @property
    def is_recording(self) -> bool:
        return self.record_seconds is not None


@dataclass
class CaptureResult:
    data: bytes
    media_type: str
    frame_count: int

    @property
    def kind(self) -> str:
        return "GIF" if self.media_type == "image/gif" else "Screenshot"


def validate_address(url: str) -> str:
    """Require an absolute URI: a scheme plus a host, or a file path."""
    if not isinstance(url, str):
        raise InvalidTargetAddress(f"Failed to parse URL {url!r}: expected a string")
    parsed = urlparse(url)
    if not parsed.scheme or not (parsed.netloc or (parsed.scheme == "file" and parsed.path)):
        raise InvalidTargetAddress(f"Failed to parse URL {url!r}: expected an absolute address")
    return url


class CapturePipeline:
    def __init__(self,
                 supervisor_factory: Optional[Callable[[], DriverSupervisor]] = None,
                 session_factory: Optional[SessionFactory] = None,
                 navigator: Optional[NavigationController] = None,
                 capturer: Optional[FrameCapturer] = None,
                 recorder: Optional[Recorder] = None,
                 encoder: Optional[AnimationEncoder] = None,
                 reporter=None,
                 debug: bool = False,
                 sleep: Callable[[float], None] = time.sleep):
        self.reporter = reporter
        self.debug = debug
        self.supervisor_factory = supervisor_factory or (lambda: DriverSupervisor(debug=debug))
        self.session_factory = session_factory
        self.navigator = navigator or NavigationController(sleep=sleep, reporter=reporter)
        self.capturer = capturer or FrameCapturer()
        self.recorder = recorder or Recorder(self.capturer, sleep=sleep, reporter=reporter)
        self.encoder = encoder or AnimationEncoder()
        self.state = PipelineState.IDLE
        self.failure: Optional[str] = None

    def _transition(self, state: PipelineState) -> None:
        logger.debug(f"Pipeline {self.state.value} -> {state.value}")
        self.state = state

    def capture(self, request: CaptureRequest) -> CaptureResult:
        """Run the pipeline and return the image bytes without writing them anywhere."""
        return self._execute(request, sink=None)

    def run(self, request: CaptureRequest) -> CaptureResult:
        """Run the pipeline and write the result to the request's sink."""
        result = self._execute(request, sink=request.sink)
        if self.reporter is not None:
            self.reporter.saved(result.kind, request.sink.describe())
        return result

    def _execute(self, request: CaptureRequest, sink: Optional[OutputSink]) -> CaptureResult:
        self.state = PipelineState.IDLE
        self.failure = None
        try:
            validate_address(request.url)
            if self.reporter is not None:
                self.reporter.banner(request.url, request.record_seconds)

            with ExitStack() as stack:
                self._transition(PipelineState.DRIVER_STARTING)
                supervisor = stack.enter_context(self.supervisor_factory())
                driver = supervisor.ensure_running()

                self._transition(PipelineState.SESSION_OPENING)
                factory = self.session_factory or self._playwright_session_factory(stack)
                with self._session(factory, request, driver.endpoint) as session:
                    result = self._capture_with(session, request)

                    self._transition(PipelineState.FINALIZING)
                    if request.console_log is not None:
                        _write_console_log(session, request.console_log)
                    self._quit(session)
                    if sink is not None:
                        sink.write(result.data)
        except BaseException as e:
            self.state = PipelineState.FAILED
            self.failure = type(e).__name__
            logger.debug(f"Capture failed: {e}", exc_info=self.debug)
            raise

        self._transition(PipelineState.DONE)
        return result

    def _capture_with(self, session, request: CaptureRequest) -> CaptureResult:
        self._transition(PipelineState.NAVIGATING)
        self.navigator.goto_and_settle(session, request.url, request.wait)

        if request.script:
            self._transition(PipelineState.SCRIPT_RUNNING)
            self.navigator.run_script(session, request.script)

        self._transition(PipelineState.CAPTURING)
        if not request.is_recording:
            if self.reporter is not None:
                self.reporter.capturing()
            return CaptureResult(self.capturer.capture(session), "image/png", 1)

        frames = self.recorder.record(session, request.record_seconds)
        self._transition(PipelineState.ENCODING)
        animation = self.encoder.encode(frames)
        return CaptureResult(animation.data, "image/gif", animation.frame_count)

    def _playwright_session_factory(self, stack: ExitStack) -> SessionFactory:
        try:
            playwright = stack.enter_context(sync_playwright())
        except PlaywrightError as e:
            raise SessionSetupFailed("Could not start the Playwright client", cause=e) from e
        return SessionFactory(playwright.chromium)

    @contextmanager
    def _session(self, factory: SessionFactory, request: CaptureRequest, endpoint: str):
        session = factory.open(request.viewport, endpoint)
        try:
            yield session
        except BaseException:
            self._abandon(session, request.console_log)
            raise

    def _quit(self, session) -> None:
        try:
            session.quit()
        except PlaywrightError as e:
            logger.warning(f"Session did not close cleanly: {e}")

    def _abandon(self, session, console_log: Optional[Path]) -> None:
        """Best-effort release after a failure; the original error is what gets reported."""
        if console_log is not None:
            try:
                _write_console_log(session, console_log)
            except OSError as e:
                logger.warning(f"Could not write console log: {e}")
        try:
            session.quit()
        except Exception as e:
            logger.warning(f"Session cleanup failed: {e}")


def _write_console_log(session, path: Path) -> None:
    lines = session.console_messages
    Path(path).write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    logger.debug(f"Wrote {len(lines)} console messages to {path}")
