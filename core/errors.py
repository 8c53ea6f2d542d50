"""
Capture Errors Module
Error taxonomy for the capture pipeline.

Every failure is fatal for the current run. Errors carry the operation that
failed and, where there is one, the underlying cause so the caller can print
something actionable.
"""

from typing import Optional


class CaptureError(Exception):
    """Base class for every capture failure."""

    operation = "capture"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self):
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class DriverNotFound(CaptureError):
    """The automation driver executable is missing or not executable."""

    operation = "driver start"

    def __init__(self, message: str, cause: Optional[BaseException] = None,
                 guidance: str = ""):
        super().__init__(message, cause)
        self.guidance = guidance


class DriverStartTimeout(CaptureError):
    operation = "driver start"


class SessionSetupFailed(CaptureError):
    operation = "session setup"


class NavigationFailed(CaptureError):
    operation = "navigation"


class ScriptExecutionFailed(CaptureError):
    operation = "script execution"


class FrameCaptureFailed(CaptureError):
    operation = "frame capture"


class EmptyFrameSequence(CaptureError):
    operation = "animation encoding"


class MalformedViewportSpec(CaptureError, ValueError):
    operation = "viewport parsing"


class InvalidTargetAddress(CaptureError, ValueError):
    operation = "address parsing"
