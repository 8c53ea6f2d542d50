"""
Navigation Module
Loads the target page, lets it settle, and runs user scripts.
"""

import logging
import time
from typing import Callable

from playwright.sync_api import Error as PlaywrightError

from utils import config
from .errors import NavigationFailed, ScriptExecutionFailed

logger = logging.getLogger(__name__)


class NavigationController:
    def __init__(self, sleep: Callable[[float], None] = time.sleep,
                 reporter=None,
                 script_grace_period: float = config.SCRIPT_GRACE_PERIOD):
        self._sleep = sleep
        self.reporter = reporter
        self.script_grace_period = script_grace_period

    def goto_and_settle(self, session, address: str, settle_seconds: float) -> None:
        """
        Navigate to ``address`` and then wait ``settle_seconds``.

        The wait always happens, even after the load event, so fonts, images
        and animations get a chance to finish before anything is captured.
        """
        logger.info(f"Navigating to {address}")
        try:
            session.goto(address)
        except PlaywrightError as e:
            raise NavigationFailed(f"Failed to load {address}", cause=e) from e

        logger.debug(f"Page loaded, settling for {settle_seconds}s")
        self._settle(settle_seconds)

    def _settle(self, seconds: float) -> None:
        if self.reporter is None or seconds <= 0:
            if seconds > 0:
                self._sleep(seconds)
            return

        whole = int(seconds)
        self.reporter.countdown_started("Loading page", whole)
        for second in range(1, whole + 1):
            self._sleep(1)
            self.reporter.countdown_tick("Loading page", second, whole)
        remainder = seconds - whole
        if remainder > 0:
            self._sleep(remainder)
        self.reporter.countdown_finished("Loading page")

    def run_script(self, session, code: str) -> None:
        """
        Evaluate ``code`` in the page and give its effects a moment to render.

        Scripts are run as given; errors surface with the page's own message.
        """
        logger.info("Executing custom script")
        try:
            session.execute(code)
        except PlaywrightError as e:
            raise ScriptExecutionFailed("Custom script failed", cause=e) from e
        self._sleep(self.script_grace_period)
