"""
Session Factory Module
Opens configured browser sessions against a running driver.

A BrowserSession is the only surface the rest of the pipeline uses to talk
to the browser: resize, navigate, run a script, take a PNG, quit.
"""

import json
import logging
import random
import uuid
from typing import List, Optional, Sequence

from playwright.sync_api import Error as PlaywrightError

from utils import config
from utils.viewport import Viewport
from .errors import SessionSetupFailed

logger = logging.getLogger(__name__)

LAUNCH_OPTIONS_HEADER = "x-playwright-launch-options"


def pick_user_agent(rng: random.Random, pool: Sequence[str] = config.USER_AGENTS) -> str:
    """Pick a browser identity uniformly from the pool using the given random source."""
    return pool[rng.randrange(len(pool))]


def build_launch_options(viewport: Viewport, user_agent: str) -> dict:
    """Headless Chromium launch options for one capture session."""
    return {
        "headless": True,
        "args": [
            "--disable-gpu",
            f"--window-size={viewport.width},{viewport.height}",
            f"--user-agent={user_agent}",
        ],
    }


class BrowserSession:
    """One browser, context and page bound to one driver."""

    def __init__(self, browser, context, page, viewport: Viewport, user_agent: str):
        self.session_id = uuid.uuid4().hex
        self.browser = browser
        self.context = context
        self.page = page
        self.viewport = viewport
        self.user_agent = user_agent
        self.console_messages: List[str] = []
        self._closed = False
        page.on("console", self._on_console)

    def _on_console(self, message) -> None:
        self.console_messages.append(f"[{message.type}] {message.text}")

    def set_window_rect(self, width: int, height: int) -> None:
        self.page.set_viewport_size({"width": width, "height": height})

    def goto(self, url: str) -> None:
        self.page.goto(url, wait_until="load")

    def execute(self, script: str) -> None:
        # Run as a function body, the way WebDriver's execute_script does
        self.page.evaluate(f"() => {{\n{script}\n}}")

    def screenshot_png(self) -> bytes:
        return self.page.screenshot(type="png")

    def quit(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.browser.close()


class SessionFactory:
    def __init__(self, browser_type, rng: Optional[random.Random] = None,
                 user_agents: Sequence[str] = config.USER_AGENTS):
        """
        Args:
            browser_type: Playwright browser type used to connect, e.g. ``playwright.chromium``
            rng: Random source for identity selection
            user_agents: Identity pool
        """
        self.browser_type = browser_type
        self.rng = rng or random.Random()
        self.user_agents = user_agents

    def open(self, viewport: Viewport, driver_endpoint: str) -> BrowserSession:
        """
        Connect to the driver and open a page sized to ``viewport``.

        Raises:
            SessionSetupFailed: the driver refused or could not be reached
        """
        user_agent = pick_user_agent(self.rng, self.user_agents)
        launch_options = build_launch_options(viewport, user_agent)
        logger.debug(f"Opening session at {driver_endpoint} ({viewport}, {user_agent})")

        browser = None
        try:
            browser = self.browser_type.connect(
                driver_endpoint,
                headers={LAUNCH_OPTIONS_HEADER: json.dumps(launch_options)},
            )
            context = browser.new_context(viewport=viewport.as_dict(), user_agent=user_agent)
            page = context.new_page()
            session = BrowserSession(browser, context, page, viewport, user_agent)
            # Launch arguments are not always honoured, so always resize explicitly
            session.set_window_rect(viewport.width, viewport.height)
        except PlaywrightError as e:
            if browser is not None:
                try:
                    browser.close()
                except PlaywrightError:
                    logger.debug("Could not close half-open browser", exc_info=True)
            raise SessionSetupFailed(f"Could not open a browser session at {driver_endpoint}", cause=e) from e

        logger.info(f"Session {session.session_id} opened")
        return session
