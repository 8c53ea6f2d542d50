import sys
import os
import json
import random
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from playwright.sync_api import Error as PlaywrightError
from core.errors import SessionSetupFailed
from core.session_factory import (
    LAUNCH_OPTIONS_HEADER, BrowserSession, SessionFactory, build_launch_options, pick_user_agent,
)
from utils import config
from utils.viewport import Viewport


class FakePage:
    def __init__(self):
        self.viewport_sizes = []
        self.handlers = {}
        self.evaluated = []
        self.visited = []

    def on(self, event, handler):
        self.handlers[event] = handler

    def set_viewport_size(self, size):
        self.viewport_sizes.append(size)

    def goto(self, url, wait_until=None):
        self.visited.append((url, wait_until))

    def evaluate(self, expression):
        self.evaluated.append(expression)

    def screenshot(self, type=None):
        return b"\x89PNG" + type.encode()


class FakeContext:
    def __init__(self, page):
        self.page = page

    def new_page(self):
        return self.page


class FakeBrowser:
    def __init__(self, page):
        self.page = page
        self.context_args = None
        self.closed = 0

    def new_context(self, **kwargs):
        self.context_args = kwargs
        return FakeContext(self.page)

    def close(self):
        self.closed += 1


class FakeBrowserType:
    def __init__(self, error=None):
        self.page = FakePage()
        self.browser = FakeBrowser(self.page)
        self.error = error
        self.connections = []

    def connect(self, endpoint, headers=None):
        self.connections.append((endpoint, headers))
        if self.error:
            raise PlaywrightError(self.error)
        return self.browser


class ConsoleMessage:
    def __init__(self, type, text):
        self.type = type
        self.text = text


def test_pick_user_agent_uses_given_random_source():
    first = [pick_user_agent(random.Random(7)) for _ in range(3)]
    second = [pick_user_agent(random.Random(7)) for _ in range(3)]
    assert first == second
    assert all(agent in config.USER_AGENTS for agent in first)

def test_pick_user_agent_reaches_whole_pool():
    rng = random.Random(1)
    seen = {pick_user_agent(rng, ("a", "b", "c")) for _ in range(200)}
    assert seen == {"a", "b", "c"}

def test_launch_options_are_headless_without_gpu():
    options = build_launch_options(Viewport(800, 600), "agent/1.0")
    assert options['headless'] is True
    assert "--disable-gpu" in options['args']
    assert "--window-size=800,600" in options['args']
    assert "--user-agent=agent/1.0" in options['args']

def test_open_connects_and_resizes_explicitly():
    browser_type = FakeBrowserType()
    factory = SessionFactory(browser_type, rng=random.Random(3), user_agents=("agent/1.0",))
    session = factory.open(Viewport(800, 600), "ws://127.0.0.1:9515/")

    endpoint, headers = browser_type.connections[0]
    assert endpoint == "ws://127.0.0.1:9515/"
    launch_options = json.loads(headers[LAUNCH_OPTIONS_HEADER])
    assert "--user-agent=agent/1.0" in launch_options['args']
    assert browser_type.browser.context_args == {
        'viewport': {'width': 800, 'height': 600},
        'user_agent': "agent/1.0",
    }
    assert browser_type.page.viewport_sizes == [{'width': 800, 'height': 600}]
    assert session.viewport == Viewport(800, 600)
    assert session.user_agent == "agent/1.0"
    assert session.session_id

def test_open_failure_is_session_setup_failed():
    factory = SessionFactory(FakeBrowserType(error="connect ECONNREFUSED 127.0.0.1:9515"))
    with pytest.raises(SessionSetupFailed) as excinfo:
        factory.open(Viewport(800, 600), "ws://127.0.0.1:9515/")
    assert "ECONNREFUSED" in str(excinfo.value)

def test_open_closes_browser_when_page_setup_fails():
    browser_type = FakeBrowserType()

    def broken_context(**kwargs):
        raise PlaywrightError("Browser has been closed")

    browser_type.browser.new_context = broken_context
    with pytest.raises(SessionSetupFailed):
        SessionFactory(browser_type).open(Viewport(800, 600), "ws://127.0.0.1:9515/")
    assert browser_type.browser.closed == 1

def test_session_operations_map_to_page():
    browser_type = FakeBrowserType()
    session = SessionFactory(browser_type).open(Viewport(320, 240), "ws://127.0.0.1:9515/")
    session.goto("http://example.com/")
    session.execute("document.title = 'x';")
    assert browser_type.page.visited == [("http://example.com/", "load")]
    assert browser_type.page.evaluated[0].startswith("() => {")
    assert "document.title = 'x';" in browser_type.page.evaluated[0]
    assert session.screenshot_png() == b"\x89PNGpng"

def test_session_collects_console_messages():
    browser_type = FakeBrowserType()
    session = SessionFactory(browser_type).open(Viewport(320, 240), "ws://127.0.0.1:9515/")
    browser_type.page.handlers['console'](ConsoleMessage("warning", "deprecated API"))
    assert session.console_messages == ["[warning] deprecated API"]

def test_quit_closes_browser_once():
    browser_type = FakeBrowserType()
    session = SessionFactory(browser_type).open(Viewport(320, 240), "ws://127.0.0.1:9515/")
    session.quit()
    session.quit()
    assert browser_type.browser.closed == 1
    assert isinstance(session, BrowserSession)
