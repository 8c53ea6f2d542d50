"""
Configuration Module
Central settings for weblook.

Driver location can be overridden from the environment:
    WEBLOOK_DRIVER_HOST, WEBLOOK_DRIVER_PORT, WEBLOOK_DRIVER_COMMAND
"""

import os

# ── Driver ──
DRIVER_HOST = os.getenv("WEBLOOK_DRIVER_HOST", "127.0.0.1")
DRIVER_PORT = int(os.getenv("WEBLOOK_DRIVER_PORT", "9515"))
DRIVER_COMMAND = os.getenv("WEBLOOK_DRIVER_COMMAND", "playwright")
DRIVER_POLL_INTERVAL = 0.1   # seconds between liveness probes
DRIVER_START_TIMEOUT = 5.0   # seconds before giving up on the driver
DRIVER_STOP_TIMEOUT = 5.0    # seconds to wait after terminate before kill
DRIVER_INSTALL_HINT = (
    "Install it with: pip install playwright && playwright install chromium"
)

# ── Page ──
SCRIPT_GRACE_PERIOD = 0.5    # seconds after a script runs, before capture

# ── Recording ──
FRAMES_PER_SECOND = 10
GIF_FRAME_DELAY_CS = 10      # hundredths of a second per GIF frame
GIF_MAX_COLORS = 256

# ── CLI defaults ──
DEFAULT_URL = "http://127.0.0.1:8080"
DEFAULT_WAIT = 10
DEFAULT_SIZE = "1280x720"
DEFAULT_RECORD_SECONDS = 10
DEFAULT_SCREENSHOT_PATH = "weblook.png"
DEFAULT_RECORDING_PATH = "weblook.gif"
STDOUT_MARKER = "-"

# Browser identities picked at random per session
USER_AGENTS = (
    # Chrome on Windows
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36",
    # Chrome on Mac
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36",
)
