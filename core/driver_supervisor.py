"""
Driver Supervisor Module
Starts, health-checks and stops the browser automation driver.

The driver is the Playwright server (``playwright run-server``), an external
process listening on a local TCP port. If something is already listening on
that port it is reused and left alone on shutdown.

Usage:
    with DriverSupervisor(port=9515) as supervisor:
        driver = supervisor.ensure_running()
        ...  # connect to driver.endpoint
"""

import logging
import shutil
import socket
import subprocess
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from utils import config
from .errors import DriverNotFound, DriverStartTimeout

logger = logging.getLogger(__name__)


@dataclass
class DriverProcess:
    host: str
    port: int
    process: Optional[subprocess.Popen] = None

    @property
    def endpoint(self) -> str:
        """Websocket address a browser session connects to."""
        return f"ws://{self.host}:{self.port}/"

    @property
    def started_here(self) -> bool:
        return self.process is not None


def is_port_open(host: str, port: int, timeout: float = config.DRIVER_POLL_INTERVAL) -> bool:
    """Bare TCP connect, the driver's liveness probe."""
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError:
        return False


class DriverSupervisor:
    def __init__(self,
                 port: int = config.DRIVER_PORT,
                 host: str = config.DRIVER_HOST,
                 command: str = config.DRIVER_COMMAND,
                 debug: bool = False,
                 poll_interval: float = config.DRIVER_POLL_INTERVAL,
                 start_timeout: float = config.DRIVER_START_TIMEOUT,
                 probe: Optional[Callable[[str, int], bool]] = None,
                 popen: Callable[..., subprocess.Popen] = subprocess.Popen,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.monotonic):
        self.port = port
        self.host = host
        self.command = command
        self.debug = debug
        self.poll_interval = poll_interval
        self.start_timeout = start_timeout
        self._probe = probe or is_port_open
        self._popen = popen
        self._sleep = sleep
        self._clock = clock
        self._driver: Optional[DriverProcess] = None
        self._shut_down = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
        return False

    def is_running(self) -> bool:
        return self._probe(self.host, self.port)

    def launch_command(self) -> List[str]:
        executable = shutil.which(self.command)
        if executable is None:
            raise DriverNotFound(
                f"Could not find the browser driver executable '{self.command}'",
                guidance=config.DRIVER_INSTALL_HINT,
            )
        return [executable, "run-server", "--port", str(self.port), "--host", self.host]

    def ensure_running(self) -> DriverProcess:
        """
        Make sure a driver is listening on the configured port.

        Returns immediately when the port is already live, so calling this
        twice never launches a second process.

        Raises:
            DriverNotFound: the executable is missing or cannot be run
            DriverStartTimeout: the driver never started listening
        """
        if self._driver is not None:
            if self.is_running():
                return self._driver
            # Our earlier driver stopped listening; reap it before replacing it
            stale, self._driver = self._driver, None
            if stale.process is not None:
                logger.warning(f"Driver on port {self.port} stopped responding, restarting it")
                self._stop(stale.process)

        if self.is_running():
            logger.debug(f"Driver already running on port {self.port}")
            self._driver = DriverProcess(self.host, self.port)
            return self._driver

        command = self.launch_command()
        logger.info(f"Starting driver on port {self.port}: {' '.join(command)}")
        output = None if self.debug else subprocess.DEVNULL
        try:
            process = self._popen(command, stdout=output, stderr=output)
        except OSError as e:
            raise DriverNotFound(
                f"Failed to start the browser driver '{self.command}'",
                cause=e,
                guidance=config.DRIVER_INSTALL_HINT,
            ) from e

        # Owned from here on, so shutdown() reaps it even if startup fails
        self._driver = DriverProcess(self.host, self.port, process)
        self._shut_down = False

        deadline = self._clock() + self.start_timeout
        while not self.is_running():
            exit_code = process.poll()
            if exit_code is not None:
                raise DriverStartTimeout(
                    f"Driver exited with code {exit_code} before listening on port {self.port}"
                )
            if self._clock() > deadline:
                raise DriverStartTimeout(
                    f"Timed out after {self.start_timeout:g}s waiting for driver on port {self.port}"
                )
            self._sleep(self.poll_interval)

        logger.info("Driver started successfully")
        return self._driver

    def shutdown(self) -> None:
        """Stop the driver if this supervisor started it. Safe to call repeatedly."""
        if self._shut_down:
            return
        self._shut_down = True
        driver, self._driver = self._driver, None
        if driver is None or driver.process is None:
            return

        logger.debug("Stopping driver...")
        self._stop(driver.process)
        logger.debug("Driver stopped")

    def _stop(self, process: subprocess.Popen) -> None:
        try:
            process.terminate()
            try:
                process.wait(timeout=config.DRIVER_STOP_TIMEOUT)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()
        except OSError as e:
            # The process may already be gone; nothing else to release
            logger.debug(f"Ignoring driver shutdown error: {e}")
