"""Fire-and-forget reload trigger for the site's dev server."""

from __future__ import annotations

import logging
import subprocess
import threading
from pathlib import Path

logger = logging.getLogger(__name__)


class RestartSignal:
    """Stops the running dev server and starts a fresh one after a short delay.

    The delay lets the HTTP response flush before the render process goes away.
    """

    def __init__(self, kill_command: list[str], start_command: list[str], cwd: Path, delay: float = 0.3) -> None:
        self.kill_command = kill_command
        self.start_command = start_command
        self.cwd = cwd
        self.delay = delay

    def notify(self) -> threading.Timer:
        timer = threading.Timer(self.delay, self._restart)
        timer.daemon = True
        timer.start()
        return timer

    def _restart(self) -> None:
        if self.kill_command:
            try:
                result = subprocess.run(self.kill_command, cwd=str(self.cwd), capture_output=True, text=True)
                if result.returncode != 0:
                    logger.info("No running dev server to stop")
            except FileNotFoundError:
                logger.warning("Kill command not found: %s", self.kill_command[0])

        if not self.start_command:
            return
        try:
            subprocess.Popen(
                self.start_command,
                cwd=str(self.cwd),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except Exception as exc:
            logger.error("Failed to restart dev server: %s", exc)
            return
        logger.info("Dev server restarted")


class NullRestartSignal:
    """Used when restarts are disabled; records how often it was asked."""

    def __init__(self) -> None:
        self.count = 0

    def notify(self) -> None:
        self.count += 1
        logger.debug("Restart requested but disabled")


def restart_signal_for(settings) -> RestartSignal | NullRestartSignal:
    if not settings.restart_enabled:
        return NullRestartSignal()
    return RestartSignal(settings.kill_command, settings.start_command, settings.root, settings.restart_delay)
