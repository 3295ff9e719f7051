"""Global deadline for a whole run."""

import logging
import sys
from os import _exit
from threading import Timer

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0
EXIT_TIMEOUT = 2


class Watchdog:
    """Terminates the process once the deadline passes, whatever it is doing.

    In-flight requests are abandoned, not cancelled. Use as a context manager
    so that a run finishing in time cancels the timer.
    """

    def __init__(
        self, deadline: float = DEFAULT_TIMEOUT, exit_code: int = EXIT_TIMEOUT
    ):
        self.deadline = deadline
        self.exit_code = exit_code
        self._timer = Timer(deadline, self._expire)
        self._timer.daemon = True

    def _expire(self) -> None:
        logger.error(f"Timed out after {self.deadline:g} seconds")
        sys.stdout.flush()
        sys.stderr.flush()
        _exit(self.exit_code)

    def start(self) -> None:
        self._timer.start()

    def cancel(self) -> None:
        self._timer.cancel()

    def __enter__(self) -> "Watchdog":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.cancel()
