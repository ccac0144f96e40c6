"""Progress spinner running on its own thread, stopped through two events."""

import logging
import threading

from rich.console import Console

logger = logging.getLogger(__name__)


class Spinner:
    """A cancellable terminal spinner.

    The spinner thread shares nothing with the caller except two events:
    ``stop`` is set by the caller, ``done`` is set by the thread once the
    spinner line has been cleared.  ``stop()`` blocks on ``done`` so no
    spinner frame can interleave with output printed afterwards.

    Use as a context manager so the spinner is stopped on every exit path::

        with Spinner(console):
            orchestrator.run(...)
    """

    def __init__(
        self, console: Console, message: str = "Working", spinner: str = "line"
    ) -> None:
        self.console = console
        self.message = message
        self.spinner = spinner
        self._stop = threading.Event()
        self._done = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run, name="lbl-spinner", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Request the spinner to stop and wait until it has."""
        if self._thread is None:
            return
        self._stop.set()
        self._done.wait()
        self._thread.join()
        self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and not self._done.is_set()

    def _run(self) -> None:
        try:
            with self.console.status(self.message, spinner=self.spinner):
                self._stop.wait()
        finally:
            self._done.set()

    def __enter__(self) -> "Spinner":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
