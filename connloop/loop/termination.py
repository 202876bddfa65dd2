# connloop/loop/termination.py
"""
Asynchronous stop requests for the connection loop.

A run-time timer (on its own thread) and SIGINT/SIGTERM (delivered to the main
thread between bytecodes, possibly while the loop holds a lock) both end up in
CancelToken.cancel(). That method only stores an attribute and writes one byte
to a socket pair, so it never blocks and never takes a lock. The loop notices
the token at the start of every cycle, inside the connect readiness wait (the
token is select()able) and during the inter-attempt delay.
"""
import logging
import select
import signal
import socket
import sys
import threading
from typing import Optional

log = logging.getLogger(__name__)

RUNTIME = "runtime"
INTERRUPT = "interrupt"

SIGNALS = tuple(s for s in (getattr(signal, "SIGINT", None), getattr(signal, "SIGTERM", None))
                if s is not None)


class CancelToken:
    def __init__(self):
        self._r, self._w = socket.socketpair()
        self._r.setblocking(False)
        self._w.setblocking(False)
        self.reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self.reason is not None

    def cancel(self, reason: str = INTERRUPT):
        if self.reason is not None:
            return
        self.reason = reason
        try:
            self._w.send(b"\0")
        except OSError:
            # buffer full or already closed; reason is set either way
            pass

    def fileno(self) -> int:
        return self._r.fileno()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Sleep up to timeout seconds; True as soon as the token is cancelled."""
        if self.cancelled:
            return True
        select.select([self._r], [], [], timeout)
        return self.cancelled

    def close(self):
        self._r.close()
        self._w.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class TerminationHandler:
    """
    Installs SIGINT/SIGTERM handlers and, for a non-zero runtime, a one-shot
    timer. Both cancel the token; the previous signal handlers come back on exit.
    """

    def __init__(self, token: CancelToken, runtime: float = 0):
        self.token = token
        self.runtime = runtime
        self._timer: Optional[threading.Timer] = None
        self._previous = {}

    def _on_signal(self, signum, frame):
        self.token.cancel(INTERRUPT)

    def _on_timer(self):
        self.token.cancel(RUNTIME)

    def install(self):
        for sig in SIGNALS:
            self._previous[sig] = signal.signal(sig, self._on_signal)
        if self.runtime:
            self._timer = threading.Timer(self.runtime, self._on_timer)
            self._timer.daemon = True
            self._timer.start()
            log.debug("Run time limited to %s seconds", self.runtime)

    def uninstall(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        for sig, previous in self._previous.items():
            signal.signal(sig, previous if previous is not None else signal.SIG_DFL)
        self._previous = {}

    def announce(self, stream=None):
        """Print why the run was cut short."""
        stream = stream or sys.stderr
        if self.token.reason == RUNTIME:
            print(f"{self.runtime:g} second timeout reached", file=stream)
        elif self.token.reason == INTERRUPT:
            print("Caught term/interrupt", file=stream)

    def __enter__(self):
        self.install()
        return self

    def __exit__(self, *exc):
        self.uninstall()
