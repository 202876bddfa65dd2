# connloop/prober/fake.py
import errno
import os
import time
from collections import deque

from connloop.prober.base import Prober
from connloop.schemas import Endpoint, ProbeOutcome

DEFAULT_ERRNO = {
    "connect_failed": errno.ECONNREFUSED,
    "attempt_error": errno.EINTR,
}


class FakeProber(Prober):
    """
    script: dict[sockaddr] -> sequence of statuses (or partial ProbeOutcome dicts)
    to return on each call for that endpoint.
    Once a script runs dry, `default` is returned. Every call is kept in
    self.calls as (endpoint, timeout).
    """
    def __init__(self, script=None, default="timed_out"):
        self.default = default
        self.calls = []
        self.script = {}
        if script:
            for k, v in script.items():
                self.script[k] = deque(v)

    def connect_once(self, endpoint: Endpoint, timeout: float, cancel=None) -> ProbeOutcome:
        self.calls.append((endpoint, timeout))
        dq = self.script.get(endpoint.sockaddr)
        step = dq.popleft() if dq else self.default
        if isinstance(step, str):
            step = {"status": step}

        status = step["status"]
        code = step.get("errno", DEFAULT_ERRNO.get(status))
        return {
            "status": status,
            "errno": code,
            "error": step.get("error", os.strerror(code) if code else None),
            "started": step.get("started", time.time()),
            "endpoint": endpoint,
            "sock": None,
        }
