# connloop/loop/controller.py

import logging
import time
from typing import Optional

from connloop.errors import DiscoveryError
from connloop.loop.report import describe_outcome
from connloop.loop.rules import count_reached, discovery_timeout, wants_delay
from connloop.loop.state import ProbeStats
from connloop.schemas import Endpoint, ProbeOutcome

log = logging.getLogger(__name__)


def _close(ev: ProbeOutcome):
    sock = ev.get("sock")
    if sock is not None:
        sock.close()


class LoopController:
    def __init__(self, prober, config, stats: Optional[ProbeStats] = None, cancel=None):
        self.prober = prober
        self.config = config
        self.stats = stats if stats is not None else ProbeStats()
        self.cancel = cancel
        self.target: Optional[Endpoint] = None

    @property
    def cancelled(self) -> bool:
        return self.cancel is not None and self.cancel.cancelled

    def _pause(self, seconds: float) -> bool:
        """Inter-attempt delay. Returns True if a stop request cut it short."""
        if self.cancel is None:
            time.sleep(seconds)
            return False
        return self.cancel.wait(seconds)

    def discover(self, endpoints) -> Optional[Endpoint]:
        """
        Pick the first endpoint that accepts a connection. That attempt counts
        as try number one. Returns None if a stop request arrives first.
        """
        timeout = discovery_timeout(self.config)
        last = None
        for ep in endpoints:
            if self.cancelled:
                return None
            log.debug("-> Trying family/socktype/proto %d/%d/%d (%s)",
                      ep.family, ep.socktype, ep.proto, ep.describe())
            ev = self.prober.connect_once(ep, timeout, cancel=self.cancel)
            _close(ev)
            status = ev["status"]
            if status == "connected":
                log.debug("-> connect() successful")
                log.debug("Successfully opened socket to %s", ep.describe())
                self.target = ep
                self.stats.record(status)
                return ep
            if status == "timed_out":
                log.debug("-> connect() timeout")
            else:
                log.debug("-> connect() failed: %s", ev.get("error"))
            last = ev

        if self.cancelled:
            return None
        if last is None:
            raise DiscoveryError("no endpoints to try")
        if last["status"] == "timed_out":
            reason = f"connection to {last['endpoint'].describe()} timed out"
        else:
            reason = f"{last.get('error')} ({last['endpoint'].describe()})"
        raise DiscoveryError(reason)

    def _attempt(self, target: Endpoint) -> Optional[ProbeOutcome]:
        ev = self.prober.connect_once(target, self.config.timeout_s, cancel=self.cancel)
        try:
            if self.cancelled:
                # the stop request wins over whatever this attempt produced
                return None
            status = ev["status"]
            if status == "connected":
                if self.config.verbose > 2:
                    log.info(describe_outcome(ev))
            else:
                log.warning(describe_outcome(ev))
            self.stats.record(status)
            return ev
        finally:
            _close(ev)

    def run(self, endpoints):
        target = self.discover(endpoints)
        stop_reason = "cancelled" if target is None else None

        if target is not None:
            log.debug("Starting connection loop.")
        while stop_reason is None:
            if count_reached(self.stats.tries, self.config.count):
                stop_reason = "count_reached"
                break
            if self.cancelled:
                stop_reason = "cancelled"
                break

            if self._attempt(target) is None:
                stop_reason = "cancelled"
                break

            if wants_delay(self.config, self.stats.tries) and self._pause(self.config.delay_s):
                stop_reason = "cancelled"
                break

        snap = self.stats.snapshot()
        log.debug("Loop finished (%s): %s", stop_reason, snap["outcomes"])
        return {
            "target": target.describe() if target is not None else None,
            "tries": snap["tries"],
            "outcomes": snap["outcomes"],
            "stop_reason": stop_reason,
        }
