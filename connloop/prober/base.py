# connloop/prober/base.py
from abc import ABC, abstractmethod

from connloop.schemas import Endpoint, ProbeOutcome


class Prober(ABC):
    @abstractmethod
    def connect_once(self, endpoint: Endpoint, timeout: float, cancel=None) -> ProbeOutcome:
        """Make exactly one connection attempt to endpoint and return a ProbeOutcome dict.

        timeout is in seconds. cancel, when given, is a CancelToken whose
        firing ends the wait early with an attempt_error outcome.
        """
        raise NotImplementedError
