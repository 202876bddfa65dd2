# connloop/loop/state.py
import threading
from collections import Counter
from dataclasses import dataclass, field


@dataclass
class ProbeStats:
    tries: int = 0
    outcomes: Counter = field(default_factory=Counter)
    # only the loop thread writes; signal handlers must never take this lock
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, status: str) -> int:
        with self._lock:
            self.tries += 1
            self.outcomes[status] += 1
            return self.tries

    def snapshot(self) -> dict:
        with self._lock:
            return {"tries": self.tries, "outcomes": dict(self.outcomes)}
