import logging
from dataclasses import dataclass

LOG_FORMAT = "%(levelname)s: %(message)s"
VERBOSE_LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"

USEC = 1_000_000


@dataclass(frozen=True)
class ProbeConfig:
    host: str
    port: str = "80"
    delay: int = 500000      # us between attempts
    timeout: int = 500000    # us per attempt
    runtime: int = 0         # seconds, 0 = run until count/interrupt
    count: int = 0           # total attempts, 0 = unbounded
    verbose: int = 0

    # discovery may wait longer per candidate since it only runs once
    discovery_timeout_factor: float = 2.0

    def __post_init__(self):
        if not self.host:
            raise ValueError("destination host is required")
        for name in ("delay", "timeout", "runtime", "count", "verbose"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.discovery_timeout_factor <= 0:
            raise ValueError("discovery_timeout_factor must be positive")

    @property
    def delay_s(self) -> float:
        return self.delay / USEC

    @property
    def timeout_s(self) -> float:
        return self.timeout / USEC


def setup_logging(verbose: int = 0):
    level = logging.DEBUG if verbose > 0 else logging.WARNING
    logging.basicConfig(
        level=level,
        format=VERBOSE_LOG_FORMAT if verbose > 0 else LOG_FORMAT,
    )
    logging.getLogger("connloop").setLevel(level)
