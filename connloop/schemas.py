# connloop/schemas.py
import socket
from dataclasses import dataclass
from typing import Literal, TypedDict, Optional

OutcomeType = Literal["connected", "connect_failed", "timed_out", "attempt_error"]

FAMILY_NAMES = {socket.AF_INET: "IPv4", socket.AF_INET6: "IPv6"}


@dataclass(frozen=True)
class Endpoint:
    family: int
    socktype: int
    proto: int
    sockaddr: tuple

    @property
    def family_name(self) -> str:
        return FAMILY_NAMES.get(self.family, str(self.family))

    def describe(self) -> str:
        """Numeric host:port, IPv6 hosts in brackets."""
        try:
            host, port = socket.getnameinfo(
                self.sockaddr, socket.NI_NUMERICHOST | socket.NI_NUMERICSERV
            )
        except OSError:
            host, port = self.sockaddr[0], str(self.sockaddr[1])
        if self.family == socket.AF_INET6:
            return f"[{host}]:{port}"
        return f"{host}:{port}"


class ProbeOutcome(TypedDict, total=False):
    status: OutcomeType
    errno: Optional[int]
    error: Optional[str]
    started: float                 # epoch seconds, right after connect() was issued
    endpoint: Endpoint
    sock: Optional[socket.socket]  # caller closes it
