# connloop/prober/tcp.py
import errno
import os
import select
import socket
import time

from connloop.prober.base import Prober
from connloop.schemas import Endpoint, ProbeOutcome

# connect_ex() results meaning "handshake under way"
PENDING = {errno.EINPROGRESS, errno.EWOULDBLOCK, errno.EALREADY,
           getattr(errno, "WSAEWOULDBLOCK", errno.EWOULDBLOCK)}


def _outcome(endpoint, status, started, sock=None, code=None, error=None) -> ProbeOutcome:
    if code and error is None:
        error = os.strerror(code)
    return {
        "status": status,
        "errno": code,
        "error": error,
        "started": started,
        "endpoint": endpoint,
        "sock": sock,
    }


class TcpProber(Prober):
    """
    Non-blocking connect() followed by a select() for writability, which is how
    the kernel signals that the handshake resolved one way or the other.
    A fresh socket is used for every attempt.
    """

    def connect_once(self, endpoint: Endpoint, timeout: float, cancel=None) -> ProbeOutcome:
        try:
            sock = socket.socket(endpoint.family, endpoint.socktype, endpoint.proto)
        except OSError as e:
            return _outcome(endpoint, "connect_failed", time.time(),
                            code=e.errno, error=f"socket(): {e.strerror or e}")

        sock.setblocking(False)
        rc = sock.connect_ex(endpoint.sockaddr)
        started = time.time()  # approx SYN timestamp

        if rc == 0:
            return _outcome(endpoint, "connected", started, sock=sock)
        if rc not in PENDING:
            return _outcome(endpoint, "connect_failed", started, sock=sock, code=rc)

        watch = [cancel] if cancel is not None else []
        try:
            readable, writable, failed = select.select(watch, [sock], [sock], timeout)
        except (OSError, ValueError) as e:
            code = getattr(e, "errno", None)
            return _outcome(endpoint, "attempt_error", started, sock=sock,
                            code=code, error=f"select() error: {getattr(e, 'strerror', None) or e}")

        if readable:
            return _outcome(endpoint, "attempt_error", started, sock=sock,
                            code=errno.EINTR, error="wait interrupted by termination request")
        if not writable and not failed:
            return _outcome(endpoint, "timed_out", started, sock=sock)

        try:
            err = sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
        except OSError as e:
            return _outcome(endpoint, "attempt_error", started, sock=sock,
                            code=e.errno, error=f"getsockopt() error: {e.strerror or e}")
        if err:
            return _outcome(endpoint, "connect_failed", started, sock=sock, code=err)
        return _outcome(endpoint, "connected", started, sock=sock)
