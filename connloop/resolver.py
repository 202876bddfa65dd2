# connloop/resolver.py
import logging
import socket
import threading

from connloop.errors import ResolutionError
from connloop.schemas import Endpoint

log = logging.getLogger(__name__)

TCP_FAMILIES = (socket.AF_INET, socket.AF_INET6)

# answers AI_ADDRCONFIG produces on loopback-only hosts; anything else is final
ADDRCONFIG_MISSES = {socket.EAI_NONAME, getattr(socket, "EAI_ADDRFAMILY", socket.EAI_NONAME)}

POLL_INTERVAL = 0.05


def _lookup(host: str, port: str, flags: int):
    return socket.getaddrinfo(host, port, socket.AF_UNSPEC, socket.SOCK_STREAM,
                              socket.IPPROTO_TCP, flags)


def resolve(host: str, port: str) -> list[Endpoint]:
    """
    Resolve host/port into TCP endpoints, in resolver order.

    AI_ADDRCONFIG keeps families the host has no address for out of the list.
    Hosts with nothing but loopback configured get no answer at all with that
    flag, so a "no such name" answer is retried once without it.
    """
    log.debug("Destination address set to %s", host)
    try:
        try:
            infos = _lookup(host, port, socket.AI_ADDRCONFIG)
        except socket.gaierror as e:
            if e.errno not in ADDRCONFIG_MISSES:
                raise
            log.debug("getaddrinfo with AI_ADDRCONFIG failed (%s), retrying without it", e)
            infos = _lookup(host, port, 0)
    except socket.gaierror as e:
        raise ResolutionError(e.strerror or str(e)) from e

    endpoints = [
        Endpoint(family, socktype, proto, sockaddr)
        for family, socktype, proto, _, sockaddr in infos
        if family in TCP_FAMILIES
    ]
    if not endpoints:
        raise ResolutionError(f"no TCP endpoints found for {host}:{port}")
    return endpoints


def resolve_cancellable(host: str, port: str, cancel) -> list[Endpoint] | None:
    """
    resolve() on a daemon thread so a stop request does not have to wait for
    getaddrinfo. Returns None when cancel fires first; the lookup thread is
    left to finish on its own.
    """
    result = {}

    def lookup():
        try:
            result["endpoints"] = resolve(host, port)
        except Exception as e:
            result["error"] = e

    worker = threading.Thread(target=lookup, name="connloop-resolver", daemon=True)
    worker.start()
    while worker.is_alive():
        if cancel.wait(POLL_INTERVAL):
            return None
    if cancel.cancelled:
        return None
    if "error" in result:
        raise result["error"]
    return result["endpoints"]
