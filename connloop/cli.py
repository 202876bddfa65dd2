# connloop/cli.py
# Usage examples:
#   connloop 192.0.2.10
#   connloop -p 443 -d 100000 -t 250000 -c 50 lb.example.net
#   python3 -m connloop -T 60 -v db01 -p postgresql

import argparse
import logging
import sys

from connloop.config import ProbeConfig, setup_logging
from connloop.errors import DiscoveryError, ResolutionError
from connloop.loop.controller import LoopController
from connloop.loop.state import ProbeStats
from connloop.loop.termination import CancelToken, TerminationHandler
from connloop.prober.tcp import TcpProber
from connloop.resolver import resolve_cancellable

log = logging.getLogger(__name__)


def _non_negative(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {raw!r}")
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {raw!r}")
    return value


def build_argparser():
    ap = argparse.ArgumentParser(prog="connloop", description="IPv4/6 connection tester")
    ap.add_argument("destination", help="Host name or address to connect to")
    ap.add_argument("-p", "--port", default="80", help="Port number or name to connect to. Default: 80")
    ap.add_argument("-d", "--delay", type=_non_negative, default=500000,
                    help="Delay between connections in us. Default: 500000")
    ap.add_argument("-t", "--timeout", type=_non_negative, default=500000,
                    help="Connection timeout in us. Default: 500000")
    ap.add_argument("-T", "--runtime", type=_non_negative, default=0,
                    help="Running time in seconds. Default: 0=inf")
    ap.add_argument("-c", "--count", type=_non_negative, default=0,
                    help="Connection count. Default: 0=inf")
    ap.add_argument("-v", "--verbose", action="count", default=0,
                    help="Verbose operation, repeat for more detail")
    return ap


def config_from_args(args) -> ProbeConfig:
    return ProbeConfig(
        host=args.destination,
        port=args.port,
        delay=args.delay,
        timeout=args.timeout,
        runtime=args.runtime,
        count=args.count,
        verbose=args.verbose,
    )


def main(argv=None) -> int:
    ap = build_argparser()
    args = ap.parse_args(argv)
    try:
        config = config_from_args(args)
    except ValueError as e:
        ap.error(str(e))

    setup_logging(config.verbose)
    stats = ProbeStats()

    with CancelToken() as token, TerminationHandler(token, runtime=config.runtime) as handler:
        endpoints = None
        try:
            endpoints = resolve_cancellable(config.host, config.port, token)
        except ResolutionError as e:
            # a lookup that fails after a stop request still ends as a stop
            if not token.cancelled:
                log.error("getaddrinfo: %s", e)
                return 1

        if endpoints is not None:
            ctrl = LoopController(TcpProber(), config, stats=stats, cancel=token)
            try:
                ctrl.run(endpoints)
            except DiscoveryError as e:
                log.error("connect(): %s", e)
                return 1

        handler.announce()

    print(f"Tried {stats.tries} connections")
    return 0


if __name__ == "__main__":
    sys.exit(main())
