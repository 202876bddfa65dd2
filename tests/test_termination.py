# tests/test_termination.py
import os
import signal
import sys
import time

import pytest

from connloop.loop.report import describe_outcome, format_stamp
from connloop.loop.state import ProbeStats
from connloop.loop.termination import CancelToken, TerminationHandler


def test_token_first_reason_wins():
    with CancelToken() as token:
        assert not token.cancelled
        token.cancel("runtime")
        token.cancel("interrupt")
        assert token.cancelled
        assert token.reason == "runtime"


def test_token_wait_times_out_then_wakes():
    with CancelToken() as token:
        start = time.monotonic()
        assert token.wait(0.05) is False
        assert time.monotonic() - start >= 0.04
        token.cancel()
        assert token.wait(5) is True


def test_runtime_timer_cancels_token():
    with CancelToken() as token, TerminationHandler(token, runtime=0.05):
        assert token.wait(5) is True
        assert token.reason == "runtime"


def test_signal_handler_cancels_and_restores():
    before = signal.getsignal(signal.SIGTERM)
    with CancelToken() as token:
        with TerminationHandler(token) as handler:
            assert signal.getsignal(signal.SIGTERM) == handler._on_signal
            handler._on_signal(signal.SIGTERM, None)
            assert token.reason == "interrupt"
    assert signal.getsignal(signal.SIGTERM) == before


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signal delivery")
def test_real_sigint_is_caught():
    with CancelToken() as token, TerminationHandler(token):
        os.kill(os.getpid(), signal.SIGINT)
        assert token.wait(5) is True
        assert token.reason == "interrupt"


def test_announce_messages(capsys):
    with CancelToken() as token:
        handler = TerminationHandler(token, runtime=30)
        handler.announce()
        assert capsys.readouterr().err == ""
        token.cancel("runtime")
        handler.announce()
        assert capsys.readouterr().err == "30 second timeout reached\n"

    with CancelToken() as token:
        token.cancel("interrupt")
        TerminationHandler(token).announce()
        assert capsys.readouterr().err == "Caught term/interrupt\n"


def test_stats_record():
    stats = ProbeStats()
    assert stats.record("connected") == 1
    assert stats.record("timed_out") == 2
    assert stats.snapshot() == {"tries": 2, "outcomes": {"connected": 1, "timed_out": 1}}


def test_format_stamp_has_calendar_and_raw_parts():
    stamp = format_stamp(1700000000.000123)
    calendar, raw = stamp.split(" ")
    assert raw == "(1700000000.000123)"
    assert calendar.endswith(".000123")
    assert len(calendar) == len("2023-11-14T22:13:20.000123")


def test_describe_outcome():
    ev = {"status": "connect_failed", "error": "Connection refused", "started": 1700000000.5}
    assert describe_outcome(ev).startswith("Connection failed: Connection refused [")
    assert describe_outcome(ev).endswith("(1700000000.500000)]")
    ev = {"status": "timed_out", "started": 1700000000.5}
    assert describe_outcome(ev).startswith("Connection timeout [")
