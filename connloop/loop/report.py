# connloop/loop/report.py
import time

from connloop.schemas import ProbeOutcome


def format_stamp(ts: float) -> str:
    """
    Local calendar time plus raw epoch time, both with microseconds:
    2024-05-01T10:20:30.000123 (1714558830.000123)
    """
    sec = int(ts)
    usec = int(round((ts - sec) * 1_000_000))
    if usec >= 1_000_000:
        sec, usec = sec + 1, usec - 1_000_000
    calendar = time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime(sec))
    return f"{calendar}.{usec:06d} ({sec}.{usec:06d})"


def describe_outcome(ev: ProbeOutcome) -> str:
    stamp = format_stamp(ev["started"])
    status = ev["status"]
    if status == "connected":
        return f"Connection successful [{stamp}]"
    if status == "connect_failed":
        return f"Connection failed: {ev.get('error')} [{stamp}]"
    if status == "timed_out":
        return f"Connection timeout [{stamp}]"
    return f"readiness wait failed: {ev.get('error')} [{stamp}]"
