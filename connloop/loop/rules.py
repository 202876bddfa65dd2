# connloop/loop/rules.py

def count_reached(tries: int, count: int) -> bool:
    """count == 0 means unbounded."""
    if count == 0:
        return False
    return tries >= count


def discovery_timeout(config) -> float:
    """Per-candidate timeout (seconds) for the one-off discovery connect."""
    return config.timeout_s * config.discovery_timeout_factor


def wants_delay(config, tries: int) -> bool:
    # no pause after the last attempt
    return config.delay > 0 and not count_reached(tries, config.count)
