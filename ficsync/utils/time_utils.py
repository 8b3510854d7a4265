import time


def now_millis() -> int:
    """Current wall-clock time as epoch milliseconds"""
    return int(time.time() * 1000)


def days_ago_millis(days: float) -> int:
    return now_millis() - int(days * 24 * 3600 * 1000)
