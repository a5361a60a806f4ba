from typing import NoReturn

# Peak amplitude at or below which a frame counts as silent
SILENCE_THRESHOLD = 1e-4


def clamp(value: float, low: float, high: float) -> float:
    """Limit ``value`` to the closed range ``[low, high]``."""
    return min(max(value, low), high)


def clamp_index(index: int, length: int) -> int:
    """Limit ``index`` to a valid position in a sequence of ``length`` items."""
    return int(clamp(int(index), 0, length - 1))


def assert_exhaustiveness(x: NoReturn) -> NoReturn:
    """Provide an assertion at type-check time that this function is never called."""
    raise AssertionError(f"Unhandled value: {x!r}")
