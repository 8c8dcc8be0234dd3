"""
Deterministic random sources and anchors for testing.
"""
from datetime import datetime, timezone


# Fixed anchor: Wednesday 2024-05-15 14:30 UTC
FIXED_NOW = datetime(2024, 5, 15, 14, 30, tzinfo=timezone.utc)


def constant_source(value: float = 0.5):
    """Random source that always returns `value` (0.5 means zero noise)."""
    return lambda: value


def sequence_source(values: list[float]):
    """Random source that cycles through `values`."""
    state = {"i": 0}

    def draw() -> float:
        value = values[state["i"] % len(values)]
        state["i"] += 1
        return value

    return draw
