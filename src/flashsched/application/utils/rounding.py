"""Rounding helpers shared by the scheduler."""

import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round with ties going towards positive infinity.

    Python's built-in round() rounds ties to even (round(16.5) == 16); the
    scheduling model expects 16.5 -> 17 so results agree across clients.
    """
    scale = 10**ndigits
    return math.floor(value * scale + 0.5) / scale


def round_half_up_int(value: float) -> int:
    """round_half_up() to the nearest integer, returned as an int."""
    return math.floor(value + 0.5)
