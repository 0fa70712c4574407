"""
Random Helpers Module

Small random-number helpers used throughout the evolutionary engine.
All of them draw from a numpy Generator: callers pass the Generator owned
by their Community so that a seeded run is reproducible end to end.

Functions:
    random_int:       Random integer in a closed interval
    shuffle:          In-place shuffle of a list
    stochastic_round: Round using the fractional part as probability of rounding up
"""

import math
import numpy as np

# Used only when a caller does not supply its own generator
_default_rng = np.random.default_rng()

def resolve_rng(rng: np.random.Generator | None) -> np.random.Generator:
    return _default_rng if rng is None else rng

def random_int(low: int, high: int, rng: np.random.Generator | None = None) -> int:
    """
    Return a random integer N such that low <= N <= high.

    Parameters:
        low:  smallest value that can be returned
        high: largest value that can be returned (inclusive)
        rng:  random number generator

    Returns:
        A uniformly drawn integer in [low, high]
    """
    return int(resolve_rng(rng).integers(low, high, endpoint=True))

def shuffle(items: list, rng: np.random.Generator | None = None) -> None:
    """
    Shuffle a list in place.

    Parameters:
        items: the list to shuffle
        rng:   random number generator
    """
    resolve_rng(rng).shuffle(items)

def stochastic_round(value: float, rng: np.random.Generator | None = None) -> int:
    """
    Round a value to a whole number, using its fractional part
    as the probability of rounding up.

    For example, 2.3 becomes 3 with probability 0.3 and 2 otherwise.

    Parameters:
        value: the value to round
        rng:   random number generator

    Returns:
        floor(value) or floor(value) + 1
    """
    integer_part = math.floor(value)
    fraction     = value - integer_part
    return integer_part + 1 if resolve_rng(rng).random() < fraction else integer_part
