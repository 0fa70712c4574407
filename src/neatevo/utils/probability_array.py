"""
Probability Array Module

Classes:
    ProbabilityArray: Weighted lottery over the positions of a list
"""

import logging
import numpy as np

logger = logging.getLogger(__name__)

class ProbabilityArray:
    """
    A weighted lottery over the positions 0..n-1 of some list.

    The weights are normalized so that they sum to one. When every weight is
    zero (or they sum to practically zero) all remaining entries become equally
    likely. Entries can be withdrawn from the lottery; selections always report
    the position in the ORIGINAL list, so callers can index their own data.

    Public Methods:
        randomly_select(): Draw one original index according to the weights
        remove(index):     Withdraw an original index from the lottery
        __len__():         Number of entries still in the lottery
    """

    _EPSILON = 1e-6

    def __init__(self, weights: list[float], rng: np.random.Generator):
        """
        Parameters:
            weights: non-negative weight for each position
            rng:     random number generator
        """
        assert len(weights) > 0, "cannot build a ProbabilityArray from no weights"

        self._rng    : np.random.Generator = rng
        self._probs  : list[float]         = [float(w) for w in weights]
        self._indexes: list[int]           = list(range(len(weights)))
        self._normalize()

    def __len__(self) -> int:
        return len(self._probs)

    def __contains__(self, index: int) -> bool:
        return index in self._indexes

    def remove(self, index: int) -> None:
        """
        Withdraw an entry, identified by its index in the original list.

        Parameters:
            index: original index of the entry to withdraw
        """
        position = self._indexes.index(index)
        del self._probs[position]
        del self._indexes[position]
        if self._probs:
            self._normalize()

    def randomly_select(self) -> int:
        """
        Draw an entry according to the weights.

        Returns:
            The original index of the selected entry
        """
        assert len(self._probs) > 0, "tried to pick from an empty ProbabilityArray"

        threshold = self._rng.random()
        acc = 0.0
        for prob, index in zip(self._probs, self._indexes):
            acc += prob
            if acc > threshold:
                return index

        # Floating point shortfall: fall back on the last entry with any weight
        for prob, index in zip(reversed(self._probs), reversed(self._indexes)):
            if prob != 0.0:
                return index

        logger.warning("Found a probability array filled with zero probabilities")
        return self._indexes[0]

    def _normalize(self) -> None:
        total = sum(self._probs)

        if total <= self._EPSILON:
            p = 1.0 / len(self._probs)
            self._probs = [p] * len(self._probs)
            return

        if abs(1.0 - total) < self._EPSILON:
            return

        self._probs = [p / total for p in self._probs]
