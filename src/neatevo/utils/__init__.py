"""
Utilities Package

Random-number helpers shared by the genotype and pool packages.

Exported:
    random_int:       Random integer in a closed interval
    resolve_rng:      The given generator, or a shared default one
    shuffle:          In-place shuffle of a list
    stochastic_round: Probabilistic rounding to a whole number
    ProbabilityArray: Weighted lottery returning original indexes
"""

from neatevo.utils.helper            import random_int, resolve_rng, shuffle, stochastic_round
from neatevo.utils.probability_array import ProbabilityArray

__all__ = ['random_int',
           'resolve_rng',
           'shuffle',
           'stochastic_round',
           'ProbabilityArray']
