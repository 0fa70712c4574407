"""
NEAT Pool Package

This package contains the classes that manage a population of genomes and
its species in the NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

The pool package coordinates the evolutionary process at the population level,
organizing genomes into species based on genetic similarity and managing
reproduction across generations.

Modules:
    species:              Species representation, fitness sharing and spawn accounting
    speciation_algorithm: Abstract speciation strategy
    uncanny_valley:       The "uncanny valley" speciation strategy
    community:            Top-level population management and the epoch

Exported Classes:
    Species:                          A cluster of genetically similar genomes
    SpeciationAlgorithm:              Strategy interface for grouping genomes into species
    UncannyValleySpeciationAlgorithm: Round-robin start, leader-based integration
    Community:                        Top-level evolutionary coordinator
"""

from neatevo.pool.species              import Species, sh
from neatevo.pool.speciation_algorithm import SpeciationAlgorithm
from neatevo.pool.uncanny_valley       import UncannyValleySpeciationAlgorithm
from neatevo.pool.community            import Community

__all__ = [
    'Species',
    'sh',
    'SpeciationAlgorithm',
    'UncannyValleySpeciationAlgorithm',
    'Community',
]
