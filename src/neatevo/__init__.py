"""
NEAT (NeuroEvolution of Augmenting Topologies) - A Python implementation.

This package evolves the topology and weights of small neural networks with
a genetic algorithm: genomes with historical markings, speciation with
fitness sharing, crossover of aligned genes and structural mutations.

Main components:
- genotype: Genetic encoding (genomes, genes, innovation registry, mutations)
- phenotype: Network expression (activation, output formulas)
- pool: Species, speciation strategies and the Community (epoch)
- run: Configuration and the Trial driver
- activations: The steepened sigmoid
- utils: Stochastic rounding and weighted lotteries

Example:
    >>> from neatevo import Config, Trial
    >>> config = Config("config.ini")
    >>> class MyTrial(Trial):
    ...     def _evaluate_fitness(self, network):
    ...         # Implement fitness evaluation
    ...         pass
    >>> trial = MyTrial(config, input_count=2, output_count=1, seed=42)
    >>> trial.run()
"""

__version__ = "0.1.0"

# Import main classes for convenient access
from neatevo.run.config        import Config
from neatevo.run.trial         import Trial
from neatevo.genotype.genome   import Genome
from neatevo.genotype          import GenomeMutator, InnovationRegistry, LinkGene, NeuronGene, NeuronType
from neatevo.phenotype         import NeuralNetwork, FormulaNetwork
from neatevo.pool              import Community, Species, SpeciationAlgorithm, UncannyValleySpeciationAlgorithm

__all__ = [
    "Config",
    "Trial",
    "Genome",
    "GenomeMutator",
    "InnovationRegistry",
    "LinkGene",
    "NeuronGene",
    "NeuronType",
    "NeuralNetwork",
    "FormulaNetwork",
    "Community",
    "Species",
    "SpeciationAlgorithm",
    "UncannyValleySpeciationAlgorithm",
]
