"""
NEAT Species Module

This module implements the Species class for the NEAT algorithm.
A species represents a cluster of genetically similar genomes
that compete primarily within their own niche.

Classes:
    Species: A group of similar genomes, with fitness sharing and spawn accounting

Functions:
    sh: The fitness sharing function
"""

import logging
import numpy as np
from typing import TYPE_CHECKING

from neatevo.utils import stochastic_round
if TYPE_CHECKING:
    from neatevo.genotype import Genome
    from neatevo.run      import Config

logger = logging.getLogger(__name__)

def sh(compatibility_distance: float, threshold: float) -> int:
    """
    Sharing function of the NEAT paper: 1 if the distance is within the threshold, else 0.
    """
    return 0 if compatibility_distance > threshold else 1

class Species:
    """
    A species of genomes in NEAT.

    Each species keeps a leader, the genome new offspring are compared with
    during speciation. Members share their fitness with the members they are
    close to, so that a large species cannot take over the population only by
    being large.

    Every generation the Community asks each species how many genomes it
    spawns for the next generation (spawn_count), how many of its best genomes
    pass on unchanged (elite_size), and how its offspring are produced
    (asexual_reproduction_count clones, sexual_reproduction_count crossovers
    among the fittest_parents_cutoff best members).

    Public Attributes:
        id:                         Unique species identifier
        leader:                     Genome used for distance calculations during speciation
        genomes:                    Member genomes (sorted by descending fitness after sort_genomes())
        gens_stagnated:             Generations since the best fitness last improved
        best_fitness:               Best fitness ever reached by a member
        mean_adjusted_fitness:      Mean adjusted fitness of the members
        spawn_count:                elite_size + offspring_count
        spawn_count_real:           The unrounded spawn count
        elite_size:                 Number of members passed unchanged to the next generation
        offspring_count:            Number of offspring this species produces
        asexual_reproduction_count: Offspring produced from a single parent
        sexual_reproduction_count:  Offspring produced from two distinct parents
        fittest_parents_cutoff:     Number of the fittest members eligible for crossover

    Public Methods:
        sort_genomes():                     Sort members by descending fitness
        compute_adjusted_fitnesses(config): Apply fitness sharing
        compute_spawn_count(...):           Share of the next generation
        compute_offspring_stats(...):       Split offspring into asexual and sexual
        update_stagnation():                Track improvement of the best fitness
        is_stagnant(max_stagnation):        Whether the species stopped improving
    """

    def __init__(self, species_id: int, leader: 'Genome'):
        """
        Create a species whose only member is its leader.

        Parameters:
            species_id: unique species identifier
            leader:     the first genome of the species
        """
        self.id     : int            = species_id
        self.leader : 'Genome'       = leader
        self.genomes: list['Genome'] = [leader]

        self.gens_stagnated: int   = 0
        self.best_fitness  : float = -np.inf

        self.mean_adjusted_fitness     : float = 0.0
        self.spawn_count               : int   = 0
        self.spawn_count_real          : float = 0.0
        self.elite_size                : int   = 0
        self.offspring_count           : int   = 0
        self.asexual_reproduction_count: int   = 0
        self.sexual_reproduction_count : int   = 0
        self.fittest_parents_cutoff    : int   = 0

    def sort_genomes(self) -> None:
        """
        Sort members by descending raw fitness. Equal fitnesses keep their order.
        """
        self.genomes.sort(key=lambda genome: genome.fitness, reverse=True)

    def compute_adjusted_fitnesses(self, config: 'Config') -> None:
        """
        Set each member's adjusted fitness to its raw fitness divided by the
        number of members within 'sh_threshold' of it (itself included), and
        the species' mean adjusted fitness.
        """
        if not self.genomes:
            self.mean_adjusted_fitness = 0.0
            return

        total = 0.0
        for mom in self.genomes:
            sharing = sum(sh(mom.compatibility_distance(dad, config), config.sh_threshold) for dad in self.genomes)

            if sharing <= 0:
                logger.warning("Genome %d of species %d shares its fitness with no one", mom.id, self.id)
                sharing = 1

            mom.adjusted_fitness = mom.fitness / sharing
            total += mom.adjusted_fitness

        self.mean_adjusted_fitness = total / len(self.genomes)

    def compute_spawn_count(self,
                            total_mean_fitness: float,
                            population_size   : int,
                            species_count     : int,
                            rng               : np.random.Generator) -> int:
        """
        Compute the share of the next generation spawned by this species,
        proportional to its mean adjusted fitness. A species whose mean is not
        positive gets no share. When the total is zero every species gets an
        equal share. The real value is rounded stochastically.

        Parameters:
            total_mean_fitness: sum of the positive mean adjusted fitnesses
            population_size:    number of genomes in a generation
            species_count:      number of species
            rng:                random number generator

        Returns:
            The rounded spawn count
        """
        if total_mean_fitness == 0:
            self.spawn_count_real = population_size / species_count
        else:
            self.spawn_count_real = max(0.0, self.mean_adjusted_fitness) / total_mean_fitness * population_size

        self.spawn_count = stochastic_round(self.spawn_count_real, rng)
        return self.spawn_count

    def compute_offspring_stats(self,
                                asexual_proportion: float,
                                cutoff_proportion : float,
                                rng               : np.random.Generator | None = None) -> None:
        """
        Split 'offspring_count' into asexual and sexual reproductions, and
        decide how many of the fittest members may be crossed over.

        The cutoff is at least 2 (two distinct parents) and at most the number
        of members. A species with a single member cannot cross over, so all
        its offspring are produced asexually.

        Parameters:
            asexual_proportion: fraction of offspring produced asexually
            cutoff_proportion:  fraction of members eligible for crossover
            rng:                random number generator
        """
        if self.offspring_count <= 0:
            self.asexual_reproduction_count = 0
            self.sexual_reproduction_count  = 0
            self.fittest_parents_cutoff     = 0
            return

        self.asexual_reproduction_count = stochastic_round(self.offspring_count * asexual_proportion, rng)
        self.sexual_reproduction_count  = self.offspring_count - self.asexual_reproduction_count

        cutoff = stochastic_round(len(self.genomes) * cutoff_proportion, rng)
        self.fittest_parents_cutoff = min(max(2, cutoff), len(self.genomes))

        if self.fittest_parents_cutoff == 1:
            self.asexual_reproduction_count += self.sexual_reproduction_count
            self.sexual_reproduction_count   = 0

    def reset_spawn(self) -> None:
        """
        Clear the spawn accounting of a species that spawns nothing.
        """
        self.elite_size                 = 0
        self.offspring_count            = 0
        self.asexual_reproduction_count = 0
        self.sexual_reproduction_count  = 0
        self.fittest_parents_cutoff     = 0

    def update_stagnation(self) -> None:
        """
        Must be called after sort_genomes(): compare the champion with the best fitness so far.
        """
        if not self.genomes:
            return

        champion_fitness = self.genomes[0].fitness
        if champion_fitness > self.best_fitness:
            self.best_fitness   = champion_fitness
            self.gens_stagnated = 0
        else:
            self.gens_stagnated += 1

    def is_stagnant(self, max_stagnation: int) -> bool:
        return self.gens_stagnated > max_stagnation

    def __repr__(self):
        return f"Species(id={self.id}, size={len(self.genomes)}, leader={self.leader.id})"
