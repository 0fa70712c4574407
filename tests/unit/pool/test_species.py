"""
Unit tests for Species and the sharing function.
"""

import numpy as np
import pytest

from neatevo.pool import Species, sh


@pytest.fixture
def species_of(make_genome):
    """Build a species from a list of fitnesses; every member has the same single link."""
    def _species_of(*fitnesses):
        genomes = []
        for fitness in fitnesses:
            genome = make_genome([(1, 3, 1.0)])
            genome.fitness = fitness
            genomes.append(genome)

        species = Species(1, genomes[0])
        species.genomes = genomes
        return species

    return _species_of


class TestSharingFunction:

    def test_within_threshold(self):
        assert sh(0.5, 3.0) == 1
        assert sh(3.0, 3.0) == 1

    def test_beyond_threshold(self):
        assert sh(3.01, 3.0) == 0


# ============================================================================
# Test fitness bookkeeping
# ============================================================================

class TestFitness:

    def test_new_species(self, make_genome):
        leader  = make_genome([(1, 3, 1.0)])
        species = Species(7, leader)

        assert species.genomes == [leader]
        assert species.leader is leader
        assert species.best_fitness == -np.inf
        assert repr(species) == f"Species(id=7, size=1, leader={leader.id})"

    def test_sort_genomes(self, species_of):
        species = species_of(1.0, 3.0, 2.0, 3.0)
        first_best = species.genomes[1]

        species.sort_genomes()

        assert [g.fitness for g in species.genomes] == [3.0, 3.0, 2.0, 1.0]
        assert species.genomes[0] is first_best

    def test_adjusted_fitness_of_identical_genomes(self, species_of, config):
        species = species_of(4.0, 2.0)
        species.compute_adjusted_fitnesses(config)

        assert [g.adjusted_fitness for g in species.genomes] == pytest.approx([2.0, 1.0])
        assert species.mean_adjusted_fitness == pytest.approx(1.5)

    def test_adjusted_fitness_of_distant_genomes(self, make_genome, config):
        config.sh_threshold = 0.1
        a = make_genome([(1, 3, 1.0)])
        b = make_genome([(1, 3, 1.0), (2, 3, 1.0)])
        a.fitness, b.fitness = 4.0, 2.0

        species = Species(1, a)
        species.genomes = [a, b]
        species.compute_adjusted_fitnesses(config)

        assert [a.adjusted_fitness, b.adjusted_fitness] == pytest.approx([4.0, 2.0])

    def test_stagnation(self, species_of):
        species = species_of(1.0)

        species.update_stagnation()
        assert (species.best_fitness, species.gens_stagnated) == (1.0, 0)

        species.update_stagnation()
        species.update_stagnation()
        assert species.gens_stagnated == 2
        assert species.is_stagnant(1)
        assert not species.is_stagnant(2)

        species.genomes[0].fitness = 5.0
        species.update_stagnation()
        assert (species.best_fitness, species.gens_stagnated) == (5.0, 0)


# ============================================================================
# Test spawn accounting
# ============================================================================

class TestSpawnCount:

    def test_proportional_share(self, species_of, community):
        species = species_of(1.0)
        species.mean_adjusted_fitness = 2.0

        assert species.compute_spawn_count(4.0, 10, 3, community.rng) == 5
        assert species.spawn_count_real == 5.0

    def test_equal_split_when_no_fitness(self, species_of, community):
        species = species_of(0.0)

        count = species.compute_spawn_count(0.0, 10, 4, community.rng)

        assert species.spawn_count_real == 2.5
        assert count in (2, 3)

    def test_negative_fitness_spawns_nothing(self, species_of, community):
        species = species_of(-1.0)
        species.mean_adjusted_fitness = -0.5

        assert species.compute_spawn_count(2.0, 10, 2, community.rng) == 0
        assert species.spawn_count_real == 0.0


class TestOffspringStats:

    def test_all_sexual(self, species_of, community):
        species = species_of(4.0, 3.0, 2.0, 1.0)
        species.offspring_count = 4

        species.compute_offspring_stats(0.0, 0.0, community.rng)

        assert (species.asexual_reproduction_count, species.sexual_reproduction_count) == (0, 4)
        assert species.fittest_parents_cutoff == 2

    def test_all_asexual(self, species_of, community):
        species = species_of(4.0, 3.0, 2.0, 1.0)
        species.offspring_count = 4

        species.compute_offspring_stats(1.0, 1.0, community.rng)

        assert (species.asexual_reproduction_count, species.sexual_reproduction_count) == (4, 0)
        assert species.fittest_parents_cutoff == 4

    def test_single_member_cannot_cross_over(self, species_of, community):
        species = species_of(4.0)
        species.offspring_count = 4

        species.compute_offspring_stats(0.5, 1.0, community.rng)

        assert (species.asexual_reproduction_count, species.sexual_reproduction_count) == (4, 0)
        assert species.fittest_parents_cutoff == 1

    def test_no_offspring(self, species_of, community):
        species = species_of(4.0, 3.0)
        species.offspring_count = 0

        species.compute_offspring_stats(0.5, 0.5, community.rng)

        assert (species.asexual_reproduction_count,
                species.sexual_reproduction_count,
                species.fittest_parents_cutoff) == (0, 0, 0)

    def test_reset_spawn(self, species_of, community):
        species = species_of(4.0, 3.0)
        species.elite_size, species.offspring_count = 1, 3
        species.compute_offspring_stats(0.5, 0.5, community.rng)

        species.reset_spawn()

        assert (species.elite_size, species.offspring_count,
                species.asexual_reproduction_count, species.sexual_reproduction_count) == (0, 0, 0, 0)
