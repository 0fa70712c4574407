"""
Unit tests for the Community class.
"""

import logging
import numpy as np
import pytest

from neatevo.pool import Community, Species, UncannyValleySpeciationAlgorithm


# ============================================================================
# Test construction and initialization
# ============================================================================

class TestConstruction:

    @pytest.mark.parametrize("population_size", [0, -3, 2.5])
    def test_invalid_population_size(self, config, population_size):
        config.initial_genome_count = population_size
        with pytest.raises(ValueError):
            Community(config, 2, 1)

    def test_defaults(self, community, config):
        assert community.population_size == 12
        assert isinstance(community.speciation_algorithm, UncannyValleySpeciationAlgorithm)
        assert community.generation_count == 0
        assert community.genomes == []

    def test_ids_are_monotonic(self, community):
        assert [community.allocate_genome_id() for _ in range(3)] == [1, 2, 3]
        assert [community.allocate_species_id() for _ in range(2)] == [1, 2]

    def test_show_log_off_silences_info(self, config):
        logger = logging.getLogger("neatevo")
        level  = logger.level
        config.show_log = 0
        try:
            Community(config, 2, 1)
            assert logger.level == logging.ERROR
        finally:
            logger.setLevel(level)


class TestInit:

    def test_population(self, community):
        community.init()

        assert len(community.genomes) == 12
        assert len({genome.id for genome in community.genomes}) == 12
        assert [len(species.genomes) for species in community.species] == [4, 4, 4]

    def test_genomes_are_minimal(self, community):
        community.init()

        for genome in community.genomes:
            assert genome.hidden_count == 0
            assert len(genome.link_genes) >= 1
            assert genome.species in community.species

    def test_same_link_same_innovation(self, community, config):
        config.prob_of_making_link_in_initial_genome = 1.0
        community.init()

        first = community.genomes[0].link_genes
        assert all([l.innovation for l in genome.link_genes] == [l.innovation for l in first]
                   for genome in community.genomes)
        assert community.registry.innovation_count == 2


# ============================================================================
# Test crossover
# ============================================================================

class TestCrossover:

    def test_same_parent_gives_a_clone(self, make_genome, community):
        mom = make_genome([(1, 3, 1.0)])
        baby = community.crossover(mom, mom)

        assert baby.id != mom.id
        assert [l.innovation for l in baby.link_genes] == [l.innovation for l in mom.link_genes]

    def test_fittest_parent_passes_on_its_structure(self, make_genome, community):
        mom = make_genome([(1, 3, 1.0), (1, 4, 1.0), (4, 3, 1.0)], hidden=[4])
        dad = make_genome([(1, 3, -1.0), (2, 3, 1.0)])
        mom.fitness, dad.fitness = 2.0, 1.0

        baby = community.crossover(mom, dad)

        assert sorted(l.innovation.n for l in baby.link_genes) == [l.innovation.n for l in mom.link_genes]
        assert sorted(n.id for n in baby.neuron_genes) == [1, 2, 3, 4]
        assert baby.link_genes[0].weight in (1.0, -1.0)
        assert baby.id not in (mom.id, dad.id)

    def test_weaker_parent_genes_are_lost(self, make_genome, community):
        mom = make_genome([(1, 3, 1.0), (1, 4, 1.0), (4, 3, 1.0)], hidden=[4])
        dad = make_genome([(1, 3, -1.0)])
        mom.fitness, dad.fitness = 1.0, 2.0

        baby = community.crossover(mom, dad)

        assert [l.innovation.n for l in baby.link_genes] == [1]
        assert sorted(n.id for n in baby.neuron_genes) == [1, 2, 3]

    def test_offspring_takes_fittest_species(self, make_genome, community):
        mom = make_genome([(1, 3, 1.0)])
        dad = make_genome([(1, 3, 2.0)])
        community.speciation_algorithm.init([mom, dad], 2)
        mom.fitness, dad.fitness = 1.0, 2.0

        assert community.crossover(mom, dad).species is dad.species

    def test_enabled_matching_genes_stay_enabled(self, make_genome, community, config):
        config.offspring_link_disable_rate = 1.0
        mom = make_genome([(1, 3, 1.0), (2, 3, 1.0, False)])
        dad = make_genome([(1, 3, 2.0), (2, 3, 1.0)])
        mom.fitness, dad.fitness = 1.0, 1.0

        baby = community.crossover(mom, dad)

        assert [l.enabled for l in baby.link_genes] == [True, False]

    def test_parents_are_untouched(self, make_genome, community):
        mom = make_genome([(1, 3, 1.0), (2, 3, 1.0)])
        dad = make_genome([(1, 3, 2.0)])
        mom.fitness, dad.fitness = 2.0, 1.0

        baby = community.crossover(mom, dad)
        baby.link_genes[0].weight = 42.0
        baby.get_neuron_by_id(3).bias = 42.0

        assert [l.weight for l in mom.link_genes] == [1.0, 1.0]
        assert [l.weight for l in dad.link_genes] == [2.0]
        assert mom.get_neuron_by_id(3).bias == 0.0


# ============================================================================
# Test epoch
# ============================================================================

class TestEpoch:

    def test_keeps_population_size(self, community):
        community.init()
        for i, genome in enumerate(community.genomes):
            genome.fitness = float(i)

        community.epoch()

        assert community.generation_count == 1
        assert len(community.genomes) == 12
        assert all(species.genomes for species in community.species)

    def test_records_statistics(self, community):
        community.init()
        for i, genome in enumerate(community.genomes):
            genome.fitness = float(i)

        community.epoch()

        assert community.mean_fitnesses == pytest.approx([5.5])
        assert community.best_fitnesses == [11.0]
        assert community.best_genome.fitness == 11.0

    def test_spawn_counts_add_up(self, community):
        community.init()
        for i, genome in enumerate(community.genomes):
            genome.fitness = float(i % 5)

        community._generation_counter = 1
        community.sort_each_species()
        community.update_best_genome()
        offspring_count = community.compute_species_stats()

        assert sum(species.spawn_count for species in community.species) == 12
        assert offspring_count == sum(species.offspring_count for species in community.species)
        assert community.species[community.best_species_index].elite_size >= 1

    def test_negative_species_fitness_keeps_population_size(self, config):
        config.initial_genome_count  = 6
        config.initial_species_count = 2
        community = Community(config, 2, 1, seed=42)
        community.init()

        losers, winners = community.species
        for genome in losers.genomes:
            genome.fitness = -1.0
        for genome in winners.genomes:
            genome.fitness = 2.0

        community.epoch()

        assert len(community.genomes) == 6
        assert losers.spawn_count == 0
        assert winners.spawn_count == 6


# ============================================================================
# Test spawn reconciliation
# ============================================================================

@pytest.fixture
def spawning(community, make_genome):
    """
    Give 'community' three hand-made species and a helper setting their spawn counts.

    Usage:
        species = spawning(counts=[3, 2, 6], reals=[3.4, 2.5, 6.1], best=1)
    """
    species = [Species(i + 1, make_genome([(1, 3, 1.0)])) for i in range(3)]
    community.species = species

    def _spawning(counts, reals=None, best=0):
        for s, count, real in zip(species, counts, reals or counts):
            s.spawn_count      = count
            s.spawn_count_real = float(real)
        community.best_species_index = best
        return species

    return _spawning


class TestSpawnReconciliation:

    def test_nothing_to_do(self, community, spawning):
        species = spawning([4, 4, 4])

        community.reconcile_spawn_counts()

        assert [s.spawn_count for s in species] == [4, 4, 4]

    def test_single_shortfall_goes_to_best_species(self, community, spawning):
        species = spawning([3, 2, 6], best=1)

        community.reconcile_spawn_counts()

        assert [s.spawn_count for s in species] == [3, 3, 6]

    def test_shortfall_follows_rounding_error(self, community, spawning):
        # The first two units go to the species rounded down the most, the
        # last one to the species with no rounding error
        species = spawning([3, 3, 3], reals=[3.9, 3.0, 3.1])

        community.reconcile_spawn_counts()

        assert [s.spawn_count for s in species] == [4, 4, 4]
        assert [s.spawn_count_real for s in species] == [4.0, 4.0, 4.0]

    def test_excess_is_removed_from_species_with_spawn(self, community, spawning):
        species = spawning([0, 7, 7], reals=[0.0, 6.5, 6.5], best=1)

        community.reconcile_spawn_counts()

        assert [s.spawn_count for s in species] == [0, 6, 6]

    @pytest.mark.parametrize("seed", range(10))
    def test_excess_never_makes_spawn_negative(self, community, spawning, seed):
        community.rng = np.random.default_rng(seed)
        species = spawning([0, 13, 2], best=1)

        community.reconcile_spawn_counts()

        counts = [s.spawn_count for s in species]
        assert sum(counts) == 12
        assert counts[0] == 0
        assert min(counts) >= 0

    def test_best_species_without_spawn_takes_one(self, community, spawning):
        species = spawning([0, 12, 0], best=0)

        community.reconcile_spawn_counts()

        assert [s.spawn_count for s in species] == [1, 11, 0]
        assert species[1].spawn_count_real == 11.0

    def test_best_species_takes_from_a_species_with_spawn(self, community, spawning):
        species = spawning([0, 6, 6], best=0)

        community.reconcile_spawn_counts()

        counts = [s.spawn_count for s in species]
        assert counts[0] == 1
        assert sorted(counts[1:]) == [5, 6]
