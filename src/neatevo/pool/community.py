"""
NEAT Community Module

This module implements the Community class, the top-level orchestrator of the
NEAT evolutionary algorithm: it owns the genomes, their species, the innovation
registry and the random number generator, and turns one scored generation into
the next one (epoch).

Classes:
    Community: A population of genomes sharing the same fitness function and topology bounds
"""

import logging
import numpy as np
from typing import TYPE_CHECKING

from neatevo.genotype                  import Genome, InnovationRegistry, NeuronType, align_allele_genes
from neatevo.pool.speciation_algorithm import SpeciationAlgorithm
from neatevo.pool.species              import Species
from neatevo.pool.uncanny_valley       import UncannyValleySpeciationAlgorithm
from neatevo.utils                     import ProbabilityArray, shuffle, stochastic_round
if TYPE_CHECKING:
    from neatevo.run import Config

logger = logging.getLogger(__name__)

class Community:
    """
    A group of species sharing the same fitness function, input count and output count.

    The driver builds a Community, calls init(), then repeatedly writes a
    fitness into every genome of 'genomes' and calls epoch(). The population
    size stays fixed; the best genome of a generation always survives into
    the next one.

    All randomness is drawn from 'rng', so that two communities built with the
    same configuration and seed evolve identically.

    Public Attributes:
        config:               Configuration parameters
        input_count:          Number of inputs of every genome
        output_count:         Number of outputs of every genome
        population_size:      Number of genomes in each generation
        speciation_algorithm: Strategy used to group genomes into species
        rng:                  Random number generator shared by all operators
        registry:             Innovation and neuron ID records
        genomes:              The genomes of the current generation
        species:              The species of the current generation
        best_genome:          The best genome of the current generation
        best_species_index:   Position in 'species' of the best genome's species
        best_fitnesses:       Best fitness of each generation
        mean_fitnesses:       Mean fitness of each generation

    Public Methods:
        init():              Create and speciate the initial population
        epoch():             Produce the next generation from the scored current one
        crossover(mom, dad): Combine two genomes into an offspring
    """

    def __init__(self,
                 config              : 'Config',
                 input_count         : int,
                 output_count        : int,
                 speciation_algorithm: SpeciationAlgorithm | None = None,
                 seed                : int | None                 = None):
        """
        Parameters:
            config:               configuration parameters
            input_count:          number of inputs of every genome
            output_count:         number of outputs of every genome
            speciation_algorithm: speciation strategy (the uncanny valley strategy if None)
            seed:                 seed of the random number generator (None for a random seed)

        Raises:
            ValueError: if the population size is not a positive whole number
        """
        population_size = config.initial_genome_count
        if not float(population_size).is_integer() or population_size <= 0:
            raise ValueError(f"Population size must be a positive whole number, got {population_size}")

        if speciation_algorithm is None:
            speciation_algorithm = UncannyValleySpeciationAlgorithm(config)

        self.config              : 'Config'            = config
        self.input_count         : int                 = input_count
        self.output_count        : int                 = output_count
        self.population_size     : int                 = int(population_size)
        self.speciation_algorithm: SpeciationAlgorithm = speciation_algorithm

        self.rng     : np.random.Generator = np.random.default_rng(seed)
        self.registry: InnovationRegistry  = InnovationRegistry(input_count, output_count)

        self.genomes: list[Genome]  = []
        self.species: list[Species] = []

        self.max_genome_id : int = 0
        self.max_species_id: int = 0

        self.best_species_index: int            = 0
        self.best_genome       : Genome | None  = None
        self.best_fitnesses    : list[float]    = []
        self.mean_fitnesses    : list[float]    = []

        self._generation_counter: int = 0

        if not config.show_log:
            logging.getLogger("neatevo").setLevel(logging.ERROR)

    @property
    def generation_count(self) -> int:
        """
        The number of epochs processed so far.
        """
        return self._generation_counter

    def allocate_genome_id(self) -> int:
        self.max_genome_id += 1
        return self.max_genome_id

    def allocate_species_id(self) -> int:
        self.max_species_id += 1
        return self.max_species_id

    def init(self) -> None:
        """
        Create 'population_size' minimal genomes and split them into
        'initial_species_count' species.
        """
        self.genomes = [Genome.from_community(self).init_minimal_genome() for _ in range(self.population_size)]

        self.speciation_algorithm.init(self.genomes, self.config.initial_species_count)
        self.species = self.speciation_algorithm.species

        self.assert_for_no_empty_species()

    def crossover(self, mom: Genome, dad: Genome) -> Genome:
        """
        Combine two distinct genomes (see http://nn.cs.utexas.edu/downloads/papers/stanley.ec02.pdf section 3.2).

        The fitter parent (chosen by a coin flip on equal fitness) passes on all
        its input and output neurons and all its disjoint and excess genes. Each
        matching gene is copied from a randomly chosen parent; when either
        parent has it disabled, the copy is disabled with probability
        'offspring_link_disable_rate'. The weaker parent's unique genes are lost.

        Parameters:
            mom: first parent
            dad: second parent, a different genome

        Returns:
            The offspring, provisionally in the fitter parent's species
        """
        if mom.id == dad.id:
            logger.error("Crossover called with genome %d as both parents; cloning it instead", mom.id)
            return mom.clone()

        fittest, other = mom, dad
        if dad.fitness > mom.fitness or (dad.fitness == mom.fitness and self.rng.random() < 0.5):
            fittest, other = dad, mom

        aligned = align_allele_genes(fittest, other)

        baby = Genome.from_community(self)
        for neuron in fittest.neuron_genes:
            if neuron.type != NeuronType.HIDDEN:
                baby.copy_neuron(neuron)
        baby.max_neuron_id = max(baby.max_neuron_id, fittest.max_neuron_id)

        disable_rate = self.config.offspring_link_disable_rate
        for gene_a, gene_b in zip(aligned.matching_genes_a, aligned.matching_genes_b):
            maybe_disable = not gene_a.enabled or not gene_b.enabled
            enabled = not (maybe_disable and self.rng.random() < disable_rate)

            if self.rng.random() < 0.5:
                baby.copy_link_and_neurons(gene_a, fittest, enabled)
            else:
                baby.copy_link_and_neurons(gene_b, other, enabled)

        for gene in aligned.disjoint_genes_a + aligned.excess_genes_a:
            baby.copy_link_and_neurons(gene, fittest)

        baby.species = fittest.species
        return baby

    def epoch(self) -> None:
        """
        Produce the next generation. Every genome must have its fitness set.

        1.  Count the generation.
        2.  Sort each species by descending fitness.
        3.  Find the best genome and its species.
        4.  Record the mean fitness.
        5.  Compute each species' adjusted fitness, spawn count and offspring split.
        6.  Create the offspring.
        7.  Trim each species back to its elite.
        8.  Rebuild the genome list: elites first, then offspring.
        9.  Speciate: re-partition everything if a species died out,
            otherwise integrate the offspring into the existing species.
        10. Re-sort species and find the best genome again.
        """
        self._generation_counter += 1
        logger.debug("Epoch %d start", self._generation_counter)

        self.sort_each_species()
        for species in self.species:
            species.update_stagnation()
        self.update_best_genome()
        self.update_stats()

        total_offspring_count = self.compute_species_stats()

        offspring = self.create_offspring()
        assert len(offspring) == total_offspring_count, \
            f"Created {len(offspring)} offspring, expected {total_offspring_count}"

        found_empty_species = self.trim_species_back_to_elite()

        self.update_genomes_array()
        self.genomes.extend(offspring)

        logger.debug("Speciation start (%s)", "respeciate all" if found_empty_species else "integrate offspring")
        if found_empty_species:
            self.speciation_algorithm.respeciate_all(self.genomes, offspring)
        else:
            self.speciation_algorithm.integrate_new_genomes(self.genomes, offspring)
        self.species = self.speciation_algorithm.species

        self.assert_for_no_empty_species()

        self.sort_each_species()
        self.update_best_genome()

        assert len(self.genomes) == self.population_size, \
            f"Genome count ({len(self.genomes)}) differs from the population size ({self.population_size}) after epoch"

        logger.debug("Epoch %d end: %d species, best fitness %s",
                     self._generation_counter, len(self.species), self.best_fitnesses[-1])

    # ----------------
    # Epoch steps

    def compute_species_stats(self) -> int:
        """
        Compute adjusted fitnesses, spawn counts, elite sizes and offspring splits.

        Spawn counts are proportional to each species' mean adjusted fitness (none
        for a species whose mean is not positive) and rounded stochastically; the
        rounding drift is then distributed so that
        the spawn counts add up to the population size. The best species always
        spawns at least one genome and keeps at least one elite.

        Returns:
            The total number of offspring to create
        """
        total_mean_fitness = 0.0
        for species in self.species:
            if not species.genomes:
                logger.warning("Found species %d with no members", species.id)
            species.compute_adjusted_fitnesses(self.config)
            total_mean_fitness += max(0.0, species.mean_adjusted_fitness)

        for species in self.species:
            species.compute_spawn_count(total_mean_fitness, len(self.genomes), len(self.species), self.rng)

        self.reconcile_spawn_counts()

        total_offspring_count = 0
        for i, species in enumerate(self.species):
            if species.spawn_count <= 0:
                species.reset_spawn()
                continue

            elite_size_real = len(species.genomes) * self.config.species_elite_proportion
            elite_size = min(stochastic_round(elite_size_real, self.rng), species.spawn_count)
            if i == self.best_species_index and elite_size <= 0:
                elite_size = 1

            species.elite_size      = elite_size
            species.offspring_count = species.spawn_count - elite_size
            total_offspring_count  += species.offspring_count

            species.compute_offspring_stats(self.config.offspring_asexual_proportion,
                                            self.config.fittest_parents_cutoff_proportion,
                                            self.rng)

        return total_offspring_count

    def reconcile_spawn_counts(self) -> None:
        """
        Bring the rounded spawn counts of the species back to the population size,
        then make sure the best species spawns at least one genome.

        A shortfall of exactly one goes to the best species; any other drift is
        spread by _distribute_spawn_count_drift(). If the best species is left
        without spawn, it takes one unit from a randomly chosen species that has some.
        """
        total_spawn_count = sum(species.spawn_count for species in self.species)
        delta_spawn_count = total_spawn_count - self.population_size
        if delta_spawn_count == -1:
            self.species[self.best_species_index].spawn_count += 1
        elif delta_spawn_count != 0:
            self._distribute_spawn_count_drift(delta_spawn_count)

        assert sum(species.spawn_count for species in self.species) == self.population_size, \
            "The total spawn count differs from the population size"

        # The best genome must be passed on
        best_species = self.species[self.best_species_index]
        if best_species.spawn_count <= 0:
            best_species.spawn_count += 1

            others = [species for species in self.species if species is not best_species and species.spawn_count > 0]
            shuffle(others, self.rng)
            if others:
                others[0].spawn_count     -= 1
                others[0].spawn_count_real = max(0.0, others[0].spawn_count_real - 1)

    def _distribute_spawn_count_drift(self, delta_spawn_count: int) -> None:
        """
        Add (delta < 0) or remove (delta > 0) spawn count one unit at a time,
        drawing species by lottery with probability proportional to their
        rounding error. A species drawn once leaves the lottery while others
        remain. Spawn count is only removed from species that have some.
        """
        step = 1 if delta_spawn_count < 0 else -1

        lottery, candidates = None, []
        for _ in range(abs(delta_spawn_count)):
            if lottery is None or len(lottery) == 0:
                candidates = [species for species in self.species if step > 0 or species.spawn_count > 0]
                weights    = [max(0.0, step * (species.spawn_count_real - species.spawn_count)) for species in candidates]
                lottery    = ProbabilityArray(weights, self.rng)

            position = lottery.randomly_select()
            species  = candidates[position]
            species.spawn_count     += step
            species.spawn_count_real = species.spawn_count

            if len(lottery) > 1 or species.spawn_count <= 0:
                lottery.remove(position)

    def create_offspring(self) -> list[Genome]:
        """
        Create the offspring of every species. Must be called after compute_species_stats().

        Asexual parents are drawn with probability proportional to fitness (all
        equally likely when no member has a positive fitness). Sexual parents are
        two distinct members drawn the same way among the 'fittest_parents_cutoff'
        best ones; with a single candidate the offspring is produced asexually.

        Returns:
            The offspring, species by species
        """
        offspring: list[Genome] = []

        total_asexual = total_sexual = total_elite = 0
        for species in self.species:
            total_asexual += species.asexual_reproduction_count
            total_sexual  += species.sexual_reproduction_count
            total_elite   += species.elite_size

            if species.offspring_count <= 0:
                continue

            probs = [max(0.0, genome.fitness) for genome in species.genomes]
            if not any(probs):
                probs = [1.0] * len(species.genomes)

            if species.asexual_reproduction_count > 0:
                lottery = ProbabilityArray(probs, self.rng)
                for _ in range(species.asexual_reproduction_count):
                    parent = species.genomes[lottery.randomly_select()]
                    offspring.append(parent.create_offspring(self.config))

            if species.sexual_reproduction_count > 0 and species.fittest_parents_cutoff <= len(species.genomes):
                parents_probs = probs[:species.fittest_parents_cutoff]

                for _ in range(species.sexual_reproduction_count):
                    lottery = ProbabilityArray(parents_probs, self.rng)
                    mom_index = lottery.randomly_select()

                    if len(lottery) > 1:
                        lottery.remove(mom_index)
                        dad_index = lottery.randomly_select()
                        offspring.append(self.crossover(species.genomes[mom_index], species.genomes[dad_index]))
                    else:
                        offspring.append(species.genomes[mom_index].create_offspring(self.config))

        logger.info("Offspring report: asexual %d, sexual %d, elite %d", total_asexual, total_sexual, total_elite)
        return offspring

    def trim_species_back_to_elite(self) -> bool:
        """
        Keep only the elite of each species (its first 'elite_size' members).

        Returns:
            True if some species lost all its members
        """
        found_empty_species    = False
        found_best_genome_next = False

        for species in self.species:
            assert species.elite_size <= len(species.genomes), \
                f"Species {species.id} has fewer members than its elite size"

            if species.elite_size <= 0 or species.spawn_count <= 0:
                species.genomes = []
                found_empty_species = True
                continue

            species.genomes = species.genomes[:species.elite_size]
            if self.best_genome is not None and species.genomes[0] is self.best_genome:
                found_best_genome_next = True

        assert found_best_genome_next, "The best genome has not been passed to the next generation"
        return found_empty_species

    def update_genomes_array(self) -> None:
        self.genomes = [genome for species in self.species for genome in species.genomes]

    def sort_each_species(self) -> None:
        for species in self.species:
            species.sort_genomes()

    def update_best_genome(self) -> None:
        """
        Find the best species champion. On equal fitness the earlier species wins.
        """
        if self._generation_counter <= 0:
            logger.warning("Best genome requested before the first epoch")
            return

        generation = self._generation_counter - 1
        while len(self.best_fitnesses) <= generation:
            self.best_fitnesses.append(-np.inf)

        self.best_genome = None
        self.best_fitnesses[generation] = -np.inf

        for i, species in enumerate(self.species):
            champion = species.genomes[0]
            if champion.fitness > self.best_fitnesses[generation]:
                self.best_fitnesses[generation] = champion.fitness
                self.best_genome        = champion
                self.best_species_index = i

    def update_stats(self) -> None:
        generation = self._generation_counter - 1
        while len(self.mean_fitnesses) <= generation:
            self.mean_fitnesses.append(0.0)
        self.mean_fitnesses[generation] = float(np.mean([genome.fitness for genome in self.genomes]))

    def assert_for_no_empty_species(self) -> None:
        empty = [species.id for species in self.species if not species.genomes]
        if empty:
            logger.error("Species %s are empty; speciation went wrong", empty)
        assert not empty, "One or more species are empty"
