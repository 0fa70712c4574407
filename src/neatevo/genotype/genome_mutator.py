"""
NEAT Genome Mutator Module

Structural and parametric mutation operators.

Classes:
    GenomeMutator: Namespace for the mutation operators applied to offspring
"""

import math
import numpy as np
from typing import TYPE_CHECKING

from neatevo.genotype.neuron_gene import NeuronGene, NeuronType
from neatevo.utils                import random_int, resolve_rng, shuffle
if TYPE_CHECKING:
    from neatevo.genotype.genome import Genome
    from neatevo.run             import Config

class GenomeMutator:
    """
    Mutation operators for genomes.

    mutate() resets the genome's fitness and phenotype and then applies,
    in this order:
      1. add-hidden-neuron mutation (only while below the hidden neuron cap)
      2. add-link mutation
      3. weight mutation
      4. bias mutation

    Each operator can also be used on its own.

    Public Methods:
        mutate(genome, config, rng):                          Full mutation pass
        add_hidden_neuron_mutation(genome, rate, rng):        Split a link with a new neuron
        add_link_mutation(genome, rate, loop_chance, rng):    Add a new link
        weights_mutation(genome, rate, prob_new, ..., rng):   Perturb or replace weights
        biases_mutation(genome, rate, prob_new, ..., rng):    Perturb or replace biases
    """

    @staticmethod
    def mutate(genome: 'Genome', config: 'Config', rng: np.random.Generator | None = None) -> None:
        rng = resolve_rng(rng)

        genome.fitness          = 0.0
        genome.adjusted_fitness = 0.0
        genome.phenotype        = None

        if genome.hidden_count < config.max_number_of_hidden_neurons:
            GenomeMutator.add_hidden_neuron_mutation(genome, config.hidden_neuron_mutation_rate, rng)

        GenomeMutator.add_link_mutation(genome,
                                        config.link_mutation_rate,
                                        config.link_mutation_chance_of_considering_looped_recurrency,
                                        rng)

        GenomeMutator.weights_mutation(genome,
                                       config.weight_mutation_rate_for_each_link,
                                       config.weight_mutation_prob_new_val,
                                       config.weight_mutation_max_pertubation,
                                       config.weight_mutation_new_val_range,
                                       rng)

        GenomeMutator.biases_mutation(genome,
                                      config.bias_mutation_rate_for_each_link,
                                      config.bias_mutation_prob_new_val,
                                      config.bias_mutation_max_pertubation,
                                      config.bias_mutation_new_val_range,
                                      rng)

    @staticmethod
    def add_hidden_neuron_mutation(genome: 'Genome', mutation_rate: float, rng: np.random.Generator | None = None) -> None:
        """
        Split an enabled, non-looped link by inserting a hidden neuron.

        The split link is disabled and replaced by two links: in->new with
        weight 1 and new->out with the old weight, so that the output of the
        network is disturbed as little as possible.

        While the genome is neither minimal nor large (at least 5 neurons
        beyond its inputs and outputs), the choice is restricted to the older
        links to avoid chaining many neurons on the same link.

        The new neuron reuses the ID recorded for an earlier split of the same
        link, unless this genome already holds a neuron with that ID.

        Parameters:
            genome:        genome to mutate
            mutation_rate: probability that the mutation takes place
            rng:           random number generator
        """
        rng = resolve_rng(rng)
        if rng.random() >= mutation_rate:
            return

        valid_links = [link for link in genome.link_genes if link.enabled and not link.is_looped]

        # Every link may be disabled
        if not valid_links:
            return

        n = len(valid_links)
        if (len(genome.link_genes) == genome.input_count * genome.output_count or
                len(genome.neuron_genes) >= genome.input_count + genome.output_count + 5):
            chosen_index = random_int(0, n - 1, rng)
        else:
            chosen_index = random_int(0, max(0, n - math.floor(math.sqrt(n)) - 1), rng)

        chosen_link = valid_links[chosen_index]
        in_neuron   = genome.get_neuron_by_id(chosen_link.in_neuron,  warn=True)
        out_neuron  = genome.get_neuron_by_id(chosen_link.out_neuron, warn=True)
        if in_neuron is None or out_neuron is None:
            return

        chosen_link.enabled = False

        registry  = genome.community.registry
        neuron_id = registry.find_neuron_id_for_mutation_at_link(in_neuron.id, out_neuron.id)
        is_new_split = neuron_id is None

        # The recorded neuron may already be in this genome, e.g. when the
        # same link was split, disabled and then re-created by crossover
        if neuron_id is not None and genome.has_neuron_with_id(neuron_id):
            neuron_id = None

        if neuron_id is None:
            neuron_id = registry.next_neuron_id()

        if is_new_split:
            registry.record_neuron_mutation(neuron_id, in_neuron.id, out_neuron.id)

        new_neuron = NeuronGene(neuron_id, NeuronType.HIDDEN,
                                (in_neuron.split_x + out_neuron.split_x) / 2,
                                (in_neuron.split_y + out_neuron.split_y) / 2)
        genome.add_neuron(new_neuron)

        genome.add_link(in_neuron.id,  new_neuron.id, 1.0)
        genome.add_link(new_neuron.id, out_neuron.id, chosen_link.weight)

    @staticmethod
    def add_link_mutation(genome               : 'Genome',
                          mutation_rate        : float,
                          chance_of_looped_link: float,
                          rng                  : np.random.Generator | None = None) -> None:
        """
        Add a link between two neurons that are not linked yet.

        All (source, destination) pairs of distinct neurons are candidates;
        with probability 'chance_of_looped_link' self-loops are candidates too.
        The candidates are shuffled and the first valid one wins. A candidate is
        rejected when its destination is an input neuron, when the link already
        exists, when its source is an output neuron (self-loops excepted), or
        when it would create a loop. The new weight is uniform in [-2, 2].

        Parameters:
            genome:                genome to mutate
            mutation_rate:         probability that the mutation takes place
            chance_of_looped_link: probability of considering self-loops
            rng:                   random number generator
        """
        rng = resolve_rng(rng)
        if rng.random() >= mutation_rate:
            return

        neurons = genome.neuron_genes
        candidates = [(src, dst)
                      for src in range(len(neurons))
                      for dst in range(len(neurons))
                      if neurons[src].id != neurons[dst].id]

        if rng.random() < chance_of_looped_link:
            candidates.extend((i, i) for i in range(len(neurons)))

        shuffle(candidates, rng)

        for src, dst in candidates:
            source, destination = neurons[src], neurons[dst]

            # Input neurons take no input from other neurons
            if destination.type == NeuronType.INPUT:
                continue
            if genome.is_duplicate_link(source.id, destination.id):
                continue

            if src == dst:
                if genome.looped_link(source.id) is not None:
                    continue
            elif source.type == NeuronType.OUTPUT:
                continue
            elif genome.is_link_potential_loop(source.id, destination.id):
                continue

            genome.add_link(source.id, destination.id, rng.uniform(-2.0, 2.0))
            return

    @staticmethod
    def weights_mutation(genome            : 'Genome',
                         rate_for_each_link: float,
                         prob_new_value    : float,
                         max_perturbation  : float,
                         new_value_range   : float,
                         rng               : np.random.Generator | None = None) -> None:
        """
        Mutate link weights, enabled or not.

        Each link mutates with probability 'rate_for_each_link'. A mutating
        weight is replaced by a uniform value in [-new_value_range, new_value_range]
        with probability 'prob_new_value'; otherwise it is perturbed by up to
        max_perturbation * (1 - rate_for_each_link) in either direction.
        """
        rng = resolve_rng(rng)
        for link in genome.link_genes:
            if rng.random() < rate_for_each_link:
                if rng.random() >= prob_new_value:
                    link.weight += rng.uniform(-1.0, 1.0) * max_perturbation * (1 - rate_for_each_link)
                else:
                    link.weight = rng.uniform(-new_value_range, new_value_range)

    @staticmethod
    def biases_mutation(genome            : 'Genome',
                        rate_for_each_link: float,
                        prob_new_value    : float,
                        max_perturbation  : float,
                        new_value_range   : float,
                        rng               : np.random.Generator | None = None) -> None:
        """
        Mutate the bias of every non-input neuron, with the scheme of weights_mutation().
        """
        rng = resolve_rng(rng)
        for neuron in genome.neuron_genes:
            if neuron.type == NeuronType.INPUT:
                continue

            if rng.random() < rate_for_each_link:
                if rng.random() >= prob_new_value:
                    neuron.bias += rng.uniform(-1.0, 1.0) * max_perturbation * (1 - rate_for_each_link)
                else:
                    neuron.bias = rng.uniform(-new_value_range, new_value_range)
