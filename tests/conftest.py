"""Pytest configuration and shared fixtures."""

import pytest

from neatevo.genotype import Genome, NeuronGene, NeuronType
from neatevo.pool     import Community
from neatevo.run      import Config


@pytest.fixture
def config():
    """Default configuration, with a small population."""
    config = Config()
    config.initial_genome_count  = 12
    config.initial_species_count = 3
    return config


@pytest.fixture
def community(config):
    """A seeded community of 2-input, 1-output genomes (not initialized)."""
    return Community(config, input_count=2, output_count=1, seed=42)


@pytest.fixture
def make_genome(community):
    """
    Factory building a genome of 'community' by hand.

    Usage:
        genome = make_genome(links=[(1, 3, 0.5), (2, 4, 1.0, False)], hidden=[4])

    Inputs are neurons 1..I, outputs I+1..I+O; hidden neurons take the given IDs.
    Each link is (in, out, weight) or (in, out, weight, enabled).
    """
    def _make_genome(links, hidden=(), biases=None):
        genome = Genome.from_community(community)
        I, O   = community.input_count, community.output_count

        for i in range(I):
            genome.add_neuron(NeuronGene(i + 1, NeuronType.INPUT, (i + 0.5) / I, 1.0))
        for i in range(O):
            genome.add_neuron(NeuronGene(I + i + 1, NeuronType.OUTPUT, (i + 0.5) / O, 0.0))
        for neuron_id in hidden:
            genome.add_neuron(NeuronGene(neuron_id, NeuronType.HIDDEN, 0.5, 0.5))

        for neuron_id, bias in (biases or {}).items():
            genome.get_neuron_by_id(neuron_id).bias = bias

        for link in links:
            genome.add_link(*link)

        community.registry.reserve_neuron_ids(genome.max_neuron_id)
        return genome

    return _make_genome
