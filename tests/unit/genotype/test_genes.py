"""
Unit tests for NeuronGene and LinkGene.
"""

from neatevo.genotype import Innovation, LinkGene, NeuronGene, NeuronType


class TestNeuronGene:

    def test_input_neurons_have_no_bias(self):
        neuron = NeuronGene(1, NeuronType.INPUT, 0.5, 1.0, bias=0.3)
        assert neuron.bias is None

    def test_other_neurons_default_to_zero_bias(self):
        assert NeuronGene(3, NeuronType.OUTPUT, 0.5, 0.0).bias == 0.0
        assert NeuronGene(4, NeuronType.HIDDEN, 0.5, 0.5, bias=-1.5).bias == -1.5

    def test_clone_is_independent(self):
        neuron = NeuronGene(4, NeuronType.HIDDEN, 0.25, 0.5, bias=1.0)
        copy   = neuron.clone()
        copy.bias = 2.0

        assert copy is not neuron
        assert (copy.id, copy.type, copy.split_x, copy.split_y) == (4, NeuronType.HIDDEN, 0.25, 0.5)
        assert neuron.bias == 1.0

    def test_str(self):
        assert str(NeuronGene(1, NeuronType.INPUT, 0.5, 1.0)).startswith("[001,I")


class TestLinkGene:

    def test_is_looped(self):
        assert LinkGene(3, 3, 1.0).is_looped
        assert not LinkGene(1, 3, 1.0).is_looped

    def test_clone_shares_innovation(self):
        innovation = Innovation(7, 1, 3)
        link = LinkGene(1, 3, 0.5, False, innovation)
        copy = link.clone()

        assert copy is not link
        assert copy.innovation is innovation
        assert (copy.in_neuron, copy.out_neuron, copy.weight, copy.enabled) == (1, 3, 0.5, False)

    def test_innovations_are_frozen_values(self):
        assert Innovation(1, 1, 3) == Innovation(1, 1, 3)
        assert hash(Innovation(1, 1, 3)) == hash(Innovation(1, 1, 3))

    def test_str(self):
        assert str(LinkGene(1, 3, 0.5, True, Innovation(2, 1, 3))) == "[002,E,01=>03,+0.50]"
