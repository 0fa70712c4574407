"""
NEAT Neural Network Module

This module implements the phenotype for the NEAT algorithm: the executable
network expressed by a genome.

Classes:
    NeuronData:    Runtime input accumulator and output of one neuron
    NeuralNetwork: Network activated in topological order, with self-loop memory
"""

import graphviz  # type: ignore
import logging
from typing import Callable, Sequence, TYPE_CHECKING

from neatevo.activations          import steepened_sigmoid_activation
from neatevo.genotype.neuron_gene import NeuronType  # Needed at runtime

if TYPE_CHECKING:
    from neatevo.genotype import Genome, LinkGene, NeuronGene

logger = logging.getLogger(__name__)

class NeuronData:
    """
    Runtime data of one neuron: the accumulated input and the activated output.
    """

    def __init__(self, neuron_id: int, input: float = 0.0, output: float = 0.0):
        self.id    : int   = neuron_id
        self.input : float = input
        self.output: float = output

    def copy(self) -> 'NeuronData':
        return NeuronData(self.id, self.input, self.output)

    def __repr__(self):
        return f"NeuronData(id={self.id}, input={self.input:+.4f}, output={self.output:+.4f})"

class NeuralNetwork:
    """
    The network expressed by a genome.

    Activation visits the neurons in the order produced by Genome.iterate():
    input neurons take the raw inputs, then hidden neurons fire wave by wave
    once all their inputs have been accumulated, and finally output neurons
    are activated and read in declared order. Each non-input neuron starts
    from its bias; enabled links add weight * source output to their
    destination.

    Everything is purely feed-forward except self-loops: a neuron with an
    enabled self-loop also adds loop_weight * (its output on the previous
    activation). This one-step memory is kept between calls to activate();
    reset() clears it.

    Public Attributes:
        genome:  The genome this network expresses
        neurons: Runtime data of every neuron, aligned with genome.neuron_genes

    Public Methods:
        activate(inputs):                  Compute the outputs for an input vector
        last_activation():                 (neuron ID, output) pairs of the last activation
        generate_formula(names, digits):   Symbolic formula of each output
        reset():                           Forget the self-loop memory
        visualize(view):                   Draw the network with Graphviz
    """

    def __init__(self, genome: 'Genome', activation: Callable = steepened_sigmoid_activation):
        """
        Parameters:
            genome:     the genome to express
            activation: activation function of hidden and output neurons
        """
        self.genome     : 'Genome'          = genome
        self._activation: Callable          = activation

        # Sorting the genome's genes must not disturb the runtime data
        self._neuron_genes: list['NeuronGene'] = list(genome.neuron_genes)
        self.neurons    : list[NeuronData]  = [NeuronData(neuron.id) for neuron in self._neuron_genes]

        self._index     : dict[int, int]    = {neuron.id: i for i, neuron in enumerate(self._neuron_genes)}
        self._rnn_memory: list[NeuronData]  = []
        self._has_activated: bool           = False

        # The genome does not change while this network is alive
        self._order = list(genome.iterate())
        self._loops: dict[int, 'LinkGene'] = {link.in_neuron: link for link in genome.link_genes if link.is_looped}

    def activate(self, inputs: Sequence[float]) -> list[float]:
        """
        Activate the network.

        Parameters:
            inputs: one value per input neuron, in input order

        Returns:
            The output of each output neuron, in declared order; an empty list
            (with a warning) if the number of inputs does not match the genome.
        """
        if len(inputs) != self.genome.input_count:
            logger.warning("Network of genome %d activated with %d inputs, expected %d",
                           self.genome.id, len(inputs), self.genome.input_count)
            return []

        self._prepare_for_activation()

        outputs = []
        input_position = 0
        for role, neuron, out_links in self._order:
            data = self.neurons[self._index[neuron.id]]

            if role == "input":
                data.input = data.output = float(inputs[input_position])
                input_position += 1
                self._feed_forward(out_links)

            elif role == "hidden":
                self._activate_neuron(neuron)
                self._feed_forward(out_links)

            else:
                self._activate_neuron(neuron)
                outputs.append(data.output)

        self._has_activated = True
        return outputs

    def reset(self) -> None:
        self._rnn_memory    = []
        self._has_activated = False
        for data in self.neurons:
            data.input = data.output = 0.0

    def last_activation(self) -> list[tuple[int, float]]:
        return [(data.id, data.output) for data in self.neurons]

    def get_neuron_data_by_id(self, neuron_id: int) -> NeuronData | None:
        """
        Return the runtime data of a neuron, or None (with a warning) if it is not in this network.
        """
        if neuron_id not in self._index:
            logger.warning("Runtime data requested for unknown neuron %d", neuron_id)
            return None
        return self.neurons[self._index[neuron_id]]

    def generate_formula(self, input_names: Sequence[str], digits_precision: int = 2) -> list[str]:
        """
        Describe each output as a formula of the inputs.

        Parameters:
            input_names:      name of each input, in input order
            digits_precision: number of decimals kept for weights and biases

        Returns:
            One formula per output neuron
        """
        # Import here to avoid circular import
        from neatevo.phenotype.formula_network import FormulaNetwork

        return FormulaNetwork(self.genome, digits_precision).formulas(input_names)

    def visualize(self, view: bool = False) -> graphviz.Digraph:
        """
        Draw the network with Graphviz, inputs on top and outputs at the bottom.

        Neurons are labelled with their ID, their bias and their output on the
        last activation; links with their innovation number and weight.
        Disabled links are drawn in light gray.

        Parameters:
            view: If True, automatically open the visualization after rendering

        Returns:
            graphviz.Digraph object representing the network
        """
        dot = graphviz.Digraph()
        dot.attr(rankdir='TB')
        dot.attr('graph', labelloc='t')

        node_attrs = {
            'input':  {'fillcolor': 'lightgrey', 'color': 'black', 'style': 'filled', 'shape': 'circle', 'penwidth': '0.5', 'fontsize': '5', 'width': '0.5', 'height': '0.5', 'fixedsize': 'true'},
            'hidden': {'fillcolor': 'lightblue', 'color': 'black', 'style': 'filled', 'shape': 'circle', 'penwidth': '0.5', 'fontsize': '5', 'width': '0.5', 'height': '0.5', 'fixedsize': 'true'},
            'output': {'fillcolor': 'white'    , 'color': 'black', 'style': 'filled', 'shape': 'circle', 'penwidth': '0.5', 'fontsize': '5', 'width': '0.5', 'height': '0.5', 'fixedsize': 'true'}
        }
        cluster_attrs = {
            'input':  {'rank': 'source', 'label': 'Inputs'},
            'hidden': {'rank': 'same',   'label': 'Hidden'},
            'output': {'rank': 'sink',   'label': 'Outputs'}
        }

        description = self.genome.describe()
        outputs     = dict(self.last_activation())

        for role in ('input', 'hidden', 'output'):
            neurons = [n for n in description['neurons'] if n['type'] == role]
            if not neurons:
                continue

            with dot.subgraph(name=f'cluster_{role}') as cluster:
                cluster.attr(style='invisible', **cluster_attrs[role])
                for neuron in sorted(neurons, key=lambda n: n['split_x']):
                    gene  = self._neuron_genes[self._index[neuron['id']]]
                    label = f"id={gene.id}"
                    if gene.bias is not None:
                        label += f"\\nbias={gene.bias:.2f}"
                    label += f"\\nout={outputs.get(gene.id, 0.0):.2f}"
                    cluster.node(str(gene.id), label=label, **node_attrs[role])

        for link in self.genome.link_genes:
            edge_attrs = {
                'label'     : f"i={link.innovation.n if link.innovation else '?'},w={link.weight:.2f}",
                'fontsize'  : '5',
                'penwidth'  : '0.5',
                'arrowsize' : '0.5',
                'labelfloat': 'false',
                'color'     : 'black' if link.enabled else 'lightgray'
            }
            dot.edge(str(link.in_neuron), str(link.out_neuron), **edge_attrs)

        if view:
            dot.view(cleanup=True)

        return dot

    def _prepare_for_activation(self) -> None:
        """
        Keep the previous outputs as self-loop memory, then reset every
        neuron: inputs to their bias (0 for input neurons), outputs to 0.
        """
        if self._has_activated:
            self._rnn_memory = [data.copy() for data in self.neurons]

        for neuron, data in zip(self._neuron_genes, self.neurons):
            data.input  = 0.0 if neuron.type == NeuronType.INPUT else neuron.bias
            data.output = 0.0

    def _activate_neuron(self, neuron: 'NeuronGene') -> float:
        index = self._index[neuron.id]
        data  = self.neurons[index]

        looped_link = self._loops.get(neuron.id)
        if looped_link is not None and looped_link.enabled and self._has_activated:
            data.input += looped_link.weight * self._rnn_memory[index].output

        data.output = float(self._activation(data.input))
        return data.output

    def _feed_forward(self, links: list['LinkGene']) -> None:
        for link in links:
            if not link.enabled or link.is_looped:
                continue

            source      = self.neurons[self._index[link.in_neuron]]
            destination = self.neurons[self._index[link.out_neuron]]
            destination.input += link.weight * source.output
