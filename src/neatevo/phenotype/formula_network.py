"""
NEAT Formula Network Module

Classes:
    FormulaNetwork: Symbolic counterpart of NeuralNetwork, producing output formulas
"""

import logging
import re
import numpy as np
from typing import Sequence, TYPE_CHECKING

from neatevo.genotype.neuron_gene import NeuronType

if TYPE_CHECKING:
    from neatevo.genotype import Genome, LinkGene, NeuronGene

logger = logging.getLogger(__name__)

# A coefficient of exactly 1 in front of a product
_UNIT_COEFFICIENT = re.compile(r"(?<![\d.])1\*")

def beautify_formula(formula: str) -> str:
    """
    Drop unit coefficients and multiplication signs: "1*x+0.5*y" -> "x+0.5y"
    """
    return _UNIT_COEFFICIENT.sub("", formula).replace("*", "")

class FormulaNetwork:
    """
    Walks a genome like NeuralNetwork does, but accumulates strings instead of
    numbers, so that every output can be written as a formula of the inputs.

    The activation function is written 𝛼(...). The previous output of a neuron
    with a self-loop is written M<i>, i being its position in the genome's
    neuron list. Weights and biases are rounded to 'digits_precision' decimals.

    Formulas grow exponentially with depth; an append that would push a
    formula past MAXIMUM_STRING_LENGTH is dropped with a warning, and the
    truncated formula is kept.

    Public Methods:
        formulas(input_names): One formula per output neuron
    """

    MAXIMUM_STRING_LENGTH = (1 << 27) - 10

    def __init__(self, genome: 'Genome', digits_precision: int = 2):
        self.genome = genome
        self._precision_mul = 10 ** digits_precision

        self._neuron_genes: list['NeuronGene'] = list(genome.neuron_genes)
        self._index : dict[int, int]  = {neuron.id: i for i, neuron in enumerate(self._neuron_genes)}
        self._inputs : list[str]      = [""] * len(self._neuron_genes)
        self._outputs: list[str]      = [""] * len(self._neuron_genes)

        # Biases, when present and non-zero
        for i, neuron in enumerate(self._neuron_genes):
            if neuron.type != NeuronType.INPUT and neuron.bias != 0.0:
                self._inputs[i] = self._number_to_str(neuron.bias)

    def formulas(self, input_names: Sequence[str]) -> list[str]:
        """
        Parameters:
            input_names: name of each input, in input order

        Returns:
            The formula of each output, in declared order; an empty list (with
            a warning) if the number of names does not match the genome's inputs.
        """
        if len(input_names) != self.genome.input_count:
            logger.warning("Formula of genome %d requested with %d input names, expected %d",
                           self.genome.id, len(input_names), self.genome.input_count)
            return []

        results = []
        input_position = 0
        for role, neuron, out_links in self.genome.iterate():
            index = self._index[neuron.id]

            if role == "input":
                self._inputs[index] = self._outputs[index] = input_names[input_position]
                input_position += 1
                self._feed_forward(out_links)

            elif role == "hidden":
                self._activate_neuron(neuron)
                self._feed_forward(out_links)

            else:
                self._activate_neuron(neuron)
                results.append(self._outputs[index])

        return [beautify_formula(formula) for formula in results]

    def _feed_forward(self, links: list['LinkGene']) -> None:
        for link in links:
            if not link.enabled or link.is_looped:
                continue

            in_index  = self._index[link.in_neuron]
            out_index = self._index[link.out_neuron]

            weight = self._number_to_str(link.weight)
            prefix = "+" if self._inputs[out_index] and not weight.startswith("-") else ""
            self._inputs[out_index] = self._append(self._inputs[out_index],
                                                   prefix + weight + "*" + self._outputs[in_index])

    def _activate_neuron(self, neuron: 'NeuronGene') -> str:
        index = self._index[neuron.id]

        looped_link = self.genome.looped_link(neuron.id)
        if looped_link is not None and looped_link.enabled:
            weight = self._number_to_str(looped_link.weight)
            prefix = "+" if self._inputs[index] and not weight.startswith("-") else ""
            self._inputs[index] = self._append(self._inputs[index], prefix + weight + f"*M{index}")

        self._outputs[index] = self._append(self._outputs[index], "𝛼(" + self._inputs[index] + ")")
        return self._outputs[index]

    def _append(self, destination: str, text: str) -> str:
        if len(destination) + len(text) <= self.MAXIMUM_STRING_LENGTH:
            return destination + text

        logger.warning("Formula too long: dropped a %d character term (formula length is %d)",
                       len(text), len(destination))
        return destination

    def _number_to_str(self, value: float) -> str:
        rounded = round(value * self._precision_mul) / self._precision_mul
        return np.format_float_positional(rounded, trim='-')
