"""
NEAT Phenotype Package

This package expresses genomes as executable networks.

Exported Classes:
    NeuronData:     Runtime data of one neuron
    NeuralNetwork:  Network activated in topological order, with self-loop memory
    FormulaNetwork: Symbolic counterpart producing output formulas
"""

from neatevo.phenotype.neural_network  import NeuronData, NeuralNetwork
from neatevo.phenotype.formula_network import FormulaNetwork

__all__ = ['NeuronData',
           'NeuralNetwork',
           'FormulaNetwork']
