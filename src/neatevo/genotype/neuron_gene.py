"""
NEAT Neuron Gene Module

This module implements the NeuronGene class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    NeuronType: Enumeration for neuron types (INPUT, HIDDEN, OUTPUT)
    NeuronGene: Gene encoding a single network neuron
"""

from enum import Enum

class NeuronType(Enum):
    INPUT  = "input"
    HIDDEN = "hidden"
    OUTPUT = "output"

class NeuronGene:
    """
    A gene describing a single neuron of a neural network.

    Neurons are identified by an ID which is unique within a genome. IDs are
    handed out by the innovation registry of the owning community, so the same
    structural mutation gives the same ID in every genome where it occurs.

    The split coordinates place the neuron on a unit square: input neurons sit
    at split_y = 1, output neurons at split_y = 0, and a hidden neuron created
    by splitting a link is placed at the midpoint of that link. They are used
    for display, and to position neurons created later on.

    Input neurons have no bias (bias is None); all other neurons start at 0.

    Public Attributes:
        id:      Neuron identifier (unique within a genome)
        type:    INPUT, HIDDEN or OUTPUT
        split_x: Horizontal display coordinate in [0, 1]
        split_y: Vertical display coordinate in [0, 1]
        bias:    Bias added to the neuron input (None for input neurons)

    Public Methods:
        clone(): Return an independent copy of this gene
    """

    def __init__(self,
                 neuron_id: int,
                 type     : NeuronType,
                 split_x  : float,
                 split_y  : float,
                 bias     : float | None = None):
        """
        Initialize a neuron gene.

        Parameters:
            neuron_id: ID of the neuron
            type:      Type of neuron (INPUT, HIDDEN or OUTPUT)
            split_x:   Horizontal display coordinate
            split_y:   Vertical display coordinate
            bias:      Neuron bias; ignored for input neurons, defaults to 0 otherwise
        """
        self.id     : int          = neuron_id
        self.type   : NeuronType   = type
        self.split_x: float        = split_x
        self.split_y: float        = split_y
        self.bias   : float | None = None

        if type != NeuronType.INPUT:
            self.bias = 0.0 if bias is None else float(bias)

    def clone(self) -> 'NeuronGene':
        return NeuronGene(self.id, self.type, self.split_x, self.split_y, self.bias)

    def __repr__(self):
        return (f"NeuronGene(id={self.id:03d}, type={self.type.value}, "
                f"split=({self.split_x:.3f}, {self.split_y:.3f}), bias={self.bias})")

    def __str__(self):
        s = f"[{self.id:03d},{self.type.value[0].upper()}"
        if self.bias is not None:
            s += f",{self.bias:+.02f}"
        return s + "]"
