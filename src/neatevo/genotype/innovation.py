"""
NEAT Innovation Module

Immutable records kept by the innovation registry.

Classes:
    Innovation:               Historical marking of a link between two neurons
    LinkGeneMutationRecord:   Registry entry mapping a neuron pair to its Innovation
    NeuronGeneMutationRecord: Registry entry remembering which neuron split a link
"""

from dataclasses import dataclass

@dataclass(frozen=True)
class Innovation:
    """
    The historical marking of a link gene.

    Every genome that discovers a link between the same two neurons shares the
    same Innovation object; 'n' is the key used to align genes of two genomes.
    """
    n         : int
    in_neuron : int
    out_neuron: int

@dataclass(frozen=True)
class LinkGeneMutationRecord:
    in_neuron : int
    out_neuron: int
    innovation: Innovation

@dataclass(frozen=True)
class NeuronGeneMutationRecord:
    """
    Records that the link (in_neuron -> out_neuron) was split by inserting
    the hidden neuron 'neuron_id', so that the same split elsewhere in the
    population reuses that ID.
    """
    neuron_id : int
    in_neuron : int
    out_neuron: int
