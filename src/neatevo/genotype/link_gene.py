"""
NEAT Link Gene Module

This module implements the LinkGene class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    LinkGene: Gene encoding a weighted link between two neurons
"""

from neatevo.genotype.innovation import Innovation

class LinkGene:
    """
    A gene describing a weighted, directed link between two neurons.

    Links refer to their endpoints by neuron ID; the neuron genes themselves
    live in the owning genome. A link whose endpoints coincide is a self-loop
    ("looped recurrency"): the only kind of recurrency a genome may contain.

    Disabled links are kept, never deleted, so that their historical marking
    stays available for alignment. The innovation is None only for temporary links
    that were never registered with a community.

    Public Attributes:
        in_neuron:  ID of the source neuron
        out_neuron: ID of the destination neuron
        weight:     Weight of the link
        enabled:    Whether this link is active in the network
        innovation: Shared historical marking (None for unregistered temporary links)

    Public Properties:
        is_looped: True for self-loops
    """

    def __init__(self,
                 in_neuron : int,
                 out_neuron: int,
                 weight    : float,
                 enabled   : bool = True,
                 innovation: Innovation | None = None):
        self.in_neuron : int                = in_neuron
        self.out_neuron: int                = out_neuron
        self.weight    : float              = float(weight)
        self.enabled   : bool               = enabled
        self.innovation: Innovation | None  = innovation

    @property
    def is_looped(self) -> bool:
        return self.in_neuron == self.out_neuron

    def clone(self) -> 'LinkGene':
        """
        Copy this gene. The Innovation is shared, not copied.
        """
        return LinkGene(self.in_neuron, self.out_neuron, self.weight, self.enabled, self.innovation)

    def __repr__(self):
        n = self.innovation.n if self.innovation is not None else None
        return (f"LinkGene(in_neuron={self.in_neuron:03d}, out_neuron={self.out_neuron:03d}, "
                f"weight={self.weight:+.6f}, enabled={self.enabled}, innovation={n})")

    def __str__(self):
        n  = f"{self.innovation.n:03d}" if self.innovation is not None else "---"
        s  = f"[{n},{'E' if self.enabled else 'D'},"
        s += f"{self.in_neuron:02d}=>{self.out_neuron:02d},{self.weight:+.02f}]"
        return s
