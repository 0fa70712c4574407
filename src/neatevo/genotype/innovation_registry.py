"""
NEAT Innovation Registry Module

This module implements the InnovationRegistry class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    InnovationRegistry: Per-community record of innovations and neuron IDs
"""

from itertools import count

from neatevo.genotype.innovation import Innovation, LinkGeneMutationRecord, NeuronGeneMutationRecord

class InnovationRegistry:
    """
    Tracks structural changes across all genomes of one community.

    Ensures that the same structural change gets the same innovation
    (for links) and the same neuron ID (for split links), for the whole
    lifetime of the community. Records are never pruned.

    One registry is owned by each Community; there is no global state,
    so several communities can evolve side by side.

    Public Attributes:
        link_gene_records:   LinkGeneMutationRecord list, in creation order
        neuron_gene_records: NeuronGeneMutationRecord list, in creation order

    Public Methods:
        determine_innovation_for_link(in_id, out_id):      Shared Innovation for a link
        find_neuron_id_for_mutation_at_link(in_id, out_id): Neuron ID that split a link, or None
        record_neuron_mutation(neuron_id, in_id, out_id):   Remember a link split
        next_neuron_id():                                   Allocate a brand-new neuron ID
    """

    def __init__(self, input_count: int, output_count: int):
        """
        Parameters:
            input_count:  number of input neurons of every genome
            output_count: number of output neurons of every genome
        """
        # Innovation numbers start at 1; input and output neurons take IDs 1..I+O
        self._next_innovation_number = count(1)
        self._next_neuron_id         = count(input_count + output_count + 1)

        self.link_gene_records  : list[LinkGeneMutationRecord]   = []
        self.neuron_gene_records: list[NeuronGeneMutationRecord] = []

        self._innovations: dict[tuple[int, int], Innovation] = {}   # (in_id, out_id) -> Innovation
        self._split_ids  : dict[tuple[int, int], int]        = {}   # (in_id, out_id) -> neuron ID

    def determine_innovation_for_link(self, in_neuron_id: int, out_neuron_id: int) -> Innovation:
        """
        Get the innovation for a link, identified by its endpoints.
        Returns the existing Innovation if this link was created before,
        otherwise creates, records and returns a new one.

        Parameters:
            in_neuron_id:  neuron ID for the 'from' end of the link
            out_neuron_id: neuron ID for the 'to' end of the link

        Returns:
            The Innovation shared by every genome holding this link
        """
        key = (in_neuron_id, out_neuron_id)

        # This is a new link
        if key not in self._innovations:
            innovation = Innovation(next(self._next_innovation_number), in_neuron_id, out_neuron_id)
            self._innovations[key] = innovation
            self.link_gene_records.append(LinkGeneMutationRecord(in_neuron_id, out_neuron_id, innovation))

        return self._innovations[key]

    def find_neuron_id_for_mutation_at_link(self, in_neuron_id: int, out_neuron_id: int) -> int | None:
        """
        Return the ID of the neuron created the first time the link
        (in_neuron_id -> out_neuron_id) was split, or None if it never was.
        """
        return self._split_ids.get((in_neuron_id, out_neuron_id))

    def record_neuron_mutation(self, neuron_id: int, in_neuron_id: int, out_neuron_id: int) -> None:
        """
        Remember that splitting (in_neuron_id -> out_neuron_id) produced 'neuron_id'.
        Only the first split of a link is recorded.
        """
        key = (in_neuron_id, out_neuron_id)
        if key in self._split_ids:
            return

        self._split_ids[key] = neuron_id
        self.neuron_gene_records.append(NeuronGeneMutationRecord(neuron_id, in_neuron_id, out_neuron_id))

    def next_neuron_id(self) -> int:
        return next(self._next_neuron_id)

    def reserve_neuron_ids(self, max_neuron_id: int) -> None:
        """
        Make sure IDs handed out from now on are above 'max_neuron_id'.
        Used when genomes created elsewhere are brought into the community.
        """
        upcoming = next(self._next_neuron_id)
        self._next_neuron_id = count(max(upcoming, max_neuron_id + 1))

    @property
    def innovation_count(self) -> int:
        return len(self.link_gene_records)
