"""
NEAT Genome Module

This module implements the Genome class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    Genome: Neuron and link genes describing one individual
"""

import json
import logging
import numpy as np
from collections import deque
from typing      import TYPE_CHECKING, Iterator

from neatevo.genotype.allele_genes        import align_allele_genes
from neatevo.genotype.innovation          import Innovation
from neatevo.genotype.innovation_registry import InnovationRegistry
from neatevo.genotype.link_gene           import LinkGene
from neatevo.genotype.neuron_gene         import NeuronGene, NeuronType
from neatevo.utils                        import random_int, resolve_rng
if TYPE_CHECKING:
    from neatevo.phenotype import NeuralNetwork
    from neatevo.pool      import Community, Species
    from neatevo.run       import Config

logger = logging.getLogger(__name__)

class Genome:
    """
    A NEAT genome: an ordered list of neuron genes and an ordered list of link genes.

    A minimal genome holds only the input and output neurons, plus a random
    subset of input->output links. Through mutation genomes grow hidden neurons
    and links; neurons are never removed and links are disabled, never deleted.

    Links refer to neurons by ID. The only recurrency a genome may hold is a
    self-loop on a single neuron; no cycle may pass through two or more neurons.
    This is checked before any link is added.

    Neuron numbering convention:
        - Input neurons:  [1, input_count]
        - Output neurons: [input_count + 1, input_count + output_count]
        - Hidden neurons: allocated by the community's innovation registry

    Public Attributes:
        id:                 Unique genome ID (monotonic per community)
        input_count:        Number of input neurons
        output_count:       Number of output neurons
        neuron_genes:       All neuron genes
        input_neuron_genes: The input neuron genes, in input order
        link_genes:         All link genes
        fitness:            Raw fitness, written by the driver
        adjusted_fitness:   Fitness after sharing within the species
        max_neuron_id:      Largest neuron ID in this genome
        species:            The Species this genome belongs to (or None)
        community:          The Community that owns this genome (or None)
        phenotype:          Cached network built by create_phenotype() (or None)

    Public Methods:
        init_minimal_genome():               Build input/output layers and initial links
        sort_genes():                        Sort neurons by ID and links by innovation
        compatibility_distance(other, cfg):  Genetic distance to another genome
        add_link(in_id, out_id, weight):     Add a registered link gene
        iterate():                           Traverse neurons from inputs to outputs
        has_loop():                          Whether a multi-neuron cycle exists
        is_link_potential_loop(in, out):     Whether a new link would create one
        create_phenotype():                  Build the executable network
        create_offspring(config):            Mutated clone of this genome
        clone():                             Copy with a fresh ID
        to_dict() / to_json():               Serialize

    Class Methods:
        from_community(community):           Empty genome with a fresh ID
        from_dict(d) / from_json(s):         Deserialize
    """

    def __init__(self,
                 input_count : int,
                 output_count: int,
                 genome_id   : int,
                 community   : 'Community | None' = None):
        """
        Initialize an empty Genome (no neurons, no links).

        Parameters:
            input_count:  number of input neurons
            output_count: number of output neurons
            genome_id:    unique genome identifier
            community:    the community that owns this genome
        """
        self.id          : int = genome_id
        self.input_count : int = input_count
        self.output_count: int = output_count

        self.neuron_genes      : list[NeuronGene] = []
        self.input_neuron_genes: list[NeuronGene] = []
        self.link_genes        : list[LinkGene]   = []

        self.fitness         : float = 0.0
        self.adjusted_fitness: float = 0.0
        self.max_neuron_id   : int   = 0

        self.species  : 'Species | None'       = None
        self.community: 'Community | None'     = community
        self.phenotype: 'NeuralNetwork | None' = None

    @classmethod
    def from_community(cls, community: 'Community') -> 'Genome':
        """
        Create an empty genome owned by 'community', with a fresh ID.
        """
        return cls(community.input_count, community.output_count, community.allocate_genome_id(), community)

    @property
    def rng(self) -> np.random.Generator:
        return resolve_rng(self.community.rng if self.community is not None else None)

    @property
    def hidden_count(self) -> int:
        return len(self.neuron_genes) - self.input_count - self.output_count

    def init_minimal_genome(self) -> 'Genome':
        """
        Build the input and output layers, then link each (input, output) pair
        with probability 'prob_of_making_link_in_initial_genome'. If no link was
        made, one random pair is linked so that the genome is never empty.

        Returns:
            self
        """
        config = self.community.config
        rng    = self.rng

        self.neuron_genes       = []
        self.input_neuron_genes = []
        self.link_genes         = []
        self.max_neuron_id      = 0

        # Inputs on the top row, outputs on the bottom row, evenly spread
        for i in range(self.input_count):
            split_x = (i + 1) / self.input_count - 0.5 / self.input_count
            self.add_neuron(NeuronGene(self.max_neuron_id + 1, NeuronType.INPUT, split_x, 1.0))

        for i in range(self.output_count):
            split_x = (i + 1) / self.output_count - 0.5 / self.output_count
            self.add_neuron(NeuronGene(self.max_neuron_id + 1, NeuronType.OUTPUT, split_x, 0.0))

        outputs = self.neuron_genes[self.input_count:]
        for input_neuron in self.input_neuron_genes:
            for output_neuron in outputs:
                if rng.random() < config.prob_of_making_link_in_initial_genome:
                    self.add_link(input_neuron.id, output_neuron.id, rng.uniform(-1.0, 1.0))

        if not self.link_genes:
            i = random_int(0, self.input_count  - 1, rng)
            j = random_int(0, self.output_count - 1, rng)
            self.add_link(self.input_neuron_genes[i].id, outputs[j].id, rng.uniform(-1.0, 1.0))

        return self

    def sort_genes(self) -> None:
        """
        Sort neurons by ascending ID and links by ascending innovation number.
        Required before aligning genes.
        """
        self.neuron_genes.sort(key=lambda neuron: neuron.id)
        self.input_neuron_genes.sort(key=lambda neuron: neuron.id)
        self.link_genes.sort(key=lambda link: link.innovation.n)

    def compatibility_distance(self, other: 'Genome', config: 'Config') -> float:
        """
        Calculate the compatibility distance between this genome and another.

            distance = c1/N * excess + c2/N * disjoint + c3 * W

        where N is the number of link genes of the larger genome and W the mean
        absolute weight difference of matching genes (disabled ones included).

        Parameters:
            other:  the genome to compare with
            config: provides the c1, c2 and c3 coefficients

        Returns:
            The distance (0 when comparing a genome with itself)
        """
        if self.id == other.id:
            return 0.0

        N = max(len(self.link_genes), len(other.link_genes))
        if N <= 0:
            logger.error("Compatibility distance requested for genomes %d and %d, which have no link genes",
                         self.id, other.id)
            raise ValueError(f"genomes {self.id} and {other.id} have no link genes")

        aligned = align_allele_genes(self, other)

        W = 0.0
        if aligned.matching_genes_a:
            W = sum(abs(a.weight - b.weight) for a, b in zip(aligned.matching_genes_a, aligned.matching_genes_b))
            W /= len(aligned.matching_genes_a)

        return (config.excess_genes_coefficient   / N * aligned.excess_count   +
                config.disjoint_genes_coefficient / N * aligned.disjoint_count +
                config.weights_coefficient * W)

    # ----------------
    # Neuron and link lookups

    def add_neuron(self, neuron: NeuronGene) -> NeuronGene:
        self.neuron_genes.append(neuron)
        if neuron.type == NeuronType.INPUT:
            self.input_neuron_genes.append(neuron)
        self.max_neuron_id = max(self.max_neuron_id, neuron.id)
        return neuron

    def add_link(self, in_neuron_id: int, out_neuron_id: int, weight: float, enabled: bool = True) -> LinkGene:
        """
        Add a link gene, with the innovation the community assigns to this neuron pair.

        Parameters:
            in_neuron_id:  ID of the source neuron
            out_neuron_id: ID of the destination neuron
            weight:        link weight
            enabled:       whether the link is active

        Returns:
            The new LinkGene
        """
        if self.community is None:
            raise RuntimeError(f"genome {self.id} does not belong to a community; cannot register a link")

        innovation = self.community.registry.determine_innovation_for_link(in_neuron_id, out_neuron_id)
        link = LinkGene(in_neuron_id, out_neuron_id, weight, enabled, innovation)
        self.link_genes.append(link)
        return link

    def is_duplicate_link(self, in_neuron_id: int, out_neuron_id: int) -> bool:
        return any(link.in_neuron == in_neuron_id and link.out_neuron == out_neuron_id for link in self.link_genes)

    def get_neuron_by_id(self, neuron_id: int, warn: bool = False) -> NeuronGene | None:
        """
        Return the neuron gene with the given ID, or None if there is none.

        Parameters:
            neuron_id: ID to look up
            warn:      log a warning when the neuron is missing
        """
        for neuron in self.neuron_genes:
            if neuron.id == neuron_id:
                return neuron

        if warn:
            logger.warning("Neuron %d requested from genome %d, which does not have it", neuron_id, self.id)
        return None

    def get_neuron_index_by_id(self, neuron_id: int) -> int:
        """
        Return the position of a neuron within 'neuron_genes', or -1 if missing.
        """
        for i, neuron in enumerate(self.neuron_genes):
            if neuron.id == neuron_id:
                return i

        logger.warning("Index of neuron %d requested from genome %d, which does not have it", neuron_id, self.id)
        return -1

    def has_neuron_with_id(self, neuron_id: int) -> bool:
        return any(neuron.id == neuron_id for neuron in self.neuron_genes)

    def looped_link(self, neuron_id: int) -> LinkGene | None:
        """
        Return the self-loop of a neuron, if it has one.
        """
        for link in self.link_genes:
            if link.in_neuron == neuron_id and link.out_neuron == neuron_id:
                return link
        return None

    def get_non_looped_links_with_source(self, neuron_id: int) -> list[LinkGene]:
        return [link for link in self.link_genes if link.in_neuron == neuron_id and not link.is_looped]

    # ----------------
    # Traversal and loop detection

    def iterate(self) -> Iterator[tuple[str, NeuronGene, list[LinkGene]]]:
        """
        Traverse the network from the inputs towards the outputs.

        Yields (role, neuron, out_links) tuples, where role is "input", "hidden"
        or "output" and out_links are the neuron's outgoing non-looped links
        (disabled ones included; consumers decide whether to use them):

        1. every input neuron, in input order;
        2. hidden neurons reachable from the inputs, wave by wave: a hidden
           neuron joins a wave once every link reaching it from a reachable
           neuron has been fed by an earlier wave;
        3. every output neuron, in neuron-list order.

        Hidden neurons sitting on a multi-neuron cycle never become ready and
        are not yielded.
        """
        out_links: dict[int, list[LinkGene]] = {neuron.id: [] for neuron in self.neuron_genes}
        for link in self.link_genes:
            if not link.is_looped and link.in_neuron in out_links and link.out_neuron in out_links:
                out_links[link.in_neuron].append(link)

        hidden = {neuron.id: neuron for neuron in self.neuron_genes if neuron.type == NeuronType.HIDDEN}

        # Hidden neurons reachable from the inputs
        reachable = set()
        queue = deque(neuron.id for neuron in self.input_neuron_genes)
        while queue:
            for link in out_links[queue.popleft()]:
                if link.out_neuron in hidden and link.out_neuron not in reachable:
                    reachable.add(link.out_neuron)
                    queue.append(link.out_neuron)

        # Number of links each reachable hidden neuron still waits for
        pending = {neuron_id: 0 for neuron_id in reachable}
        for source_id in [neuron.id for neuron in self.input_neuron_genes] + list(reachable):
            for link in out_links[source_id]:
                if link.out_neuron in pending:
                    pending[link.out_neuron] += 1

        def feed(links: list[LinkGene], wave: list[int]) -> None:
            for link in links:
                if link.out_neuron in pending:
                    pending[link.out_neuron] -= 1
                    if pending[link.out_neuron] == 0:
                        wave.append(link.out_neuron)

        wave: list[int] = []
        for neuron in list(self.input_neuron_genes):
            links = out_links[neuron.id]
            yield "input", neuron, links
            feed(links, wave)

        visited = 0
        while wave:
            next_wave: list[int] = []
            for neuron_id in wave:
                links = out_links[neuron_id]
                visited += 1
                yield "hidden", hidden[neuron_id], links
                feed(links, next_wave)
            wave = next_wave

        if visited < len(reachable):
            logger.warning("Genome %d has a loop: %d hidden neuron(s) could not be reached in order",
                           self.id, len(reachable) - visited)

        for neuron in list(self.neuron_genes):
            if neuron.type == NeuronType.OUTPUT:
                yield "output", neuron, out_links[neuron.id]

    def has_loop(self) -> bool:
        """
        Check whether the non-looped links of this genome form a cycle.

        Self-loops are allowed and ignored. A cycle through two or more
        neurons would make the network impossible to activate in order.
        """
        in_degree: dict[int, int]       = {neuron.id: 0  for neuron in self.neuron_genes}
        targets  : dict[int, list[int]] = {neuron.id: [] for neuron in self.neuron_genes}
        for link in self.link_genes:
            if link.is_looped or link.in_neuron not in targets or link.out_neuron not in in_degree:
                continue
            targets[link.in_neuron].append(link.out_neuron)
            in_degree[link.out_neuron] += 1

        # Kahn's algorithm: if some neurons can never be freed, there is a cycle
        ready = deque(neuron_id for neuron_id, degree in in_degree.items() if degree == 0)
        freed = 0
        while ready:
            neuron_id = ready.popleft()
            freed += 1
            for target in targets[neuron_id]:
                in_degree[target] -= 1
                if in_degree[target] == 0:
                    ready.append(target)

        return freed < len(in_degree)

    def is_link_potential_loop(self, in_neuron_id: int, out_neuron_id: int) -> bool:
        """
        Check whether adding the link (in_neuron_id -> out_neuron_id) would create a loop.
        The link is appended temporarily and always removed afterwards.
        """
        # Only a real cycle counts: a link closing a diamond (two paths joining
        # at the same neuron) is accepted
        candidate = LinkGene(in_neuron_id, out_neuron_id, 1.0, True, None)
        self.link_genes.append(candidate)
        try:
            return self.has_loop()
        finally:
            self.link_genes.pop()

    # ----------------
    # Reproduction

    def create_phenotype(self) -> 'NeuralNetwork':
        """
        Build (and cache in 'phenotype') the executable network for this genome.
        """
        # Import here to avoid circular import
        from neatevo.phenotype.neural_network import NeuralNetwork

        self.phenotype = NeuralNetwork(self)
        return self.phenotype

    def create_offspring(self, config: 'Config') -> 'Genome':
        """
        Produce a mutated clone of this genome (asexual reproduction).
        """
        # Import here to avoid circular import
        from neatevo.genotype.genome_mutator import GenomeMutator

        offspring = self.clone()
        GenomeMutator.mutate(offspring, config, self.rng)
        return offspring

    def clone(self) -> 'Genome':
        """
        Deep-copy this genome under a fresh ID.

        Neuron and link genes are copied; Innovation objects are shared.
        Fitness, adjusted fitness, species and max neuron ID carry over.
        """
        if self.community is None:
            raise RuntimeError(f"genome {self.id} does not belong to a community; cannot allocate an ID for its clone")

        new_genome = Genome.from_community(self.community)
        new_genome.fitness          = self.fitness
        new_genome.adjusted_fitness = self.adjusted_fitness
        new_genome.species          = self.species

        for neuron in self.neuron_genes:
            new_genome.add_neuron(neuron.clone())
        new_genome.link_genes = [link.clone() for link in self.link_genes]
        new_genome.max_neuron_id = max(self.max_neuron_id, new_genome.max_neuron_id)

        return new_genome

    def copy_neuron(self, neuron: NeuronGene) -> NeuronGene:
        """
        Copy a neuron gene into this genome, unless a neuron with its ID is already here.

        Returns:
            The neuron gene held by this genome
        """
        existing = self.get_neuron_by_id(neuron.id)
        if existing is not None:
            return existing
        return self.add_neuron(neuron.clone())

    def copy_link_and_neurons(self, link: LinkGene, source: 'Genome', enabled: bool | None = None) -> LinkGene:
        """
        Copy a link gene of 'source' into this genome, along with its endpoint
        neurons when they are not here yet. The Innovation is shared.

        Parameters:
            link:    link gene of 'source' to copy
            source:  the genome holding 'link'
            enabled: overrides the copied enabled flag when given

        Returns:
            The new LinkGene
        """
        for neuron_id in (link.in_neuron, link.out_neuron):
            neuron = source.get_neuron_by_id(neuron_id, warn=True)
            if neuron is not None:
                self.copy_neuron(neuron)

        new_link = link.clone()
        if enabled is not None:
            new_link.enabled = enabled
        self.link_genes.append(new_link)
        return new_link

    # ----------------
    # Persistence and display

    def to_dict(self) -> dict:
        """
        Convert the genome to a dictionary representation.

        This is the inverse operation of from_dict().

        Returns:
            Dictionary with the following structure:
            {
                "id": 7, "input_count": 2, "output_count": 1,
                "adjusted_fitness": 0.5, "max_neuron_id": 4,
                "neurons": [
                    {"id": 1, "type": "input",  "split_x": 0.25, "split_y": 1.0},
                    {"id": 3, "type": "output", "split_x": 0.5,  "split_y": 0.0, "bias": 0.1},
                    {"id": 4, "type": "hidden", "split_x": 0.37, "split_y": 0.5, "bias": 0.0}
                ],
                "links": [
                    {"from": 1, "to": 4, "weight": 1.0, "enabled": true, "innovation": 3}
                ]
            }
        """
        neurons = []
        for neuron in self.neuron_genes:
            neuron_dict = {
                "id"     : neuron.id,
                "type"   : neuron.type.value,
                "split_x": neuron.split_x,
                "split_y": neuron.split_y,
            }
            if neuron.type != NeuronType.INPUT:
                neuron_dict["bias"] = neuron.bias
            neurons.append(neuron_dict)

        links = []
        for link in self.link_genes:
            links.append({
                "from"      : link.in_neuron,
                "to"        : link.out_neuron,
                "weight"    : link.weight,
                "enabled"   : link.enabled,
                "innovation": link.innovation.n if link.innovation is not None else None
            })

        return {
            "id"              : self.id,
            "input_count"     : self.input_count,
            "output_count"    : self.output_count,
            "adjusted_fitness": self.adjusted_fitness,
            "max_neuron_id"   : self.max_neuron_id,
            "neurons"         : neurons,
            "links"           : links
        }

    @classmethod
    def from_dict(cls,
                  genome_dict: dict,
                  registry   : InnovationRegistry | None = None,
                  community  : 'Community | None'        = None) -> 'Genome':
        """
        Create a Genome from a dictionary produced by to_dict().

        Innovations are taken from 'registry' (or from the community's registry)
        when one is available, so that the loaded genome aligns with the genomes
        of that community; otherwise they are rebuilt from the stored numbers.

        Parameters:
            genome_dict: dictionary description of the genome
            registry:    registry used to resolve innovations
            community:   community the genome will belong to

        Returns:
            The reconstructed Genome

        Raises:
            ValueError: if the description is inconsistent
        """
        if registry is None and community is not None:
            registry = community.registry

        genome = cls(genome_dict["input_count"], genome_dict["output_count"], genome_dict["id"], community)

        for neuron_dict in genome_dict["neurons"]:
            neuron_type = NeuronType(neuron_dict["type"])
            neuron = NeuronGene(neuron_dict["id"], neuron_type,
                                neuron_dict["split_x"], neuron_dict["split_y"],
                                neuron_dict.get("bias"))
            if genome.has_neuron_with_id(neuron.id):
                raise ValueError(f"neuron ID {neuron.id} appears twice in genome {genome.id}")
            genome.add_neuron(neuron)

        if len(genome.input_neuron_genes) != genome.input_count:
            raise ValueError(f"genome {genome.id} declares {genome.input_count} inputs "
                             f"but holds {len(genome.input_neuron_genes)} input neurons")

        for link_dict in genome_dict["links"]:
            in_id, out_id = link_dict["from"], link_dict["to"]
            if not genome.has_neuron_with_id(in_id) or not genome.has_neuron_with_id(out_id):
                raise ValueError(f"link {in_id}->{out_id} of genome {genome.id} refers to a missing neuron")

            if registry is not None:
                innovation = registry.determine_innovation_for_link(in_id, out_id)
            elif link_dict.get("innovation") is not None:
                innovation = Innovation(link_dict["innovation"], in_id, out_id)
            else:
                innovation = None

            genome.link_genes.append(LinkGene(in_id, out_id, link_dict["weight"], link_dict["enabled"], innovation))

        genome.adjusted_fitness = genome_dict.get("adjusted_fitness", 0.0)
        genome.max_neuron_id    = max(genome.max_neuron_id, genome_dict.get("max_neuron_id", 0))

        if registry is not None:
            registry.reserve_neuron_ids(genome.max_neuron_id)

        return genome

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls,
                  text     : str,
                  registry : InnovationRegistry | None = None,
                  community: 'Community | None'        = None) -> 'Genome':
        return cls.from_dict(json.loads(text), registry, community)

    def describe(self) -> dict:
        """
        Describe the genome for a renderer.

        Returns:
            {"neurons": [{"id", "type", "split_x", "split_y"}, ...],
             "links":   [{"source", "dest", "enabled"}, ...]}
            where "source" and "dest" are positions in the "neurons" list.
        """
        positions = {neuron.id: i for i, neuron in enumerate(self.neuron_genes)}
        neurons = [{"id": n.id, "type": n.type.value, "split_x": n.split_x, "split_y": n.split_y}
                   for n in self.neuron_genes]
        links = [{"source": positions[l.in_neuron], "dest": positions[l.out_neuron], "enabled": l.enabled}
                 for l in self.link_genes
                 if l.in_neuron in positions and l.out_neuron in positions]
        return {"neurons": neurons, "links": links}

    def __str__(self):
        s  = f"Genome {self.id} (fitness={self.fitness:.4f})\n"
        s += "Neurons: " + " ".join(str(neuron) for neuron in self.neuron_genes) + "\n"
        s += "Links:   " + " ".join(str(link)   for link   in self.link_genes)
        return s
