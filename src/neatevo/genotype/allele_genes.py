"""
NEAT Gene Alignment Module

Aligns the link genes of two genomes by innovation number, the step shared by
the compatibility distance and by crossover.

Classes:
    AlleleGenesData: Matching, disjoint and excess genes of a pair of genomes

Functions:
    align_allele_genes: Classify the link genes of two genomes
"""

import logging
from dataclasses import dataclass, field
from typing      import TYPE_CHECKING

from neatevo.genotype.link_gene import LinkGene
if TYPE_CHECKING:
    from neatevo.genotype.genome import Genome

logger = logging.getLogger(__name__)

@dataclass
class AlleleGenesData:
    """
    Result of aligning genome A with genome B.

    matching_genes_a[i] and matching_genes_b[i] carry the same innovation number.
    """
    matching_genes_a: list[LinkGene] = field(default_factory=list)
    matching_genes_b: list[LinkGene] = field(default_factory=list)
    disjoint_genes_a: list[LinkGene] = field(default_factory=list)
    disjoint_genes_b: list[LinkGene] = field(default_factory=list)
    excess_genes_a  : list[LinkGene] = field(default_factory=list)
    excess_genes_b  : list[LinkGene] = field(default_factory=list)

    @property
    def excess_count(self) -> int:
        return len(self.excess_genes_a) + len(self.excess_genes_b)

    @property
    def disjoint_count(self) -> int:
        return len(self.disjoint_genes_a) + len(self.disjoint_genes_b)

def _max_innovation_number(genome: 'Genome') -> int:
    if not genome.link_genes:
        return 0
    return genome.link_genes[-1].innovation.n

def align_allele_genes(a: 'Genome', b: 'Genome') -> AlleleGenesData:
    """
    Align the link genes of two genomes.

    Both genomes are sorted first. Every gene is placed in a slot indexed by
    its innovation number minus one; walking the slots, genes present in both
    genomes are matching, genes present in one genome only are excess when
    their innovation number lies beyond the other genome's maximum, and
    disjoint otherwise.

    Parameters:
        a: first genome
        b: second genome

    Returns:
        AlleleGenesData describing the alignment
    """
    for genome in (a, b):
        if any(link.innovation is None for link in genome.link_genes):
            raise ValueError(f"genome {genome.id} holds link genes without an innovation; cannot align")

    a.sort_genes()
    b.sort_genes()

    result = AlleleGenesData()

    # Aligning a genome with itself: everything matches
    if a.id == b.id:
        result.matching_genes_a = list(a.link_genes)
        result.matching_genes_b = list(a.link_genes)
        return result

    if not a.link_genes or not b.link_genes:
        logger.warning("Aligning genome(s) without link genes: genome %d has %d, genome %d has %d",
                       a.id, len(a.link_genes), b.id, len(b.link_genes))

    max_innovation_a = _max_innovation_number(a)
    max_innovation_b = _max_innovation_number(b)
    max_innovation   = max(max_innovation_a, max_innovation_b)

    slots_a: list[LinkGene | None] = [None] * max_innovation
    slots_b: list[LinkGene | None] = [None] * max_innovation
    for gene in a.link_genes:
        slots_a[gene.innovation.n - 1] = gene
    for gene in b.link_genes:
        slots_b[gene.innovation.n - 1] = gene

    # slot i holds innovation number i+1
    for i, (gene_a, gene_b) in enumerate(zip(slots_a, slots_b)):
        if gene_a is not None and gene_b is not None:
            result.matching_genes_a.append(gene_a)
            result.matching_genes_b.append(gene_b)
        elif gene_a is not None:
            if i + 1 > max_innovation_b:
                result.excess_genes_a.append(gene_a)
            else:
                result.disjoint_genes_a.append(gene_a)
        elif gene_b is not None:
            if i + 1 > max_innovation_a:
                result.excess_genes_b.append(gene_b)
            else:
                result.disjoint_genes_b.append(gene_b)

    return result
