"""
Unit tests for gene alignment by innovation number.
"""

import pytest

from neatevo.genotype import LinkGene, align_allele_genes


def innovations(genes):
    return [gene.innovation.n for gene in genes]


class TestAlignAlleleGenes:
    """Test matching, disjoint and excess genes."""

    def test_identical_structure_matches_everything(self, make_genome):
        a = make_genome([(1, 3, 0.5), (2, 3, 1.0)])
        b = make_genome([(1, 3, -0.5), (2, 3, 2.0)])

        aligned = align_allele_genes(a, b)

        assert innovations(aligned.matching_genes_a) == [1, 2]
        assert [gene.weight for gene in aligned.matching_genes_b] == [-0.5, 2.0]
        assert aligned.excess_count == 0
        assert aligned.disjoint_count == 0

    def test_excess_and_disjoint(self, make_genome):
        # innovations: (1,3)=1, (2,3)=2, (1,4)=3, (4,3)=4
        a = make_genome([(1, 3, 1.0), (2, 3, 1.0)])
        b = make_genome([(2, 3, 1.0), (1, 4, 1.0), (4, 3, 1.0)], hidden=[4])

        aligned = align_allele_genes(a, b)

        assert innovations(aligned.matching_genes_a) == [2]
        assert innovations(aligned.disjoint_genes_a) == [1]
        assert innovations(aligned.excess_genes_b)   == [3, 4]
        assert aligned.disjoint_genes_b == []
        assert aligned.excess_genes_a   == []

    def test_alignment_is_symmetric(self, make_genome):
        a = make_genome([(1, 3, 1.0), (2, 3, 1.0)])
        b = make_genome([(2, 3, 1.0), (1, 4, 1.0), (4, 3, 1.0)], hidden=[4])

        ab = align_allele_genes(a, b)
        ba = align_allele_genes(b, a)

        assert innovations(ab.excess_genes_b)   == innovations(ba.excess_genes_a)
        assert innovations(ab.disjoint_genes_a) == innovations(ba.disjoint_genes_b)
        assert ab.excess_count   == ba.excess_count
        assert ab.disjoint_count == ba.disjoint_count

    def test_genomes_are_sorted_first(self, make_genome):
        a = make_genome([(1, 3, 1.0), (2, 3, 1.0)])
        b = make_genome([(2, 3, 1.0), (1, 3, 1.0)])
        b.link_genes.reverse()

        aligned = align_allele_genes(a, b)
        assert innovations(b.link_genes) == [1, 2]
        assert innovations(aligned.matching_genes_b) == [1, 2]

    def test_genome_with_itself(self, make_genome):
        a = make_genome([(1, 3, 1.0), (2, 3, 1.0)])
        aligned = align_allele_genes(a, a)
        assert aligned.matching_genes_a == aligned.matching_genes_b
        assert len(aligned.matching_genes_a) == 2

    def test_genome_without_links(self, make_genome):
        a = make_genome([(1, 3, 1.0), (2, 3, 1.0)])
        b = make_genome([])

        aligned = align_allele_genes(a, b)
        assert innovations(aligned.excess_genes_a) == [1, 2]

    def test_unregistered_links_are_rejected(self, make_genome):
        a = make_genome([(1, 3, 1.0)])
        b = make_genome([])
        b.link_genes.append(LinkGene(2, 3, 1.0))

        with pytest.raises(ValueError):
            align_allele_genes(a, b)
