"""
NEAT Genotype Package

This package implements the genotype representation for the NEAT (NeuroEvolution of
Augmenting Topologies) algorithm: the genes, their historical markings, and the
operators that align, mutate and copy them.

Modules:
    neuron_gene:         NeuronType enumeration and NeuronGene class
    link_gene:           LinkGene class
    innovation:          Innovation and mutation record classes
    innovation_registry: InnovationRegistry class
    allele_genes:        Gene alignment by innovation number
    genome:              Genome class
    genome_mutator:      GenomeMutator class

Exported Classes:
    NeuronType:         Enumeration for neuron types (INPUT, HIDDEN, OUTPUT)
    NeuronGene:         Gene encoding a single network neuron
    LinkGene:           Gene encoding a weighted link between neurons
    Innovation:         Shared historical marking of a link
    InnovationRegistry: Per-community record of innovations and neuron IDs
    AlleleGenesData:    Result of aligning two genomes
    Genome:             Complete genome representing a neural network
    GenomeMutator:      Structural and parametric mutation operators
"""

from neatevo.genotype.allele_genes        import AlleleGenesData, align_allele_genes
from neatevo.genotype.genome              import Genome
from neatevo.genotype.genome_mutator      import GenomeMutator
from neatevo.genotype.innovation          import Innovation, LinkGeneMutationRecord, NeuronGeneMutationRecord
from neatevo.genotype.innovation_registry import InnovationRegistry
from neatevo.genotype.link_gene           import LinkGene
from neatevo.genotype.neuron_gene         import NeuronType, NeuronGene

__all__ = ['AlleleGenesData',
           'align_allele_genes',
           'Genome',
           'GenomeMutator',
           'Innovation',
           'LinkGeneMutationRecord',
           'NeuronGeneMutationRecord',
           'InnovationRegistry',
           'LinkGene',
           'NeuronType',
           'NeuronGene']
