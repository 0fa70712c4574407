"""
NEAT Speciation Algorithm Module

Classes:
    SpeciationAlgorithm: Abstract strategy that partitions genomes into species
"""

from abc    import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from neatevo.genotype     import Genome
    from neatevo.pool.species import Species

class SpeciationAlgorithm(ABC):
    """
    Strategy used by a Community to group its genomes into species.

    Implementations keep the current list of species, exposed through the
    'species' property; the Community reads it after every call.

    Abstract Methods:
        init(genomes, species_count):           Partition the initial population
        respeciate_all(genomes, offspring):     Re-partition every genome
        integrate_new_genomes(genomes, offspring): Place new offspring among existing species
    """

    def __init__(self):
        self._species: list['Species'] = []

    @property
    def species(self) -> list['Species']:
        return self._species

    @abstractmethod
    def init(self, genomes: list['Genome'], species_count: int) -> None:
        """
        Partition the initial population into 'species_count' species.
        """
        pass

    @abstractmethod
    def respeciate_all(self, genomes: list['Genome'], offspring: list['Genome']) -> None:
        """
        Re-partition every genome, after one or more species died out.

        Parameters:
            genomes:   every genome of the new generation (elites and offspring)
            offspring: the genomes created this generation
        """
        pass

    @abstractmethod
    def integrate_new_genomes(self, genomes: list['Genome'], offspring: list['Genome']) -> None:
        """
        Assign each new offspring to a species, keeping the existing species.

        Parameters:
            genomes:   every genome of the new generation (elites and offspring)
            offspring: the genomes created this generation
        """
        pass
