"""
Uncanny Valley Speciation Module

Classes:
    UncannyValleySpeciationAlgorithm: Round-robin start, leader-based integration of offspring
"""

import logging
import math
from typing import TYPE_CHECKING

from neatevo.pool.speciation_algorithm import SpeciationAlgorithm
from neatevo.pool.species              import Species
if TYPE_CHECKING:
    from neatevo.genotype import Genome
    from neatevo.run      import Config

logger = logging.getLogger(__name__)

class UncannyValleySpeciationAlgorithm(SpeciationAlgorithm):
    """
    The "uncanny valley" speciation strategy.

    The initial population is dealt round-robin into a fixed number of
    species, without looking at compatibility. Afterwards each species keeps
    a leader, and every offspring is compared with the leader of its parent's
    species:

    - if it is compatible (distance below 'min_species_compatibility_distance'),
      it moves to the first other species whose leader it is also compatible
      with, or stays with its parent's species;
    - if it is not, it founds a new species while the number of species is
      below the initial count, and otherwise joins whichever is closer of its
      parent's species and the species founded this generation.

    Once every offspring is placed, member lists are rebuilt from the genomes'
    species, so that every genome belongs to exactly one species.

    Public Attributes:
        species_count: The initial (and maximum) number of species
    """

    def __init__(self, config: 'Config'):
        super().__init__()
        self._config      : 'Config' = config
        self.species_count: int      = 0

    def init(self, genomes: list['Genome'], species_count: int) -> None:
        self.species_count = species_count
        self._species      = []

        for i, genome in enumerate(genomes):
            if i < species_count:
                species = self._new_species(genome)
                self._species.append(species)
            else:
                species = self._species[i % species_count]
                species.genomes.append(genome)
            genome.species = species

    def respeciate_all(self, genomes: list['Genome'], offspring: list['Genome']) -> None:
        self._species = [species for species in self._species if species.genomes]
        self.integrate_new_genomes(genomes, offspring)

    def integrate_new_genomes(self, genomes: list['Genome'], offspring: list['Genome']) -> None:
        self._update_leaders(genomes)

        threshold  = self._config.min_species_compatibility_distance
        new_species: list[Species] = []

        for genome in offspring:
            parent = genome.species

            # The parent's species died out (or was never known)
            if parent is None or not any(parent is species for species in self._species):
                self._place_orphan(genome, new_species)
                continue

            parent_distance = self._distance(genome, parent)

            if parent_distance < threshold:
                for species in self._species:
                    if species is not parent and self._distance(genome, species) < threshold:
                        genome.species = species
                        break

            elif len(new_species) + len(self._species) < self.species_count:
                new_species.append(self._new_species(genome))

            else:
                closest, min_distance = None, math.inf
                for species in new_species:
                    distance = self._distance(genome, species)
                    if distance < min_distance:
                        closest, min_distance = species, distance

                if parent_distance < min_distance:
                    closest = parent

                genome.species = closest

        self._species.extend(new_species)
        self._rebuild_members(genomes)

    def _new_species(self, founder: 'Genome') -> Species:
        species = Species(founder.community.allocate_species_id(), founder)
        founder.species = species
        return species

    def _distance(self, genome: 'Genome', species: Species) -> float:
        return genome.compatibility_distance(species.leader, self._config)

    def _place_orphan(self, genome: 'Genome', new_species: list[Species]) -> None:
        """
        Place an offspring whose parent species is gone: found a new species
        if there is room, otherwise join the species with the closest leader.
        """
        if len(new_species) + len(self._species) < self.species_count:
            new_species.append(self._new_species(genome))
            return

        candidates = self._species + new_species
        genome.species = min(candidates, key=lambda species: self._distance(genome, species))

    def _update_leaders(self, genomes: list['Genome']) -> None:
        """
        Make sure each species is led by a genome of the new generation: the
        old leader if it survived, otherwise the closest genome to the old
        leader among this species' genomes and the unspeciated ones.
        """
        for species in self._species:
            new_leader = species.genomes[0] if species.genomes else None
            new_leader_distance = math.inf
            candidates = 0

            for genome in genomes:
                if genome.id == species.leader.id:
                    new_leader = genome
                    break

                if genome.species is None or genome.species is species:
                    candidates += 1
                    distance = genome.compatibility_distance(species.leader, self._config)
                    if distance < new_leader_distance:
                        new_leader, new_leader_distance = genome, distance

            if new_leader is None:
                logger.error("Could not find a new leader for species %d (%d candidates among %d genomes)",
                             species.id, candidates, len(genomes))
                continue

            species.leader = new_leader

    def _rebuild_members(self, genomes: list['Genome']) -> None:
        for species in self._species:
            species.genomes = [genome for genome in genomes if genome.species is species]

        empty = [species for species in self._species if not species.genomes]
        for species in empty:
            logger.warning("Species %d has no members after speciation and is removed", species.id)
        self._species = [species for species in self._species if species.genomes]

        for species in self._species:
            if not any(genome is species.leader for genome in species.genomes):
                species.leader = species.genomes[0]
