"""
NEAT Species Module

This module implements the Species class for the NEAT algorithm.
A species represents a cluster of genetically similar genomes
that compete primarily within their own niche.

Classes:
    Species: Represents a single species with its members and reproduction policy
"""

import colorsys
import random
import uuid
from typing import TYPE_CHECKING

from neatarena.run.config import Config
if TYPE_CHECKING:
    from neatarena.genotype import Genome

class Species:
    """
    A species representing a cluster of genetically similar genomes in NEAT.

    In NEAT, the population is divided into species based on genetic similarity,
    allowing different evolutionary niches to develop independently. This protects
    innovative structures from being eliminated by competition with more mature
    solutions, as genomes only compete for resources within their own species.

    A species is a label, not an owner: the genomes live in the population, the
    species only refers to them. Its representative (used for compatibility tests)
    is usually a genome of the previous generation.

    Public Attributes:
        id:                Unique species identifier
        representative:    Genome used to decide whether other genomes belong to this species
        members:           The genomes currently assigned to this species
        colour:            RGB colour tag (components in [0, 1]), for display purposes
        generations_lived: Number of generations this species has bred

    Public Methods:
        is_compatible(genome):                 Whether a genome belongs in this species
        attempt_add(genome):                   Add a genome to this species, if compatible
        average_adjusted_fitness():            Mean fitness of members, after fitness sharing
        next_generation(allocation, out):      Breed the members into a new generation
    """

    def __init__(self,
                 representative   : 'Genome',
                 config           : Config,
                 species_id       : str | None = None,
                 colour           : tuple[float, float, float] | None = None,
                 generations_lived: int = 0):
        """
        Initialize a new species, with its representative as its first member.

        Parameters:
            representative:    the genome that represents this species in the speciation process
            config:            stores configuration parameters
            species_id:        unique identifier (a new one is generated if None)
            colour:            RGB colour tag (a random bright colour is generated if None)
            generations_lived: generations this species has already bred
        """
        self._config: Config = config

        self.id               : str                        = species_id or uuid.uuid4().hex
        self.representative   : 'Genome'                   = representative
        self.members          : list['Genome']             = [representative]
        self.colour           : tuple[float, float, float] = colour or self._random_colour()
        self.generations_lived: int                        = generations_lived

        representative.species = self

    @staticmethod
    def _random_colour() -> tuple[float, float, float]:
        return colorsys.hsv_to_rgb(random.random(), random.uniform(0.5, 1.0), random.uniform(0.5, 1.0))

    def is_compatible(self, genome: 'Genome') -> bool:
        """
        Whether a genome is similar enough to the representative to be part of this species.
        """
        return self.representative.is_compatible(genome)

    def attempt_add(self, genome: 'Genome') -> bool:
        """
        Add a genome to this species, provided it is compatible.

        Returns:
            True if the genome was added, False if it is not part of this species
        """
        if not self.is_compatible(genome):
            return False

        self.members.append(genome)
        genome.species = self
        return True

    def average_adjusted_fitness(self, population: list['Genome'] | None = None) -> float:
        """
        Calculate the average adjusted fitness of the members.

        Each member's fitness is shared among all genomes of the population compatible
        with it (itself included), so that large species cannot dominate reproduction
        merely by being large.

        Parameters:
            population: All genomes of the current generation (the members if None)
        """
        if not self.members:
            return 0.0
        if population is None:
            population = self.members

        total_adjusted_fitness = 0.0
        for genome in self.members:
            matches = sum(1 for other in population
                          if other is genome or genome.is_compatible(other))
            matches = max(matches, 1)
            total_adjusted_fitness += genome.fitness / matches

        return total_adjusted_fitness / len(self.members)

    def next_generation(self, allocation: int, out: list['Genome']) -> None:
        """
        Create this species' share of the next generation.

        The members are ranked by fitness. The first ranks (a fraction of the
        allocation set by 'breed_retention') are carried over as clones, provided
        their fitness is not zero. Every other slot is filled by crossing two parents
        picked among the fittest members (a fraction of the species set by
        'breed_consideration') and mutating the child.

        Afterwards the species has no members until the population is speciated again.

        Parameters:
            allocation: How many genomes this species has been allocated
            out:        Where to append the new genomes
        """
        if not self.members:
            return

        # Sort members from highest fitness to lowest
        ranked = sorted(self.members, key=lambda genome: genome.fitness, reverse=True)

        breed_range    = max(1, int(len(ranked) * self._config.breed_consideration))
        retained_count = int(allocation * self._config.breed_retention)

        # Select a new representative among the parents
        self.representative = ranked[random.randrange(breed_range)]

        for i in range(allocation):

            # Carry the best scorers over into the new generation
            if i <= retained_count and i < len(ranked) and ranked[i].fitness != 0.0:
                out.append(ranked[i].clone())

            # Breed and mutate a new genome
            else:
                parent1 = ranked[random.randrange(breed_range)]
                parent2 = ranked[random.randrange(breed_range)]

                child = parent1.crossover(parent2)
                child.create_mutations()
                out.append(child)

        # The members will be reassigned if this species survives
        self.members = []
        self.generations_lived += 1

    def to_dict(self) -> dict:
        return {
            "id"               : self.id,
            "colour"           : list(self.colour),
            "generations_lived": self.generations_lived,
            "representative"   : self.representative.to_dict(),
        }

    @classmethod
    def from_dict(cls, species_dict: dict, config: Config, tracker) -> 'Species':
        """
        Create a Species from a dictionary description (as produced by 'to_dict').

        The species starts without members: genomes are re-attached as they are loaded.

        Raises:
            KeyError:   if a required field is missing
            ValueError: if a field is invalid
        """
        from neatarena.genotype import Genome

        representative = Genome.from_dict(species_dict["representative"], config, tracker)
        colour         = tuple(float(c) for c in species_dict["colour"])
        if len(colour) != 3:
            raise ValueError(f"Species colour must have 3 components, got {len(colour)}")

        species = cls(representative, config,
                      species_id        = str(species_dict["id"]),
                      colour            = colour,
                      generations_lived = int(species_dict["generations_lived"]))
        species.members = []
        return species

    def __repr__(self):
        return (f"Species(id={self.id[:8]}, members={len(self.members)}, "
                f"generations_lived={self.generations_lived})")
