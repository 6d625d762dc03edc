"""
NEAT Species Manager Module

This module implements the SpeciesManager class for the NEAT algorithm.
The manager coordinates the speciation process and the allocation of
offspring among species across generations.

Speciation in NEAT:
In traditional genetic algorithms, new structural innovations often have lower
initial fitness and are quickly eliminated. NEAT addresses this by organizing
the population into species - groups of genetically similar genomes that
compete primarily within their own niche. This allows novel structures time to
optimize before facing global competition.

How Speciation Works:
1. Each genome is compared with the representative of every active species, in order
2. It joins the first species whose representative is within the compatibility threshold
3. If no species is compatible, it founds a new species (as its representative)
4. Species left without members are extinct and removed

How Offspring are Allocated:
1. Each species gets an adjusted fitness (fitness shared among compatible genomes of the population)
2. Each species gets a share of the next generation proportional to its adjusted fitness
3. Rounding errors are fixed by randomly chosen species gaining or losing one slot at a time

Classes:
    SpeciesManager: Manages all species, handles speciation and offspring allocation
"""

import logging
import math
import random
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from neatarena.genotype import Genome
from neatarena.run.config   import Config
from neatarena.pool.species import Species

logger = logging.getLogger(__name__)

class SpeciesManager:
    """
    Manages the collection of species and the speciation process across generations.

    Public Attributes:
        species: The active species, in order of creation

    Public Methods:
        speciate(genomes):                          Assign all genomes to species
        assign(genome):                             Assign a single genome to a species
        prune():                                    Remove species without members
        find(species_id):                           Look up an active species by ID
        adjusted_fitness():                         Average adjusted fitness of each species
        calculate_offspring_allocations(target):    Determine offspring count per species
    """

    def __init__(self, config: Config):
        """
        Initialize the Species Manager.

        Parameters:
            config: Stores configuration parameters.
        """
        self.species: list[Species] = []
        self._config: Config        = config

    def assign(self, genome: 'Genome') -> Species:
        """
        Assign a genome to the first compatible species, creating a new species if none is.

        Returns:
            The species the genome was assigned to
        """
        for species in self.species:
            if species.attempt_add(genome):
                return species

        # No species is similar enough: this genome founds a new one
        species = Species(genome, self._config)
        self.species.append(species)
        return species

    def speciate(self, genomes: list['Genome']) -> None:
        """
        Assign all genomes in a population to species based on genetic similarity.

        Existing members are dropped first, so that afterwards the species membership
        lists partition 'genomes'. Species without members are removed.

        Postconditions:
            - Every genome is assigned to exactly one species
            - Each species has at least one member

        Parameters:
            genomes: All genomes in the population
        """
        for species in self.species:
            species.members = []
        for genome in genomes:
            genome.species = None

        for genome in genomes:
            self.assign(genome)

        self.prune()

    def prune(self) -> list[Species]:
        """
        Remove all species that have no members.

        Returns:
            The removed species
        """
        extinct      = [species for species in self.species if not species.members]
        self.species = [species for species in self.species if species.members]
        if extinct:
            logger.debug("%d species went extinct", len(extinct))
        return extinct

    def find(self, species_id: str) -> Species | None:
        for species in self.species:
            if species.id == species_id:
                return species
        return None

    def adjusted_fitness(self) -> list[float]:
        """
        Returns:
            The average adjusted fitness of each active species, in order
        """
        population = [genome for species in self.species for genome in species.members]
        return [species.average_adjusted_fitness(population) for species in self.species]

    def calculate_offspring_allocations(self, target_size: int) -> list[int]:
        """
        Calculate how many genomes each species contributes to the next generation.

        Each species is allocated a share of 'target_size' proportional to its average
        adjusted fitness (rounded down). If the adjusted fitness summed over all species
        is not positive, every species starts with 0. The allocations are then fixed up
        so they add up to exactly 'target_size': randomly picked species gain one slot
        at a time while there is a shortfall, or lose one slot at a time (never below 0)
        while there is a surplus.

        Parameters:
            target_size: The size of the next generation

        Returns:
            The number of offspring of each active species, in order
        """
        if target_size < 0:
            raise ValueError(f"target size must be non-negative, got {target_size}")
        if not self.species:
            if target_size > 0:
                raise RuntimeError("Cannot allocate offspring without any species")
            return []

        adjusted = self.adjusted_fitness()
        total    = sum(adjusted)

        if total <= 0:
            allocations = [0] * len(self.species)
        else:
            allocations = [max(0, math.floor(fitness / total * target_size)) for fitness in adjusted]

        # Reconcile rounding
        while sum(allocations) < target_size:
            allocations[random.randrange(len(allocations))] += 1

        while sum(allocations) > target_size:
            candidates = [i for i, allocation in enumerate(allocations) if allocation > 0]
            allocations[random.choice(candidates)] -= 1

        logger.debug("offspring allocations: %s", allocations)
        return allocations

    def __len__(self):
        return len(self.species)

    def __iter__(self):
        return iter(self.species)
