"""
NEAT Population Module

This module implements the Population class, the top-level orchestrator for the NEAT
evolutionary algorithm. The population owns the genomes of the current generation,
the run-wide innovation registry and the species, and drives generation turnover.

Classes:
    Population: Top-level evolutionary coordinator managing genomes and generations
"""

import logging
import numpy as np

from neatarena.run.config               import Config
from neatarena.genotype                 import Genome, InnovationTracker
from neatarena.pool.species             import Species
from neatarena.pool.species_manager     import SpeciesManager

logger = logging.getLogger(__name__)

class Population:
    """
    A population of evolving genomes in the NEAT algorithm.

    The Population is the controller of one evolutionary run. The caller creates
    the base population, feeds sensor vectors to the genomes and reads their
    outputs, assigns each genome a fitness, and then asks the population to breed
    the next generation.

    The innovation registry lives as long as the population: a connection that
    reappears, in any genome and any generation, gets back its original innovation
    number. Only mutation and crossover (both driven from here) write to it.

    Public Attributes:
        config:     Hyperparameters of the run
        tracker:    The run-wide innovation registry
        genomes:    All genomes in the current generation
        generation: Number of generations bred so far
        run_time:   Cumulative run time in seconds (advanced by the caller)

    Public Properties:
        species: The active species

    Public Methods:
        fetch_innovation_id(from_node, to_node): Get (or create) an innovation number
        gene_exists(from_node, to_node):         Whether a connection was ever created
        create_genome():                         Create a new genome for this run
        generate_base_population(...):           Create and speciate the first generation
        breed_next_generation(target_size):      Create the next generation
        speciate():                              Assign all genomes to species
        get_fittest_genome():                    Return the genome with highest fitness
        statistics():                            Summary of the current generation
        to_dict():                               Convert the run state to a dictionary

    Class Methods:
        from_dict(population_dict): Restore a run from a dictionary
    """

    def __init__(self, config: Config, tracker: InnovationTracker | None = None):
        """
        Initialize an empty population (see 'generate_base_population').

        Parameters:
            config:  Stores configuration parameters
            tracker: Innovation registry to continue from (a new one if None)
        """
        self.config          : Config            = config
        self.tracker         : InnovationTracker = tracker if tracker is not None else InnovationTracker()
        self.genomes         : list[Genome]      = []
        self.generation      : int               = 0
        self.run_time        : float             = 0.0
        self._species_manager: SpeciesManager    = SpeciesManager(config)

    @property
    def species(self) -> list[Species]:
        return self._species_manager.species

    def fetch_innovation_id(self, from_node: int, to_node: int) -> int:
        return self.tracker.fetch_innovation_id(from_node, to_node)

    def gene_exists(self, from_node: int, to_node: int) -> bool:
        return self.tracker.gene_exists(from_node, to_node)

    def create_genome(self, input_count: int | None = None, output_count: int | None = None) -> Genome:
        """
        Create a new genome, connected according to the initial connection policy.
        """
        return Genome(self.config, self.tracker, input_count, output_count,
                      connect=self.config.initial_cxn_policy == "full")

    def generate_base_population(self,
                                 count                  : int | None = None,
                                 input_count            : int | None = None,
                                 output_count           : int | None = None,
                                 initial_mutation_rounds: int | None = None) -> list[Genome]:
        """
        Create the first generation and split it into species.

        Every genome is created fresh, then goes through a number of mutation rounds
        so that the population starts out diverse. Arguments left as None take their
        value from the configuration.

        Parameters:
            count:                   Number of genomes
            input_count:             Number of input nodes of each genome
            output_count:            Number of output nodes of each genome
            initial_mutation_rounds: Number of 'create_mutations' rounds applied to each genome

        Returns:
            The new genomes
        """
        count  = self.config.population_size         if count                   is None else count
        rounds = self.config.initial_mutation_rounds if initial_mutation_rounds is None else initial_mutation_rounds
        if count < 0:
            raise ValueError(f"population size must be non-negative, got {count}")

        self.genomes = []
        for _ in range(count):
            genome = self.create_genome(input_count, output_count)
            for _ in range(rounds):
                genome.create_mutations()
            self.genomes.append(genome)

        self.speciate()
        logger.debug("base population: %d genomes, %d species, %d innovations",
                     len(self.genomes), len(self.species), len(self.tracker))
        return self.genomes

    def speciate(self) -> None:
        """
        Assign every genome of the current generation to a species.
        """
        self._species_manager.speciate(self.genomes)

    def breed_next_generation(self, target_size: int | None = None) -> list[Genome]:
        """
        Create the next generation from the current one.

        As a precondition, the caller has assigned a fitness to every genome.

        The generation process follows these steps:

        Step 1: Offspring Allocation
        - Calculate the adjusted fitness of each species (fitness sharing)
        - Split 'target_size' among species in proportion to their adjusted fitness
        - Fix rounding by randomly adding/removing slots until the sizes add up

        Step 2: Reproduction
        - Each species fills its allocation with clones of its best members
          and mutated offspring of its fittest members

        Step 3: Speciation
        - Assign all offspring to species (creating new ones as needed)
        - Remove extinct species (those with no members)

        Parameters:
            target_size: Size of the new generation (the configured population size if None)

        Raises:
            ValueError: if 'target_size' is not positive

        Returns:
            The new generation (exactly 'target_size' genomes)
        """
        target_size = self.config.population_size if target_size is None else target_size
        if target_size < 1:
            raise ValueError(f"target size must be positive, got {target_size}")

        # Genomes without a species (e.g. orphans of a loaded run) take part in breeding
        for genome in self.genomes:
            if genome.species is None or genome.species not in self.species:
                self._species_manager.assign(genome)

        allocations = self._species_manager.calculate_offspring_allocations(target_size)

        # Spawn the new generation, one species at a time
        offspring_all: list[Genome] = []
        for species, allocation in zip(list(self.species), allocations):
            species.next_generation(allocation, offspring_all)
        self.genomes = offspring_all

        # Split the new population into species
        self.speciate()
        self.generation += 1

        logger.debug("generation %d: %d genomes, %d species, %d innovations",
                     self.generation, len(self.genomes), len(self.species), len(self.tracker))
        return self.genomes

    def get_fittest_genome(self) -> Genome | None:
        """
        Returns:
            The genome with the highest fitness value, or None if the population is empty
        """
        if not self.genomes:
            return None
        return max(self.genomes, key=lambda genome: genome.fitness)

    def statistics(self) -> dict:
        """
        Summarize the current generation.
        """
        fitness = np.array([genome.fitness for genome in self.genomes], dtype=float)
        return {
            "generation"     : self.generation,
            "population_size": len(self.genomes),
            "species_count"  : len(self.species),
            "max_fitness"    : float(fitness.max())  if fitness.size else 0.0,
            "mean_fitness"   : float(fitness.mean()) if fitness.size else 0.0,
            "innovations"    : len(self.tracker),
            "run_time"       : self.run_time,
        }

    def to_dict(self) -> dict:
        """
        Convert the state of the run to a dictionary.

        Returns:
            Dictionary with the following structure:
            {
                "config":      {...},                        # hyperparameters
                "innovations": [[from, to, innovation], ...],
                "generation":  12,
                "run_time":    340.5,
                "species":     [{"id": ..., "colour": [r, g, b], "generations_lived": 3,
                                 "representative": {...}}, ...],
                "genomes":     [{...}, ...]                  # see 'Genome.to_dict'
            }
        """
        return {
            "config"     : self.config.to_dict(),
            "innovations": [list(triple) for triple in self.tracker.to_list()],
            "generation" : self.generation,
            "run_time"   : self.run_time,
            "species"    : [species.to_dict() for species in self.species],
            "genomes"    : [genome.to_dict() for genome in self.genomes],
        }

    @classmethod
    def from_dict(cls, population_dict: dict) -> 'Population':
        """
        Restore a run from a dictionary (as produced by 'to_dict').

        The innovation table is restored before any genome, and the species before the
        genomes that refer to them. A genome whose species cannot be found, or which is
        no longer compatible with it, is reported with a warning and assigned to a
        species afresh.

        Raises:
            KeyError:   if a required field is missing
            ValueError: if a field is invalid
        """
        config  = Config.from_dict(population_dict["config"])
        tracker = InnovationTracker.from_list(population_dict["innovations"])

        population            = cls(config, tracker)
        population.generation = int(population_dict["generation"])
        population.run_time   = float(population_dict.get("run_time", 0.0))

        for species_dict in population_dict["species"]:
            species = Species.from_dict(species_dict, config, tracker)
            population._species_manager.species.append(species)

        orphans = []
        for genome_dict in population_dict["genomes"]:
            genome = Genome.from_dict(genome_dict, config, tracker)
            population.genomes.append(genome)

            species_id = genome_dict.get("species")
            if species_id is None:
                orphans.append(genome)
                continue

            species = population._species_manager.find(str(species_id))
            if species is None:
                logger.warning("Genome refers to unknown species %s, it will be re-speciated", species_id)
                orphans.append(genome)
            elif not species.attempt_add(genome):
                logger.warning("Genome is not compatible with its species %s, it will be re-speciated", species_id)
                orphans.append(genome)

        for genome in orphans:
            population._species_manager.assign(genome)
        population._species_manager.prune()

        return population

    def __str__(self):
        return '\n'.join(str(genome) for genome in self.genomes)
