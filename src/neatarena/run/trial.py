"""
NEAT Trial Module

This module defines the abstract base class for NEAT trials with built-in
support for CPU-based parallelization using joblib.

A trial represents one independent run of the NEAT algorithm, evolving a
population through generations until a solution is found or the maximum
number of generations is reached.
"""

import time
from abc        import ABC, abstractmethod
from joblib     import Parallel, delayed
from statistics import mean

from neatarena.run.config import Config
from neatarena.genotype   import Genome
from neatarena.pool       import Population

class Trial(ABC):
    """
    Abstract base class for implementing a NEAT trial.

    A trial represents one independent run of the NEAT algorithm, evolving a
    population through generations until a solution is found or the maximum
    number of generations is reached.

    Subclasses must implement:
    - _evaluate_fitness(genome): Evaluate fitness for a single genome
    - _report_progress(): Display progress after each generation
    - _final_report(): Display final results

    Subclasses can override:
    - _reset(): Reset trial-specific state (call super()._reset())
    - _terminate(): Custom termination logic (default: max generations + fitness threshold)

    Public Attributes:
        population: The evolving population (None until the trial runs)
        failed:     Whether the trial ended without reaching the fitness threshold

    Public Methods:
        run(): Execute a complete NEAT trial

    Parallelization of fitness evaluation for genomes:
        num_jobs=1:  Serial evaluation (no parallelization)
        num_jobs>1:  Use specified number of parallel processes
        num_jobs=-1: Use all available CPU cores
    """

    def __init__(self, config: Config, population: Population | None = None, suppress_output: bool = False):
        """
        Initialize the trial.

        Parameters:
            config:          Configuration parameters
            population:      A population to continue training (e.g. a loaded collection);
                             if None, the trial starts from a new base population
            suppress_output: If True, suppress progress and final reports
                             (useful when running multiple trials in a row)
        """
        self._config            : Config            = config
        self._generation_counter: int               = 0
        self._initial_population: Population | None = population
        self._suppress_output   : bool              = suppress_output
        self.population         : Population | None = None
        self.failed             : bool              = True

    def run(self, num_jobs: int = 1):
        """
        Run the trial.

        Resets the trial state and runs the evolutionary
        algorithm until the terminate condition is met.

        Parameters:
            num_jobs: Number of parallel processes for fitness evaluation of genomes
                      1 = serial (no parallelization)
                     -1 = use all available CPU cores
                     >1 = use specified number of processes
        """
        # Reset the trial state before starting a new run
        self._reset()

        start = time.perf_counter()

        # Create the initial population (or continue an existing one)
        if self._initial_population is not None:
            self.population = self._initial_population
        else:
            self.population = Population(self._config)
            self.population.generate_base_population()

        # Evaluate the fitness of the initial population
        self._evaluate_fitness_all(num_jobs)
        start = self._update_run_time(start)

        # Display progress for the initial population
        if not self._suppress_output:
            self._report_progress()

        # Evolution loop
        while not self._terminate():
            self._generation_counter += 1

            # The members of the population mate and create offspring
            self.population.breed_next_generation()

            # Evaluate the fitness of each genome in the new generation
            self._evaluate_fitness_all(num_jobs)
            start = self._update_run_time(start)

            # Display progress after each generation
            if not self._suppress_output:
                self._report_progress()

        # Produce final report
        if not self._suppress_output:
            self._final_report()

    def _update_run_time(self, start: float) -> float:
        now = time.perf_counter()
        self.population.run_time += now - start
        return now

    def _reset(self):
        """
        Reset the trial state before starting a new run.

        Subclasses with problem-specific data should call
        super()._reset() and then initialize that data.
        """
        self._generation_counter = 0
        self.failed = True

    @abstractmethod
    def _evaluate_fitness(self, genome: Genome) -> float:
        """
        Evaluate and return the fitness of a genome.

        This method should feed inputs from the problem domain through the genome
        (see 'Genome.evaluate') and compute a fitness score. Higher fitness values
        indicate better performance and a larger share of the next generation.

        IMPORTANT: The fitness must be a positive number (or zero).

        Parameters:
            genome: The Genome (neural network) to evaluate

        Returns:
            float: Fitness score for the genome
        """
        pass

    def _evaluate_fitness_all(self, num_jobs: int):
        """
        Evaluate fitness for all genomes in the population.

        Uses serial or parallel evaluation based on num_jobs:
        - num_jobs=1: Sequential evaluation in single process
        - num_jobs>1 or -1: Parallel evaluation using joblib

        Parameters:
            num_jobs: Number of parallel processes for fitness evaluation
        """
        genomes   = self.population.genomes
        serialize = num_jobs == 1

        if serialize:
            for genome in genomes:
                genome.fitness = self._evaluate_fitness(genome)
        else:
            fitness_all = Parallel(num_jobs)(delayed(self._evaluate_fitness)(g) for g in genomes)
            for genome, fitness in zip(genomes, fitness_all):
                genome.fitness = fitness

    @abstractmethod
    def _report_progress(self):
        """
        Report trial progress after each generation.

        This method is called after evaluating each generation and can be used to
        log statistics, save collections, or display progress information
        (e.g., generation number, best fitness, species count).

        This method is suppressed by setting 'self._suppress_output' to 'True'.
        """
        pass

    @abstractmethod
    def _final_report(self):
        """
        Produce final report at the end of the trial.

        This method is suppressed by setting 'self._suppress_output' to 'True'.
        """
        pass

    def _terminate(self) -> bool:
        """
        Determine whether the trial should terminate.

        This default implementation stops the trial after a maximum number
        of generations and (optionally) also stops it if a given measure of
        population fitness has reached a given threshold.

        Subclasses can override this method for custom termination logic.

        Returns:
            bool: True if the trial should stop, False otherwise
        """
        # Has this trial run for too long?
        terminate = self._generation_counter >= self._config.max_number_generations

        # Check whether the fitness has reached a target threshold
        if self._config.fitness_termination_check:
            genome_fitness  = [genome.fitness for genome in self.population.genomes]
            overall_fitness = None

            if self._config.fitness_criterion == "max":
                overall_fitness = max(genome_fitness)
            elif self._config.fitness_criterion == "mean":
                overall_fitness = mean(genome_fitness)
            else:
                raise RuntimeError("bad 'fitness_criterion' in configuration file")

            # Compare a measure of population fitness (max, mean, ...) against a threshold
            success = overall_fitness >= self._config.fitness_threshold
            terminate = terminate or success

            if terminate:
                self.failed = not success

        return terminate
