"""
XOR Problem Implementation for NEAT

This module implements the classic XOR (exclusive OR) problem as a benchmark
for the NEAT algorithm. The XOR problem is a fundamental test case in neural
network research, demonstrating the necessity of hidden nodes for solving
non-linearly separable problems.

The XOR Problem:
    XOR is a two-input, one-output boolean function where the output is True
    only when the inputs differ:
        Input (0, 0) → Output 0
        Input (0, 1) → Output 1
        Input (1, 0) → Output 1
        Input (1, 1) → Output 0

    This problem cannot be solved by a single-layer perceptron (linear classifier)
    and requires at least one hidden node, making it an ideal minimal test case
    for topology-evolving algorithms like NEAT.

Fitness Function:
    Fitness = 4.0 - Σ(output - target)²

    Maximum fitness of 4.0 is achieved when all four XOR cases produce exact outputs.

Classes:
    Trial_XOR: NEAT trial for solving XOR

Usage:
    config = Config("examples/configs/config_xor.ini")
    trial  = Trial_XOR(config)
    trial.run(num_jobs=1)
"""

from neatarena.run.config     import Config
from neatarena.genotype       import Genome
from neatarena.pool           import Population
from neatarena.run            import Trial
from neatarena.run.collection import save_collection

class Trial_XOR(Trial):
    """
    NEAT trial for solving the XOR (exclusive OR) problem.

    Problem Definition:
        Inputs: 2 binary values (0 or 1)
        Output: 1 value (XOR of inputs)
        Training cases: All 4 possible input combinations

    Success Criteria:
        Trial succeeds when fitness reaches the threshold or after
        maximum generations (both specified in the configuration file)

    Implemented Methods:
        _evaluate_fitness(genome): Test network on all 4 XOR cases
        _report_progress():        Display generation statistics and XOR truth table
        _final_report():           Display the fittest genome (and store the population)
    """

    def __init__(self,
                 config         : Config,
                 population     : Population | None = None,
                 collection_name: str | None = None,
                 suppress_output: bool = False):
        """
        Initialize the XOR trial.

        Parameters:
            config:          Configuration parameters (population size, mutation rates, etc.)
            population:      A population to continue training, if any
            collection_name: If given, the final population is saved under this name
            suppress_output: If True, suppress progress and final reports
        """
        super().__init__(config, population, suppress_output)

        self.xor_inputs      = [[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]
        self.xor_outputs     = [[0.0],      [1.0],      [1.0],      [0.0]]
        self.collection_name = collection_name

    def _evaluate_fitness(self, genome: Genome) -> float:
        """
        Evaluate genome fitness by testing on XOR inputs.

        Parameters:
            genome: The genome to evaluate

        Returns:
            Fitness score (maximum 4.0 for perfect XOR solution)
        """
        fitness = 4.0  # max possible fitness
        for inputs, expected_output in zip(self.xor_inputs, self.xor_outputs):
            output   = genome.evaluate(inputs)              # pass the inputs through the network
            error    = output[0] - expected_output[0]       # calculate error
            fitness -= error ** 2                           # errors cause the fitness to decrease

        # tanh outputs lie in [-1, 1], so errors up to 2 are possible
        return max(fitness, 0.0)

    def _report_progress(self):
        """
        Print a report describing the current generation.
        """
        fittest = self.population.get_fittest_genome()
        stats   = self.population.statistics()

        s  = f"===============\n"
        s += f"GENERATION {self._generation_counter:04d}\n"
        s += f"population size = {stats['population_size']}\n"
        s += f"number species  = {stats['species_count']}\n"
        s += f"innovations     = {stats['innovations']}\n"
        s += f"maximum fitness = {stats['max_fitness']:.4f}\n"
        s += f"mean fitness    = {stats['mean_fitness']:.4f}\n"
        s += '\n'
        s += str(fittest)
        s += '\n\n'

        s += "input         output   target  error\n"
        s += "------------------------------------\n"
        for inputs, target in zip(self.xor_inputs, self.xor_outputs):
            output = fittest.evaluate(inputs)[0]
            s += f"{inputs} -> {output:.4f}    {target[0]}   {abs(output - target[0]):.4f}\n"

        print(s)

    def _final_report(self):
        """
        Display results at the end of the trial.
        """
        fittest = self.population.get_fittest_genome()

        s  = "\nRESULT: " + ("FAILED" if self.failed else "SUCCESS") + "\n"
        s += f"generations     = {self.population.generation}\n"
        s += f"run time        = {self.population.run_time:.2f}s\n"
        s += f"hidden nodes    = {len(fittest.hidden_nodes)}\n"
        s += f"enabled genes   = {sum(gene.enabled for gene in fittest.genes)}\n"
        print(s)

        if self.collection_name:
            path = save_collection(self.population, self.collection_name)
            print(f"Population saved to '{path}'")
