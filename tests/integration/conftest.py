"""
Shared fixtures for integration tests.
"""

import pytest

from neatarena.run.config import Config


@pytest.fixture
def xor_inputs():
    """XOR inputs (list format)."""
    return [[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]


@pytest.fixture
def xor_outputs():
    """XOR expected outputs (list format)."""
    return [[0.0], [1.0], [1.0], [0.0]]


@pytest.fixture
def xor_config():
    """A configuration suited to the XOR problem."""
    config = Config()
    config.population_size = 100
    config.num_inputs = 2
    config.num_bias = 1
    config.num_outputs = 1
    config.initial_cxn_policy = "full"
    config.weight_diff_coeff = 0.4
    config.species_delta_threshold = 3.0
    config.max_number_generations = 30
    return config


@pytest.fixture
def xor_fitness(xor_inputs, xor_outputs):
    """
    Function evaluating the XOR fitness of a genome (max 4.0 for perfect solution).
    """

    def _evaluate(genome):
        fitness = 4.0
        for inputs, expected_output in zip(xor_inputs, xor_outputs):
            output = genome.evaluate(inputs)
            error = output[0] - expected_output[0]
            fitness -= error ** 2
        return max(fitness, 0.0)

    return _evaluate
