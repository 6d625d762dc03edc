"""
Shared fixtures for pool tests.
"""

import pytest


@pytest.fixture
def identical_genomes(make_genome):
    """Factory for genomes with identical structure (all in one species)."""

    def _make(fitness_values):
        return [make_genome([(0, 3, 0.5)], fitness=fitness) for fitness in fitness_values]

    return _make
