"""Pytest configuration and shared fixtures."""

import random
import sys
from pathlib import Path

import numpy as np
import pytest

# Add the source tree and the project root (for 'examples') to the Python path
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir / "src"))
sys.path.insert(0, str(root_dir))


@pytest.fixture(autouse=True)
def set_random_seeds():
    """Seed the random generators so that every test is reproducible."""
    random.seed(42)
    np.random.seed(42)
    yield
    random.seed(None)
    np.random.seed(None)


@pytest.fixture
def config():
    """Default configuration: 2 inputs, 1 bias node, 1 output."""
    from neatarena.run.config import Config
    return Config()


@pytest.fixture
def tracker():
    """A fresh innovation registry."""
    from neatarena.genotype import InnovationTracker
    return InnovationTracker()


@pytest.fixture
def make_genome(config, tracker):
    """
    Factory building a genome from a list of (from, to, weight) connections.

    Hidden nodes are created as needed, in increasing ID order.
    """
    from neatarena.genotype import Genome

    def _make(connections=(), hidden=0, fitness=0.0, cfg=None, trk=None):
        genome = Genome(config if cfg is None else cfg, tracker if trk is None else trk)
        for _ in range(hidden):
            genome.add_hidden_node()
        for from_node, to_node, weight in connections:
            genome.add_gene(from_node, to_node).weight = weight
        genome.fitness = fitness
        return genome

    return _make
