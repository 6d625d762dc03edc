"""
NEAT (NeuroEvolution of Augmenting Topologies) - A Python implementation.

This package provides an implementation of the NEAT algorithm for evolving the
weights and the topology of neural networks through genetic algorithms. Genomes
are evaluated directly (no separate phenotype), and may contain recurrent links.

Main components:
- genotype: Genetic encoding (nodes, genes, genomes, innovation tracking)
- pool: Population and speciation management
- run: Configuration, trial execution and persistence

Example:
    >>> from neatarena import Config, Trial
    >>> config = Config("config.ini")
    >>> class MyTrial(Trial):
    ...     def _evaluate_fitness(self, genome):
    ...         # Implement fitness evaluation
    ...         pass
    >>> trial = MyTrial(config)
    >>> trial.run()
"""

__version__ = "0.1.0"

# Import main classes for convenient access
from neatarena.run.config     import Config
from neatarena.run.trial      import Trial
from neatarena.run.collection import CollectionLoadError, save_collection, load_collection, list_collections
from neatarena.genotype       import Gene, Genome, InnovationTracker, Node, NodeType
from neatarena.pool           import Population, Species

__all__ = [
    "Config",
    "Trial",
    "CollectionLoadError",
    "save_collection",
    "load_collection",
    "list_collections",
    "Gene",
    "Genome",
    "InnovationTracker",
    "Node",
    "NodeType",
    "Population",
    "Species",
]
