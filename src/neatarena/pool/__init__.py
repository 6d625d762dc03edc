"""
NEAT Pool Package

This package manages the evolving population of the NEAT algorithm: the split of
genomes into species and the turnover from one generation to the next.

Modules:
    species:         Species class
    species_manager: SpeciesManager class
    population:      Population class

Exported Classes:
    Species:        A cluster of genetically similar genomes
    SpeciesManager: Speciation and offspring allocation
    Population:     Top-level evolutionary coordinator
"""

from neatarena.pool.species         import Species
from neatarena.pool.species_manager import SpeciesManager
from neatarena.pool.population      import Population

__all__ = ['Species',
           'SpeciesManager',
           'Population']
