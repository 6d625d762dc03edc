"""
NEAT Genotype Package

This package implements the genotype representation for the NEAT (NeuroEvolution of
Augmenting Topologies) algorithm: the genetic encoding of variable-topology networks,
which is also directly evaluated as a network.

A genome consists of:
- Nodes: the vertices of the network (input, bias, output, hidden)
- Genes: weighted, directed connections between nodes, carrying innovation numbers

Modules:
    node:               NodeType enumeration and Node class
    gene:               Gene class
    genome:             Genome class
    innovation_tracker: InnovationTracker class

Exported Classes:
    NodeType:          Enumeration for node types (INPUT, BIAS, OUTPUT, HIDDEN)
    Node:              A network vertex with its cached evaluation state
    Gene:              A weighted connection between two nodes
    GeneComparison:    Result of aligning the genes of two genomes
    Genome:            Complete genome representing a neural network
    InnovationTracker: Run-wide registry of innovation numbers
"""

from neatarena.genotype.gene               import Gene
from neatarena.genotype.genome             import GeneComparison, Genome
from neatarena.genotype.innovation_tracker import InnovationTracker
from neatarena.genotype.node               import NodeType, Node

__all__ = ['Gene',
           'GeneComparison',
           'Genome',
           'InnovationTracker',
           'Node',
           'NodeType']
