"""
NEAT Node Module.

This module implements the Node class and NodeType enumeration
for the NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    NodeType: Enumeration for node types (INPUT, BIAS, OUTPUT, HIDDEN)
    Node:     A vertex of a genome's network, with its cached evaluation state
"""

import numpy as np
from enum   import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from neatarena.genotype.genome import Genome

class NodeType(Enum):
    """
    Nodes come in four types: input, bias, output, hidden.
    """
    INPUT  = "I"
    BIAS   = "B"
    OUTPUT = "O"
    HIDDEN = "H"

class Node:
    """
    A node in a genome's Neural Network.

    Nodes are identified by their index in the owning genome's node list, so IDs are
    dense, genome-local and 0-based. A node does not own the genes touching it: it
    keeps the indices (into the genome's gene list) of its incoming and outgoing genes.

    Input and bias nodes are never computed. A bias node always holds 1.0; an input node
    holds whatever value was last fed into the genome. Output and hidden nodes compute
    their value as tanh of the weighted sum of their enabled incoming connections.

    The evaluation state ('value', 'cache_valid', 'in_progress') is private to the
    genome and reset at the start of every evaluation.

    Public Attributes:
        id:          Index of this node in the owning genome
        type:        Type of node (INPUT, BIAS, OUTPUT or HIDDEN)
        incoming:    Indices of the genes entering this node
        outgoing:    Indices of the genes leaving this node
        value:       Cached value (or, while being computed, the partial sum)
        cache_valid: Whether 'value' is the final value for the current evaluation
        in_progress: Whether the value of this node is currently being computed

    Public Methods:
        reset():                   Invalidate the cached value
        calculate_value(genome):   Compute (or fetch the cached) value of this node
    """

    __slots__ = ('id', 'type', 'incoming', 'outgoing', 'value', 'cache_valid', 'in_progress')

    def __init__(self, node_id: int, node_type: NodeType):
        self.id         : int       = node_id
        self.type       : NodeType  = node_type
        self.incoming   : list[int] = []
        self.outgoing   : list[int] = []
        self.value      : float     = 1.0 if node_type == NodeType.BIAS else 0.0
        self.cache_valid: bool      = False
        self.in_progress: bool      = False

    @property
    def is_fixed(self) -> bool:
        """Whether the value of this node is set (input/bias) rather than computed."""
        return self.type in (NodeType.INPUT, NodeType.BIAS)

    def reset(self) -> None:
        """
        Clear the evaluation state ahead of a new evaluation.
        """
        if self.type != NodeType.BIAS:
            self.value = 0.0
        self.cache_valid = False
        self.in_progress = False

    def calculate_value(self, genome: 'Genome') -> float:
        """
        Calculate the value of this node by reading its incoming connections.

        The calculation recurses into the source nodes and memoizes every value it
        computes. Structural mutations can create cycles; if a node is reached again
        while its own value is still being computed, the recursion stops there and
        tanh of the partial sum accumulated so far is returned as an approximation.
        That approximation is not cached, so other paths reaching the node later still
        see its completed value.

        Parameters:
            genome: the genome owning this node

        Returns:
            The activated value of this node
        """
        if self.type == NodeType.BIAS:
            return 1.0
        if self.type == NodeType.INPUT or self.cache_valid:
            return self.value

        # Cycle: this node is already being computed further up the recursion
        if self.in_progress:
            return float(np.tanh(self.value))

        self.in_progress = True
        self.value       = 0.0
        for gene_index in self.incoming:
            gene = genome.genes[gene_index]
            if not gene.enabled:
                continue
            source_value = genome.nodes[gene.from_node].calculate_value(genome)
            self.value  += source_value * gene.weight

        self.value       = float(np.tanh(self.value))
        self.cache_valid = True
        self.in_progress = False
        return self.value

    def __repr__(self):
        return f"Node(node_id={self.id:03d}, node_type=NodeType.{self.type.name})"

    def __str__(self):
        return f"[{self.type.value}{self.id}]"
