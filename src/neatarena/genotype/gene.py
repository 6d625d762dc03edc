"""
NEAT Gene Module

This module implements the Gene class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    Gene: Gene encoding a weighted, directed connection between two nodes
"""

class Gene:
    """
    A gene describing a weighted connection between two nodes in a Neural Network.

    Each gene represents a directed edge in the network graph, connecting a
    source node to a destination node with an associated weight. Genes are
    aligned across genomes by their innovation number, which serves as a
    historical marker during crossover and speciation; within one genome a
    gene is also uniquely identified by its (from_node, to_node) pair.

    Genes are never deleted from a genome, only disabled.

    Public Attributes:
        innovation: Global innovation number identifying this connection
        from_node:  ID of the source node
        to_node:    ID of the destination node
        weight:     Weight of the connection
        enabled:    Whether this connection is active in the network

    Public Methods:
        copy(): Return an independent copy of this gene
    """

    __slots__ = ('innovation', 'from_node', 'to_node', 'weight', 'enabled')

    def __init__(self,
                 innovation: int,
                 from_node : int,
                 to_node   : int,
                 weight    : float,
                 enabled   : bool = True):
        self.innovation: int   = innovation
        self.from_node : int   = from_node
        self.to_node   : int   = to_node
        self.weight    : float = weight
        self.enabled   : bool  = enabled

    @property
    def key(self) -> tuple[int, int]:
        """The (from_node, to_node) pair of this gene."""
        return (self.from_node, self.to_node)

    def copy(self) -> 'Gene':
        return Gene(self.innovation, self.from_node, self.to_node, self.weight, self.enabled)

    def __eq__(self, other):
        if not isinstance(other, Gene):
            return NotImplemented
        return (self.innovation == other.innovation and
                self.from_node  == other.from_node  and
                self.to_node    == other.to_node    and
                self.weight     == other.weight     and
                self.enabled    == other.enabled)

    __hash__ = None

    def __repr__(self):
        return (f"Gene(innovation={self.innovation:03d}, from_node={self.from_node:03d}, "
                f"to_node={self.to_node:03d}, weight={self.weight:+.6f}, enabled={self.enabled})")

    def __str__(self):
        s  = f"[{self.innovation:03d},{'E' if self.enabled else 'D'},"
        s += f"{self.from_node:02d}=>{self.to_node:02d},{self.weight:+.02f}]"
        return s
