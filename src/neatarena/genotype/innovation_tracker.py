"""
NEAT Innovation Tracker Module

This module implements the InnovationTracker class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    InnovationTracker: Run-wide registry of innovation numbers
"""

class InnovationTracker:
    """
    Tracks structural changes globally across all genomes of an evolutionary run.
    Ensures the same connection (identified by its endpoints) gets the same
    innovation number, in whichever genome and generation it appears.

    A tracker is owned by a single Population and only written to while that
    population mutates or breeds its genomes.
    """

    def __init__(self):
        # For each connection ever created, map its endpoints to its innovation number
        self._innovation_numbers: dict[tuple[int, int], int] = {}   # (from_node, to_node) -> innovation number
        self._next_innovation   : int = 0

    @property
    def next_innovation(self) -> int:
        """The innovation number that the next new connection will receive."""
        return self._next_innovation

    def fetch_innovation_id(self, from_node: int, to_node: int) -> int:
        """
        Get innovation number for a connection, identified by its endpoints.
        Returns existing innovation number if this connection was created
        before, otherwise assigns a new innovation number.

        Parameters:
            from_node: node ID for the 'from' end of the connection
            to_node:   node ID for the 'to'   end of the connection

        Returns:
            connection ID (a.k.a. innovation number)
        """
        key = (from_node, to_node)

        # This is a new connection
        if key not in self._innovation_numbers:
            self._innovation_numbers[key] = self._next_innovation
            self._next_innovation += 1

        return self._innovation_numbers[key]

    def gene_exists(self, from_node: int, to_node: int) -> bool:
        """
        Whether a connection between these endpoints was ever created during the run.
        """
        return (from_node, to_node) in self._innovation_numbers

    def to_list(self) -> list[tuple[int, int, int]]:
        """
        Returns:
            the innovation table as (from_node, to_node, innovation) triples, by innovation
        """
        triples = [(f, t, innov) for (f, t), innov in self._innovation_numbers.items()]
        return sorted(triples, key=lambda triple: triple[2])

    @classmethod
    def from_list(cls, triples) -> 'InnovationTracker':
        """
        Rebuild a tracker from (from_node, to_node, innovation) triples.
        Numbering continues after the highest innovation number loaded.

        Raises:
            ValueError: if a connection or an innovation number appears twice
        """
        tracker = cls()
        seen_innovations = set()
        for from_node, to_node, innovation in triples:
            key = (int(from_node), int(to_node))
            innovation = int(innovation)
            if key in tracker._innovation_numbers:
                raise ValueError(f"Connection {key} appears twice in the innovation table")
            if innovation in seen_innovations:
                raise ValueError(f"Innovation number {innovation} appears twice in the innovation table")
            seen_innovations.add(innovation)
            tracker._innovation_numbers[key] = innovation
            tracker._next_innovation = max(tracker._next_innovation, innovation + 1)
        return tracker

    def __len__(self):
        return len(self._innovation_numbers)
