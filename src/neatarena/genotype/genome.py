"""
NEAT Genome Module

This module implements the Genome class for the NEAT
(NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    GeneComparison: Result of aligning the genes of two genomes
    Genome:         Complete genome representing a neural network
"""

import random
from typing import NamedTuple, TYPE_CHECKING

from neatarena.run.config                  import Config
from neatarena.genotype.gene               import Gene
from neatarena.genotype.innovation_tracker import InnovationTracker
from neatarena.genotype.node               import Node, NodeType
if TYPE_CHECKING:
    from neatarena.pool.species import Species

class GeneComparison(NamedTuple):
    """
    Counts obtained by aligning the genes of two genomes by innovation number.
    """
    excess     : int     # genes beyond the highest innovation number of the other genome
    disjoint   : int     # unmatched genes within the range of the other genome
    matching   : int     # genes present in both genomes
    weight_diff: float   # sum of the absolute weight differences of matching genes

class Genome:
    """
    A NEAT genome: a neural network described as a list of nodes and a list of genes.

    The genome owns its nodes and genes exclusively. Nodes refer to the genes touching
    them, and genes to their endpoint nodes, through indices into these two lists.
    Within one genome at most one gene may connect a given (from, to) pair of nodes.

    Networks may contain cycles: structural mutations never check for them, and the
    evaluator tolerates them (see 'Node.calculate_value').

    Node numbering convention (load-bearing, other code slices nodes by these offsets):
        - Input nodes:  [0, I)
        - Bias nodes:   [I, I + B)
        - Output nodes: [I + B, I + B + O)
        - Hidden nodes: [I + B + O, ...), in creation order

    Public Attributes:
        nodes:            List of nodes, indexed by node ID
        genes:            List of genes, in creation order
        gene_index:       Maps a (from_node, to_node) pair to the index of its gene
        input_count:      Number of input nodes
        bias_count:       Number of bias nodes
        output_count:     Number of output nodes
        fitness:          Fitness assigned by the caller (0 until assigned)
        previous_fitness: Fitness of the genome this one was cloned from
        age:              Number of generations this genome survived as a clone
        species:          The Species this genome is assigned to (None until speciated)

    Public Methods:
        add_gene(from_node, to_node):  Create a new gene in this genome
        evaluate(inputs):              Feed a sensor vector through the network
        create_mutations():            Apply weight and structural mutations stochastically
        mutate_weights():              Apply weight mutations
        add_connection_mutation():     Attempt to connect two nodes
        add_node_mutation():           Attempt to split a connection with a new node
        clone():                       Copy a surviving genome into the next generation
        crossover(other):              Create offspring by crossing this genome with another
        compare(other):                Align genes with another genome
        compatibility_distance(other): Calculate the genetic distance to another genome
        is_compatible(other):          Whether another genome belongs to the same species
        to_dict():                     Convert genome to dictionary representation

    Class Methods:
        from_dict(genome_dict, config, tracker): Create a genome from a dictionary description
    """

    def __init__(self,
                 config      : Config,
                 tracker     : InnovationTracker,
                 input_count : int | None = None,
                 output_count: int | None = None,
                 bias_count  : int | None = None,
                 connect     : bool = False):
        """
        Initialize a Genome holding only its input, bias and output nodes.

        The node counts default to the values in the configuration.

        Parameters:
            config:       Stores configuration parameters
            tracker:      The run-wide innovation registry
            input_count:  Number of input nodes
            output_count: Number of output nodes
            bias_count:   Number of bias nodes
            connect:      If True, connect every input and bias node to every output node
        """
        self._config : Config            = config
        self._tracker: InnovationTracker = tracker

        self.input_count : int = config.num_inputs  if input_count  is None else input_count
        self.output_count: int = config.num_outputs if output_count is None else output_count
        self.bias_count  : int = config.num_bias    if bias_count   is None else bias_count

        self.nodes     : list[Node]                = []
        self.genes     : list[Gene]                = []
        self.gene_index: dict[tuple[int, int], int] = {}   # (from_node, to_node) => index into 'genes'

        self.fitness         : float             = 0.0
        self.previous_fitness: float             = 0.0
        self.age             : int               = 0
        self.species         : 'Species | None'  = None

        # The node types are laid out in a fixed order: inputs, biases, outputs
        for _ in range(self.input_count):
            self.nodes.append(Node(len(self.nodes), NodeType.INPUT))
        for _ in range(self.bias_count):
            self.nodes.append(Node(len(self.nodes), NodeType.BIAS))
        for _ in range(self.output_count):
            self.nodes.append(Node(len(self.nodes), NodeType.OUTPUT))

        if connect:
            for from_node in range(self.input_count + self.bias_count):
                for to_node in self.output_ids:
                    self.add_gene(from_node, to_node)

    @property
    def output_ids(self) -> range:
        start = self.input_count + self.bias_count
        return range(start, start + self.output_count)

    @property
    def input_nodes(self) -> list[Node]:
        return self.nodes[:self.input_count]

    @property
    def bias_nodes(self) -> list[Node]:
        return self.nodes[self.input_count:self.input_count + self.bias_count]

    @property
    def output_nodes(self) -> list[Node]:
        return self.nodes[self.output_ids.start:self.output_ids.stop]

    @property
    def hidden_nodes(self) -> list[Node]:
        return self.nodes[self.output_ids.stop:]

    @property
    def config(self) -> Config:
        return self._config

    @property
    def tracker(self) -> InnovationTracker:
        return self._tracker

    def has_gene(self, from_node: int, to_node: int) -> bool:
        return (from_node, to_node) in self.gene_index

    def add_gene(self, from_node: int, to_node: int) -> Gene:
        """
        Create a gene connecting two nodes of this genome.

        The innovation number comes from the run-wide registry, so a connection between
        the same pair of nodes gets the same number in every genome. The initial weight
        is drawn uniformly from [-1, 1].

        Parameters:
            from_node: ID of the node the gene leaves from
            to_node:   ID of the node the gene enters

        Returns:
            The newly created gene

        Raises:
            ValueError: if this genome already has a gene between these nodes
            IndexError: if either node does not exist
        """
        if self.has_gene(from_node, to_node):
            raise ValueError(f"Gene from ({from_node}->{to_node}) already exists in this genome")
        if not (0 <= from_node < len(self.nodes) and 0 <= to_node < len(self.nodes)):
            raise IndexError(f"Gene ({from_node}->{to_node}) references a node outside [0, {len(self.nodes)})")

        innovation = self._tracker.fetch_innovation_id(from_node, to_node)
        gene       = Gene(innovation, from_node, to_node, random.uniform(-1.0, 1.0))

        gene_id = len(self.genes)
        self.genes.append(gene)
        self.gene_index[(from_node, to_node)] = gene_id
        self.nodes[from_node].outgoing.append(gene_id)
        self.nodes[to_node].incoming.append(gene_id)
        return gene

    def add_hidden_node(self) -> Node:
        """
        Append a new hidden node to this genome.
        """
        node = Node(len(self.nodes), NodeType.HIDDEN)
        self.nodes.append(node)
        return node

    def evaluate(self, inputs) -> list[float]:
        """
        Pass a sensor vector through the network.

        Parameters:
            inputs: Values fed to the input nodes (exactly 'input_count' of them)

        Returns:
            The values of the output nodes ('output_count' of them)

        Raises:
            ValueError: if the number of inputs differs from 'input_count'
        """
        if len(inputs) != self.input_count:
            raise ValueError(f"Expected {self.input_count} inputs, got {len(inputs)}")

        # Set the input node values
        for node, value in zip(self.input_nodes, inputs):
            node.value       = float(value)
            node.cache_valid = False
            node.in_progress = False

        # Clear all working values
        for node in self.nodes[self.input_count:]:
            node.reset()

        return [node.calculate_value(self) for node in self.output_nodes]

    def create_mutations(self) -> None:
        """
        Apply to the current genome all possible mutation operations.

        Weights are always subject to mutation; then an attempt to add a connection and
        an attempt to add a node each happen with the structural mutation probability.
        """
        self.mutate_weights()

        if random.random() <= self._config.structural_mutation_chance:
            self.add_connection_mutation()

        if random.random() <= self._config.structural_mutation_chance:
            self.add_node_mutation()

    def mutate_weights(self) -> None:
        """
        Stochastically mutate the weights of the genes.

        Each gene is mutated with probability 'weight_mutation_chance', in one of
        five equally likely ways:
         + flip the sign of the weight
         + replace the weight with a random value in [-1, 1]
         + increase the weight by a random fraction in [0%, 100%]
         + decrease the weight to a random fraction in [0%, 100%] of itself
         + toggle the enabled state (only if 'gene_state_flip_mutation' is set)
        """
        for gene in self.genes:
            if random.random() > self._config.weight_mutation_chance:
                continue

            r = random.random()
            if r <= 0.2:
                gene.weight *= -1.0
            elif r <= 0.4:
                gene.weight  = random.uniform(-1.0, 1.0)
            elif r <= 0.6:
                gene.weight *= 1.0 + random.random()
            elif r <= 0.8:
                gene.weight *= random.random()
            elif self._config.gene_state_flip_mutation:
                gene.enabled = not gene.enabled

    def add_connection_mutation(self) -> Gene | None:
        """
        Attempt to connect a random pair of nodes.

        The connection may not start at an output node, nor end at an input or bias node.
        A candidate pair is rejected if a connection between its endpoints was ever
        created in the run, in any genome: innovation numbers stay the only source of
        truth for aligning genes. Connections creating cycles are allowed.

        Returns:
            The new gene, or None if no candidate was accepted within the allowed attempts
        """
        from_candidates = [node.id for node in self.nodes if node.type != NodeType.OUTPUT]
        to_candidates   = [node.id for node in self.nodes if not node.is_fixed]
        if not from_candidates or not to_candidates:
            return None

        for _ in range(self._config.max_mutation_attempts):
            from_node = random.choice(from_candidates)
            to_node   = random.choice(to_candidates)

            if not self._tracker.gene_exists(from_node, to_node):
                return self.add_gene(from_node, to_node)
        return None

    def add_node_mutation(self) -> Node | None:
        """
        Attempt to split a random enabled connection with a new hidden node.

        The split gene is disabled (not deleted) and replaced by two new genes:
        'from -> new node' with weight 1.0, so that the network behaviour is
        initially disturbed as little as possible, and 'new node -> to' with the
        weight of the split gene.

        Returns:
            The new node, or None if no enabled gene was found within the allowed attempts
        """
        if not self.genes:
            return None

        for _ in range(self._config.max_mutation_attempts):
            gene = random.choice(self.genes)
            if not gene.enabled:
                continue

            new_node     = self.add_hidden_node()
            gene.enabled = False
            self.add_gene(gene.from_node, new_node.id).weight = 1.0
            self.add_gene(new_node.id, gene.to_node).weight   = gene.weight
            return new_node
        return None

    def _copy_structure(self) -> 'Genome':
        """
        Create a genome with the same nodes and genes as this one, but no history.
        """
        copy = Genome(self._config, self._tracker,
                      self.input_count, self.output_count, self.bias_count)
        for _ in range(len(self.nodes) - len(copy.nodes)):
            copy.add_hidden_node()
        for gene in self.genes:
            copy._append_gene(gene.copy())
        return copy

    def _append_gene(self, gene: Gene) -> None:
        """
        Register an existing gene (with its innovation number already assigned).
        """
        if self.has_gene(gene.from_node, gene.to_node):
            raise ValueError(f"Gene from ({gene.from_node}->{gene.to_node}) already exists in this genome")
        gene_id = len(self.genes)
        self.genes.append(gene)
        self.gene_index[gene.key] = gene_id
        self.nodes[gene.from_node].outgoing.append(gene_id)
        self.nodes[gene.to_node].incoming.append(gene_id)

    def clone(self) -> 'Genome':
        """
        Carry this genome over into the next generation.

        The clone has the same structure and weights, is one generation older and
        remembers the fitness of this genome as its previous fitness. Its own fitness
        starts at 0 and it is not yet assigned to any species.
        """
        clone = self._copy_structure()
        clone.age              = self.age + 1
        clone.previous_fitness = self.fitness
        return clone

    def crossover(self, other: 'Genome') -> 'Genome':
        """
        Perform NEAT crossover between this genome and another to create offspring.

        Genes are aligned by innovation number:
        - equal fitness:   every gene of either parent is inherited; for matching
                           genes the parent is picked at random
        - unequal fitness: matching genes are inherited from a random parent; disjoint
                           and excess genes only from the fitter parent

        The offspring gets placeholder hidden nodes, created in increasing ID order,
        up to the highest node ID referenced by the inherited genes.

        Parameters:
            other: the other parent genome

        Returns:
            New offspring genome (age 0, fitness 0)

        Raises:
            ValueError: if the parents have different numbers of input, bias or output nodes
        """
        if (self.input_count, self.bias_count, self.output_count) != \
           (other.input_count, other.bias_count, other.output_count):
            raise ValueError("Cannot cross genomes with different input, bias or output counts")

        genes_self  = {gene.innovation: gene for gene in self.genes}
        genes_other = {gene.innovation: gene for gene in other.genes}

        inherited = []
        for innov in sorted(genes_self.keys() | genes_other.keys()):
            gene_self  = genes_self.get(innov)
            gene_other = genes_other.get(innov)

            # Matching genes: inherit from a random parent
            if gene_self is not None and gene_other is not None:
                inherited.append(gene_self if random.random() < 0.5 else gene_other)

            # Disjoint & excess genes: inherit if the parent owning it is not less fit
            elif gene_self is not None and self.fitness >= other.fitness:
                inherited.append(gene_self)
            elif gene_other is not None and other.fitness >= self.fitness:
                inherited.append(gene_other)

        offspring = Genome(self._config, self._tracker,
                           self.input_count, self.output_count, self.bias_count)

        for parent_gene in inherited:
            # Ensure the endpoints exist (must be created in index order)
            max_id = max(parent_gene.from_node, parent_gene.to_node)
            while len(offspring.nodes) <= max_id:
                offspring.add_hidden_node()

            gene         = offspring.add_gene(parent_gene.from_node, parent_gene.to_node)
            gene.weight  = parent_gene.weight
            gene.enabled = parent_gene.enabled

        return offspring

    def compare(self, other: 'Genome') -> GeneComparison:
        """
        Align the genes of this genome and another by innovation number.

        Genes present in only one genome are 'excess' if their innovation number is
        beyond the highest one reached by the other genome, 'disjoint' otherwise.

        Parameters:
            other: the genome to align with

        Returns:
            The number of excess, disjoint and matching genes, and the summed
            absolute weight difference of the matching genes
        """
        weights_self  = {gene.innovation: gene.weight for gene in self.genes}
        weights_other = {gene.innovation: gene.weight for gene in other.genes}

        innovs_self  = set(weights_self)
        innovs_other = set(weights_other)

        matching_innovs     =  innovs_self & innovs_other
        non_matching_innovs = (innovs_self | innovs_other) - matching_innovs

        max_innov_self  = max(innovs_self)  if innovs_self  else -1
        max_innov_other = max(innovs_other) if innovs_other else -1
        excess_limit    = min(max_innov_self, max_innov_other)

        num_excess   = sum(1 for innov in non_matching_innovs if innov >  excess_limit)
        num_disjoint = len(non_matching_innovs) - num_excess

        weight_diff = sum(abs(weights_self[i] - weights_other[i]) for i in matching_innovs)
        return GeneComparison(num_excess, num_disjoint, len(matching_innovs), weight_diff)

    def compatibility_distance(self, other: 'Genome') -> float:
        """
        Calculate the genetic distance between this genome and another, with the NEAT formula:
           distance = (c1 * E / N) + (c2 * D / N) + c3 * W̄

        Where:
        - E = number of excess genes
        - D = number of disjoint genes
        - N = number of genes in the larger genome (no E and D terms when N is 0)
        - W̄ = average weight difference of matching genes (0 without matching genes)
        - c1, c2, c3 = coefficients from the configuration

        Parameters:
            other: the genome relative to which we are calculating the distance

        Returns:
            the genetic distance between this genome and 'other'
        """
        comparison = self.compare(other)

        N = max(len(self.genes), len(other.genes))
        excess_ratio   = comparison.excess   / N if N else 0.0
        disjoint_ratio = comparison.disjoint / N if N else 0.0
        avg_weight_diff = comparison.weight_diff / comparison.matching if comparison.matching else 0.0

        return (self._config.excess_coeff      * excess_ratio   +
                self._config.disjoint_coeff    * disjoint_ratio +
                self._config.weight_diff_coeff * avg_weight_diff)

    def is_compatible(self, other: 'Genome') -> bool:
        """
        Whether this genome and another can be considered the same species.
        """
        return self.compatibility_distance(other) <= self._config.species_delta_threshold

    def to_dict(self) -> dict:
        """
        Convert the genome to a dictionary representation.

        Returns:
            Dictionary with the following structure:
            {
                "input_count": 2, "bias_count": 1, "output_count": 1, "total_count": 5,
                "fitness": 1.5, "previous_fitness": 0.0, "age": 0,
                "species": "9f0c...",            # only if assigned to a species
                "genes": [
                    {"from": 0, "to": 4, "enabled": false, "weight": 0.5},
                    {"from": 0, "to": 3, "enabled": true,  "weight": 1.0},
                    {"from": 4, "to": 3, "enabled": true,  "weight": 0.5}
                ]
            }
        """
        genome_dict = {
            "input_count"     : self.input_count,
            "bias_count"      : self.bias_count,
            "output_count"    : self.output_count,
            "total_count"     : len(self.nodes),
            "fitness"         : self.fitness,
            "previous_fitness": self.previous_fitness,
            "age"             : self.age,
            "genes"           : [{"from"   : gene.from_node,
                                  "to"     : gene.to_node,
                                  "enabled": gene.enabled,
                                  "weight" : gene.weight} for gene in self.genes],
        }
        if self.species is not None:
            genome_dict["species"] = self.species.id
        return genome_dict

    @classmethod
    def from_dict(cls, genome_dict: dict, config: Config, tracker: InnovationTracker) -> 'Genome':
        """
        Create a Genome from a dictionary description (as produced by 'to_dict').

        Genes are recreated through 'add_gene', so their innovation numbers are looked up
        in 'tracker': load the innovation table before loading genomes; every gene
        must already have an entry there. The "species" field is not resolved here.

        Raises:
            KeyError:   if a required field is missing
            ValueError: if the structure is invalid, or a gene is missing from the innovation table
        """
        input_count  = int(genome_dict["input_count"])
        output_count = int(genome_dict["output_count"])
        bias_count   = int(genome_dict.get("bias_count", 0))
        total_count  = int(genome_dict["total_count"])
        if min(input_count, output_count, bias_count) < 0:
            raise ValueError("Node counts must be non-negative")
        if total_count < input_count + bias_count + output_count:
            raise ValueError(f"total_count {total_count} is smaller than the number of fixed nodes")

        genome = cls(config, tracker, input_count, output_count, bias_count)
        for _ in range(total_count - len(genome.nodes)):
            genome.add_hidden_node()

        for gene_data in genome_dict["genes"]:
            from_node, to_node = int(gene_data["from"]), int(gene_data["to"])
            if not tracker.gene_exists(from_node, to_node):
                raise ValueError(f"Gene ({from_node}->{to_node}) has no entry in the innovation table")
            gene         = genome.add_gene(from_node, to_node)
            gene.enabled = bool(gene_data["enabled"])
            gene.weight  = float(gene_data["weight"])

        genome.fitness          = float(genome_dict.get("fitness", 0.0))
        genome.previous_fitness = float(genome_dict.get("previous_fitness", 0.0))
        genome.age              = int(genome_dict.get("age", 0))
        return genome

    def __getstate__(self):
        # Species hold references to other genomes; keep pickled genomes self-contained
        state = self.__dict__.copy()
        state["species"] = None
        return state

    def __str__(self):
        node_genes_str = ''.join(str(node) for node in self.nodes)
        gene_str       = ''.join(str(gene) for gene in self.genes)
        return f"Nodes: {node_genes_str}\nGenes: {gene_str}"

