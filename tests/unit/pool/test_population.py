"""
Unit tests for Population class.

Tests cover the base population, generation turnover,
innovation tracking and conversion to and from dictionaries.
"""

import logging

import pytest

from neatarena.pool import Population


@pytest.fixture
def population(config):
    config.population_size = 12
    return Population(config)


def assign_fitness(population, fitness_function):
    for i, genome in enumerate(population.genomes):
        genome.fitness = fitness_function(i, genome)


# ============================================================================
# Test: Base population
# ============================================================================

class TestPopulationBase:
    """Test creation of the first generation."""

    def test_base_population_size(self, population):
        genomes = population.generate_base_population()
        assert len(genomes) == 12
        assert population.genomes is genomes
        assert population.generation == 0

    def test_explicit_arguments(self, population):
        genomes = population.generate_base_population(count=5, input_count=4, output_count=2,
                                                      initial_mutation_rounds=0)
        assert len(genomes) == 5
        assert all(genome.input_count == 4 and genome.output_count == 2 for genome in genomes)
        assert all(genome.genes == [] for genome in genomes)

    def test_full_connection_policy(self, config, population):
        config.initial_cxn_policy = "full"
        genomes = population.generate_base_population(initial_mutation_rounds=0)
        assert all(sorted(g.key for g in genome.genes) == [(0, 3), (1, 3), (2, 3)]
                   for genome in genomes)

    def test_every_genome_speciated(self, population):
        population.generate_base_population()
        assert all(genome.species in population.species for genome in population.genomes)
        assert sum(len(species.members) for species in population.species) == 12

    def test_negative_count(self, population):
        with pytest.raises(ValueError):
            population.generate_base_population(count=-1)


# ============================================================================
# Test: Innovation tracking
# ============================================================================

class TestPopulationInnovations:
    """Test the run-wide innovation registry."""

    def test_delegates_to_tracker(self, population):
        assert not population.gene_exists(0, 3)
        innovation = population.fetch_innovation_id(0, 3)
        assert population.gene_exists(0, 3)
        assert population.tracker.fetch_innovation_id(0, 3) == innovation

    def test_innovations_stable_across_generations(self, config, population):
        config.structural_mutation_chance = 0.8
        population.generate_base_population()

        seen = {}
        for _ in range(5):
            for genome in population.genomes:
                for gene in genome.genes:
                    assert seen.setdefault(gene.key, gene.innovation) == gene.innovation
            assign_fitness(population, lambda i, genome: 1.0 + len(genome.genes))
            population.breed_next_generation()


# ============================================================================
# Test: Generation turnover
# ============================================================================

class TestPopulationBreed:
    """Test breeding the next generation."""

    @pytest.mark.parametrize("target", [1, 12, 25])
    def test_exact_size(self, population, target):
        population.generate_base_population()
        assign_fitness(population, lambda i, genome: float(i))

        genomes = population.breed_next_generation(target)
        assert len(genomes) == target
        assert population.generation == 1

    def test_all_zero_fitness(self, population):
        population.generate_base_population()
        assert len(population.breed_next_generation()) == 12

    @pytest.mark.parametrize("target", [-3, 0])
    def test_non_positive_target(self, population, target):
        """An empty generation is refused, so the species survive for later breeding."""
        population.generate_base_population()
        species_before = list(population.species)
        with pytest.raises(ValueError, match="positive"):
            population.breed_next_generation(target)

        assert population.species == species_before
        assert len(population.breed_next_generation(5)) == 5

    def test_offspring_speciated(self, population):
        population.generate_base_population()
        assign_fitness(population, lambda i, genome: float(i % 4))
        population.breed_next_generation()

        assert all(species.members for species in population.species)
        assert all(genome.species in population.species for genome in population.genomes)
        memberships = [g for species in population.species for g in species.members]
        assert len(memberships) == len(population.genomes)

    def test_skewed_fitness_scenario(self, config):
        """Four identical genomes with fitness [10, 0, 0, 0]: the fittest survives as a clone."""
        config.breed_retention = 0.1
        population = Population(config)
        population.generate_base_population(count=4, initial_mutation_rounds=0)
        assert len(population.species) == 1

        for genome, fitness in zip(population.genomes, [10.0, 0.0, 0.0, 0.0]):
            genome.fitness = fitness
        best = population.genomes[0]

        genomes = population.breed_next_generation(4)
        assert len(genomes) == 4
        clones = [genome for genome in genomes if genome.previous_fitness == 10.0]
        assert clones
        assert clones[0].genes == best.genes
        assert clones[0].age == best.age + 1

    def test_multiple_generations(self, population):
        population.generate_base_population()
        for generation in range(1, 6):
            assign_fitness(population, lambda i, genome: 1.0 + genome.evaluate([1.0, 0.0])[0])
            population.breed_next_generation()
            assert population.generation == generation
            assert len(population.genomes) == 12


# ============================================================================
# Test: Reporting
# ============================================================================

class TestPopulationReporting:
    """Test summaries of the current generation."""

    def test_fittest_genome(self, population):
        population.generate_base_population()
        assign_fitness(population, lambda i, genome: float(i == 7))
        assert population.get_fittest_genome() is population.genomes[7]

    def test_fittest_of_empty_population(self, population):
        assert population.get_fittest_genome() is None

    def test_statistics(self, population):
        population.generate_base_population()
        assign_fitness(population, lambda i, genome: 2.0 if i == 0 else 1.0)

        stats = population.statistics()
        assert stats["population_size"] == 12
        assert stats["max_fitness"] == 2.0
        assert stats["mean_fitness"] == pytest.approx(13.0 / 12)
        assert stats["species_count"] == len(population.species)
        assert stats["innovations"] == len(population.tracker)


# ============================================================================
# Test: Dictionary conversion
# ============================================================================

class TestPopulationDict:
    """Test conversion to and from dictionaries."""

    @pytest.fixture
    def evolved(self, config, population):
        config.structural_mutation_chance = 0.8
        population.generate_base_population()
        for _ in range(3):
            assign_fitness(population, lambda i, genome: 1.0 + len(genome.genes))
            population.breed_next_generation()
        population.run_time = 12.5
        return population

    def test_round_trip(self, evolved):
        restored = Population.from_dict(evolved.to_dict())

        assert restored.generation == 3
        assert restored.run_time == 12.5
        assert restored.tracker.to_list() == evolved.tracker.to_list()
        assert [s.id for s in restored.species] == [s.id for s in evolved.species]
        assert [g.genes for g in restored.genomes] == [g.genes for g in evolved.genomes]
        assert [g.species.id for g in restored.genomes] == [g.species.id for g in evolved.genomes]
        assert restored.config.to_dict() == evolved.config.to_dict()

    def test_restored_run_continues(self, evolved):
        restored = Population.from_dict(evolved.to_dict())
        next_innovation = restored.tracker.next_innovation

        assign_fitness(restored, lambda i, genome: 1.0)
        restored.breed_next_generation()

        assert len(restored.genomes) == 12
        assert all(gene.innovation < restored.tracker.next_innovation
                   for genome in restored.genomes for gene in genome.genes)
        assert restored.tracker.next_innovation >= next_innovation

    def test_orphaned_genome_is_respeciated(self, evolved, caplog):
        data = evolved.to_dict()
        data["genomes"][0]["species"] = "no-such-species"

        with caplog.at_level(logging.WARNING, logger="neatarena.pool.population"):
            restored = Population.from_dict(data)

        assert "unknown species" in caplog.text
        assert restored.genomes[0].species in restored.species

    def test_genome_without_species(self, evolved):
        data = evolved.to_dict()
        del data["genomes"][0]["species"]

        restored = Population.from_dict(data)
        assert restored.genomes[0].species in restored.species

    def test_missing_field(self, evolved):
        data = evolved.to_dict()
        del data["innovations"]
        with pytest.raises(KeyError):
            Population.from_dict(data)
