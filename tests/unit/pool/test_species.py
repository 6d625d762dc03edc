"""
Unit tests for Species class.

Tests cover membership, fitness sharing, reproduction and
conversion to and from dictionaries.
"""

import pytest

from neatarena.pool import Species


# ============================================================================
# Test: Membership
# ============================================================================

class TestSpeciesMembership:
    """Test species creation and membership."""

    def test_representative_is_first_member(self, config, make_genome):
        genome  = make_genome([(0, 3, 0.5)])
        species = Species(genome, config)

        assert species.members == [genome]
        assert species.representative is genome
        assert genome.species is species
        assert species.generations_lived == 0

    def test_unique_ids(self, config, make_genome):
        species1 = Species(make_genome(), config)
        species2 = Species(make_genome(), config)
        assert species1.id != species2.id

    def test_colour_components(self, config, make_genome):
        species = Species(make_genome(), config)
        assert len(species.colour) == 3
        assert all(0.0 <= c <= 1.0 for c in species.colour)

    def test_attempt_add_compatible(self, config, make_genome):
        species = Species(make_genome([(0, 3, 0.5)]), config)
        genome  = make_genome([(0, 3, 0.6)])

        assert species.attempt_add(genome) is True
        assert genome in species.members
        assert genome.species is species

    def test_attempt_add_incompatible(self, config, make_genome):
        config.species_delta_threshold = 0.5
        species = Species(make_genome([(0, 3, 0.5)]), config)
        genome  = make_genome([(1, 3, 0.5), (2, 3, 0.5)])

        assert species.attempt_add(genome) is False
        assert genome not in species.members
        assert genome.species is None


# ============================================================================
# Test: Fitness sharing
# ============================================================================

class TestSpeciesAdjustedFitness:
    """Test the average adjusted fitness."""

    def test_skewed_fitness(self, config, identical_genomes):
        """Fitness [10, 0, 0, 0] in one species: mean(10/4, 0, 0, 0)."""
        genomes = identical_genomes([10.0, 0.0, 0.0, 0.0])
        species = Species(genomes[0], config)
        for genome in genomes[1:]:
            assert species.attempt_add(genome)

        assert species.average_adjusted_fitness() == pytest.approx(0.625)

    def test_shared_with_whole_population(self, config, identical_genomes):
        """Compatible genomes outside the species also share the fitness."""
        genomes = identical_genomes([4.0, 1.0, 1.0, 1.0])
        species = Species(genomes[0], config)

        assert species.average_adjusted_fitness(genomes) == pytest.approx(1.0)
        assert species.average_adjusted_fitness() == pytest.approx(4.0)

    def test_single_member(self, config, identical_genomes):
        species = Species(identical_genomes([3.0])[0], config)
        assert species.average_adjusted_fitness() == pytest.approx(3.0)

    def test_no_members(self, config, make_genome):
        species = Species(make_genome(), config)
        species.members = []
        assert species.average_adjusted_fitness() == 0.0


# ============================================================================
# Test: Reproduction
# ============================================================================

@pytest.fixture
def ranked_species(config, identical_genomes):
    genomes = identical_genomes([1.0, 5.0, 3.0, 2.0, 4.0])
    species = Species(genomes[0], config)
    for genome in genomes[1:]:
        species.attempt_add(genome)
    return species, genomes


class TestSpeciesNextGeneration:
    """Test breeding a species into the next generation."""

    def test_fills_allocation(self, ranked_species):
        species, _ = ranked_species
        out = []
        species.next_generation(7, out)

        assert len(out) == 7
        assert species.members == []
        assert species.generations_lived == 1

    def test_appends_to_existing_output(self, ranked_species):
        species, _ = ranked_species
        out = ["placeholder"]
        species.next_generation(3, out)
        assert len(out) == 4
        assert out[0] == "placeholder"

    def test_best_members_are_cloned(self, config, ranked_species):
        """With retention 0.1 and allocation 10, the ranks 0 and 1 are carried over."""
        config.breed_retention = 0.1
        species, genomes = ranked_species
        out = []
        species.next_generation(10, out)

        assert out[0].previous_fitness == 5.0
        assert out[0].age == 1
        assert out[0].genes == genomes[1].genes
        assert out[1].previous_fitness == 4.0
        assert all(genome.age == 0 for genome in out[2:])

    def test_zero_fitness_is_not_cloned(self, config, identical_genomes):
        config.breed_retention = 1.0
        genomes = identical_genomes([0.0, 0.0])
        species = Species(genomes[0], config)
        species.attempt_add(genomes[1])

        out = []
        species.next_generation(4, out)
        assert len(out) == 4
        assert all(genome.age == 0 for genome in out)

    def test_representative_chosen_among_fittest(self, config, ranked_species):
        config.breed_consideration = 0.4
        species, genomes = ranked_species
        species.next_generation(5, [])
        # breed range is int(5 * 0.4) = 2: the two fittest genomes
        assert species.representative in (genomes[1], genomes[4])

    def test_zero_allocation(self, ranked_species):
        species, _ = ranked_species
        out = []
        species.next_generation(0, out)
        assert out == []
        assert species.members == []

    def test_no_members(self, config, make_genome):
        species = Species(make_genome(), config)
        species.members = []
        out = []
        species.next_generation(3, out)
        assert out == []


# ============================================================================
# Test: Dictionary conversion
# ============================================================================

class TestSpeciesDict:
    """Test conversion to and from dictionaries."""

    def test_round_trip(self, config, tracker, make_genome):
        species = Species(make_genome([(0, 3, 0.5)]), config)
        species.generations_lived = 6

        restored = Species.from_dict(species.to_dict(), config, tracker)

        assert restored.id == species.id
        assert restored.colour == pytest.approx(species.colour)
        assert restored.generations_lived == 6
        assert restored.representative.genes == species.representative.genes
        assert restored.members == []

    def test_bad_colour(self, config, tracker, make_genome):
        d = Species(make_genome(), config).to_dict()
        d["colour"] = [0.1, 0.2]
        with pytest.raises(ValueError, match="colour"):
            Species.from_dict(d, config, tracker)
