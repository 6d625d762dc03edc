"""
Unit tests for Gene class.

Tests cover construction, copying, equality and string representations.
"""

import pytest

from neatarena.genotype.gene import Gene


# ============================================================================
# Test: Construction and copying
# ============================================================================

class TestGeneBasics:
    """Test gene construction and copying."""

    def test_defaults_to_enabled(self):
        """A new gene is enabled unless stated otherwise."""
        gene = Gene(7, 0, 3, 0.5)
        assert gene.enabled is True
        assert gene.key == (0, 3)

    def test_copy_is_independent(self):
        """Mutating a copy leaves the original untouched."""
        gene = Gene(7, 0, 3, 0.5)
        copy = gene.copy()

        assert copy == gene
        assert copy is not gene

        copy.weight  = -2.0
        copy.enabled = False
        assert gene.weight == 0.5
        assert gene.enabled is True

    def test_equality_covers_all_fields(self):
        """Genes differing in any field are not equal."""
        gene = Gene(1, 0, 3, 0.5, True)
        assert gene != Gene(2, 0, 3, 0.5, True)
        assert gene != Gene(1, 1, 3, 0.5, True)
        assert gene != Gene(1, 0, 4, 0.5, True)
        assert gene != Gene(1, 0, 3, 0.6, True)
        assert gene != Gene(1, 0, 3, 0.5, False)

    def test_genes_are_unhashable(self):
        """Genes are mutable, so they cannot be used as dictionary keys."""
        with pytest.raises(TypeError):
            hash(Gene(1, 0, 3, 0.5))


# ============================================================================
# Test: String representations
# ============================================================================

class TestGeneStrings:
    """Test gene string representations."""

    def test_str_enabled(self):
        assert str(Gene(5, 1, 3, 0.25)) == "[005,E,01=>03,+0.25]"

    def test_str_disabled(self):
        assert str(Gene(12, 4, 3, -1.5, enabled=False)) == "[012,D,04=>03,-1.50]"

    def test_repr_contains_fields(self):
        text = repr(Gene(5, 1, 3, 0.25))
        assert "innovation=005" in text
        assert "enabled=True" in text
