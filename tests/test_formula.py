"""Tests for the formula front-end of demean/degroup."""

import pytest

from wrangle_tlbx.selection import parse_by, parse_formula, parse_terms


class TestParseFormula:
    """One-sided formulas."""

    def test_plain_terms(self) -> None:
        """Terms are split at '+', whitespace ignored."""
        assert parse_formula("~ x + y") == (("x",), ("y",))

    def test_tilde_is_optional(self) -> None:
        """A leading '~' may be omitted."""
        assert parse_formula("x+y") == parse_formula("~x + y")

    @pytest.mark.parametrize("text", ["~ x*z + y", "~ x:z + y"])
    def test_interactions(self, text: str) -> None:
        """'*' and ':' both mark interaction terms."""
        assert parse_formula(text) == (("x", "z"), ("y",))

    @pytest.mark.parametrize("text", ["", "~", "~ x +", "y ~ x", "~ x * "])
    def test_malformed(self, text: str) -> None:
        """Empty formulas, empty terms and two-sided formulas are rejected."""
        with pytest.raises(ValueError):
            parse_formula(text)


class TestParseTerms:
    """Lists of names and terms."""

    def test_list_of_names(self) -> None:
        """Each entry is parsed as a term."""
        assert parse_terms(["x", "y*z"]) == (("x",), ("y", "z"))

    def test_empty_list(self) -> None:
        """At least one variable is required."""
        with pytest.raises(ValueError):
            parse_terms([])

    def test_non_string_entries(self) -> None:
        """Only names are accepted."""
        with pytest.raises(TypeError):
            parse_terms(["x", 3])


class TestParseBy:
    """Grouping specifications."""

    @pytest.mark.parametrize("spec", ["~ g1 + g2", ["g1", "g2"], "g1 + g2 + g1"])
    def test_flatten(self, spec) -> None:
        """Formulas and lists give the same de-duplicated names."""
        assert parse_by(spec) == ["g1", "g2"]

    def test_single_name(self) -> None:
        """A single name is a one-element list."""
        assert parse_by("id") == ["id"]
