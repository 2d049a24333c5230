"""Tests for column specifications and their resolution."""

import pandas as pd
import pytest

from wrangle_tlbx.selection import (
    ColumnIndex,
    Indices,
    col_range,
    contains,
    data_extract,
    data_select,
    ends_with,
    is_factor,
    is_numeric,
    regex,
    resolve,
    resolve_selection,
    select_columns,
    starts_with,
    suggest_column_names,
    where,
)
from wrangle_tlbx.utils import Diagnostics


ALL_COLUMNS = ["Sepal.Length", "Sepal.Width", "Petal.Length", "Petal.Width", "Species"]


class TestPatterns:
    """Name-based pattern selection."""

    def test_starts_with(self, iris_df: pd.DataFrame) -> None:
        """Prefix matches keep frame order."""
        assert select_columns(iris_df, starts_with("Sepal")) == ["Sepal.Length", "Sepal.Width"]

    def test_ends_with(self, iris_df: pd.DataFrame) -> None:
        """Suffix matches are anchored at the end."""
        assert select_columns(iris_df, ends_with("Width")) == ["Sepal.Width", "Petal.Width"]

    def test_contains_is_literal(self, iris_df: pd.DataFrame) -> None:
        """A dot in a contains pattern is not a regex wildcard."""
        assert select_columns(iris_df, contains(".")) == ALL_COLUMNS[:4]

    def test_multiple_patterns_union_in_first_seen_order(self, iris_df: pd.DataFrame) -> None:
        """Several patterns are unioned, first pattern's matches first."""
        assert select_columns(iris_df, starts_with("Petal", "Sepal")) == [
            "Petal.Length",
            "Petal.Width",
            "Sepal.Length",
            "Sepal.Width",
        ]

    def test_regex_helper(self, iris_df: pd.DataFrame) -> None:
        """Regex patterns search unanchored unless anchored explicitly."""
        assert select_columns(iris_df, regex("^P")) == ["Petal.Length", "Petal.Width"]
        assert select_columns(iris_df, regex("al\\.W")) == ["Sepal.Width", "Petal.Width"]

    def test_regex_flag(self, iris_df: pd.DataFrame) -> None:
        """regex=True treats the select string as a regular expression."""
        assert select_columns(iris_df, "Length$", regex=True) == ["Sepal.Length", "Petal.Length"]

    def test_regex_flag_requires_string(self, iris_df: pd.DataFrame) -> None:
        """regex=True with a non-string selection is rejected."""
        with pytest.raises(ValueError, match="regex"):
            select_columns(iris_df, ["Sepal.Length"], regex=True)

    def test_ignore_case(self, iris_df: pd.DataFrame) -> None:
        """Case folding applies to patterns and literal names."""
        assert select_columns(iris_df, starts_with("sepal"), ignore_case=True) == ["Sepal.Length", "Sepal.Width"]
        assert select_columns(iris_df, starts_with("sepal")) == []
        assert select_columns(iris_df, "species", ignore_case=True) == ["Species"]

    def test_pattern_level_ignore_case_overrides_call(self, iris_df: pd.DataFrame) -> None:
        """A pattern's own ignore_case wins over the call argument."""
        assert select_columns(iris_df, starts_with("petal", ignore_case=True)) == ["Petal.Length", "Petal.Width"]


class TestExplicitNames:
    """Literal names, name ranges and renaming."""

    def test_unmatched_names_are_dropped(self, iris_df: pd.DataFrame) -> None:
        """Unknown names are silently skipped and order follows the request."""
        assert select_columns(iris_df, ["Petal.Width", "Sepal.Length", "Test"]) == ["Petal.Width", "Sepal.Length"]

    def test_colon_token_is_a_range(self, iris_df: pd.DataFrame) -> None:
        """'a:b' expands to the inclusive range between two columns."""
        assert select_columns(iris_df, "Sepal.Width:Petal.Width") == ["Sepal.Width", "Petal.Length", "Petal.Width"]

    def test_duplicates_are_removed(self, iris_df: pd.DataFrame) -> None:
        """Names requested twice appear once."""
        assert select_columns(iris_df, ["Species", "Species"]) == ["Species"]

    def test_numeric_looking_names_match_verbatim(self) -> None:
        """Numeric-looking names are names, not positions."""
        df = pd.DataFrame({"1": [1], "2": [2], "x": [3]})
        assert select_columns(df, ["2"]) == ["2"]

    def test_report_unmatched_suggests_names(self, iris_df: pd.DataFrame) -> None:
        """Misspelled names are reported with suggestions when requested."""
        diag = Diagnostics()
        selection = resolve_selection(iris_df, ["Sepal.Lenght", "Species"], diagnostics=diag, report_unmatched=True)
        assert selection.columns == ["Species"]
        assert any("`Sepal.Length`" in msg for msg in diag.messages("info"))

    def test_data_select_renames(self, iris_df: pd.DataFrame) -> None:
        """Mapping selections rename the output columns."""
        out = data_select(iris_df, {"sl": "Sepal.Length", "kind": "Species"})
        assert list(out.columns) == ["sl", "kind"]
        pd.testing.assert_series_equal(out["sl"], iris_df["Sepal.Length"], check_names=False)


class TestRanges:
    """Inclusive column ranges."""

    def test_range(self, iris_df: pd.DataFrame) -> None:
        """A range spans the columns between both ends."""
        assert select_columns(iris_df, col_range("Sepal.Width", "Petal.Width")) == [
            "Sepal.Width",
            "Petal.Length",
            "Petal.Width",
        ]

    @pytest.mark.parametrize(("start", "end"), [("Sepal.Length", "Species"), ("Petal.Length", "Sepal.Width")])
    def test_range_symmetry(self, iris_df: pd.DataFrame, start: str, end: str) -> None:
        """Reversed ends give the same span."""
        assert resolve(col_range(start, end), iris_df) == resolve(col_range(end, start), iris_df)

    def test_missing_end_gives_empty(self, iris_df: pd.DataFrame) -> None:
        """A range with an unknown end matches nothing."""
        assert select_columns(iris_df, col_range("Sepal.Length", "Nope"), verbose=False) == []


class TestIndices:
    """1-based positions."""

    def test_positive_positions(self, iris_df: pd.DataFrame) -> None:
        """Positions are 1-based."""
        assert select_columns(iris_df, [1, 3]) == ["Sepal.Length", "Petal.Length"]

    def test_python_range(self, iris_df: pd.DataFrame) -> None:
        """range objects are positions."""
        assert select_columns(iris_df, range(1, 3)) == ["Sepal.Length", "Sepal.Width"]

    def test_negative_positions_exclude(self, iris_df: pd.DataFrame) -> None:
        """All-negative positions drop those columns."""
        assert select_columns(iris_df, Indices((-1, -5))) == ALL_COLUMNS[1:4]

    def test_out_of_range_positions_are_dropped(self, iris_df: pd.DataFrame) -> None:
        """Positions beyond the frame width are ignored."""
        assert select_columns(iris_df, [2, 10]) == ["Sepal.Width"]

    def test_mixed_signs_raise(self, iris_df: pd.DataFrame) -> None:
        """Mixing positive and negative positions is an error."""
        with pytest.raises(ValueError, match="mix negative and positive"):
            select_columns(iris_df, [1, -2])

    def test_zero_raises(self, iris_df: pd.DataFrame) -> None:
        """Position 0 does not exist."""
        with pytest.raises(ValueError, match="1-based"):
            select_columns(iris_df, 0)


class TestPredicates:
    """Selection by column values."""

    def test_type_predicates(self, iris_df: pd.DataFrame) -> None:
        """Built-in type checks."""
        assert select_columns(iris_df, is_numeric) == ALL_COLUMNS[:4]
        assert select_columns(iris_df, is_factor) == ["Species"]

    def test_value_predicate(self, iris_df: pd.DataFrame) -> None:
        """Functions are evaluated on the values, not the names."""
        selected = select_columns(
            iris_df,
            where(lambda s: pd.api.types.is_float_dtype(s) and s.mean() > 3),
        )
        assert selected == ["Sepal.Length", "Sepal.Width", "Petal.Length"]

    def test_plain_callable(self, iris_df: pd.DataFrame) -> None:
        """Plain callables are wrapped into predicates."""
        assert select_columns(iris_df, lambda s: isinstance(s.dtype, pd.CategoricalDtype)) == ["Species"]


class TestComposition:
    """Negation, union and exclusion."""

    def test_negation(self, iris_df: pd.DataFrame) -> None:
        """~spec selects the complement in frame order."""
        assert select_columns(iris_df, ~starts_with("Sepal")) == ["Petal.Length", "Petal.Width", "Species"]

    @pytest.mark.parametrize("spec", [starts_with("Petal"), ends_with("Width"), is_factor, col_range(2, 3)])
    def test_complement_law(self, iris_df: pd.DataFrame, spec) -> None:
        """resolve(~S) equals all columns minus resolve(S)."""
        selected = resolve(spec, iris_df)
        assert resolve(~spec, iris_df) == [col for col in ALL_COLUMNS if col not in selected]

    def test_double_negation(self, iris_df: pd.DataFrame) -> None:
        """Negating twice gives the original specification back."""
        spec = starts_with("Sepal")
        assert ~~spec == spec

    def test_union(self, iris_df: pd.DataFrame) -> None:
        """spec | other unions in order."""
        assert select_columns(iris_df, starts_with("Petal") | "Species") == ["Petal.Length", "Petal.Width", "Species"]

    def test_mixed_list_is_a_union(self, iris_df: pd.DataFrame) -> None:
        """Lists mixing names and helpers are unions."""
        assert select_columns(iris_df, ["Species", ends_with("Length")]) == ["Species", "Sepal.Length", "Petal.Length"]

    def test_exclude(self, iris_df: pd.DataFrame) -> None:
        """Exclusions are subtracted, keeping select order."""
        assert select_columns(iris_df, exclude=contains("Width")) == ["Sepal.Length", "Petal.Length", "Species"]
        assert select_columns(iris_df, ["Petal.Width", "Sepal.Width", "Species"], exclude=is_factor) == [
            "Petal.Width",
            "Sepal.Width",
        ]

    def test_idempotence(self, iris_df: pd.DataFrame) -> None:
        """Re-selecting a resolved selection returns it unchanged."""
        first = select_columns(iris_df, ends_with("Width") | is_factor)
        assert select_columns(iris_df, first) == first


class TestEmptyAndErrors:
    """Empty results and invalid input."""

    def test_empty_result_warns(self, iris_df: pd.DataFrame) -> None:
        """No match returns an empty list and records a warning."""
        diag = Diagnostics()
        assert select_columns(iris_df, starts_with("Nope"), diagnostics=diag) == []
        assert diag.messages("warning") == ["No column names that matched the required search pattern were found."]

    def test_verbose_false_is_silent(self, iris_df: pd.DataFrame) -> None:
        """verbose=False leaves the caller's collector untouched."""
        diag = Diagnostics()
        select_columns(iris_df, starts_with("Nope"), verbose=False, diagnostics=diag)
        assert len(diag) == 0

    def test_non_frame_raises(self) -> None:
        """Mappings are not frames."""
        with pytest.raises(TypeError):
            select_columns({"a": [1, 2]}, "a")

    def test_uninterpretable_selection_raises(self, iris_df: pd.DataFrame) -> None:
        """Floats are not a selection."""
        with pytest.raises(TypeError):
            select_columns(iris_df, 1.5)


class TestColumnIndex:
    """Name to position snapshot."""

    def test_lookup(self) -> None:
        """Positions and case-insensitive lookups."""
        index = ColumnIndex(["a", "B", "c"])
        assert index.position("c") == 2
        assert index.position("b") is None
        assert index.lookup("b", ignore_case=True) == "B"
        assert "a" in index
        assert len(index) == 3
        assert index.span(2, 0) == ["a", "B", "c"]

    def test_suggestions(self) -> None:
        """Close matches are suggested for misspelled names."""
        suggestions = suggest_column_names(["Speceis"], ALL_COLUMNS)
        assert suggestions["Speceis"][0] == "Species"


class TestDataExtract:
    """Pulling columns out of a frame."""

    def test_all_matches_give_a_frame(self, iris_df: pd.DataFrame) -> None:
        """Several matched columns are returned as a frame."""
        out = data_extract(iris_df, ends_with("Width"))
        assert isinstance(out, pd.DataFrame)
        assert list(out.columns) == ["Sepal.Width", "Petal.Width"]

    @pytest.mark.parametrize(("mode", "expected"), [("first", "Sepal.Width"), ("last", "Petal.Width")])
    def test_first_and_last(self, iris_df: pd.DataFrame, mode: str, expected: str) -> None:
        """A single remaining column is returned as a Series."""
        out = data_extract(iris_df, ends_with("Width"), extract=mode)
        assert isinstance(out, pd.Series)
        assert out.name == expected

    @pytest.mark.parametrize(
        ("mode", "expected"),
        [("odd", ["Sepal.Length", "Petal.Length"]), ("even", ["Sepal.Width", "Petal.Width"])],
    )
    def test_odd_and_even(self, iris_df: pd.DataFrame, mode: str, expected: list[str]) -> None:
        """Odd and even positions among the matched columns."""
        out = data_extract(iris_df, starts_with("Sepal", "Petal"), extract=mode)
        assert list(out.columns) == expected

    def test_mode_is_case_insensitive(self, iris_df: pd.DataFrame) -> None:
        """Extract modes ignore case."""
        assert data_extract(iris_df, ends_with("Width"), extract="LAST").name == "Petal.Width"

    def test_unknown_mode(self, iris_df: pd.DataFrame) -> None:
        """Only the five modes are accepted."""
        with pytest.raises(ValueError, match="extract"):
            data_extract(iris_df, "Species", extract="middle")

    def test_as_data_frame(self, iris_df: pd.DataFrame) -> None:
        """A single column can be kept as a frame."""
        out = data_extract(iris_df, "Species", as_data_frame=True)
        assert isinstance(out, pd.DataFrame)
        assert list(out.columns) == ["Species"]

    def test_nothing_matched(self, iris_df: pd.DataFrame) -> None:
        """No match gives None and a warning."""
        diag = Diagnostics()
        assert data_extract(iris_df, starts_with("Nope"), diagnostics=diag) is None
        assert diag.messages("warning")

    @pytest.mark.parametrize("name", ["Species", -1, 5])
    def test_name_by_column(self, iris_df: pd.DataFrame, name) -> None:
        """Elements are labelled by another column, given by name or 1-based/negative position."""
        out = data_extract(iris_df, "Sepal.Length", name=name)
        assert out.index.tolist() == iris_df["Species"].tolist()
        assert out.tolist() == iris_df["Sepal.Length"].tolist()

    @pytest.mark.parametrize("name", [0, "row.names"])
    def test_name_by_row_labels(self, name) -> None:
        """0 and "row.names" label elements by the frame's index."""
        df = pd.DataFrame({"x": [1, 2, 3]}, index=["r1", "r2", "r3"])
        assert data_extract(df, "x", name=name).index.tolist() == ["r1", "r2", "r3"]

    def test_name_sequence(self, iris_df: pd.DataFrame) -> None:
        """Sequences label elements only when they have one label per row."""
        labels = list("abcdef")
        assert data_extract(iris_df, "Species", name=labels).index.tolist() == labels
        assert data_extract(iris_df, "Species", name=["a", "b"]).index.tolist() == list(range(6))

    def test_name_ignored_for_frames(self, iris_df: pd.DataFrame) -> None:
        """Frames keep their index."""
        out = data_extract(iris_df, ends_with("Width"), name="Species")
        assert out.index.tolist() == list(range(6))

    def test_unknown_name_column(self, iris_df: pd.DataFrame) -> None:
        """Naming by a missing column is an error."""
        with pytest.raises(ValueError, match="`Specis`"):
            data_extract(iris_df, "Sepal.Length", name="Specis")
