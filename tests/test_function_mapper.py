"""Tests for degree/function relations."""
import pytest

from harmonic_engine.function_mapper import (
    DEGREE_TO_FUNCTIONS,
    FUNCTION_TO_DEGREES,
    are_degrees_in_same_function,
    chord_functions,
    degree_functions,
    expected_functions,
    function_degrees,
    is_principal_parallel_pair,
    is_secondary_dominant,
    parallel_degrees,
    primary_degree,
    primary_function,
    special_root_function,
)


class TestTables:
    """Tests for the function tables."""

    def test_degree_to_functions(self):
        """Test III and VI carry two functions each."""
        assert degree_functions("III") == ("T", "D")
        assert degree_functions("VI") == ("T", "SD")
        assert degree_functions("V") == ("D",)
        assert degree_functions("VIII") == ()

    def test_function_to_degrees(self):
        """Test degree lists per function."""
        assert function_degrees("T") == ("I", "VI", "III")
        assert function_degrees("SD") == ("IV", "II", "VI")
        assert function_degrees("D") == ("V", "VII", "III")
        assert function_degrees(None) == ()

    def test_tables_agree(self):
        """Test every degree is listed under each of its functions."""
        for degree, functions in DEGREE_TO_FUNCTIONS.items():
            for function in functions:
                assert degree in FUNCTION_TO_DEGREES[function]

    def test_primary_and_parallels(self):
        """Test primary degrees and parallels."""
        assert primary_degree("T") == "I"
        assert primary_degree("SD") == "IV"
        assert primary_degree("D") == "V"
        assert parallel_degrees("D") == ("VII", "III")

    def test_special_roots(self):
        """Test special roots map to SD or D."""
        assert special_root_function("N") == "SD"
        assert special_root_function("It") == "D"
        assert special_root_function("Fr") == "D"
        assert special_root_function("Gr") == "D"
        assert special_root_function(None) is None


class TestDegreeRelations:
    """Tests for same-function and principal/parallel relations."""

    def test_same_function(self):
        """Test the weak shared-function relation."""
        assert are_degrees_in_same_function("V", "III")
        assert are_degrees_in_same_function("IV", "VI")
        assert not are_degrees_in_same_function("I", "V")

    @pytest.mark.parametrize("a,b", [("I", "III"), ("I", "VI"), ("V", "VII"), ("IV", "II"), ("IV", "VI")])
    def test_principal_parallel_pairs(self, a, b):
        """Test accepted primary/parallel pairs in both orders."""
        assert is_principal_parallel_pair(a, b)
        assert is_principal_parallel_pair(b, a)

    @pytest.mark.parametrize("a,b", [("V", "III"), ("I", "V"), ("V", "V"), ("III", "VI")])
    def test_rejected_pairs(self, a, b):
        """Test pairs that are not primary/parallel substitutes."""
        assert not is_principal_parallel_pair(a, b)

    def test_missing_degree(self):
        """Test unknown degrees are never a pair."""
        assert not is_principal_parallel_pair(None, "I")


class TestChordFunctions:
    """Tests for per-chord function resolution."""

    def test_degree_chord(self):
        """Test a plain degree."""
        assert chord_functions({"degree": "III"}) == ("T", "D")
        assert primary_function({"degree": "II", "figure": "6"}) == "SD"

    def test_explicit_function_first(self):
        """Test a selected function leads the tuple."""
        assert chord_functions({"degree": "VI", "selectedFunction": "SD"}) == ("SD", "T")

    def test_six_four_variants(self):
        """Test passing and cadential I64 act as dominants."""
        assert chord_functions({"degree": "I", "figure": "64", "sixFourVariant": "cadential"}) == ("D",)
        assert chord_functions({"degree": "I", "figure": "64", "sixFourVariant": "passing"}) == ("D",)

    def test_literal_six_four_keeps_tonic(self):
        """Test a bare I64 carries its degree's tonic function."""
        assert chord_functions({"degree": "I", "figure": "64"}) == ("T",)
        assert primary_function({"degree": "I", "figure": "64"}) == "T"

    def test_special_root(self):
        """Test special roots."""
        assert chord_functions({"specialRoot": "N"}) == ("SD",)
        assert chord_functions({"specialRoot": "Gr"}) == ("D",)

    def test_function_only(self):
        """Test a function-only annotation."""
        assert chord_functions({"selectedFunction": "T"}) == ("T",)
        assert chord_functions({}) == ()


class TestExpectedFunctions:
    """Tests for the functions accepted as a function-only answer."""

    def test_from_degree(self):
        """Test functions come from the degree."""
        assert expected_functions({"degree": "VI"}) == ("T", "SD")

    def test_cadential_six_four_adds_dominant(self):
        """Test the implied dominant is accepted too."""
        chord = {"degree": "I", "figure": "64", "sixFourVariant": "cadential"}
        assert expected_functions(chord) == ("T", "D")

    def test_without_degree(self):
        """Test explicit function and special root fallbacks."""
        assert expected_functions({"selectedFunction": "SD"}) == ("SD",)
        assert expected_functions({"specialRoot": "It"}) == ("D",)
        assert expected_functions(None) == ()


class TestSecondaryDominant:
    """Tests for the secondary dominant heuristic."""

    def test_of_degree(self):
        """Test an explicit target degree."""
        assert is_secondary_dominant({"degree": "V", "figure": "7", "ofDegree": "V"})

    def test_label_suffix(self):
        """Test /V, /IV and /VI suffixes."""
        assert is_secondary_dominant({"displayLabel": "V7/V"})
        assert is_secondary_dominant({"root": "V/IV"})
        assert is_secondary_dominant({"displayLabel": "vii°/vi"})

    def test_plain_chords(self):
        """Test ordinary chords are not secondary dominants."""
        assert not is_secondary_dominant({"degree": "V", "figure": "7"})
        assert not is_secondary_dominant(None)
