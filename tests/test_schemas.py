"""Tests for the boundary schemas."""
from harmonic_engine.chord_model import Chord
from harmonic_engine.schemas import (
    ChordAnnotationSchema,
    parse_chord,
    parse_performance,
    parse_qcm_answer,
)


class TestChordAnnotationSchema:
    """Tests for chord annotation validation."""

    def test_camel_case_aliases(self):
        """Test the authoring collaborator's keys."""
        chord = parse_chord({"degree": "v", "specialRoot": "bogus", "isBorrowed": "true", "displayLabel": " V7 "})
        assert chord == Chord(degree="V", is_borrowed=True, display_label="V7")

    def test_snake_case_names(self):
        """Test field names are accepted too."""
        schema = ChordAnnotationSchema(special_root="gr", six_four_variant="Passing")
        assert schema.special_root == "Gr"
        assert schema.six_four_variant == "passing"

    def test_extra_keys_ignored(self):
        """Test unknown keys are dropped."""
        assert parse_chord({"degree": "I", "id": 12, "timestamp": 3.5}) == Chord(degree="I")

    def test_not_a_mapping(self):
        """Test unusable input."""
        assert parse_chord(None) is None
        assert parse_chord("V7") is None
        assert parse_chord([1, 2]) is None

    def test_figure_spellings(self):
        """Test figure validation."""
        assert parse_chord({"figure": "6/5"}).figure == "65"
        assert parse_chord({"figure": "8"}).figure is None


class TestQcmAnswerSchema:
    """Tests for multiple-choice answers."""

    def test_bare_label(self):
        """Test a string is the chosen label."""
        assert parse_qcm_answer("V7").chord == "V7"

    def test_fields(self):
        """Test function parsing."""
        answer = parse_qcm_answer({"chord": " II6 ", "function": "sd", "cadence": "plagal"})
        assert answer.chord == "II6"
        assert answer.function == "SD"
        assert answer.cadence == "plagal"

    def test_unknown_function(self):
        """Test an unknown function is dropped."""
        assert parse_qcm_answer({"function": "X"}).function is None

    def test_invalid(self):
        """Test unusable input."""
        assert parse_qcm_answer(None) is None
        assert parse_qcm_answer(42) is None


class TestPerformanceRecordSchema:
    """Tests for performance records."""

    def test_valid(self):
        """Test a valid record."""
        record = parse_performance({"attempts": 4, "averageScore": 80.5})
        assert record.attempts == 4
        assert record.average_score == 80.5

    def test_defaults(self):
        """Test an empty record."""
        record = parse_performance({})
        assert record.attempts == 0
        assert record.average_score == 0.0

    def test_invalid(self):
        """Test out-of-range and wrongly typed records."""
        assert parse_performance({"averageScore": 150}) is None
        assert parse_performance({"attempts": "many"}) is None
