"""Tests for multiple-choice option generation."""
import pytest

from harmonic_engine.qcm_builder import (
    OPTION_COUNT,
    build_options,
    get_function_for_option_label,
    label_seed,
)


def assert_valid_options(options, correct_label):
    assert len(options) == OPTION_COUNT
    assert options.count(correct_label) == 1
    assert len(set(options)) == OPTION_COUNT


class TestBuildOptions:
    """Tests for build_options."""

    def test_five_distinct_with_correct(self, dominant_exercise):
        """Test shape of the option list."""
        options = build_options({"degree": "V", "figure": "7"}, dominant_exercise, question_seed=7)
        assert_valid_options(options, "V7")

    def test_deterministic(self, dominant_exercise):
        """Test identical inputs give identical output."""
        correct = {"degree": "V", "figure": "7"}
        first = build_options(correct, dominant_exercise, False, 7)
        second = build_options(correct, dominant_exercise, False, 7)
        assert first == second

    def test_default_seed_is_label_sum(self, dominant_exercise):
        """Test the seed defaults to the label's character code sum."""
        correct = {"degree": "V", "figure": "7"}
        assert label_seed("V7") == ord("V") + ord("7")
        assert build_options(correct, dominant_exercise) == build_options(
            correct, dominant_exercise, question_seed=label_seed("V7")
        )

    def test_mostly_far_lures(self, dominant_exercise):
        """Test the default mode takes one close lure and three far ones."""
        options = build_options({"degree": "V", "figure": "7"}, dominant_exercise, False, 11)
        assert options == ["V7", "III", "IV", "V", "II6"]

    def test_mostly_close_lures(self, dominant_exercise):
        """Test mastery mode takes every close lure before the far ones."""
        options = build_options({"degree": "V", "figure": "7"}, dominant_exercise, True, 11)
        # V and VII6 are the only close chords, so the pool tops up with a far one
        assert set(options) == {"V7", "V", "VII6", "III", "IV"}

    @pytest.mark.parametrize("seed", [0, 1, 7, 250, 10000])
    def test_without_exercise_chords(self, seed):
        """Test synthesis fills the list when no other chords are given."""
        assert_valid_options(build_options({"degree": "I"}, None, False, seed), "I")
        assert_valid_options(build_options({"degree": "I"}, [], True, seed), "I")

    def test_special_root_correct_chord(self):
        """Test an augmented sixth as the expected chord."""
        chords = [{"specialRoot": "It"}, {"degree": "V"}, {"degree": "I"}, {"degree": "IV"}]
        options = build_options({"specialRoot": "It"}, chords, False, 3)
        assert_valid_options(options, "It+6")
        assert "V" in options

    def test_repeated_chords_fill_the_selection(self):
        """Test repeated chords are only collapsed after the lures are picked."""
        chords = [
            {"degree": "I"}, {"degree": "I"}, {"degree": "IV"}, {"degree": "IV"},
            {"degree": "V"}, {"degree": "II", "figure": "6"}, {"degree": "VI"},
        ]
        options = build_options({"degree": "V"}, chords, False, 2)
        assert_valid_options(options, "V")
        # The two I chords take two of the three far slots; II6 only comes in
        # as a top-up once the duplicate is dropped
        assert {"V6/4", "I", "IV", "II6"} == set(options) - {"V"}

    def test_fundamental_figure_is_not_a_distractor(self):
        """Test "V5" is never offered next to "V"."""
        for seed in range(20):
            options = build_options({"degree": "V", "figure": "5"}, [], True, seed)
            assert_valid_options(options, "V")

    def test_degree_mode_ignored(self, dominant_exercise):
        """Test the display preference does not change options."""
        plain = build_options({"degree": "V", "figure": "7"}, dominant_exercise, False, 4)
        minor = build_options({"degree": "V", "figure": "7", "degreeMode": "minor"}, dominant_exercise, False, 4)
        assert plain == minor

    def test_unlabelled_correct_chord(self):
        """Test no options for a chord without a label."""
        assert build_options({"selectedFunction": "D"}, []) == []
        assert build_options(None, []) == []


    def test_parallel_degree_of_another_function_is_far(self):
        """Test closeness follows the primary function only."""
        chords = [{"degree": "VI"}, {"degree": "I"}, {"degree": "II", "figure": "6"}, {"degree": "V"}]
        options = build_options({"degree": "IV"}, chords, True, 6)
        assert_valid_options(options, "IV")
        # VI leads with T, so it only fills the single far slot and V is left out
        assert {"II6", "VI", "I"} <= set(options)
        assert "V" not in options

    def test_special_roots_are_close_to_each_other(self):
        """Test chords without a degree count as close lures for one another."""
        chords = [
            {"degree": "I"}, {"degree": "IV"}, {"degree": "VI"},
            {"degree": "II", "figure": "6"}, {"degree": "III"}, {"specialRoot": "N"},
        ]
        options = build_options({"specialRoot": "It"}, chords, False, 3)
        assert set(options) == {"It+6", "II♭6", "I", "IV", "VI"}


def _chord(degree, figure=None):
    return {"degree": degree, "figure": figure} if figure else {"degree": degree}


PROGRESSION_AROUND_IV = [_chord("I"), _chord("IV"), _chord("VI"), _chord("V"), _chord("III"), _chord("VII")]
DOMINANT_EXERCISE = [
    _chord("V", "7"), _chord("V"), _chord("VII", "6"), _chord("III"),
    _chord("IV"), _chord("II", "6"), _chord("I"),
]
AUGMENTED_SIXTH_EXERCISE = [
    {"specialRoot": "It"}, {"specialRoot": "N"}, _chord("V"), _chord("I"), _chord("IV"), _chord("VII", "7"),
]
TONIC_EXERCISE = [_chord("I"), _chord("IV"), _chord("V", "7"), _chord("VI"), _chord("II", "6"), _chord("V")]


class TestReferenceOptionLists:
    """Exact option lists for known exercises; these must stay stable across releases."""

    @pytest.mark.parametrize("correct,chords,use_close_lures,seed,expected", [
        (_chord("IV"), PROGRESSION_AROUND_IV, False, 5, ["V", "VI", "IV", "I", "IV6/4"]),
        (_chord("IV"), PROGRESSION_AROUND_IV, False, 25, ["V", "I", "IV", "IV6", "VI"]),
        (_chord("V", "7"), DOMINANT_EXERCISE, False, 7, ["III", "V", "IV", "V7", "II6"]),
        (_chord("V", "7"), DOMINANT_EXERCISE, False, 11, ["V7", "III", "IV", "V", "II6"]),
        (_chord("V", "7"), DOMINANT_EXERCISE, False, 52, ["II6", "V7", "III", "V", "IV"]),
        ({"specialRoot": "It"}, AUGMENTED_SIXTH_EXERCISE, True, 3, ["It+6", "V", "VII7", "II♭6", "I"]),
        ({"specialRoot": "It"}, AUGMENTED_SIXTH_EXERCISE, True, 23, ["VII7", "It+6", "II♭6", "V", "I"]),
        (_chord("I"), TONIC_EXERCISE, False, 12, ["I", "V7", "II6", "VI", "IV"]),
        (_chord("I"), TONIC_EXERCISE, False, 53, ["V7", "VI", "I", "IV", "II6"]),
    ])
    def test_option_list(self, correct, chords, use_close_lures, seed, expected):
        """Test the exact options and their order."""
        assert build_options(correct, chords, use_close_lures, seed) == expected


class TestFunctionForOptionLabel:
    """Tests for option colouring."""

    def test_pattern_rules(self):
        """Test label patterns."""
        assert get_function_for_option_label("Cad.6/4") == "D"
        assert get_function_for_option_label("It+6") == "D"
        assert get_function_for_option_label("Gr+6") == "D"
        assert get_function_for_option_label("II♭6") == "SD"

    def test_degree_lookup(self):
        """Test the leading degree decides."""
        assert get_function_for_option_label("VII6") == "D"
        assert get_function_for_option_label("II6/5") == "SD"
        assert get_function_for_option_label("VI") == "T"
        assert get_function_for_option_label("V7 / I") == "D"

    def test_correct_label_uses_chord(self):
        """Test the correct option takes the expected chord's function."""
        passing = {"degree": "I", "figure": "64", "sixFourVariant": "passing"}
        assert get_function_for_option_label("V6/4", passing) == "D"

    def test_defaults_to_tonic(self):
        """Test unknown labels and a literal I64."""
        assert get_function_for_option_label("") == "T"
        assert get_function_for_option_label("???") == "T"
        assert get_function_for_option_label("I6/4", {"degree": "I", "figure": "64"}) == "T"
