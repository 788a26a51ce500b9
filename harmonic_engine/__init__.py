"""
Harmonic Answer Engine

Validation, multiple-choice generation and difficulty estimation for
Roman-numeral / figured-bass harmonic analysis exercises.
"""

__version__ = "0.1.0"
__author__ = "Harmonic Answer Engine Team"

from .chord_model import (
    Chord,
    DegreeChord,
    SpecialRootChord,
    FunctionOnlyChord,
    HarmonicFunction,
    SpecialRoot,
    SixFourVariant,
    Accidental,
    DegreeMode,
    as_chord,
    classify_chord,
    normalize_degree,
    normalize_figure,
    normalize_cadence,
    chord_key,
)
from .function_mapper import (
    DEGREE_TO_FUNCTIONS,
    FUNCTION_TO_DEGREES,
    degree_functions,
    function_degrees,
    chord_functions,
    primary_function,
    expected_functions,
    are_degrees_in_same_function,
    is_principal_parallel_pair,
    is_secondary_dominant,
)
from .chord_formatter import (
    format_chord_string,
    format_chord_detailed,
    parse_chord_display_string,
    degree_display_label,
)
from .seeded_rng import SeededRng, lcg_next, seeded_shuffle
from .qcm_builder import build_options, get_function_for_option_label
from .answer_validator import (
    ValidationResult,
    ValidationOptions,
    validate,
    validate_qcm,
)
from .difficulty import (
    DifficultyLevel,
    DifficultyTable,
    DifficultySettings,
    DifficultyBreakdown,
    estimate_difficulty,
    explain_difficulty,
    inter_marker_durations,
)
from .exercise_scoring import (
    CloseLurePolicy,
    AttemptSummary,
    should_use_close_lures,
    is_chord_relevant_for_node,
    relevant_chord_indices,
    calculate_node_score,
    summarize_attempt,
)
from .config_loader import (
    ConfigLoader,
    ConfigLoadError,
    EngineConfig,
    get_config_loader,
)

__all__ = [
    # Chord model
    "Chord",
    "DegreeChord",
    "SpecialRootChord",
    "FunctionOnlyChord",
    "HarmonicFunction",
    "SpecialRoot",
    "SixFourVariant",
    "Accidental",
    "DegreeMode",
    "as_chord",
    "classify_chord",
    "normalize_degree",
    "normalize_figure",
    "normalize_cadence",
    "chord_key",
    # Function mapper
    "DEGREE_TO_FUNCTIONS",
    "FUNCTION_TO_DEGREES",
    "degree_functions",
    "function_degrees",
    "chord_functions",
    "primary_function",
    "expected_functions",
    "are_degrees_in_same_function",
    "is_principal_parallel_pair",
    "is_secondary_dominant",
    # Formatting
    "format_chord_string",
    "format_chord_detailed",
    "parse_chord_display_string",
    "degree_display_label",
    # Multiple choice
    "SeededRng",
    "lcg_next",
    "seeded_shuffle",
    "build_options",
    "get_function_for_option_label",
    # Validation
    "ValidationResult",
    "ValidationOptions",
    "validate",
    "validate_qcm",
    # Difficulty
    "DifficultyLevel",
    "DifficultyTable",
    "DifficultySettings",
    "DifficultyBreakdown",
    "estimate_difficulty",
    "explain_difficulty",
    "inter_marker_durations",
    # Exercise scoring
    "CloseLurePolicy",
    "AttemptSummary",
    "should_use_close_lures",
    "is_chord_relevant_for_node",
    "relevant_chord_indices",
    "calculate_node_score",
    "summarize_attempt",
    # Configuration
    "ConfigLoader",
    "ConfigLoadError",
    "EngineConfig",
    "get_config_loader",
]
