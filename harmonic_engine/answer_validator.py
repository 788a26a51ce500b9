"""
Answer Validator - graded comparison of a learner's chord with the expected one.

Levels and scores:
    1   / 100  exact degree and figure
    2   /  80  right degree, different figure
    2   /  65  right function, different degree (explicit function or
               principal/parallel substitution)
    3   /  30  function-only answer naming a correct function
    0.5 /  30  multiple-choice label on the wrong chord but the right function
    0   /   0  incorrect, or missing answer

A matching cadence adds a 10-point bonus on top of any level. Nothing here
raises; incomplete chords simply score level 0.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union
import logging

from .chord_model import (
    DegreeChord,
    HarmonicFunction,
    SpecialRootChord,
    as_chord,
    classify_chord,
    normalize_cadence,
)
from .chord_formatter import format_chord_string
from .function_mapper import degree_functions, expected_functions, is_principal_parallel_pair
from .qcm_builder import get_function_for_option_label
from .schemas import parse_qcm_answer

logger = logging.getLogger(__name__)


CADENCE_BONUS = 10

FEEDBACK_MISSING = "missing answer"
FEEDBACK_PERFECT = "Perfect"
FEEDBACK_FIND_DEGREE = "right function, find the exact degree"
FEEDBACK_WRONG_DEGREE = "right function, wrong degree"
FEEDBACK_DIFFERENT_FIGURE = "right degree, different figure"
FEEDBACK_WRONG_CHORD = "right function, wrong chord"
FEEDBACK_INCORRECT = "incorrect"
FEEDBACK_CADENCE_SUFFIX = " + cadence bonus"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one comparison."""
    level: float
    score: int
    cadence_bonus: int = 0
    feedback: str = ""

    @property
    def total(self) -> int:
        """Score including the cadence bonus."""
        return self.score + self.cadence_bonus

    @property
    def is_perfect(self) -> bool:
        return self.level == 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "score": self.score,
            "cadenceBonus": self.cadence_bonus,
            "feedback": self.feedback,
        }


@dataclass(frozen=True)
class ValidationOptions:
    """Presentation constraints that change what can be scored."""
    function_only_available: bool = False

    @classmethod
    def coerce(cls, options: Union["ValidationOptions", Mapping[str, Any], None]) -> "ValidationOptions":
        if options is None:
            return cls()
        if isinstance(options, ValidationOptions):
            return options
        flag = options.get("functionOnlyAvailable", options.get("function_only_available", False))
        return cls(function_only_available=bool(flag))


MISSING_ANSWER = ValidationResult(level=0, score=0, cadence_bonus=0, feedback=FEEDBACK_MISSING)

_PERFECT = (1, 100, FEEDBACK_PERFECT)
_DIFFERENT_FIGURE = (2, 80, FEEDBACK_DIFFERENT_FIGURE)
_WRONG_DEGREE = (2, 65, FEEDBACK_WRONG_DEGREE)
_SUBSTITUTION = (2, 65, FEEDBACK_FIND_DEGREE)
_FUNCTION_ONLY = (3, 30, FEEDBACK_FIND_DEGREE)
_WRONG_CHORD = (0.5, 30, FEEDBACK_WRONG_CHORD)
_INCORRECT = (0, 0, FEEDBACK_INCORRECT)


def cadence_bonus(user_cadence: Any, correct_cadence: Any) -> int:
    """10 when both cadences are present and equal after normalization."""
    user = normalize_cadence(user_cadence)
    correct = normalize_cadence(correct_cadence)
    if user is not None and correct is not None and user == correct:
        return CADENCE_BONUS
    return 0


def _result(outcome, bonus: int) -> ValidationResult:
    level, score, feedback = outcome
    if bonus:
        feedback += FEEDBACK_CADENCE_SUFFIX
    return ValidationResult(level=level, score=score, cadence_bonus=bonus, feedback=feedback)


def _function_only(function: Optional[str], correct: Any):
    if function is not None and function in expected_functions(correct):
        return _FUNCTION_ONLY
    return _INCORRECT


def _decide(user: Any, correct: Any, function: Optional[str]):
    """Walk the decision table; first matching rule wins."""
    user_variant = classify_chord(user)
    correct_variant = classify_chord(correct)

    if (
        isinstance(user_variant, SpecialRootChord)
        and isinstance(correct_variant, SpecialRootChord)
        and user_variant.special_root == correct_variant.special_root
    ):
        return _PERFECT

    user_degree = user_variant.degree if isinstance(user_variant, DegreeChord) else None
    correct_degree = correct_variant.degree if isinstance(correct_variant, DegreeChord) else None

    if user_degree and correct_degree and user_degree == correct_degree:
        if user_variant.figure == correct_variant.figure:
            return _PERFECT

    if function and not user_degree:
        return _function_only(function, correct)

    if function and user_degree and correct_degree:
        if function in expected_functions(correct):
            if user_degree == correct_degree:
                return _PERFECT
            if function in degree_functions(user_degree):
                return _WRONG_DEGREE

    if user_degree and correct_degree:
        if user_degree == correct_degree:
            return _DIFFERENT_FIGURE
        if is_principal_parallel_pair(user_degree, correct_degree):
            return _SUBSTITUTION

    return _INCORRECT


def validate(
    user_answer: Any,
    correct_answer: Any,
    selected_function: Optional[str] = None,
    options: Union[ValidationOptions, Mapping[str, Any], None] = None,
) -> ValidationResult:
    """
    Compare a learner's chord with the expected chord.

    Args:
        user_answer: Learner's chord (Chord or dict)
        correct_answer: Expected chord (Chord or dict)
        selected_function: Function picked by the learner; defaults to the
            answer's own ``selectedFunction`` / ``function`` field
        options: ``ValidationOptions`` or ``{"functionOnlyAvailable": bool}``.
            In function-only mode the learner's degree is ignored and only a
            correct function scores.

    Returns:
        ValidationResult with level, score, cadence bonus and feedback
    """
    user = as_chord(user_answer)
    correct = as_chord(correct_answer)
    if user is None or correct is None:
        logger.debug(f"Missing chord (user={user_answer!r}, expected={correct_answer!r})")
        return MISSING_ANSWER

    opts = ValidationOptions.coerce(options)
    bonus = cadence_bonus(user.cadence, correct.cadence)

    member = HarmonicFunction.parse(selected_function)
    function = member.value if member else user.explicit_function

    if opts.function_only_available:
        outcome = _function_only(function, correct)
    else:
        outcome = _decide(user, correct, function)
    return _result(outcome, bonus)


def validate_qcm(
    answer: Any,
    correct_answer: Any,
    options: Union[ValidationOptions, Mapping[str, Any], None] = None,
) -> ValidationResult:
    """
    Compare a multiple-choice answer ``{chord, cadence, function}`` with the
    expected chord.

    The chosen label is compared with ``format_chord_string`` of the
    expected chord, the same renderer that produced the options.
    """
    payload = parse_qcm_answer(answer)
    correct = as_chord(correct_answer)
    if payload is None or correct is None:
        logger.debug(f"Missing QCM answer (answer={answer!r}, expected={correct_answer!r})")
        return MISSING_ANSWER

    opts = ValidationOptions.coerce(options)
    bonus = cadence_bonus(payload.cadence, correct.cadence)
    functions = expected_functions(correct)

    if opts.function_only_available:
        return _result(_function_only(payload.function, correct), bonus)

    correct_label = format_chord_string(correct)
    if payload.chord is not None and payload.chord == correct_label:
        outcome = _PERFECT
    elif payload.chord is None:
        outcome = _function_only(payload.function, correct)
    else:
        chosen_function = payload.function or get_function_for_option_label(
            payload.chord, correct, correct_label
        )
        outcome = _WRONG_CHORD if chosen_function in functions else _INCORRECT
    return _result(outcome, bonus)
