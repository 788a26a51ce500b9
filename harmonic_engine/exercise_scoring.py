"""
Exercise Scoring - aggregate per-chord validation into exercise results.

Covers what the host application needs around the validator: deciding
whether a learner gets close lures, filtering the chords a learning-path
node actually tests, the node score percentage and the XP earned by an
attempt. The learner's history is read-only input here.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
import logging
import math

from .chord_model import SpecialRootChord, as_chord, classify_chord, normalize_degree, normalize_figure
from .answer_validator import ValidationOptions, validate
from .function_mapper import is_secondary_dominant, primary_function
from .schemas import parse_performance

logger = logging.getLogger(__name__)


@dataclass
class CloseLurePolicy:
    """When a learner has earned close (harder) multiple-choice lures."""
    min_attempts: int = 3
    min_average_score: float = 75.0

    @classmethod
    def from_dict(cls, data: Dict) -> 'CloseLurePolicy':
        return cls(
            min_attempts=int(data.get('min_attempts', 3)),
            min_average_score=float(data.get('min_average_score', 75.0)),
        )


def should_use_close_lures(performance: Any, policy: Optional[CloseLurePolicy] = None) -> bool:
    """True once ``{attempts, averageScore}`` shows mastery of the node."""
    policy = policy or CloseLurePolicy()
    record = parse_performance(performance)
    if record is None:
        return False
    return record.attempts >= policy.min_attempts and record.average_score >= policy.min_average_score


# =============================================================================
# NODE CRITERIA
# =============================================================================

ALL_FUNCTIONS = ("T", "SD", "D")
STAGE_3_FIGURES = ("5", "6", "64", "7", "65", "43", "2")


@dataclass(frozen=True)
class NodeCriteria:
    """What a learning-path node tests; a chord matching any field counts."""
    functions: Tuple[str, ...] = ()
    degrees: Tuple[str, ...] = ()
    figures: Tuple[str, ...] = ()
    special_roots: Tuple[str, ...] = ()
    secondary_dominants: bool = False


NODE_CRITERIA: Dict[str, NodeCriteria] = {
    "1.1": NodeCriteria(("T", "D"), ("I", "V"), ("5", "6", "64")),
    "1.2": NodeCriteria(ALL_FUNCTIONS, ("I", "IV", "II", "V"), ("5", "6", "64")),
    "2.1": NodeCriteria(ALL_FUNCTIONS, ("I", "IV", "II", "V"), ("5", "6")),
    "2.2": NodeCriteria(ALL_FUNCTIONS, ("I", "IV", "II", "V"), ("5", "6", "64", "65")),
    "2.3": NodeCriteria(ALL_FUNCTIONS, ("I", "IV", "II", "V", "VII"), ("5", "6", "64", "7", "65")),
    "3.1": NodeCriteria(ALL_FUNCTIONS, ("I", "IV", "II", "V", "VII"), STAGE_3_FIGURES),
    "3.2": NodeCriteria(ALL_FUNCTIONS, ("I", "IV", "II", "V", "VII"), STAGE_3_FIGURES),
    "3.2-vii7": NodeCriteria(ALL_FUNCTIONS, ("I", "IV", "II", "V", "VII"), STAGE_3_FIGURES),
    "3.3": NodeCriteria(ALL_FUNCTIONS, ("I", "IV", "II", "V", "VI", "VII"), STAGE_3_FIGURES),
    "3.4": NodeCriteria(ALL_FUNCTIONS, ("I", "IV", "II", "V", "VI", "VII"), STAGE_3_FIGURES),
    "3.5": NodeCriteria(ALL_FUNCTIONS, ("I", "IV", "II", "V", "VII"), STAGE_3_FIGURES),
    "4.1": NodeCriteria(ALL_FUNCTIONS, ("I", "IV", "II", "V", "VI", "VII"), STAGE_3_FIGURES, ("N",)),
    "4.2": NodeCriteria(ALL_FUNCTIONS, ("I", "IV", "II", "V", "VI", "VII"), STAGE_3_FIGURES, ("N",), True),
    "4.3": NodeCriteria(ALL_FUNCTIONS, ("I", "IV", "II", "V", "VI", "VII"), STAGE_3_FIGURES, ("N",), True),
    "4.4": NodeCriteria(ALL_FUNCTIONS, ("I", "IV", "II", "V", "VI", "VII"), STAGE_3_FIGURES, ("N",), True),
    "4.5": NodeCriteria(
        ALL_FUNCTIONS, ("I", "IV", "II", "V", "VI", "VII"), STAGE_3_FIGURES, ("N", "It", "Fr", "Gr"), True
    ),
    "4.6": NodeCriteria(
        ALL_FUNCTIONS, ("I", "IV", "II", "III", "V", "VI", "VII"), STAGE_3_FIGURES, ("N", "It", "Fr", "Gr"), True
    ),
}


def is_chord_relevant_for_node(chord: Any, node_id: str) -> bool:
    """Whether a node's exercises test this chord."""
    criteria = NODE_CRITERIA.get(node_id)
    parsed = as_chord(chord)
    if criteria is None or parsed is None:
        return False

    function = primary_function(parsed)
    if function is not None and function in criteria.functions:
        return True

    degree = normalize_degree(parsed)
    if degree is not None and degree in criteria.degrees:
        return True

    figure = normalize_figure(parsed.figure)
    if figure and figure in criteria.figures:
        return True

    variant = classify_chord(parsed)
    if isinstance(variant, SpecialRootChord) and variant.special_root in criteria.special_roots:
        return True
    return criteria.secondary_dominants and is_secondary_dominant(parsed)


def relevant_chord_indices(node_id: str, chords: Sequence[Any]) -> List[int]:
    """Indices of the expected chords a node takes into account."""
    return [index for index, chord in enumerate(chords) if is_chord_relevant_for_node(chord, node_id)]


# =============================================================================
# SCORING
# =============================================================================

MAX_CHORD_SCORE = 100
CADENCE_EXTRA = 10

# XP per chord by validation level
XP_BY_LEVEL: Dict[float, int] = {1: 10, 2: 6, 3: 4, 0.5: 5, 0: 0}


@dataclass
class AttemptSummary:
    """Per-attempt results handed back to the host application."""
    xp_gained: int = 0
    correct_count: int = 0
    total_questions: int = 0
    levels: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "xpGained": self.xp_gained,
            "correctCount": self.correct_count,
            "totalQuestions": self.total_questions,
        }


def _answer_at(answers: Sequence[Any], index: int) -> Any:
    return answers[index] if 0 <= index < len(answers) else None


def calculate_node_score(
    user_answers: Sequence[Any],
    correct_answers: Sequence[Any],
    indices: Optional[Iterable[int]] = None,
    node_id: Optional[str] = None,
    function_only_available: bool = False,
) -> int:
    """
    Percentage of the achievable score over the chords that count.

    Each expected chord is worth 100 points, plus 10 when it carries a
    cadence. Unanswered chords score 0.

    Args:
        user_answers: Learner answers, aligned with ``correct_answers``
        correct_answers: Expected chords
        indices: Chords to score; defaults to the node's relevant chords
            when ``node_id`` is given, else every chord
        node_id: Learning-path node used to pick relevant chords
        function_only_available: Phase where only functions can be entered

    Returns:
        Rounded percentage 0-100; 0 when nothing counts
    """
    if indices is None:
        if node_id is not None:
            indices = relevant_chord_indices(node_id, correct_answers)
        else:
            indices = range(len(correct_answers))
    indices = list(indices)
    if not indices:
        return 0

    options = ValidationOptions(function_only_available=function_only_available)
    total = 0
    maximum = 0
    for index in indices:
        correct = as_chord(_answer_at(correct_answers, index))
        if correct is None:
            continue
        maximum += MAX_CHORD_SCORE
        if correct.cadence:
            maximum += CADENCE_EXTRA
        user = _answer_at(user_answers, index)
        if user is not None:
            total += validate(user, correct, None, options).total

    if maximum == 0:
        return 0
    return int(math.floor(total / maximum * 100 + 0.5))


def summarize_attempt(
    user_answers: Sequence[Any],
    correct_answers: Sequence[Any],
    function_only_available: bool = False,
) -> AttemptSummary:
    """XP and count of fully correct chords for one attempt."""
    options = ValidationOptions(function_only_available=function_only_available)
    summary = AttemptSummary(total_questions=len(correct_answers))
    for index, correct in enumerate(correct_answers):
        user = _answer_at(user_answers, index)
        if correct is None or user is None:
            continue
        result = validate(user, correct, None, options)
        summary.levels.append(result.level)
        summary.xp_gained += XP_BY_LEVEL.get(result.level, 0)
        if result.level == 1:
            summary.correct_count += 1

    logger.debug(
        f"Attempt: {summary.correct_count}/{summary.total_questions} correct, "
        f"{summary.xp_gained} XP"
    )
    return summary
