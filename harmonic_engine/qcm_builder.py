"""
Distractor Generator / QCM Builder - deterministic multiple-choice options.

For each expected chord the builder returns five labels: the correct one and
four distractors. Distractors come from the exercise's own chords when
possible, split into "close" lures (same primary function, same degree, or a
neighbouring degree) and "far" ones; synthetic chords fill the gaps. A
learner who has mastered the node gets mostly close lures.

All randomness flows from one seed, so identical inputs always give the
same list in the same order.

Usage:
    from harmonic_engine.qcm_builder import build_options

    options = build_options(
        {"degree": "V", "figure": "7"},
        exercise_chords,
        use_close_lures=False,
        question_seed=3,
    )
"""

from typing import Any, Iterable, List, Optional, Set, Tuple
import logging
import re

from .chord_model import Chord, DEGREES, DegreeChord, as_chord, classify_chord
from .chord_formatter import format_chord_string
from .function_mapper import degree_functions, primary_function
from .seeded_rng import SeededRng, seeded_shuffle

logger = logging.getLogger(__name__)


OPTION_COUNT = 5
DISTRACTOR_COUNT = OPTION_COUNT - 1

# Figures drawn for synthetic distractors
SYNTHETIC_FIGURES: Tuple[str, ...] = ("5", "6", "64", "7", "65", "43", "2")

# Candidate degree -> expected degrees it is a close lure for
CLOSE_DEGREE_NEIGHBOURS = {
    "III": ("I", "VI"),
    "VI": ("I", "III"),
    "II": ("IV",),
    "VII": ("V",),
}

MIN_CLOSE_CANDIDATES = 2
MIN_FAR_CANDIDATES = 2

# Upper bound on RNG draws per synthesis loop; the label space is large
# enough that this is never reached in practice.
MAX_SYNTHESIS_DRAWS = 500

_OPTION_DEGREE = re.compile(r"^([♭#])?(VII|VI|IV|III|II|I|V)")


def label_seed(label: str) -> int:
    """Default seed for a question: sum of the label's character codes."""
    return sum(ord(char) for char in label)


def _root_degree(chord: Any) -> Optional[str]:
    variant = classify_chord(chord)
    return variant.degree if isinstance(variant, DegreeChord) else None


def _is_close(chord: Chord, correct_function: Optional[str], correct_degree: Optional[str]) -> bool:
    """Same primary function, same degree, or a neighbouring degree.

    Chords without a degree (special roots, function-only annotations) share
    the "no degree" value, so they are close to one another.
    """
    if primary_function(chord) == correct_function:
        return True
    degree = _root_degree(chord)
    if degree == correct_degree:
        return True
    if degree is None or correct_degree is None:
        return False
    return correct_degree in CLOSE_DEGREE_NEIGHBOURS.get(degree, ())


def _classify_candidates(
    correct: Chord,
    correct_label: str,
    all_chords: Iterable[Any],
) -> Tuple[List[str], List[str]]:
    """Split the exercise's other chords into close and far labels.

    Repeated chords are kept, in exercise order; duplicates are only
    collapsed once the distractors have been picked.
    """
    correct_function = primary_function(correct)
    correct_degree = _root_degree(correct)
    close: List[str] = []
    far: List[str] = []

    for raw in all_chords:
        chord = as_chord(raw)
        if chord is None:
            continue
        label = format_chord_string(chord)
        if not label or label == correct_label:
            continue
        if _is_close(chord, correct_function, correct_degree):
            close.append(label)
        else:
            far.append(label)
    return close, far


def _synthesize_far(rng: SeededRng, correct_degree: Optional[str], taken: Set[str]) -> Optional[str]:
    """Draw one chord on a different degree with a random figure."""
    degree = rng.choice(DEGREES)
    if degree == correct_degree:
        return None
    figure = rng.choice(SYNTHETIC_FIGURES)
    label = format_chord_string(Chord(degree=degree, figure=figure))
    if label in taken:
        return None
    return label


def _generate_distractors(
    correct: Chord,
    correct_label: str,
    all_chords: Iterable[Any],
    use_close_lures: bool,
    seed: int,
) -> List[str]:
    rng = SeededRng(seed)
    close, far = _classify_candidates(correct, correct_label, all_chords)
    correct_degree = _root_degree(correct)

    # Same degree, different figure
    if correct_degree is not None:
        other_figures = [f for f in SYNTHETIC_FIGURES if f != correct.figure]
        draws = 0
        while len(close) < MIN_CLOSE_CANDIDATES and draws < MAX_SYNTHESIS_DRAWS:
            draws += 1
            figure = rng.choice(other_figures)
            label = format_chord_string(Chord(degree=correct_degree, figure=figure))
            if label != correct_label and label not in close:
                close.append(label)

    taken = {correct_label, *close, *far}
    draws = 0
    while len(far) < MIN_FAR_CANDIDATES and draws < MAX_SYNTHESIS_DRAWS:
        draws += 1
        label = _synthesize_far(rng, correct_degree, taken)
        if label is not None:
            far.append(label)
            taken.add(label)

    if use_close_lures:
        picked = close[:3] + far[:1]
    else:
        picked = close[:1] + far[:3]

    distractors: List[str] = []
    for label in seeded_shuffle(picked, seed + 1)[:DISTRACTOR_COUNT]:
        if label != correct_label and label not in distractors:
            distractors.append(label)

    # Thin pools or repeated chords: top up from the unused pool, preferred
    # kind first, then with further synthetic chords from the same generator
    remaining = close + far if use_close_lures else far + close
    for label in remaining:
        if len(distractors) >= DISTRACTOR_COUNT:
            break
        if label not in distractors:
            distractors.append(label)

    draws = 0
    while len(distractors) < DISTRACTOR_COUNT and draws < MAX_SYNTHESIS_DRAWS:
        draws += 1
        label = _synthesize_far(rng, correct_degree, taken)
        if label is not None:
            distractors.append(label)
            taken.add(label)

    if len(distractors) < DISTRACTOR_COUNT:
        logger.debug(f"Only {len(distractors)} distractors found for {correct_label!r}")

    return distractors


def build_options(
    correct_chord: Any,
    all_chords: Optional[Iterable[Any]] = None,
    use_close_lures: bool = False,
    question_seed: Optional[int] = None,
) -> List[str]:
    """
    Build the shuffled option list for one multiple-choice question.

    Args:
        correct_chord: Expected chord (Chord or dict)
        all_chords: Every expected chord of the exercise, used as lures
        use_close_lures: Mastery mode, 3 close lures + 1 far instead of 1 + 3
        question_seed: Seed for this question; defaults to the character
            code sum of the correct label

    Returns:
        Five distinct labels containing the correct label exactly once, or
        an empty list when the expected chord has no label.
    """
    correct = as_chord(correct_chord)
    if correct is None:
        return []
    correct_label = format_chord_string(correct)
    if not correct_label:
        logger.debug("Expected chord has no option label; no options built")
        return []

    seed = label_seed(correct_label) if question_seed is None else int(question_seed)
    distractors = _generate_distractors(correct, correct_label, all_chords or [], use_close_lures, seed)
    return seeded_shuffle([correct_label] + distractors, seed + 2)


def get_function_for_option_label(
    option_label: Optional[str],
    correct_chord: Any = None,
    correct_label: Optional[str] = None,
) -> str:
    """Infer a T/SD/D tag for a rendered option label (used for colouring).

    The correct option gets the expected chord's own function; other labels
    are read from their leading symbol. Defaults to "T".
    """
    if not option_label:
        return "T"
    if correct_chord is not None:
        if correct_label is None:
            correct_label = format_chord_string(correct_chord)
        if option_label == correct_label:
            return primary_function(correct_chord) or "T"

    if option_label.startswith("cad") or option_label.startswith("Cad."):
        return "D"
    if option_label.startswith(("It+6", "Fr+6", "Gr+6")):
        return "D"
    if option_label.startswith("II♭"):
        return "SD"

    match = _OPTION_DEGREE.match(option_label)
    if match:
        functions = degree_functions(match.group(2))
        return functions[0] if functions else "T"
    return "T"
