"""
Chord Formatter - render chord annotations as display labels.

``format_chord_string`` produces the compact label used as a multiple-choice
option; the validator compares learner choices against the same function,
so its output must stay stable byte for byte.
"""

from typing import Any, Dict, Optional
import re

from .chord_model import (
    Accidental,
    DegreeChord,
    DegreeMode,
    FunctionOnlyChord,
    SixFourVariant,
    SpecialRootChord,
    as_chord,
    classify_chord,
    normalize_degree,
    normalize_figure,
)


SPECIAL_ROOT_LABELS: Dict[str, str] = {
    "N": "II♭6",
    "It": "It+6",
    "Fr": "Fr+6",
    "Gr": "Gr+6",
}

STACKED_FIGURES: Dict[str, str] = {
    "64": "6/4",
    "65": "6/5",
    "43": "4/3",
    "54": "5/4",
}

ACCIDENTAL_SIGNS: Dict[str, str] = {
    Accidental.FLAT.value: "♭",
    Accidental.SHARP.value: "♯",
    Accidental.NATURAL.value: "♮",
}

DEGREE_DISPLAY: Dict[str, Dict[str, str]] = {
    "I": {"generic": "I", "major": "I", "minor": "i"},
    "II": {"generic": "II", "major": "ii", "minor": "ii°"},
    "III": {"generic": "III", "major": "iii", "minor": "III"},
    "IV": {"generic": "IV", "major": "IV", "minor": "iv"},
    "V": {"generic": "V", "major": "V", "minor": "V"},
    "VI": {"generic": "VI", "major": "vi", "minor": "VI"},
    "VII": {"generic": "VII", "major": "vii°", "minor": "vii°"},
}

NO_ANSWER = "No answer"

_PEDAL_SUFFIX = re.compile(r"^(.+?)\s*/\s*(I|II|III|IV|V|VI|VII)$")
_STACKED_SUFFIX = re.compile(r"(6/4|6/5|4/3|5/4)$")
_SIMPLE_SUFFIX = re.compile(r"^(.+?)(\d{1,2})$")
_CADENTIAL_PREFIX = re.compile(r"^Cad\.\s*$", re.IGNORECASE)


def render_figure(figure: str) -> str:
    return STACKED_FIGURES.get(figure, figure)


def _six_four_degree(variant: DegreeChord) -> str:
    if variant.degree == "I" and variant.figure == "64":
        if variant.six_four_variant == SixFourVariant.PASSING.value:
            return "V"
        if variant.six_four_variant == SixFourVariant.CADENTIAL.value:
            return "Cad."
    return variant.degree


def format_chord_string(chord: Any) -> str:
    """Compact option label, e.g. "V6/5", "Cad.6/4", "It+6", "II6 / I".

    Root position renders without a figure; natural signs are not shown.
    """
    variant = classify_chord(chord)
    if isinstance(variant, SpecialRootChord):
        return SPECIAL_ROOT_LABELS[variant.special_root]
    if not isinstance(variant, DegreeChord):
        return ""

    degree_part = _six_four_degree(variant)
    result = degree_part
    if degree_part != "Cad." and variant.accidental in (Accidental.FLAT.value, Accidental.SHARP.value):
        result += ACCIDENTAL_SIGNS[variant.accidental]
    result += render_figure(variant.figure)
    if variant.pedal_degree:
        result += " / " + variant.pedal_degree
    return result


def format_chord_detailed(chord: Any) -> str:
    """Author-facing rendering with borrowing brackets and quality marker.

    Examples: "♭II6", "(IV6/4)", "V7 / I", "SD".
    """
    parsed = as_chord(chord)
    variant = classify_chord(parsed)
    if parsed is None or variant is None:
        return NO_ANSWER

    parts = []
    if parsed.is_borrowed:
        parts.append("(")

    accidental = Accidental.parse(parsed.accidental)
    if accidental is not None and not isinstance(variant, SpecialRootChord):
        parts.append(ACCIDENTAL_SIGNS[accidental.value])

    if isinstance(variant, SpecialRootChord):
        parts.append(SPECIAL_ROOT_LABELS[variant.special_root])
    elif isinstance(variant, DegreeChord):
        degree_part = _six_four_degree(variant)
        parts.append(degree_part)
        if degree_part == variant.degree and parsed.quality:
            parts.append(str(parsed.quality))
        parts.append(render_figure(variant.figure))
    elif isinstance(variant, FunctionOnlyChord):
        parts.append(variant.function)

    if parsed.is_borrowed:
        parts.append(")")

    if isinstance(variant, DegreeChord) and variant.pedal_degree:
        parts.append(" / " + variant.pedal_degree)

    return "".join(parts) or NO_ANSWER


def parse_chord_display_string(label: Optional[str]) -> Dict[str, Any]:
    """Split a rendered label into its leading part, figure and pedal degree.

    Returns a dict with keys ``leading``, ``figure`` (None, or a dict with
    ``stacked`` and either ``digits`` or ``value``) and ``pedal_degree``.
    """
    empty = {"leading": "", "figure": None, "pedal_degree": None}
    if not label or not isinstance(label, str):
        return empty
    text = label.strip()
    if not text:
        return empty

    pedal_match = _PEDAL_SUFFIX.match(text)
    base = pedal_match.group(1).strip() if pedal_match else text
    pedal_degree = pedal_match.group(2) if pedal_match else None

    if base in ("It+6", "Fr+6", "Gr+6"):
        return {"leading": base, "figure": None, "pedal_degree": pedal_degree}

    # Neapolitan: the flat belongs to the sixth, not to the degree
    if base in ("II♭6", "IIb6"):
        return {
            "leading": "II",
            "figure": {"stacked": False, "value": "♭6"},
            "pedal_degree": pedal_degree,
        }

    stacked = _STACKED_SUFFIX.search(base)
    if stacked:
        fraction = stacked.group(1)
        leading = base[: -len(fraction)].strip()
        if fraction == "6/4" and (leading == "cad" or _CADENTIAL_PREFIX.match(leading)):
            leading = "Cad."
        return {
            "leading": leading,
            "figure": {"stacked": True, "digits": fraction.split("/")},
            "pedal_degree": pedal_degree,
        }

    simple = _SIMPLE_SUFFIX.match(base)
    if simple:
        return {
            "leading": simple.group(1),
            "figure": {"stacked": False, "value": simple.group(2)},
            "pedal_degree": pedal_degree,
        }

    return {"leading": base, "figure": None, "pedal_degree": pedal_degree}


def degree_display_label(degree: Any, degree_mode: Any = DegreeMode.GENERIC) -> str:
    """Degree as shown to a learner who prefers ``degree_mode`` spelling.

    The preference is passed in explicitly; scoring never looks at it.
    """
    canonical = normalize_degree(degree)
    if canonical is None:
        return "" if degree is None else str(degree)
    mode = DegreeMode.parse(degree_mode) or DegreeMode.GENERIC
    return DEGREE_DISPLAY[canonical][mode.value]


def figure_display(figure: Any) -> str:
    """Display form of a figure code ("64" -> "6/4"); root position is blank."""
    return render_figure(normalize_figure(figure))
