"""
Chord Model & Normalizer - canonical representation of a chord annotation.

A chord annotation is what an exercise author attaches to a video
timestamp: a Roman numeral degree (or a special root such as the
Neapolitan), a figured-bass inversion code, an optional cadence label and
a handful of flags. Learner answers share the same shape.

Everything here is pure: chords are immutable, the normalizers are total
and return None / "" for anything they do not recognise.

Usage:
    from harmonic_engine.chord_model import Chord, normalize_degree, chord_key

    chord = Chord.from_dict({"degree": "v", "figure": "7"})
    normalize_degree(chord)   # "V"
    chord_key(chord)          # "V7"
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Tuple, Union
import logging
import re

logger = logging.getLogger(__name__)


# =============================================================================
# VOCABULARIES
# =============================================================================

DEGREES: Tuple[str, ...] = ("I", "II", "III", "IV", "V", "VI", "VII")

# Figured-bass inversion codes. "5" is root position and means the same as
# no figure at all.
FIGURES: Tuple[str, ...] = ("5", "6", "64", "7", "65", "43", "2", "9", "11", "13", "54")
FUNDAMENTAL_FIGURE = "5"

CADENCE_SYNONYMS = {
    "deceptive": "rompue",
    "half": "demi-cadence",
}

_DISPLAY_LABEL_DEGREE = re.compile(r"^[♭#]?([ivx]+)", re.IGNORECASE)


class _Vocabulary(Enum):
    """Enum base with a lenient parser for plain-data inputs."""

    @classmethod
    def parse(cls, value: Any) -> Optional["_Vocabulary"]:
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        if not text:
            return None
        for member in cls:
            if text == member.value or text.lower() in member.aliases():
                return member
        return None

    def aliases(self) -> Tuple[str, ...]:
        return (str(self.value).lower(),)


class HarmonicFunction(_Vocabulary):
    """Riemann harmonic functions."""
    TONIC = "T"
    SUBDOMINANT = "SD"
    DOMINANT = "D"

    @property
    def display_name(self) -> str:
        return {"T": "Tonic", "SD": "Subdominant", "D": "Dominant"}[self.value]


class SpecialRoot(_Vocabulary):
    """Chromatic chords identified by name rather than by degree."""
    NEAPOLITAN = "N"
    ITALIAN_SIXTH = "It"
    FRENCH_SIXTH = "Fr"
    GERMAN_SIXTH = "Gr"


class SixFourVariant(_Vocabulary):
    """How an I64 chord behaves functionally."""
    PASSING = "passing"
    CADENTIAL = "cadential"


class Accidental(_Vocabulary):
    """Alteration applied to the degree."""
    FLAT = "flat"
    SHARP = "sharp"
    NATURAL = "natural"

    def aliases(self) -> Tuple[str, ...]:
        return {
            "flat": ("flat", "b", "♭"),
            "sharp": ("sharp", "#", "♯"),
            "natural": ("natural", "♮"),
        }[self.value]


class DegreeMode(_Vocabulary):
    """Display preference for degree labels. Never used for scoring."""
    GENERIC = "generic"
    MAJOR = "major"
    MINOR = "minor"


# =============================================================================
# CHORD ANNOTATION
# =============================================================================

@dataclass(frozen=True)
class Chord:
    """A single chord annotation (expected answer or learner answer)."""
    degree: Optional[str] = None
    accidental: Optional[str] = None
    quality: Optional[str] = None
    figure: Optional[str] = None
    is_borrowed: bool = False
    special_root: Optional[str] = None
    selected_function: Optional[str] = None
    function: Optional[str] = None          # legacy spelling of selected_function
    cadence: Optional[str] = None
    six_four_variant: Optional[str] = None
    pedal_degree: Optional[str] = None
    degree_mode: Optional[str] = None

    # Free-text sources used when no degree is given
    root: Optional[str] = None
    display_label: Optional[str] = None

    # Secondary dominant target (e.g. "V" for V/V)
    of_degree: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Optional["Chord"]:
        """Build a chord from the authoring collaborator's camelCase dict.

        Unknown vocabulary values are dropped rather than rejected; returns
        None only when ``data`` is not a mapping at all.
        """
        from .schemas import parse_chord
        return parse_chord(data)

    @property
    def explicit_function(self) -> Optional[str]:
        """The function the annotation names outright, if any."""
        member = HarmonicFunction.parse(self.selected_function or self.function)
        return member.value if member else None


@dataclass(frozen=True)
class DegreeChord:
    """A chord identified by its scale degree."""
    degree: str
    figure: str = ""
    accidental: Optional[str] = None
    six_four_variant: Optional[str] = None
    pedal_degree: Optional[str] = None
    function: Optional[str] = None


@dataclass(frozen=True)
class SpecialRootChord:
    """A Neapolitan or augmented-sixth chord."""
    special_root: str
    function: Optional[str] = None


@dataclass(frozen=True)
class FunctionOnlyChord:
    """A partial answer naming only a harmonic function."""
    function: str


ChordVariant = Union[DegreeChord, SpecialRootChord, FunctionOnlyChord]
ChordLike = Union[Chord, Mapping[str, Any]]


def as_chord(value: Any) -> Optional[Chord]:
    """Coerce a Chord, a plain dict or a schema instance into a Chord."""
    if value is None:
        return None
    if isinstance(value, Chord):
        return value
    if isinstance(value, Mapping):
        return Chord.from_dict(value)
    to_chord = getattr(value, "to_chord", None)
    if callable(to_chord):
        return to_chord()
    logger.debug(f"Ignoring chord input of unsupported type {type(value).__name__}")
    return None


def classify_chord(value: Any) -> Optional[ChordVariant]:
    """Resolve a chord annotation to exactly one variant.

    A special root takes precedence over a degree; a chord with neither
    but with a function is a function-only answer.
    """
    chord = as_chord(value)
    if chord is None:
        return None

    function = chord.explicit_function
    special = SpecialRoot.parse(chord.special_root)
    if special is not None:
        return SpecialRootChord(special_root=special.value, function=function)

    degree = normalize_degree(chord)
    if degree is not None:
        variant = SixFourVariant.parse(chord.six_four_variant)
        accidental = Accidental.parse(chord.accidental)
        return DegreeChord(
            degree=degree,
            figure=normalize_figure(chord.figure),
            accidental=accidental.value if accidental else None,
            six_four_variant=variant.value if variant else None,
            pedal_degree=_canonical_degree(chord.pedal_degree),
            function=function,
        )

    if function is not None:
        return FunctionOnlyChord(function=function)
    return None


# =============================================================================
# NORMALIZERS
# =============================================================================

def _canonical_degree(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip().upper()
    return text if text in DEGREES else None


def normalize_degree(value: Any) -> Optional[str]:
    """Uppercase Roman-numeral degree of a chord, or None.

    Sources in priority order: ``degree``, ``root``, then the leading
    numeral of ``display_label``. A plain string is normalized directly.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return _canonical_degree(value)

    chord = as_chord(value)
    if chord is None:
        return None

    degree = _canonical_degree(chord.degree)
    if degree:
        return degree
    degree = _canonical_degree(chord.root)
    if degree:
        return degree
    if chord.display_label:
        match = _DISPLAY_LABEL_DEGREE.match(str(chord.display_label).strip())
        if match:
            return _canonical_degree(match.group(1))
    return None


def normalize_figure(figure: Any) -> str:
    """Canonical figure code; root position ("5") and unknown codes give ""."""
    if figure is None:
        return ""
    text = str(figure).strip().replace("/", "").replace(" ", "")
    if text == FUNDAMENTAL_FIGURE or text not in FIGURES:
        return ""
    return text


def normalize_cadence(cadence: Any) -> Optional[str]:
    """Lower-cased, trimmed cadence label with synonyms folded together."""
    if cadence is None:
        return None
    text = str(cadence).strip().lower()
    if not text:
        return None
    return CADENCE_SYNONYMS.get(text, text)


def chord_key(value: Any) -> Optional[str]:
    """Short canonical key of a chord (e.g. "V7", "N6", "cad64")."""
    variant = classify_chord(value)
    if isinstance(variant, SpecialRootChord):
        if variant.special_root == SpecialRoot.NEAPOLITAN.value:
            return "N6"
        return variant.special_root
    if not isinstance(variant, DegreeChord):
        return None

    if variant.degree == "I" and variant.figure == "64":
        if variant.six_four_variant == SixFourVariant.PASSING.value:
            return "V64"
        if variant.six_four_variant == SixFourVariant.CADENTIAL.value:
            return "cad64"
        return "I64"
    return variant.degree + variant.figure
