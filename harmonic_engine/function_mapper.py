"""
Function Mapper - relations between scale degrees and harmonic functions.

Tonic (T), Subdominant (SD) and Dominant (D) each have one primary degree
and a set of parallel degrees. III and VI belong to two functions each; the
tables below encode that exactly and must not be "symmetrised".
"""

from typing import Any, Dict, Optional, Tuple
import re

from .chord_model import (
    DegreeChord,
    FunctionOnlyChord,
    SixFourVariant,
    SpecialRootChord,
    as_chord,
    classify_chord,
    normalize_degree,
)


DEGREE_TO_FUNCTIONS: Dict[str, Tuple[str, ...]] = {
    "I": ("T",),
    "II": ("SD",),
    "III": ("T", "D"),
    "IV": ("SD",),
    "V": ("D",),
    "VI": ("T", "SD"),
    "VII": ("D",),
}

FUNCTION_TO_DEGREES: Dict[str, Tuple[str, ...]] = {
    "T": ("I", "VI", "III"),
    "SD": ("IV", "II", "VI"),
    "D": ("V", "VII", "III"),
}

PRIMARY_DEGREES: Dict[str, str] = {"T": "I", "SD": "IV", "D": "V"}

PARALLEL_DEGREES: Dict[str, Tuple[str, ...]] = {
    "T": ("III", "VI"),
    "SD": ("II", "VI"),
    "D": ("VII", "III"),
}

# Parallels that never substitute for the primary: III is not a stand-in for V
NON_SUBSTITUTING_PARALLELS: Dict[str, Tuple[str, ...]] = {"D": ("III",)}

SPECIAL_ROOT_FUNCTIONS: Dict[str, str] = {"N": "SD", "It": "D", "Fr": "D", "Gr": "D"}

_SECONDARY_DOMINANT_LABEL = re.compile(r"/V|/IV|/VI", re.IGNORECASE)


def degree_functions(degree: Any) -> Tuple[str, ...]:
    """Functions a degree can carry, principal function first."""
    return DEGREE_TO_FUNCTIONS.get(normalize_degree(degree) or "", ())


def function_degrees(function: Optional[str]) -> Tuple[str, ...]:
    return FUNCTION_TO_DEGREES.get(function or "", ())


def primary_degree(function: Optional[str]) -> Optional[str]:
    return PRIMARY_DEGREES.get(function or "")


def parallel_degrees(function: Optional[str]) -> Tuple[str, ...]:
    return PARALLEL_DEGREES.get(function or "", ())


def special_root_function(special_root: Optional[str]) -> Optional[str]:
    return SPECIAL_ROOT_FUNCTIONS.get(special_root or "")


def six_four_function(variant: DegreeChord) -> Optional[str]:
    """Passing and cadential I64 chords act as dominants; a literal I64 implies nothing beyond its degree."""
    if variant.degree == "I" and variant.figure == "64" and variant.six_four_variant in (
        SixFourVariant.PASSING.value,
        SixFourVariant.CADENTIAL.value,
    ):
        return "D"
    return None


def chord_functions(chord: Any) -> Tuple[str, ...]:
    """Every function a chord annotation can carry, most specific first.

    An explicitly named function comes first, then the special-root or
    six-four function, then the degree's functions.
    """
    variant = classify_chord(chord)
    if variant is None:
        return ()

    functions = []
    if variant.function:
        functions.append(variant.function)

    if isinstance(variant, SpecialRootChord):
        functions.append(special_root_function(variant.special_root))
    elif isinstance(variant, DegreeChord):
        implied = six_four_function(variant)
        if implied:
            functions.append(implied)
        else:
            functions.extend(degree_functions(variant.degree))

    ordered = []
    for function in functions:
        if function and function not in ordered:
            ordered.append(function)
    return tuple(ordered)


def primary_function(chord: Any) -> Optional[str]:
    """Single function used to colour or group a chord."""
    functions = chord_functions(chord)
    return functions[0] if functions else None


def are_degrees_in_same_function(degree_a: Any, degree_b: Any) -> bool:
    """True when two degrees share at least one function (the weak relation)."""
    functions_b = degree_functions(degree_b)
    return any(function in functions_b for function in degree_functions(degree_a))


def is_principal_parallel_pair(degree_a: Any, degree_b: Any) -> bool:
    """True when one degree is a function's primary and the other its parallel.

    Accepted pairs are I/III, I/VI, IV/II, IV/VI and V/VII. III is listed
    among the dominant parallels but is not a substitute for V.
    """
    a = normalize_degree(degree_a)
    b = normalize_degree(degree_b)
    if a is None or b is None or a == b:
        return False

    for function, primary in PRIMARY_DEGREES.items():
        for principal, parallel in ((a, b), (b, a)):
            if principal != primary or parallel not in PARALLEL_DEGREES[function]:
                continue
            if parallel not in NON_SUBSTITUTING_PARALLELS.get(function, ()):
                return True
    return False


def is_secondary_dominant(chord: Any) -> bool:
    """Heuristic: an explicit "of" degree, or a /V, /IV, /VI label suffix."""
    parsed = as_chord(chord)
    if parsed is None:
        return False
    if parsed.of_degree is not None and str(parsed.of_degree).strip():
        return True
    label = parsed.display_label or parsed.root or ""
    return bool(_SECONDARY_DOMINANT_LABEL.search(str(label)))


def expected_functions(chord: Any) -> Tuple[str, ...]:
    """Functions that count as a correct function-only answer for ``chord``.

    Derived from the degree when one resolves; otherwise from the explicit
    function field or the special root.
    """
    variant = classify_chord(chord)
    if isinstance(variant, DegreeChord):
        functions = list(degree_functions(variant.degree))
        implied = six_four_function(variant)
        if implied and implied not in functions:
            functions.append(implied)
        return tuple(functions)
    if isinstance(variant, SpecialRootChord):
        if variant.function:
            return (variant.function,)
        return (special_root_function(variant.special_root),)
    if isinstance(variant, FunctionOnlyChord):
        return (variant.function,)
    return ()
