"""
Difficulty Estimator - one label per exercise from its expected chords.

The base difficulty is the hardest chord in the sequence (lookup of its
chord key in a static table, secondary dominants counting as the top
level). Three modulators nudge it up: fast harmonic rhythm, rare cadences,
and a wide variety of inversions. Simple progressions (base <= 2) can gain
at most half a level from modulators.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
import logging
import math

from .chord_model import as_chord, chord_key, normalize_cadence, normalize_figure
from .function_mapper import is_secondary_dominant

logger = logging.getLogger(__name__)


class DifficultyLevel(Enum):
    """Exercise difficulty labels, stage 1 to 4."""
    BEGINNER = "débutant"
    INTERMEDIATE = "intermédiaire"
    ADVANCED = "avancé"
    EXPERT = "expert"

    @classmethod
    def from_stage(cls, stage: int) -> "DifficultyLevel":
        return _STAGES[max(1, min(4, stage)) - 1]


_STAGES = (
    DifficultyLevel.BEGINNER,
    DifficultyLevel.INTERMEDIATE,
    DifficultyLevel.ADVANCED,
    DifficultyLevel.EXPERT,
)


# Chord key -> difficulty (1-4); keys not listed use DEFAULT_CHORD_DIFFICULTY
CHORD_KEY_DIFFICULTY: Dict[str, int] = {
    "I": 1, "IV": 1, "V": 1, "II": 1, "V7": 1,
    "I6": 2, "V6": 2, "V64": 2, "II6": 2, "VI": 2, "VII": 2, "cad64": 2,
    "V65": 2, "V43": 2, "V2": 2, "II65": 2,
    "VII6": 2, "VII7": 2, "VII64": 2, "VII65": 2, "VII43": 2, "VII2": 2,
    "VI6": 2, "IV6": 2, "II7": 2, "II43": 2, "II2": 2,
    "IV64": 3, "II64": 3, "III64": 3, "VI64": 3, "N6": 3, "I64": 3,
    "It": 4, "Fr": 4, "Gr": 4,
}

DEFAULT_CHORD_DIFFICULTY = 2
SECONDARY_DOMINANT_DIFFICULTY = 4


@dataclass
class DifficultyTable:
    """Chord-key difficulty lookup."""
    chord_keys: Dict[str, int] = field(default_factory=lambda: dict(CHORD_KEY_DIFFICULTY))
    default: int = DEFAULT_CHORD_DIFFICULTY
    secondary_dominant: int = SECONDARY_DOMINANT_DIFFICULTY

    def difficulty_for(self, key: Optional[str]) -> int:
        if not key:
            return self.default
        return self.chord_keys.get(key, self.default)

    @classmethod
    def from_dict(cls, data: Dict) -> 'DifficultyTable':
        """Built-in table with the given ``chord_keys`` entries merged over it."""
        chord_keys = dict(CHORD_KEY_DIFFICULTY)
        chord_keys.update({str(k): int(v) for k, v in (data.get('chord_keys') or {}).items()})
        return cls(
            chord_keys=chord_keys,
            default=int(data.get('default', DEFAULT_CHORD_DIFFICULTY)),
            secondary_dominant=int(data.get('secondary_dominant', SECONDARY_DOMINANT_DIFFICULTY)),
        )


@dataclass
class DifficultySettings:
    """Modulator thresholds for the difficulty estimate."""
    fast_average_seconds: float = 1.5     # average gap below this: +fast_bonus
    medium_average_seconds: float = 2.5   # else below this: +medium_bonus
    fast_bonus: float = 1.0
    medium_bonus: float = 0.5
    rare_cadences: Tuple[str, ...] = ("plagal", "rompue", "évitée")
    rare_cadence_bonus: float = 0.5
    many_figures: int = 5                 # distinct inversions for +many_figures_bonus
    some_figures: int = 3                 # else for +some_figures_bonus
    many_figures_bonus: float = 1.0
    some_figures_bonus: float = 0.5
    simple_base_max: int = 2              # bases up to this have modulators capped
    simple_modulator_cap: float = 0.5

    @classmethod
    def from_dict(cls, data: Dict) -> 'DifficultySettings':
        defaults = cls()
        rare = data.get('rare_cadences')
        return cls(
            fast_average_seconds=float(data.get('fast_average_seconds', defaults.fast_average_seconds)),
            medium_average_seconds=float(data.get('medium_average_seconds', defaults.medium_average_seconds)),
            fast_bonus=float(data.get('fast_bonus', defaults.fast_bonus)),
            medium_bonus=float(data.get('medium_bonus', defaults.medium_bonus)),
            rare_cadences=tuple(normalize_cadence(c) for c in rare) if rare else defaults.rare_cadences,
            rare_cadence_bonus=float(data.get('rare_cadence_bonus', defaults.rare_cadence_bonus)),
            many_figures=int(data.get('many_figures', defaults.many_figures)),
            some_figures=int(data.get('some_figures', defaults.some_figures)),
            many_figures_bonus=float(data.get('many_figures_bonus', defaults.many_figures_bonus)),
            some_figures_bonus=float(data.get('some_figures_bonus', defaults.some_figures_bonus)),
            simple_base_max=int(data.get('simple_base_max', defaults.simple_base_max)),
            simple_modulator_cap=float(data.get('simple_modulator_cap', defaults.simple_modulator_cap)),
        )


@dataclass
class DifficultyBreakdown:
    """How a difficulty label was reached."""
    base: int
    duration_modulator: float = 0.0
    cadence_modulator: float = 0.0
    figure_modulator: float = 0.0
    modulators: float = 0.0          # after the simple-progression cap
    score: float = 0.0               # rounded to 0.5 and clamped to [1, 4]
    stage: int = 1

    @property
    def level(self) -> DifficultyLevel:
        return DifficultyLevel.from_stage(self.stage)

    @property
    def label(self) -> str:
        return self.level.value


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def inter_marker_durations(timestamps: Iterable[float]) -> List[float]:
    """Gaps in seconds between consecutive chord markers."""
    times = [float(t) for t in timestamps if t is not None]
    return [later - earlier for earlier, later in zip(times, times[1:])]


def _base_difficulty(chords: Sequence[Any], table: DifficultyTable) -> Optional[int]:
    base = None
    for chord in chords:
        if is_secondary_dominant(chord):
            value = table.secondary_dominant
        else:
            key = chord_key(chord)
            if key is None:
                continue
            value = table.difficulty_for(key)
        base = value if base is None else max(base, value)
    return base


def _duration_modulator(durations: Sequence[float], settings: DifficultySettings) -> float:
    if not durations:
        return 0.0
    average = sum(durations) / len(durations)
    if average < settings.fast_average_seconds:
        return settings.fast_bonus
    if average < settings.medium_average_seconds:
        return settings.medium_bonus
    return 0.0


def _cadence_modulator(chords: Sequence[Any], settings: DifficultySettings) -> float:
    rare = set(settings.rare_cadences)
    if any(normalize_cadence(chord.cadence) in rare for chord in chords):
        return settings.rare_cadence_bonus
    return 0.0


def _figure_modulator(chords: Sequence[Any], settings: DifficultySettings) -> float:
    figures = {normalize_figure(chord.figure) for chord in chords} - {""}
    if len(figures) >= settings.many_figures:
        return settings.many_figures_bonus
    if len(figures) >= settings.some_figures:
        return settings.some_figures_bonus
    return 0.0


def explain_difficulty(
    chords: Optional[Iterable[Any]],
    inter_chord_durations: Optional[Iterable[float]] = None,
    table: Optional[DifficultyTable] = None,
    settings: Optional[DifficultySettings] = None,
) -> Optional[DifficultyBreakdown]:
    """Full breakdown behind ``estimate_difficulty``; None when nothing is rated."""
    table = table or DifficultyTable()
    settings = settings or DifficultySettings()
    parsed = [chord for chord in (as_chord(c) for c in chords or []) if chord is not None]

    base = _base_difficulty(parsed, table)
    if base is None:
        return None

    durations = [float(d) for d in inter_chord_durations or [] if d is not None]
    breakdown = DifficultyBreakdown(
        base=base,
        duration_modulator=_duration_modulator(durations, settings),
        cadence_modulator=_cadence_modulator(parsed, settings),
        figure_modulator=_figure_modulator(parsed, settings),
    )

    modulators = breakdown.duration_modulator + breakdown.cadence_modulator + breakdown.figure_modulator
    if base <= settings.simple_base_max:
        modulators = min(modulators, settings.simple_modulator_cap)
    breakdown.modulators = modulators

    score = _round_half_up((base + modulators) * 2) / 2
    breakdown.score = max(1.0, min(4.0, score))
    breakdown.stage = _round_half_up(breakdown.score)

    logger.debug(
        f"Difficulty base={base} modulators={modulators} "
        f"score={breakdown.score} -> {breakdown.label}"
    )
    return breakdown


def estimate_difficulty(
    chords: Optional[Iterable[Any]],
    inter_chord_durations: Optional[Iterable[float]] = None,
    table: Optional[DifficultyTable] = None,
    settings: Optional[DifficultySettings] = None,
) -> Optional[str]:
    """
    Estimate an exercise's difficulty label.

    Args:
        chords: Expected chords of the exercise, in order
        inter_chord_durations: Seconds between consecutive chord markers
        table: Chord-key difficulty table (defaults to the built-in one)
        settings: Modulator thresholds (defaults to the built-in ones)

    Returns:
        "débutant", "intermédiaire", "avancé", "expert", or None when no
        chord can be rated
    """
    breakdown = explain_difficulty(chords, inter_chord_durations, table, settings)
    return breakdown.label if breakdown else None
