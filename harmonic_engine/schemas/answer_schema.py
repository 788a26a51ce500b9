"""
Pydantic schemas for the plain-data inputs of the engine.

The surrounding application hands over dicts: chord annotations with
camelCase keys, multiple-choice answers and per-node performance records.
These models coerce them into the engine's types. Unknown vocabulary values
become None instead of failing validation, so a half-filled annotation
still scores (at level 0) rather than raising.
"""
from typing import Any, Optional
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..chord_model import (
    DEGREES,
    FIGURES,
    Accidental,
    Chord,
    DegreeMode,
    HarmonicFunction,
    SixFourVariant,
    SpecialRoot,
)

logger = logging.getLogger(__name__)


def _text_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _vocabulary_value(vocabulary, value: Any) -> Optional[str]:
    member = vocabulary.parse(value)
    return member.value if member is not None else None


class ChordAnnotationSchema(BaseModel):
    """Validated chord annotation.

    Accepts both the authoring collaborator's camelCase keys
    (``specialRoot``, ``sixFourVariant``...) and snake_case field names.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    degree: Optional[str] = Field(default=None, description="Roman numeral I-VII")
    accidental: Optional[str] = Field(default=None, description="flat, sharp or natural")
    quality: Optional[str] = Field(default=None, description="Free-form marker, e.g. ° or +")
    figure: Optional[str] = Field(default=None, description="Figured-bass code")
    is_borrowed: bool = Field(default=False, alias="isBorrowed")
    special_root: Optional[str] = Field(default=None, alias="specialRoot")
    selected_function: Optional[str] = Field(default=None, alias="selectedFunction")
    function: Optional[str] = Field(default=None)
    cadence: Optional[str] = Field(default=None)
    six_four_variant: Optional[str] = Field(default=None, alias="sixFourVariant")
    pedal_degree: Optional[str] = Field(default=None, alias="pedalDegree")
    degree_mode: Optional[str] = Field(default=None, alias="degreeMode")
    root: Optional[str] = Field(default=None)
    display_label: Optional[str] = Field(default=None, alias="displayLabel")
    of_degree: Optional[str] = Field(default=None, alias="ofDegree")

    @field_validator("degree", "pedal_degree", mode="before")
    @classmethod
    def canonical_degree(cls, v: Any) -> Optional[str]:
        """Uppercase known degrees; anything else is treated as absent."""
        text = _text_or_none(v)
        if text is None:
            return None
        text = text.upper()
        return text if text in DEGREES else None

    @field_validator("figure", mode="before")
    @classmethod
    def known_figure(cls, v: Any) -> Optional[str]:
        """Keep vocabulary figures, accepting slash spellings like "6/4"."""
        text = _text_or_none(v)
        if text is None:
            return None
        text = text.replace("/", "").replace(" ", "")
        return text if text in FIGURES else None

    @field_validator("accidental", mode="before")
    @classmethod
    def known_accidental(cls, v: Any) -> Optional[str]:
        return _vocabulary_value(Accidental, v)

    @field_validator("special_root", mode="before")
    @classmethod
    def known_special_root(cls, v: Any) -> Optional[str]:
        return _vocabulary_value(SpecialRoot, v)

    @field_validator("selected_function", "function", mode="before")
    @classmethod
    def known_function(cls, v: Any) -> Optional[str]:
        return _vocabulary_value(HarmonicFunction, v)

    @field_validator("six_four_variant", mode="before")
    @classmethod
    def known_six_four_variant(cls, v: Any) -> Optional[str]:
        return _vocabulary_value(SixFourVariant, v)

    @field_validator("degree_mode", mode="before")
    @classmethod
    def known_degree_mode(cls, v: Any) -> Optional[str]:
        return _vocabulary_value(DegreeMode, v)

    @field_validator("quality", "cadence", "root", "display_label", "of_degree", mode="before")
    @classmethod
    def plain_text(cls, v: Any) -> Optional[str]:
        return _text_or_none(v)

    @field_validator("is_borrowed", mode="before")
    @classmethod
    def lenient_flag(cls, v: Any) -> bool:
        if isinstance(v, str):
            return v.strip().lower() in ("true", "1", "yes")
        return bool(v)

    def to_chord(self) -> Chord:
        return Chord(**self.model_dump(by_alias=False))


class QcmAnswerSchema(BaseModel):
    """A learner's multiple-choice answer: chosen label, cadence, function."""

    model_config = ConfigDict(extra="ignore")

    chord: Optional[str] = Field(default=None, description="Chosen option label")
    cadence: Optional[str] = Field(default=None)
    function: Optional[str] = Field(default=None, description="T, SD or D")

    @field_validator("chord", "cadence", mode="before")
    @classmethod
    def plain_text(cls, v: Any) -> Optional[str]:
        return _text_or_none(v)

    @field_validator("function", mode="before")
    @classmethod
    def known_function(cls, v: Any) -> Optional[str]:
        return _vocabulary_value(HarmonicFunction, v)


class PerformanceRecordSchema(BaseModel):
    """Historical performance of a learner on one exercise node."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    attempts: int = Field(default=0, ge=0, description="Number of attempts")
    average_score: float = Field(
        default=0.0, ge=0.0, le=100.0, alias="averageScore", description="Average score 0-100"
    )


def parse_chord(data: Any) -> Optional[Chord]:
    """Validate a chord annotation dict; None when it is not a mapping."""
    if data is None:
        return None
    if isinstance(data, ChordAnnotationSchema):
        return data.to_chord()
    try:
        return ChordAnnotationSchema.model_validate(data).to_chord()
    except ValidationError as e:
        logger.debug(f"Unusable chord annotation {data!r}: {e}")
        return None


def parse_qcm_answer(data: Any) -> Optional[QcmAnswerSchema]:
    """Validate a multiple-choice answer; a bare string is the chosen label."""
    if data is None:
        return None
    if isinstance(data, QcmAnswerSchema):
        return data
    if isinstance(data, str):
        data = {"chord": data}
    try:
        return QcmAnswerSchema.model_validate(data)
    except ValidationError as e:
        logger.debug(f"Unusable QCM answer {data!r}: {e}")
        return None


def parse_performance(data: Any) -> Optional[PerformanceRecordSchema]:
    """Validate a ``{attempts, averageScore}`` record; None when malformed."""
    if data is None:
        return None
    if isinstance(data, PerformanceRecordSchema):
        return data
    try:
        return PerformanceRecordSchema.model_validate(data)
    except ValidationError as e:
        logger.debug(f"Unusable performance record {data!r}: {e}")
        return None
