"""
Boundary Schema Package

Pydantic models for the plain-data structures the host application passes
to the engine.

Usage:
    from harmonic_engine.schemas import parse_chord, parse_qcm_answer

    chord = parse_chord({"degree": "v", "figure": "7", "sixFourVariant": None})
    answer = parse_qcm_answer({"chord": "V7", "function": "D"})
"""

from .answer_schema import (
    ChordAnnotationSchema,
    QcmAnswerSchema,
    PerformanceRecordSchema,
    parse_chord,
    parse_qcm_answer,
    parse_performance,
)

__all__ = [
    'ChordAnnotationSchema',
    'QcmAnswerSchema',
    'PerformanceRecordSchema',
    'parse_chord',
    'parse_qcm_answer',
    'parse_performance',
]
