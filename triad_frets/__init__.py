"""Fret positions for three-string triads on a standard-tuned guitar."""

from .exceptions import InvalidInput, TriadFretsError, UnsolvableVoicing
from .note_types import (
    Chord,
    ChordRole,
    FretPosition,
    Interval,
    Note,
    ShapeName,
    StringSet,
    TriadQuality,
    Voicing,
)
from .note_utils import parse_note, sounding_notes
from .shapes import anchor_string, roles_for_shape
from .solver import calculate_fret_positions, fret_pattern, iter_all_voicings
from .tuning import interval_semitones, open_pitch_class, strings_in_set

__all__ = [
    "Chord",
    "ChordRole",
    "FretPosition",
    "Interval",
    "InvalidInput",
    "Note",
    "ShapeName",
    "StringSet",
    "TriadFretsError",
    "TriadQuality",
    "UnsolvableVoicing",
    "Voicing",
    "anchor_string",
    "calculate_fret_positions",
    "fret_pattern",
    "interval_semitones",
    "iter_all_voicings",
    "open_pitch_class",
    "parse_note",
    "roles_for_shape",
    "sounding_notes",
    "strings_in_set",
]
