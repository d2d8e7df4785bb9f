"""Standard tuning, string sets and triad interval tables."""

from typing import Dict, Tuple

from .exceptions import InvalidInput
from .note_types import ChordRole, Interval, StringSet, TriadQuality

NUM_STRINGS = 6

# Open strings of a standard-tuned guitar as MIDI numbers (E4 B3 G3 D3 A2 E2)
OPEN_STRING_MIDI: Dict[int, int] = {1: 64, 2: 59, 3: 55, 4: 50, 5: 45, 6: 40}

OPEN_PITCH_CLASSES: Dict[int, int] = {
    string: midi % 12 for string, midi in OPEN_STRING_MIDI.items()
}

# Lowest-pitched string first
STRING_SETS: Dict[StringSet, Tuple[int, int, int]] = {
    StringSet.I: (3, 2, 1),
    StringSet.II: (4, 3, 2),
    StringSet.III: (5, 4, 3),
    StringSet.IV: (6, 5, 4),
}

INTERVAL_SEMITONES: Dict[Interval, int] = {
    Interval.ROOT: 0,
    Interval.MINOR_THIRD: 3,
    Interval.MAJOR_THIRD: 4,
    Interval.DIMINISHED_FIFTH: 6,
    Interval.PERFECT_FIFTH: 7,
}

TRIAD_INTERVALS: Dict[TriadQuality, Dict[ChordRole, Interval]] = {
    TriadQuality.MAJOR: {
        ChordRole.ROOT: Interval.ROOT,
        ChordRole.THIRD: Interval.MAJOR_THIRD,
        ChordRole.FIFTH: Interval.PERFECT_FIFTH,
    },
    TriadQuality.MINOR: {
        ChordRole.ROOT: Interval.ROOT,
        ChordRole.THIRD: Interval.MINOR_THIRD,
        ChordRole.FIFTH: Interval.PERFECT_FIFTH,
    },
    TriadQuality.DIMINISHED: {
        ChordRole.ROOT: Interval.ROOT,
        ChordRole.THIRD: Interval.MINOR_THIRD,
        ChordRole.FIFTH: Interval.DIMINISHED_FIFTH,
    },
}


def _check_string(string: int) -> int:
    if isinstance(string, bool) or not isinstance(string, int) or string not in OPEN_STRING_MIDI:
        raise InvalidInput(f"String must be an integer 1-{NUM_STRINGS}, got {string!r}")
    return string


def open_pitch_class(string: int) -> int:
    """Pitch class (0-11, C=0) of an open string."""
    return OPEN_PITCH_CLASSES[_check_string(string)]


def open_string_midi(string: int) -> int:
    """MIDI number of an open string."""
    return OPEN_STRING_MIDI[_check_string(string)]


def fret_pitch_class(string: int, fret: int) -> int:
    """Pitch class sounded by ``fret`` on ``string``."""
    return (open_pitch_class(string) + fret) % 12


def interval_semitones(interval) -> int:
    """Semitones between the root and ``interval``."""
    return INTERVAL_SEMITONES[Interval.parse(interval)]


def interval_for_role(quality, role: ChordRole) -> Interval:
    """Interval that ``role`` takes in a triad of ``quality``."""
    return TRIAD_INTERVALS[TriadQuality.parse(quality)][role]


def strings_in_set(string_set) -> Tuple[int, int, int]:
    """String numbers of a set, lowest-pitched string first."""
    return STRING_SETS[StringSet.parse(string_set)]


def set_topology(string_set) -> Tuple[int, int]:
    """Semitone gaps between the open strings of a set, from low to high.

    Sets sharing a topology share their fret patterns: set I is (4, 5),
    set II is (5, 4), sets III and IV are both (5, 5).
    """
    low, mid, high = (open_string_midi(s) for s in strings_in_set(string_set))
    return (mid - low, high - mid)
