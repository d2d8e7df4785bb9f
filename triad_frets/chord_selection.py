"""Chord, shape and string-set pickers that feed the solver.

Selection state (the previously picked chord or shape) is always passed in
by the caller, and randomness comes from an optional ``random.Random`` so a
seeded generator gives repeatable sequences.
"""

import random
from typing import List, Optional, Sequence

from .exceptions import InvalidInput
from .logger import get_logger
from .note_types import Chord, ChordRole, ShapeName, StringSet, TriadQuality
from .note_utils import parse_note, pitch_class_name, spell_interval
from .tuning import interval_for_role

# Get logger for this module
logger = get_logger(__name__)

CIRCLE_DIRECTIONS = {"right": 7, "left": 5}  # Perfect fifth up, perfect fourth up


def _rng(rng: Optional[random.Random]):
    return rng if rng is not None else random


def pick_random_shape(
    previous: Optional[ShapeName] = None, rng: Optional[random.Random] = None
) -> ShapeName:
    """Pick a shape different from ``previous``."""
    previous = ShapeName.parse(previous) if previous is not None else None
    candidates = [s for s in ShapeName if s is not previous]
    return _rng(rng).choice(candidates)


def pick_random_string_set(
    previous: Optional[StringSet] = None, rng: Optional[random.Random] = None
) -> StringSet:
    """Pick a string set different from ``previous``."""
    previous = StringSet.parse(previous) if previous is not None else None
    candidates = [s for s in StringSet if s is not previous]
    return _rng(rng).choice(candidates)


def generate_random_chord(
    selected_notes: Sequence[str],
    previous: Optional[Chord] = None,
    qualities: Optional[Sequence] = None,
    rng: Optional[random.Random] = None,
) -> Chord:
    """Pick a random root and quality.

    Args:
        selected_notes: Root spellings to choose from
        previous: The chord picked last time; its root is not repeated
            unless it is the only note selected
        qualities: Qualities to choose from, all three if empty or None
        rng: Random generator, the module-level one if None

    Returns:
        Chord: The picked root spelling and quality

    Raises:
        InvalidInput: If no notes are selected or a note or quality is unknown
    """
    if not selected_notes:
        raise InvalidInput("No notes selected")

    for name in selected_notes:
        parse_note(name)
    types = [TriadQuality.parse(q) for q in qualities] if qualities else list(TriadQuality)
    rng = _rng(rng)

    if len(selected_notes) == 1:
        root = selected_notes[0]
    else:
        candidates = [n for n in selected_notes if previous is None or n != previous.root]
        root = rng.choice(candidates or list(selected_notes))

    chord = Chord(root, rng.choice(types))
    logger.debug(f"Picked {chord} (previous: {previous})")
    return chord


def circle_of_fifths_progression(
    direction: str = "right", qualities: Optional[Sequence] = None
) -> List[Chord]:
    """Walk twelve roots from C by fifths ('right') or fourths ('left').

    Black-key roots are spelled with flats. Each root is paired with every
    selected quality, in the order given.
    """
    if direction not in CIRCLE_DIRECTIONS:
        raise InvalidInput(f"Direction must be 'right' or 'left', got {direction!r}")
    types = [TriadQuality.parse(q) for q in qualities] if qualities else list(TriadQuality)
    step = CIRCLE_DIRECTIONS[direction]

    progression = []
    for i in range(12):
        root = pitch_class_name(i * step, use_flats=True)
        for quality in types:
            progression.append(Chord(root, quality))
    return progression


def next_chord_in_circle(current: Optional[Chord], progression: Sequence[Chord]) -> Chord:
    """Return the chord after ``current``, wrapping to the start.

    The first chord is returned when ``current`` is None or not found.
    """
    if not progression:
        raise InvalidInput("Progression is empty")
    if current is None:
        return progression[0]
    try:
        index = list(progression).index(current)
    except ValueError:
        return progression[0]
    return progression[(index + 1) % len(progression)]


def chord_note_names(chord: Chord, octave: int = 4) -> List[str]:
    """Root, third and fifth of a chord with an octave number, e.g. ['C4', 'E4', 'G4'].

    Each tone is spelled on its own letter above the root: F minor is
    F Ab C and C diminished is C Eb Gb.
    """
    root = parse_note(chord.root)
    return [
        f"{spell_interval(root, interval_for_role(chord.quality, role))}{octave}"
        for role in ChordRole
    ]


def format_chord(chord: Chord) -> str:
    return f"{chord.root} {chord.quality.value}"
