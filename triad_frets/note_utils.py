"""Utility functions for working with note names, pitch classes and frequencies."""

import re
from typing import List, Union

import numpy as np

from .exceptions import InvalidInput
from .logger import get_logger
from .note_types import FLAT_NAMES, SHARP_NAMES, Interval, Note, Voicing
from .tuning import interval_semitones, open_string_midi

# Get logger for this module
logger = get_logger(__name__)

# Compile regex to split a note name into letter and accidental
# This pattern matches:
# - Note letter (A-G, case insensitive)
# - Optional accidental: one or two sharps or flats, or a unicode sign
NOTE_PATTERN = re.compile(r"^([A-Ga-g])(##|bb|#|b|♯|♭)?$")

NATURAL_PITCH_CLASSES = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}

ACCIDENTAL_OFFSETS = {None: 0, "#": 1, "♯": 1, "##": 2, "b": -1, "♭": -1, "bb": -2}


def parse_note(name: Union[str, Note]) -> Note:
    """Parse a root spelling into a Note.

    Args:
        name: A note name such as 'C', 'f#', 'Db', 'B#' or 'E♭', or a Note

    Returns:
        Note: The pitch class, keeping the spelling for display

    Raises:
        InvalidInput: If the spelling is not a recognised note name
    """
    if isinstance(name, Note):
        return name
    if not isinstance(name, str):
        raise InvalidInput(f"Note name must be a string, got {name!r}")

    match = NOTE_PATTERN.match(name.strip())
    if not match:
        raise InvalidInput(f"Unrecognised note name: {name!r}")

    letter, accidental = match.groups()
    letter = letter.upper()
    pitch_class = (NATURAL_PITCH_CLASSES[letter] + ACCIDENTAL_OFFSETS[accidental]) % 12
    spelling = letter + (accidental or "").replace("♯", "#").replace("♭", "b")
    return Note(pitch_class, spelling)


def pitch_class_name(pitch_class: int, use_flats: bool = False) -> str:
    """Name a pitch class with sharps (default) or flats."""
    names = FLAT_NAMES if use_flats else SHARP_NAMES
    return names[pitch_class % 12]


LETTERS = "CDEFGAB"


def spell_interval(root: Union[str, Note], interval: Interval) -> str:
    """Spell the note ``interval`` above ``root`` from the letter it falls on.

    A third sits two letters above the root and a fifth four. The letter's
    accidental decides between the sharp and flat name of the pitch class,
    so F minor gets Ab rather than G#, and a tone that would need B#, Fb or
    a double accidental takes its plain name instead (G# major is G# C D#).
    """
    root = parse_note(root)
    pitch_class = (root.pitch_class + interval_semitones(interval)) % 12
    degree = int(interval.value[0]) - 1
    target = LETTERS[(LETTERS.index(root.name[0]) + degree) % 7]
    offset = (pitch_class - NATURAL_PITCH_CLASSES[target] + 6) % 12 - 6
    if offset == 0:
        return target
    return pitch_class_name(pitch_class, use_flats=offset < 0)


def midi_to_note_name(midi_number: int, use_flats: bool = False) -> str:
    """Name a MIDI note number in Scientific Pitch Notation (C4 = 60)."""
    octave = (midi_number // 12) - 1
    return f"{pitch_class_name(midi_number % 12, use_flats)}{octave}"


def midi_to_frequency(midi_number: int) -> float:
    """Equal-tempered frequency of a MIDI note number, with A4 (69) at 440 Hz."""
    return float(440.0 * np.power(2.0, (midi_number - 69) / 12.0))


def sounding_midi(string: int, fret: int) -> int:
    """MIDI number sounded by ``fret`` on ``string`` in standard tuning."""
    return open_string_midi(string) + fret


def sounding_notes(voicing: Voicing, use_flats: bool = False) -> List[str]:
    """SPN names of the notes a voicing sounds, in the voicing's string order."""
    names = [
        midi_to_note_name(sounding_midi(p.string, p.fret), use_flats)
        for p in voicing.positions
    ]
    logger.debug(f"Sounding notes for {voicing}: {names}")
    return names


def sounding_frequencies(voicing: Voicing) -> List[float]:
    """Frequencies in Hz of the notes a voicing sounds, in the voicing's string order."""
    return [midi_to_frequency(sounding_midi(p.string, p.fret)) for p in voicing.positions]
