"""Type definitions for the triad fret engine."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional, Tuple

from .exceptions import InvalidInput


def _lookup(enum_cls, value, aliases: Dict[str, str]):
    """Coerce ``value`` into a member of ``enum_cls``.

    Members pass through unchanged. Strings are matched case-insensitively
    against member values and multi-letter ``aliases``; one-letter aliases
    are case sensitive, so 'M' (major) and 'm' (minor) stay distinct.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        text = value.strip()
        key = text.lower()
        for member in enum_cls:
            if member.value.lower() == key:
                return member
        if text in aliases:
            return enum_cls(aliases[text])
        if len(key) > 1 and key in aliases:
            return enum_cls(aliases[key])
    raise InvalidInput(f"Unknown {enum_cls.__name__}: {value!r}")


class TriadQuality(Enum):
    """Quality of a three-note chord."""

    MAJOR = "Major"
    MINOR = "Minor"
    DIMINISHED = "Diminished"

    @classmethod
    def parse(cls, value) -> "TriadQuality":
        return _lookup(
            cls,
            value,
            {
                "M": "Major",
                "maj": "Major",
                "m": "Minor",
                "min": "Minor",
                "dim": "Diminished",
                "o": "Diminished",
            },
        )


class ShapeName(Enum):
    """Triad shape, named after the open chord it resembles."""

    D = "D"
    A = "A"
    E = "E"

    @classmethod
    def parse(cls, value) -> "ShapeName":
        return _lookup(cls, value, {})


class StringSet(Enum):
    """One of the four windows of three adjacent strings."""

    I = "I"  # noqa: E741
    II = "II"
    III = "III"
    IV = "IV"

    @classmethod
    def parse(cls, value) -> "StringSet":
        if isinstance(value, int) and not isinstance(value, bool):
            value = {1: "I", 2: "II", 3: "III", 4: "IV"}.get(value, str(value))
        return _lookup(cls, value, {"set i": "I", "set ii": "II", "set iii": "III", "set iv": "IV"})


class ChordRole(Enum):
    """Scale degree a chord tone plays within the triad."""

    ROOT = "root"
    THIRD = "third"
    FIFTH = "fifth"


class Interval(Enum):
    """Interval of a chord tone above the root, in tonal notation."""

    ROOT = "1P"
    MINOR_THIRD = "3m"
    MAJOR_THIRD = "3M"
    DIMINISHED_FIFTH = "5d"
    PERFECT_FIFTH = "5P"

    @property
    def role(self) -> ChordRole:
        if self is Interval.ROOT:
            return ChordRole.ROOT
        if self in (Interval.MINOR_THIRD, Interval.MAJOR_THIRD):
            return ChordRole.THIRD
        return ChordRole.FIFTH

    @classmethod
    def parse(cls, value) -> "Interval":
        if isinstance(value, cls):
            return value
        # Interval names are case sensitive: 3m and 3M differ.
        for member in cls:
            if member.value == value:
                return member
        raise InvalidInput(f"Unknown Interval: {value!r}")


SHARP_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")
FLAT_NAMES = ("C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B")


@dataclass(frozen=True)
class Note:
    """A pitch class with an optional display spelling.

    Two notes are equal when their pitch classes are equal; ``C#`` and ``Db``
    compare equal and hash the same.
    """

    pitch_class: int  # Semitones above C, 0-11
    spelling: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        if not isinstance(self.pitch_class, int) or not 0 <= self.pitch_class < 12:
            raise InvalidInput(f"Pitch class must be an integer 0-11, got {self.pitch_class!r}")

    @property
    def name(self) -> str:
        return self.spelling or SHARP_NAMES[self.pitch_class]

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class FretPosition:
    """A fretted (or open) note on one string of the guitar."""

    string: int  # String number (1 is the highest-pitched string, 6 the lowest)
    fret: int  # Fret number (0 for open string)
    interval: Interval  # Chord tone this position sounds

    @property
    def role(self) -> ChordRole:
        return self.interval.role

    def __str__(self):
        return f"S{self.string}F{self.fret}({self.interval.value})"


@dataclass(frozen=True)
class Voicing:
    """Three fret positions realizing one triad on one string set.

    Positions are ordered by string number ascending. ``layout`` is the shape
    whose role order the frets follow; it differs from ``shape`` only where
    the shape cannot fit the string set and a neighbouring layout is used.
    """

    root: Note
    quality: TriadQuality
    shape: ShapeName
    string_set: StringSet
    positions: Tuple[FretPosition, FretPosition, FretPosition]
    layout: Optional[ShapeName] = None

    def __post_init__(self):
        if self.layout is None:
            object.__setattr__(self, "layout", self.shape)

    @property
    def frets(self) -> Tuple[int, ...]:
        return tuple(p.fret for p in self.positions)

    @property
    def min_fret(self) -> int:
        return min(self.frets)

    @property
    def max_fret(self) -> int:
        return max(self.frets)

    @property
    def span(self) -> int:
        return self.max_fret - self.min_fret

    @property
    def intervals(self) -> Tuple[Interval, ...]:
        return tuple(p.interval for p in self.positions)

    def position_for(self, role: ChordRole) -> FretPosition:
        for position in self.positions:
            if position.role is role:
                return position
        raise KeyError(role)

    def shift_octaves(self, octaves: int) -> "Voicing":
        """Return a copy with every fret moved by ``12 * octaves``."""
        return replace(
            self,
            positions=tuple(
                replace(p, fret=p.fret + 12 * octaves) for p in self.positions
            ),
        )

    def __str__(self):
        return (
            f"{self.root} {self.quality.value} [{self.shape.value}/{self.string_set.value}] "
            + " ".join(str(p) for p in self.positions)
        )


@dataclass(frozen=True)
class Chord:
    """A root spelling and triad quality picked by a chord selector."""

    root: str
    quality: TriadQuality

    def __str__(self):
        return f"{self.root} {self.quality.value}"
