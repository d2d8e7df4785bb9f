"""Fret position solver for three-string triads.

The solver works from a precomputed pattern table. For every shape, quality
and string-set topology the table holds the fret offset of each string
relative to the string carrying the root. Solving a triad is then a single
lookup: find the root's fret on its anchor string, add the offsets, and lift
the whole voicing an octave if it would fall below the lowest allowed fret.

The table is derived from the tuning once, at import, and every entry is
checked against ``MAX_SPAN`` before any voicing is produced.
"""

import itertools
from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Tuple

from .exceptions import UnsolvableVoicing
from .logger import get_logger
from .note_types import (
    SHARP_NAMES,
    ChordRole,
    FretPosition,
    Note,
    ShapeName,
    StringSet,
    TriadQuality,
    Voicing,
)
from .note_utils import parse_note
from .shapes import SHAPE_LAYOUTS, anchor_index, anchor_string
from .tuning import (
    STRING_SETS,
    fret_pitch_class,
    interval_for_role,
    interval_semitones,
    open_pitch_class,
    set_topology,
    strings_in_set,
)

# Get logger for this module
logger = get_logger(__name__)

MAX_SPAN = 3  # Four consecutive frets
FRETTED_FLOOR = 1
OPEN_FLOOR = 0

Topology = Tuple[int, int]


@dataclass(frozen=True)
class FretPattern:
    """Fret offsets of one triad layout relative to its root string."""

    layout: ShapeName  # Shape whose role layout the offsets realize
    roles: Tuple[ChordRole, ChordRole, ChordRole]  # Lowest string first
    offsets: Tuple[int, int, int]  # Lowest string first, 0 on the root string

    @property
    def span(self) -> int:
        return max(self.offsets) - min(self.offsets)

    @property
    def anchor(self) -> int:
        return self.roles.index(ChordRole.ROOT)


def derive_pattern(layout: ShapeName, quality: TriadQuality, topology: Topology) -> FretPattern:
    """Place the two non-root tones of a layout as close to the root as possible.

    Each tone can sit at an offset ``c`` in 0..11 from the root fret or an
    octave lower at ``c - 12``. All four combinations are tried and the one
    with the smallest span wins, ties going to the smallest total distance
    from the root.
    """
    roles = SHAPE_LAYOUTS[layout]
    anchor = roles.index(ChordRole.ROOT)
    heights = (0, topology[0], topology[0] + topology[1])

    choices: List[Tuple[int, ...]] = []
    for index, role in enumerate(roles):
        if index == anchor:
            choices.append((0,))
            continue
        semitones = interval_semitones(interval_for_role(quality, role))
        step = (semitones - (heights[index] - heights[anchor])) % 12
        choices.append((step, step - 12))

    offsets = min(
        itertools.product(*choices),
        key=lambda o: (max(o) - min(o), sum(abs(x) for x in o)),
    )
    return FretPattern(layout, roles, tuple(offsets))


def _layout_candidates(shape: ShapeName) -> List[ShapeName]:
    """The shape's own layout, then the others by distance of their root string."""
    home = anchor_index(shape)
    return sorted(
        ShapeName,
        key=lambda other: (other is not shape, abs(anchor_index(other) - home)),
    )


def build_pattern(shape: ShapeName, quality: TriadQuality, topology: Topology) -> FretPattern:
    """Pick the pattern for a shape, borrowing a neighbour layout if it cannot fit.

    Raises:
        UnsolvableVoicing: If no layout fits within MAX_SPAN
    """
    for layout in _layout_candidates(shape):
        pattern = derive_pattern(layout, quality, topology)
        if pattern.span <= MAX_SPAN:
            if layout is not shape:
                logger.debug(
                    f"Shape {shape.value} {quality.value} on topology {topology} needs "
                    f"span {derive_pattern(shape, quality, topology).span}; "
                    f"using the {layout.value} layout {pattern.offsets}"
                )
            return pattern
    raise UnsolvableVoicing(
        f"No layout fits shape {shape.value} {quality.value} on topology {topology}"
    )


def build_pattern_table() -> Dict[Tuple[ShapeName, TriadQuality, Topology], FretPattern]:
    """Build and validate the pattern for every shape, quality and topology."""
    topologies = sorted({set_topology(s) for s in STRING_SETS})
    table = {}
    for shape, quality, topology in itertools.product(ShapeName, TriadQuality, topologies):
        pattern = build_pattern(shape, quality, topology)
        if set(pattern.roles) != set(ChordRole) or pattern.offsets[pattern.anchor] != 0:
            raise UnsolvableVoicing(f"Malformed pattern for {shape}, {quality}: {pattern}")
        table[(shape, quality, topology)] = pattern
    logger.debug(f"Built {len(table)} fret patterns over topologies {topologies}")
    return table


PATTERN_TABLE = build_pattern_table()


def fret_pattern(shape, quality, string_set) -> FretPattern:
    """Look up the pattern used for a shape and quality on a string set."""
    return PATTERN_TABLE[
        (ShapeName.parse(shape), TriadQuality.parse(quality), set_topology(string_set))
    ]


def lift_to_floor(frets: Sequence[int], floor: int = FRETTED_FLOOR) -> List[int]:
    """Move all frets up by whole octaves until none is below ``floor``.

    Every fret moves by the same amount, so the span and the pitch class
    of each string are unchanged.
    """
    frets = list(frets)
    while min(frets) < floor:
        frets = [fret + 12 for fret in frets]
    return frets


def verify_voicing(voicing: Voicing, floor: int = FRETTED_FLOOR) -> Voicing:
    """Check a voicing's span, floor, roles and pitch classes.

    Returns:
        The voicing unchanged

    Raises:
        UnsolvableVoicing: If any invariant does not hold
    """
    problems = []
    if len(voicing.positions) != 3:
        problems.append(f"expected 3 positions, got {len(voicing.positions)}")
    if voicing.span > MAX_SPAN:
        problems.append(f"span {voicing.span} exceeds {MAX_SPAN}")
    if voicing.min_fret < floor:
        problems.append(f"fret {voicing.min_fret} is below floor {floor}")
    if sorted(p.string for p in voicing.positions) != sorted(strings_in_set(voicing.string_set)):
        problems.append("positions do not cover the string set")
    elif anchor_string(voicing.string_set, voicing.layout) not in [
        p.string for p in voicing.positions if p.role is ChordRole.ROOT
    ]:
        problems.append(f"root is not on the root string of the {voicing.layout.value} layout")

    expected = {
        interval_for_role(voicing.quality, role) for role in ChordRole
    }
    if set(voicing.intervals) != expected or len(set(voicing.intervals)) != 3:
        problems.append(f"intervals {[i.value for i in voicing.intervals]} are not a complete triad")

    for position in voicing.positions:
        target = (voicing.root.pitch_class + interval_semitones(position.interval)) % 12
        if fret_pitch_class(position.string, position.fret) != target:
            problems.append(f"{position} does not sound pitch class {target}")

    if problems:
        message = f"Invalid voicing {voicing}: " + "; ".join(problems)
        logger.error(message)
        raise UnsolvableVoicing(message)
    return voicing


def calculate_fret_positions(root, quality, shape, string_set, allow_open: bool = False) -> Voicing:
    """Find the frets that play a triad with a given shape on a string set.

    Args:
        root: Root note name (e.g. 'C', 'F#', 'Db') or a Note
        quality: TriadQuality or its name ('Major', 'Minor', 'Diminished')
        shape: ShapeName or its name ('D', 'A', 'E')
        string_set: StringSet or its name ('I', 'II', 'III', 'IV')
        allow_open: If True, open strings (fret 0) may be used; otherwise the
            lowest fret is 1 and a root on an open string's pitch is played at fret 12

    Returns:
        Voicing: Three positions ordered by string number ascending, spanning
        at most four consecutive frets

    Raises:
        InvalidInput: If any argument is not a recognised value
        UnsolvableVoicing: If the result breaks an invariant (a bug, never user error)
    """
    note = parse_note(root)
    quality = TriadQuality.parse(quality)
    shape = ShapeName.parse(shape)
    string_set = StringSet.parse(string_set)
    floor = OPEN_FLOOR if allow_open else FRETTED_FLOOR

    pattern = fret_pattern(shape, quality, string_set)
    strings = strings_in_set(string_set)
    anchor_fret = (note.pitch_class - open_pitch_class(strings[pattern.anchor])) % 12
    frets = lift_to_floor([anchor_fret + offset for offset in pattern.offsets], floor)

    positions = sorted(
        (
            FretPosition(string, fret, interval_for_role(quality, role))
            for string, fret, role in zip(strings, frets, pattern.roles)
        ),
        key=lambda p: p.string,
    )
    voicing = Voicing(note, quality, shape, string_set, tuple(positions), pattern.layout)
    logger.debug(f"Solved {voicing}")
    return verify_voicing(voicing, floor)


def iter_all_voicings(allow_open: bool = False) -> Iterator[Voicing]:
    """Yield the voicing of every root, quality, shape and string set."""
    for pitch_class, quality, shape, string_set in itertools.product(
        range(12), TriadQuality, ShapeName, StringSet
    ):
        yield calculate_fret_positions(
            Note(pitch_class, SHARP_NAMES[pitch_class]), quality, shape, string_set, allow_open
        )
