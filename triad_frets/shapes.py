"""Triad shapes: which chord tone sits on which string of a string set."""

from typing import Dict, Tuple

from .exceptions import UnsolvableVoicing
from .note_types import ChordRole, ShapeName
from .tuning import strings_in_set

# Roles per string of a set, lowest-pitched string first
SHAPE_LAYOUTS: Dict[ShapeName, Tuple[ChordRole, ChordRole, ChordRole]] = {
    ShapeName.D: (ChordRole.FIFTH, ChordRole.ROOT, ChordRole.THIRD),
    ShapeName.A: (ChordRole.ROOT, ChordRole.THIRD, ChordRole.FIFTH),
    ShapeName.E: (ChordRole.THIRD, ChordRole.FIFTH, ChordRole.ROOT),
}


def _check_layouts() -> None:
    for shape, layout in SHAPE_LAYOUTS.items():
        if len(layout) != 3 or set(layout) != set(ChordRole):
            raise UnsolvableVoicing(
                f"Shape {shape.value} must carry root, third and fifth once each, got {layout}"
            )


_check_layouts()


def shape_layout(shape) -> Tuple[ChordRole, ChordRole, ChordRole]:
    return SHAPE_LAYOUTS[ShapeName.parse(shape)]


def anchor_index(shape) -> int:
    """Position of the root within a set (0 = lowest string)."""
    return shape_layout(shape).index(ChordRole.ROOT)


def roles_for_shape(string_set, shape) -> Tuple[Tuple[ChordRole, int], ...]:
    """Pair each string of a set with the chord role a shape puts on it.

    Args:
        string_set: StringSet or its name ('I'-'IV')
        shape: ShapeName or its name ('D', 'A', 'E')

    Returns:
        Three (role, string) pairs, lowest-pitched string first
    """
    return tuple(zip(shape_layout(shape), strings_in_set(string_set)))


def anchor_string(string_set, shape) -> int:
    """String carrying the root of a shape within a set."""
    return strings_in_set(string_set)[anchor_index(shape)]
