"""Error kinds raised by the triad fret engine."""


class TriadFretsError(Exception):
    """Base class for all errors raised by triad_frets."""


class InvalidInput(TriadFretsError, ValueError):
    """An input is outside the closed set of roots, qualities, shapes or string sets."""


class UnsolvableVoicing(TriadFretsError, AssertionError):
    """A voicing could not satisfy the span, floor or pitch-class invariants.

    This is never a user error: it means the pattern table or the octave
    correction is wrong.
    """
