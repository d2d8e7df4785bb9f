"""Main entry point for the triad-frets CLI."""

import random
import sys

import click
import pyfiglet

from ..chord_selection import (
    chord_note_names,
    circle_of_fifths_progression,
    format_chord,
    generate_random_chord,
    pick_random_shape,
    pick_random_string_set,
)
from ..core.config import ConfigManager
from ..exceptions import InvalidInput
from ..logger import get_logger
from ..logging_config import setup_logging
from ..note_types import ChordRole, ShapeName, StringSet, TriadQuality, Voicing
from ..note_utils import sounding_frequencies, sounding_notes
from ..solver import MAX_SPAN, calculate_fret_positions, iter_all_voicings

logger = get_logger(__name__)

QUALITY_CHOICES = [q.value for q in TriadQuality]
SHAPE_CHOICES = [s.value for s in ShapeName]
SET_CHOICES = [s.value for s in StringSet]


def render_diagram(voicing: Voicing) -> str:
    """Draw the voicing's strings over the four frets it can span.

    Each occupied fret shows the interval played there, e.g.::

             12   13   14   15
        S1 |-3M-|----|----|----|
    """
    first = voicing.min_fret
    frets = range(first, first + MAX_SPAN + 1)
    lines = ["     " + "".join(f"{fret:>5}" for fret in frets)]
    for position in voicing.positions:
        cells = [
            f"-{position.interval.value}-" if fret == position.fret else "----"
            for fret in frets
        ]
        lines.append(f"S{position.string}  |" + "|".join(cells) + "|")
    return "\n".join(lines)


def format_voicing(voicing: Voicing, use_flats: bool = False) -> str:
    notes = sounding_notes(voicing, use_flats)
    frequencies = sounding_frequencies(voicing)
    rows = [
        f"  string {p.string}  fret {p.fret:>2}  {p.interval.value}  {note:<4}{freq:8.2f} Hz"
        for p, note, freq in zip(voicing.positions, notes, frequencies)
    ]
    return "\n".join(rows)


def _solve(root, quality, shape, string_set, allow_open: bool) -> Voicing:
    try:
        return calculate_fret_positions(root, quality, shape, string_set, allow_open=allow_open)
    except InvalidInput as e:
        raise click.UsageError(str(e))


@click.group()
@click.option("--debug", is_flag=True, help="Show debug information")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding configuration files (default: ~/.config/triad_frets)",
)
@click.pass_context
def main(ctx, debug, config_dir):
    """Find fret positions for three-string triads."""
    setup_logging(level="DEBUG" if debug else None)
    ctx.obj = ConfigManager(config_dir)
    logger.debug(f"Using configuration in {ctx.obj.config_dir}")


@main.command()
@click.argument("root")
@click.argument("quality", type=click.Choice(QUALITY_CHOICES, case_sensitive=False))
@click.argument("shape", type=click.Choice(SHAPE_CHOICES, case_sensitive=False))
@click.argument("string_set", metavar="SET", type=click.Choice(SET_CHOICES, case_sensitive=False))
@click.option("--open/--no-open", "allow_open", default=None, help="Allow open strings (fret 0)")
@click.option("--flats/--sharps", "use_flats", default=None, help="Spell sounding notes with flats")
@click.option("--banner", is_flag=True, help="Print the chord name in large letters")
@click.pass_obj
def voicing(config, root, quality, shape, string_set, allow_open, use_flats, banner):
    """Show the frets of ROOT QUALITY played with SHAPE on string SET."""
    if allow_open is None:
        allow_open = config.get_config("solver")["allow_open_strings"]
    if use_flats is None:
        use_flats = config.get_config("display")["use_flats"]

    result = _solve(root, quality, shape, string_set, allow_open)
    title = f"{result.root} {result.quality.value}"
    if banner:
        click.echo(pyfiglet.figlet_format(title))
    click.echo(f"{title} - shape {result.shape.value}, set {result.string_set.value}")
    if result.layout is not result.shape:
        click.echo(f"  (played with the {result.layout.value}-shape layout, root on string "
                   f"{result.position_for(ChordRole.ROOT).string})")
    click.echo(format_voicing(result, use_flats))
    click.echo(render_diagram(result))


@main.command()
@click.option("--quality", type=click.Choice(QUALITY_CHOICES, case_sensitive=False), default=None)
@click.option("--set", "string_set", type=click.Choice(SET_CHOICES, case_sensitive=False), default=None)
@click.option("--open/--no-open", "allow_open", default=None, help="Allow open strings (fret 0)")
@click.pass_obj
def table(config, quality, string_set, allow_open):
    """List the voicing of every root, quality, shape and set."""
    if allow_open is None:
        allow_open = config.get_config("solver")["allow_open_strings"]

    for result in iter_all_voicings(allow_open=allow_open):
        if quality and result.quality is not TriadQuality.parse(quality):
            continue
        if string_set and result.string_set is not StringSet.parse(string_set):
            continue
        frets = " ".join(f"{p.string}:{p.fret}" for p in result.positions)
        click.echo(
            f"{result.root.name:<3}{result.quality.value:<11}"
            f"{result.shape.value} {result.string_set.value:<4}{frets}  span {result.span}"
        )


@main.command(name="random")
@click.option("--count", "-n", default=4, show_default=True, help="Number of chords to pick")
@click.option("--seed", type=int, default=None, help="Seed for repeatable picks")
@click.option("--set", "string_set", type=click.Choice(SET_CHOICES, case_sensitive=False), default=None,
              help="Keep one string set instead of picking one per chord")
@click.pass_obj
def random_chords(config, count, seed, string_set):
    """Pick random chords and show a voicing for each."""
    rng = random.Random(seed)
    selection = config.get_config("selection")
    allow_open = config.get_config("solver")["allow_open_strings"]

    chord = shape = current_set = None
    for _ in range(count):
        try:
            chord = generate_random_chord(
                selection["notes"], previous=chord, qualities=selection["qualities"], rng=rng
            )
        except InvalidInput as e:
            raise click.UsageError(f"Invalid selection configuration: {e}")
        shape = pick_random_shape(previous=shape, rng=rng)
        current_set = (
            StringSet.parse(string_set)
            if string_set
            else pick_random_string_set(previous=current_set, rng=rng)
        )
        result = _solve(chord.root, chord.quality, shape, current_set, allow_open)
        frets = " ".join(f"{p.string}:{p.fret}({p.interval.value})" for p in result.positions)
        click.echo(f"{format_chord(chord):<16}shape {shape.value}  set {current_set.value:<4}{frets}")


@main.command()
@click.option("--direction", type=click.Choice(["right", "left"]), default="right", show_default=True)
@click.option("--quality", "qualities", multiple=True,
              type=click.Choice(QUALITY_CHOICES, case_sensitive=False))
@click.option("--octave", type=int, default=None, help="Octave of the chord notes (default from config)")
@click.pass_obj
def circle(config, direction, qualities, octave):
    """Print the circle-of-fifths progression with the notes of each chord."""
    if octave is None:
        octave = config.get_config("display")["octave"]
    for chord in circle_of_fifths_progression(direction, list(qualities) or None):
        click.echo(f"{format_chord(chord):<16}{' '.join(chord_note_names(chord, octave))}")


if __name__ == "__main__":
    sys.exit(main(prog_name="triad-frets"))
