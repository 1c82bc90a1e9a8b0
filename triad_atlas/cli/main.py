"""Main entry point for the Triad Atlas CLI."""

from typing import Optional

import click

from ..core.config import ConfigManager
from ..core.factory import ComponentFactory
from ..database.models import save_database
from ..intervals import calculate_interval, invert_interval, is_consonant
from ..logger import get_logger
from ..logging_config import setup_logging
from ..note_types import ChordVoicing
from ..note_utils import NOTE_PATTERN
from ..triads import generate_triad, identify_triad
from ..validation import (
    DIFFICULTY_LEVELS,
    TRIAD_QUALITIES,
    is_valid_note_name,
)

logger = get_logger(__name__)


def _factory(ctx: click.Context) -> ComponentFactory:
    return ComponentFactory(ConfigManager(ctx.obj["config_dir"]))


def _is_note(value: str) -> bool:
    match = NOTE_PATTERN.match(value)
    return bool(match) and is_valid_note_name(match.group(1))


def _format_voicing(voicing: ChordVoicing) -> str:
    fingers = "".join(str(f) for f in voicing.fingering)
    return (
        f"{voicing.triad.symbol:<5} {voicing.shape:<24} {voicing.difficulty:<12} "
        f"neck {voicing.neck_position:>2}  fingers {fingers}"
    )


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Configuration directory (default: ~/.config/triad_atlas).",
)
@click.option(
    "--database",
    type=click.Path(dir_okay=False),
    default=None,
    help="Triad database JSON file (default: configured path, else built in memory).",
)
@click.pass_context
def cli(ctx, debug, config_dir, database):
    """Triad Atlas - guitar triad theory and voicing lookup"""
    setup_logging(level="DEBUG" if debug else None)
    ctx.obj = {"config_dir": config_dir, "database": database}


@cli.command()
@click.option("--output", "-o", type=click.Path(dir_okay=False), required=True, help="Where to write the JSON dataset.")
@click.pass_context
def build(ctx, output):
    """Precompute every triad and voicing into a JSON dataset"""
    logger.debug(f"Building triad database for {output}")
    database = _factory(ctx).create_database_builder().build()
    save_database(database, output)

    stats = database.stats
    click.echo(f"Database saved to: {output}")
    click.echo(f"  - Total triads: {stats.total_triads}")
    click.echo(f"  - Total voicings: {stats.total_voicings}")
    click.echo(f"  - Total positions: {stats.total_positions}")
    for level in DIFFICULTY_LEVELS:
        click.echo(f"  - {level.capitalize()} voicings: {stats.voicings_by_difficulty[level]}")


@cli.command()
@click.argument("root")
@click.argument("quality", type=click.Choice(TRIAD_QUALITIES))
def triad(root, quality):
    """Show the chord tones of ROOT QUALITY"""
    result = generate_triad(root, quality)
    if result is None:
        raise click.ClickException(f"Invalid root note: {root}")
    click.echo(f"{result.symbol}: {result.root} {result.third} {result.fifth}")


@cli.command()
@click.argument("notes", nargs=3)
def identify(notes):
    """Name the triad formed by three NOTES"""
    if not all(_is_note(n) for n in notes):
        raise click.ClickException(f"Invalid notes: {' '.join(notes)}")

    result = identify_triad(list(notes))
    if result is None:
        click.echo(f"{' '.join(notes)}: not a triad")
        return
    click.echo(f"{result.symbol} ({result.root.name} {result.quality})")


@cli.command()
@click.argument("start")
@click.argument("end")
def interval(start, end):
    """Show the interval from START up to END and its inversion"""
    result = calculate_interval(start, end)
    if result is None:
        raise click.ClickException(f"Invalid notes: {start} {end}")

    inverted = invert_interval(result)
    consonance = "consonant" if is_consonant(result) else "dissonant"
    click.echo(f"{result.abbreviation} ({result.name}, {consonance}); inverts to {inverted.abbreviation}")


@cli.command()
@click.argument("root")
@click.argument("quality", type=click.Choice(TRIAD_QUALITIES))
@click.option("--difficulty", type=click.Choice(DIFFICULTY_LEVELS), default=None, help="Only this difficulty.")
@click.option("--neck-position", type=click.IntRange(0, 24), default=None, help="Only this neck position.")
@click.option("--max-frets", type=click.IntRange(0, 24), default=None, help="Highest fret allowed.")
@click.option("--no-open", is_flag=True, help="Exclude voicings with open strings.")
@click.option("--limit", type=int, default=20, show_default=True, help="Maximum voicings to list.")
@click.pass_context
def voicings(ctx, root, quality, difficulty, neck_position, max_frets, no_open, limit):
    """List voicings of ROOT QUALITY from the dataset"""
    if not is_valid_note_name(root):
        raise click.ClickException(f"Invalid root note: {root}")

    logger.debug(f"Querying {root} {quality} voicings")
    lookup = _factory(ctx).create_lookup(ctx.obj["database"])
    found = lookup.find_voicings(
        root=root,
        quality=quality,
        difficulty=difficulty,
        neck_position=neck_position,
        max_frets=max_frets,
        include_open_strings=False if no_open else None,
    )
    for voicing in found[:limit]:
        click.echo(_format_voicing(voicing))
    click.echo(f"{len(found)} voicings found")


@cli.command()
@click.pass_context
def stats(ctx):
    """Show dataset totals and metadata"""
    summary = _factory(ctx).create_lookup(ctx.obj["database"]).get_database_stats()
    click.echo(f"Version: {summary['version']} ({summary['instrument']}, generated {summary['generated']})")
    click.echo(f"Triads: {summary['total_triads']}")
    click.echo(f"Voicings: {summary['total_voicings']}")
    click.echo(f"Positions: {summary['total_positions']}")
    for level, count in summary["voicings_by_difficulty"].items():
        click.echo(f"  {level}: {count}")


@cli.command("random")
@click.option("--quality", type=click.Choice(TRIAD_QUALITIES), default=None, help="Only this quality.")
@click.pass_context
def random_triad(ctx, quality):
    """Pick a random triad from the dataset"""
    entry = _factory(ctx).create_lookup(ctx.obj["database"]).get_random_triad(quality)
    if entry is None:
        raise click.ClickException("No triads available")
    triad = entry.triad
    click.echo(f"{triad.symbol}: {triad.root} {triad.third} {triad.fifth}")


def main(args: Optional[list] = None) -> None:
    """Run the CLI, using sys.argv when args is None."""
    cli.main(args=args, prog_name="triad-atlas")


if __name__ == "__main__":
    main()
