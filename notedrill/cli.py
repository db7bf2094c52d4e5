"""notedrill CLI entry point."""

import logging
import random
import sys
import time
from collections.abc import Iterable
from typing import cast

import click

from notedrill import __version__
from notedrill.difficulty import DIFFICULTY_LEVELS, MAX_DIFFICULTY, MIN_DIFFICULTY
from notedrill.errors import NotedrillError
from notedrill.exercises import MODES, Exercise
from notedrill.keymap import KEYBOARD_MAP, iter_midi_events, key_to_token
from notedrill.note_generator import CLEFS
from notedrill.session import InputEvent, SessionSettings, TrainingSession
from notedrill.sheet_exporter import SUPPORTED_FORMATS, SheetExporter
from notedrill.verifier import Verdict

QUIT_COMMANDS = {":q", ":quit", ":exit"}


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _resolve_token(word: str) -> str:
    """Computer-keyboard letters map to notes; anything else is a note token."""
    return key_to_token(word) or word


def _line_to_events(line: str) -> list[InputEvent]:
    """One input line is a chord: every key goes down, then every key comes up."""
    tokens = [_resolve_token(word) for word in line.split()]
    return [InputEvent("press", t) for t in tokens] + [InputEvent("release", t) for t in tokens]


def _describe(verdict: Verdict, session: TrainingSession) -> str:
    if session.settings.mode == "scale":
        total = len(session.exercise.display_notes) if session.exercise else 0
        if not verdict.correct:
            return "  ✗ wrong note, start the scale again"
        if verdict.complete:
            return f"  ✓ scale complete ({total}/{total})"
        return f"  ✓ {len(verdict.played)}/{total}"

    mark = "✓ correct" if verdict.correct else "✗ incorrect"
    if session.settings.mode == "note":
        return f"  {mark}   streak {session.streak}  best {session.best_streak}"
    return f"  {mark}"


def _show_exercise(session: TrainingSession, exporter: SheetExporter) -> None:
    if session.exercise is None:
        return
    click.echo()
    click.echo(exporter.render(session.exercise, session.played))


def _run(session: TrainingSession, exporter: SheetExporter, batches: Iterable[list[InputEvent]]) -> None:
    """Feed event batches to the session and report after each one."""
    _show_exercise(session, exporter)
    for events in batches:
        session.feed(events)
        for verdict in session.process_events(now=time.monotonic()):
            click.echo(_describe(verdict, session))

        if session.advance_pending:
            time.sleep(session.settings.advance_delay)
            if session.tick(time.monotonic()):
                _show_exercise(session, exporter)


def _stdin_batches() -> Iterable[list[InputEvent]]:
    for line in click.get_text_stream("stdin"):
        stripped = line.strip()
        if stripped.lower() in QUIT_COMMANDS:
            return
        if stripped:
            yield _line_to_events(stripped)


def _midi_batches(port_name: str | None) -> Iterable[list[InputEvent]]:
    for event in iter_midi_events(port_name):
        yield [event]


# ── Shared options ─────────────────────────────────────────────────────────────

def _exercise_options(func):  # type: ignore[no-untyped-def]
    options = [
        click.option(
            "--mode",
            type=click.Choice(MODES, case_sensitive=False),
            default="note",
            show_default=True,
            help="What to drill: single notes/clusters, named chords, or scales.",
        ),
        click.option(
            "--difficulty",
            "-d",
            type=click.IntRange(MIN_DIFFICULTY, MAX_DIFFICULTY),
            default=1,
            show_default=True,
            help=f"Difficulty level ({MIN_DIFFICULTY}–{MAX_DIFFICULTY}). See 'notedrill levels'.",
        ),
        click.option(
            "--clef",
            type=click.Choice(CLEFS, case_sensitive=False),
            default="treble",
            show_default=True,
            help="Staff to read from. 'both' mixes treble and bass above difficulty 4.",
        ),
        click.option(
            "--seed",
            type=int,
            default=None,
            metavar="INT",
            help="Seed the random source for a reproducible run.",
        ),
        click.option(
            "--cheat/--no-cheat",
            default=False,
            show_default=True,
            help="Print the note names alongside the staff.",
        ),
        click.option(
            "--sharps/--no-sharps",
            default=False,
            show_default=True,
            help="Allow sharpened notes in the note drill on levels that include sharps.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="notedrill")
@click.option("-v", "--verbose", count=True, help="Increase log output (-v info, -vv debug).")
def main(verbose: int) -> None:
    """notedrill — sight-reading practice for notes, chords and scales."""
    _configure_logging(verbose)


# ── levels subcommand ──────────────────────────────────────────────────────────

@main.command()
def levels() -> None:
    """List the difficulty levels of the note drill."""
    click.echo("Level  Notes  Sharps  Octaves  Description")
    for level in DIFFICULTY_LEVELS:
        octaves = ",".join(str(o) for o in level.octave_range)
        sharps = "yes" if level.includes_sharps else "no"
        click.echo(f"{level.level:>5}  {level.note_count:>5}  {sharps:>6}  {octaves:>7}  {level.description}")


# ── show subcommand ────────────────────────────────────────────────────────────

@main.command()
@_exercise_options
@click.option(
    "--format",
    "output_format",
    type=click.Choice(sorted(SUPPORTED_FORMATS), case_sensitive=False),
    default="text",
    show_default=True,
    help="Output format: terminal staff or Markdown with a VexFlow script.",
)
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Write to a file instead of standard output.",
)
def show(
    mode: str,
    difficulty: int,
    clef: str,
    seed: int | None,
    cheat: bool,
    sharps: bool,
    output_format: str,
    output: str | None,
) -> None:
    """
    Generate one exercise and print or save it.

    \b
    Examples:
      notedrill show --mode chord -d 9 --cheat
      notedrill show --mode scale -d 8 --format md-vexflow -o scale.md
    """
    settings = SessionSettings(
        difficulty=difficulty, mode=mode.lower(), clef=clef.lower(), cheat=cheat, allow_sharps=sharps
    )
    session = TrainingSession(settings, rng=random.Random(seed))
    exporter = SheetExporter(output_format=output_format, cheat=cheat)
    exercise = cast(Exercise, session.exercise)

    if output is None:
        click.echo(exporter.render(exercise), nl=False)
        return

    try:
        exporter.export(exercise, output)
    except OSError as exc:
        click.echo(f"  ERROR: Could not write output file — {exc}", err=True)
        sys.exit(1)
    click.echo(f"Wrote {exercise.label} → '{output}'")


# ── practice subcommand ────────────────────────────────────────────────────────

@main.command()
@_exercise_options
@click.option(
    "--delay",
    type=click.FloatRange(0.0, 10.0),
    default=0.5,
    show_default=True,
    metavar="SECS",
    help="Pause after a correct answer before the next exercise.",
)
@click.option(
    "--midi-port",
    default=None,
    metavar="NAME",
    help="Read from a MIDI input port (requires the 'midi' extra) instead of typed input.",
)
def practice(
    mode: str,
    difficulty: int,
    clef: str,
    seed: int | None,
    cheat: bool,
    sharps: bool,
    delay: float,
    midi_port: str | None,
) -> None:
    """
    Interactive drill.

    Type one answer per line: note tokens such as 'C4 E4 G4', or computer
    keys 'a w s e d f t g y h u j' for C4 to B4. Keys on one line are
    pressed together. In scale mode, play the scale one note at a time.
    Type ':q' to quit.
    """
    settings = SessionSettings(
        difficulty=difficulty,
        mode=mode.lower(),
        clef=clef.lower(),
        cheat=cheat,
        advance_delay=delay,
        allow_sharps=sharps,
    )
    session = TrainingSession(settings, rng=random.Random(seed))
    exporter = SheetExporter(output_format="text", cheat=cheat)

    click.echo(f"notedrill v{__version__}")
    click.echo(f"  Mode   : {settings.mode}  |  Difficulty: {settings.difficulty}  |  Clef: {settings.clef}")
    if midi_port is None:
        keys = " ".join(f"{key}={token}" for key, token in KEYBOARD_MAP.items())
        click.echo(f"  Keys   : {keys}")

    batches = _stdin_batches() if midi_port is None else _midi_batches(midi_port)
    try:
        _run(session, exporter, batches)
    except NotedrillError as exc:
        click.echo(f"  ERROR: {exc}", err=True)
        sys.exit(1)
    except ImportError as exc:
        click.echo(f"  ERROR: MIDI input needs the 'midi' extra ({exc}).", err=True)
        sys.exit(1)
    except OSError as exc:
        click.echo(f"  ERROR: Could not open MIDI input — {exc}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo()

    if settings.mode == "note":
        click.echo(f"Best streak: {session.best_streak}")
