"""Main CLI entry point for Chiptheory."""

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from chiptheory import __version__
from chiptheory.config import get_settings
from chiptheory.models.analysis import AnalysisState, KeySignature, Mode, Note, Voice
from chiptheory.models.pipeline import ProcessingContext
from chiptheory.storage import JsonFileStore, load_or_default, saver
from chiptheory.theory.analysis_model import AnalysisModel
from chiptheory.theory.grid import compute_grid, measure_at, measure_time
from chiptheory.theory.pitch_table import PITCH_NAMES
from chiptheory.theory.segmenter import find_playing_notes, tonal_notes

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="chiptheory")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
def main(verbose: bool) -> None:
    """Chiptheory - musical structure from NES APU period dumps.

    Segment chip-state dumps into notes, mark downbeats to build a measure
    grid, and set a key to classify notes by scale degree.
    """
    level = "DEBUG" if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _store() -> JsonFileStore:
    return JsonFileStore(get_settings().store_dir)


def _load_notes(dump: Path) -> dict[Voice, list[Note]]:
    """Segment a dump, exiting with an error if it cannot be read."""
    from chiptheory.stages import LoadDumpStage, SegmentationStage

    settings = get_settings()
    context = ProcessingContext(
        source_path=dump,
        resolution_seconds=settings.resolution_seconds,
    )
    for stage in (LoadDumpStage(), SegmentationStage()):
        result = stage.run(context)
        if not result.success:
            console.print(f"[red]Error: {result.error_message}[/red]")
            raise SystemExit(1)
    return context.notes


def _parse_root(root: str) -> int:
    """Pitch class from a name ("C#", "a") or a number 0-11."""
    if root.isdigit():
        value = int(root)
    else:
        name = root[:1].upper() + root[1:].replace("s", "#")
        if name not in PITCH_NAMES:
            raise click.BadParameter(f"unknown pitch name {root!r}")
        value = PITCH_NAMES.index(name)
    if not 0 <= value < 12:
        raise click.BadParameter(f"pitch class must be 0-11, got {value}")
    return value


def _describe(state: AnalysisState) -> str:
    key = "none"
    if state.key is not None:
        key = f"{PITCH_NAMES[state.key.root]} {state.key.mode.value}"
    anchors = ", ".join(f"{t:.3f}s" for t in state.anchors) or "none"
    selected = "none"
    if state.selected_downbeat_index is not None:
        selected = str(state.selected_downbeat_index)
        position = measure_time(state, state.selected_downbeat_index)
        if position is not None:
            selected += f" ({position:.3f}s)"
    return (
        f"phase=[bold]{state.phase.value}[/bold] anchors={anchors} "
        f"corrections={len(state.corrected_measures)} "
        f"selected={selected} key={key}"
    )


@main.command()
@click.argument("dump", type=click.Path(path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    help="Output directory (default: ./output/<dump name>)",
)
@click.option("--track", "track_id", type=str, help="Track id (default: dump file name)")
def analyze(dump: Path, output: Path | None, track_id: str | None) -> None:
    """Segment DUMP and write annotation.json.

    \b
    1. Load the chip-state dump
    2. Segment every voice into notes
    3. Derive the measure grid from the saved annotation
    4. Classify notes against the saved key
    5. Write annotation.json
    """
    from chiptheory.pipeline import create_default_pipeline

    if not dump.exists():
        console.print(f"[red]Error: File not found: {dump}[/red]")
        raise SystemExit(1)

    settings = get_settings()
    if output is None:
        output = settings.output_dir / dump.stem

    console.print(f"[bold blue]Chiptheory[/bold blue] v{__version__}")
    console.print(f"Processing: [green]{dump}[/green]")
    console.print(f"Output: [green]{output}[/green]")
    console.print()

    pipeline = create_default_pipeline(settings, _store())
    result = pipeline.run(dump, output, track_id)

    if result.success:
        console.print("[bold green]Processing complete![/bold green]")
        console.print(f"Output: {result.output_path}")
        if result.warnings:
            console.print("[yellow]Notes:[/yellow]")
            for warning in result.warnings:
                console.print(f"  - {warning}")
    else:
        console.print("[bold red]Processing failed![/bold red]")
        for error in result.errors:
            console.print(f"[red]Error: {error}[/red]")
        raise SystemExit(1)


@main.command(name="click")
@click.argument("dump", type=click.Path(path_type=Path))
@click.argument("note_index", type=int)
@click.option(
    "--voice",
    type=click.Choice([v.value for v in Voice]),
    default=Voice.PULSE1.value,
    show_default=True,
)
@click.option("--track", "track_id", type=str, help="Track id (default: dump file name)")
def click_note(dump: Path, note_index: int, voice: str, track_id: str | None) -> None:
    """Click note NOTE_INDEX of a voice to mark or correct a downbeat."""
    notes = _load_notes(dump)[Voice(voice)]
    if not 0 <= note_index < len(notes):
        console.print(
            f"[red]Error: {voice} has {len(notes)} notes, no note {note_index}[/red]"
        )
        raise SystemExit(1)

    track_id = track_id or dump.stem
    store = _store()
    state = load_or_default(store, track_id)
    model = AnalysisModel(save=saver(store, track_id))

    note = notes[note_index]
    state = model.advance(note, state.selected_downbeat_index, state)
    console.print(f"Clicked {note.pitch.name} at {note.start:.3f}s")
    console.print(_describe(state))


@main.command()
@click.argument("measure_index", type=int, required=False)
@click.option("--track", "track_id", type=str, required=True)
def select(measure_index: int | None, track_id: str) -> None:
    """Select measure MEASURE_INDEX for correction (omit to deselect)."""
    store = _store()
    state = load_or_default(store, track_id)
    state = AnalysisModel(save=saver(store, track_id)).select_downbeat(state, measure_index)
    console.print(_describe(state))


@main.command()
@click.argument("root", required=False)
@click.argument(
    "mode",
    type=click.Choice([m.value for m in Mode]),
    default=Mode.MAJOR.value,
    required=False,
)
@click.option("--track", "track_id", type=str, required=True)
@click.option("--clear", is_flag=True, help="Remove the key")
def key(root: str | None, mode: str, track_id: str, clear: bool) -> None:
    """Set the key of a track to ROOT (e.g. C, F#, 9) in MODE."""
    if not clear and root is None:
        raise click.UsageError("ROOT is required unless --clear is given")

    store = _store()
    state = load_or_default(store, track_id)
    model = AnalysisModel(save=saver(store, track_id))
    if clear:
        state = model.clear_key(state)
    else:
        state = model.set_key(state, KeySignature(root=_parse_root(root), mode=Mode(mode)))
    console.print(_describe(state))


@main.command()
@click.option("--track", "track_id", type=str, required=True)
@click.option("--corrections-only", is_flag=True, help="Keep the anchors")
def reset(track_id: str, corrections_only: bool) -> None:
    """Drop the downbeats and corrections of a track (the key is kept)."""
    store = _store()
    state = load_or_default(store, track_id)
    model = AnalysisModel(save=saver(store, track_id))
    state = model.clear_corrections(state) if corrections_only else model.reset(state)
    console.print(_describe(state))


@main.command()
@click.argument("dump", type=click.Path(path_type=Path))
@click.argument("position_ms", type=float)
@click.option("--track", "track_id", type=str, help="Track id (default: dump file name)")
def playing(dump: Path, position_ms: float, track_id: str | None) -> None:
    """List the notes sounding at playback position POSITION_MS."""
    settings = get_settings()
    notes = tonal_notes(_load_notes(dump))
    position = position_ms - settings.cursor_lag_ms

    state = load_or_default(_store(), track_id or dump.stem)
    grid = compute_grid(state, notes, settings.beats_per_measure)
    measure = measure_at(grid, position / 1000)

    table = Table(title=f"Playing at {position / 1000:.3f}s")
    table.add_column("Note")
    table.add_column("MIDI", justify="right")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    for note in find_playing_notes(notes, position):
        table.add_row(
            note.pitch.name,
            str(note.midi_number),
            f"{note.start:.3f}",
            f"{note.end:.3f}",
        )
    console.print(table)
    if measure is not None:
        console.print(f"Measure: {measure}")


@main.command()
def info() -> None:
    """Show current configuration."""
    settings = get_settings()

    console.print("[bold]Configuration[/bold]")
    console.print(f"  Output directory: {settings.output_dir}")
    console.print(f"  Store directory: {settings.store_dir}")
    console.print(f"  Resolution: {settings.resolution_seconds:.5f}s")
    console.print(f"  Beats per measure: {settings.beats_per_measure}")
    console.print(f"  Cursor lag: {settings.cursor_lag_ms}ms")
    console.print(f"  Log level: {settings.log_level}")


if __name__ == "__main__":
    main()
