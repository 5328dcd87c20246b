"""CLI commands for reviewing a document analysis result."""

import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from rehab_import import __version__
from rehab_import.config import get_settings
from rehab_import.matching.classifier import MatchBucket
from rehab_import.matching.patient import suggest_patient
from rehab_import.models.extraction import DocumentAnalysisResult
from rehab_import.models.patient import PatientOption

app = typer.Typer(
    name="rehab-import",
    help="Review and reconcile exercises extracted from clinical documents",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)

_roster_adapter = TypeAdapter(list[PatientOption])


def _load_analysis(path: Path) -> DocumentAnalysisResult:
    if not path.exists():
        err_console.print(f"[red]Analysis file not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        return DocumentAnalysisResult.model_validate_json(path.read_text())
    except ValidationError as e:
        err_console.print(f"[red]Invalid analysis file {path}: {e.error_count()} errors[/red]")
        raise typer.Exit(1)


def _load_roster(path: Path) -> list[PatientOption]:
    if not path.exists():
        err_console.print(f"[red]Roster file not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        return _roster_adapter.validate_json(path.read_text())
    except ValidationError as e:
        err_console.print(f"[red]Invalid roster file {path}: {e.error_count()} errors[/red]")
        raise typer.Exit(1)


def _open_session(analysis: DocumentAnalysisResult, patient_id: Optional[str] = None):
    from rehab_import.reconcile.session import ImportSession

    return ImportSession(analysis, patient_id=patient_id)


@app.command()
def review(
    analysis_file: Path = typer.Argument(..., help="JSON file with the document analysis result"),
    approve_confident: bool = typer.Option(
        False, "--approve-confident", help="Approve every confident match"
    ),
    use_matched: bool = typer.Option(
        False, "--use-matched", help="Reuse the top suggestion for every matched exercise"
    ),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Classify extracted exercises and show the resulting decisions."""
    analysis = _load_analysis(analysis_file)
    session = _open_session(analysis)

    if approve_confident:
        session.approve_all_confident()
    if use_matched:
        session.use_all_matched()

    if output_json:
        buckets = session.buckets()
        output = {
            "buckets": {
                bucket.value: [e.temp_id for e in buckets.get(bucket)] for bucket in MatchBucket
            },
            "decisions": {
                temp_id: decision.model_dump(mode="json", exclude_none=True)
                for temp_id, decision in session.exercise_decisions.items()
            },
            "sets": {s.temp_id: session.is_set_eligible(s.temp_id) for s in session.exercise_sets},
            "stats": session.import_stats().model_dump(),
        }
        typer.echo(json.dumps(output, indent=2))
        return

    _display_review(session)


def _display_review(session) -> None:
    """Display review buckets and stats in rich format."""
    info = session.document_info
    console.print(
        Panel(
            f"[bold]Patient:[/bold] {info.patient_name or '-'}\n"
            f"[bold]Therapist:[/bold] {info.therapist_name or '-'}\n"
            f"[bold]Exercises:[/bold] {len(session.exercises)}  "
            f"[bold]Sets:[/bold] {len(session.exercise_sets)}  "
            f"[bold]Notes:[/bold] {len(session.clinical_notes)}",
            title="Document",
        )
    )

    buckets = session.buckets()
    for bucket, title, style in (
        ("confident", "Confident matches", "green"),
        ("uncertain", "Uncertain matches", "yellow"),
        ("new", "New exercises", "cyan"),
    ):
        exercises = getattr(buckets, bucket)
        if not exercises:
            continue
        table = Table(title=f"{title} ({len(exercises)})", title_style=style)
        table.add_column("Temp ID")
        table.add_column("Exercise")
        table.add_column("Decision")
        table.add_column("Match")
        for exercise in exercises:
            decision = session.exercise_decisions[exercise.temp_id]
            suggestions = session.suggestions_for(exercise.temp_id)
            if decision.action == "reuse":
                match = session.reuse_target_name(exercise.temp_id) or decision.reuse_exercise_id
            elif suggestions:
                match = f"{suggestions[0].existing_exercise_name} ({suggestions[0].confidence:.0%})"
            else:
                match = "-"
            table.add_row(exercise.temp_id, exercise.name, decision.action, match)
        console.print(table)

    if session.exercise_sets:
        table = Table(title="Exercise Sets")
        table.add_column("Set")
        table.add_column("Active exercises")
        table.add_column("Eligible")
        for exercise_set in session.exercise_sets:
            eligible = session.is_set_eligible(exercise_set.temp_id)
            table.add_row(
                exercise_set.name,
                f"{len(session.active_members(exercise_set.temp_id))}/{len(exercise_set.exercise_temp_ids)}",
                "[green]yes[/green]" if eligible else "[red]no[/red]",
            )
        console.print(table)

    stats = session.exercise_stats()
    progress = session.confident_progress()
    console.print(
        Panel(
            f"[bold]Reuse:[/bold] {stats.reuse_count}  "
            f"[bold]Create:[/bold] {stats.create_count}  "
            f"[bold]Skip:[/bold] {stats.skip_count}\n"
            f"[bold]Confident approved:[/bold] {progress.approved_count}/{progress.total}\n"
            f"[bold]Can proceed:[/bold] {stats.can_proceed}",
            title="Summary",
            border_style="green" if stats.can_proceed else "red",
        )
    )


@app.command()
def payload(
    analysis_file: Path = typer.Argument(..., help="JSON file with the document analysis result"),
    patient_id: Optional[str] = typer.Option(None, "--patient-id", "-p", help="Patient to attach"),
    roster_file: Optional[Path] = typer.Option(
        None, "--roster", "-r", help="JSON roster used to suggest a patient"
    ),
    approve_confident: bool = typer.Option(
        False, "--approve-confident", help="Approve every confident match"
    ),
    create_set: bool = typer.Option(
        False, "--create-set", help="Group all imported exercises into a new set"
    ),
):
    """Print the import request built from the default decisions."""
    analysis = _load_analysis(analysis_file)

    if patient_id is None and roster_file is not None:
        settings = get_settings()
        match = suggest_patient(
            analysis.document_info.patient_name,
            _load_roster(roster_file),
            settings.patient_suggest_threshold,
        )
        if match is not None:
            err_console.print(f"[dim]Suggested patient: {match.fullname} ({match.id})[/dim]", highlight=False)
            patient_id = match.id

    session = _open_session(analysis, patient_id=patient_id)
    if approve_confident:
        session.approve_all_confident()
    if create_set:
        from rehab_import.reconcile.commands import SetCreateSetAfterImport

        session.dispatch(SetCreateSetAfterImport(enabled=True))

    if not session.can_proceed():
        err_console.print("[red]Nothing to import: every exercise is skipped[/red]")
        raise typer.Exit(1)

    request = session.build_import_request()
    typer.echo(request.model_dump_json(by_alias=True, indent=2))


@app.command()
def match_patient(
    name: str = typer.Argument(..., help="Patient name detected in a document"),
    roster_file: Path = typer.Option(..., "--roster", "-r", help="JSON roster file"),
):
    """Rank roster entries against a detected patient name."""
    from rehab_import.matching.patient import filter_patients, patient_search_score

    settings = get_settings()
    roster = _load_roster(roster_file)

    suggested = suggest_patient(name, roster, settings.patient_suggest_threshold)
    if suggested is None:
        console.print(f"[yellow]No confident match for {name!r}[/yellow]")
    else:
        console.print(f"[green]Suggested: {suggested.fullname} ({suggested.id})[/green]")

    matches = filter_patients(name, roster, settings.patient_filter_threshold)
    if not matches:
        return

    table = Table(title=f"Roster matches ({len(matches)})")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Score")
    for patient in matches:
        table.add_row(
            patient.id,
            patient.fullname,
            patient.email or "-",
            f"{patient_search_score(name, patient):.0f}",
        )
    console.print(table)


@app.command()
def version():
    """Show version information."""
    console.print(f"rehab-import v{__version__}")


if __name__ == "__main__":
    app()
