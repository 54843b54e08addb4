"""Command-line interface for the tutoring transcript pipeline."""

import json
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tutorsim.config.settings import get_settings
from tutorsim.llm.engine import LLMTransformEngine
from tutorsim.logging_config import configure_logging
from tutorsim.models.results import PipelineResult
from tutorsim.pipeline import TranscriptValidationError, process_transcript

app = typer.Typer(
    name="tutorsim",
    help="Tutoring simulator - split raw session transcripts into speaker turns",
    add_completion=False,
)
console = Console()


@app.command()
def process(
    source: str = typer.Argument(
        ...,
        help="Path to a plain-text transcript, or '-' to read from stdin",
    ),
    student_name: Optional[str] = typer.Option(
        None,
        "--student-name",
        "-s",
        help="Name of the virtual student (used in the instructions only)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the transcript JSON here instead of stdout",
    ),
    pretty: bool = typer.Option(
        True,
        "--pretty/--compact",
        help="Pretty-print JSON output",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Run the three-pass splitter over a raw transcript."""
    configure_logging("DEBUG" if verbose else "WARNING", json_logs=get_settings().log_json)

    if source == "-":
        full_text = sys.stdin.read()
    else:
        path = Path(source)
        if not path.is_file():
            console.print(f"[red]Error:[/red] file not found: {path}")
            raise typer.Exit(code=1)
        full_text = path.read_text(encoding="utf-8")

    engine = LLMTransformEngine()
    try:
        result = process_transcript(full_text, student_name, engine=engine)
    except TranscriptValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    finally:
        engine.close()

    payload = {
        "success": True,
        "transcript": [u.to_wire() for u in result.transcript],
        "originalLength": result.original_length,
        "formattedLength": result.formatted_length,
    }
    rendered = json.dumps(payload, indent=2 if pretty else None, ensure_ascii=False)

    if output is not None:
        output.write_text(rendered, encoding="utf-8")
        _display_summary(result, student_name)
        console.print(f"\n[green]Transcript saved to:[/green] {output}")
    else:
        typer.echo(rendered)


@app.command()
def info() -> None:
    """Display system information and configuration."""
    from tutorsim import __version__
    from tutorsim.llm.client import get_llm_settings

    settings = get_settings()
    llm_settings = get_llm_settings()

    console.print(
        Panel.fit(
            "[bold blue]Tutoring Simulator Transcript Pipeline[/bold blue]",
            border_style="blue",
        )
    )

    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="dim")
    table.add_column("Value")

    table.add_row("Version", __version__)
    table.add_row("LLM Model", llm_settings.model_name)
    table.add_row("Ollama URL", llm_settings.ollama_base_url)
    table.add_row("Temperature", str(llm_settings.temperature))
    table.add_row("Max Output Tokens", str(llm_settings.num_predict))
    table.add_row("Call Timeout", f"{llm_settings.engine_timeout_seconds}s")
    table.add_row("Preservation Threshold", f"{settings.preservation_threshold:.0%}")

    console.print(table)


def _display_summary(result: PipelineResult, student_name: Optional[str]) -> None:
    """Display the split transcript and per-pass outcome."""
    student_label = student_name or "Student"

    table = Table(title="Transcript", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Speaker")
    table.add_column("Text")

    for i, utterance in enumerate(result.transcript, 1):
        speaker = "[cyan]Tutor[/cyan]" if utterance.is_user else f"[magenta]{student_label}[/magenta]"
        table.add_row(str(i), speaker, utterance.text)

    console.print(table)

    for stage_result in result.stage_results:
        status = "[yellow]fallback[/yellow]" if stage_result.used_fallback else "[green]ok[/green]"
        line = f"[dim]Pass {stage_result.stage.number} ({stage_result.stage.value}):[/dim] {status}"
        if stage_result.preservation_rate is not None:
            line += f" [dim]preservation {stage_result.preservation_rate:.0%}[/dim]"
        console.print(line)


if __name__ == "__main__":
    app()
