"""Typer CLI application for the interpretation quiz."""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from src.config.logging_config import configure_logging
from src.config.settings import Settings, get_settings
from src.errors import QuizError
from src.models.quiz import Quiz, QuizView
from src.services.factory import create_quiz_service
from src.services.quiz_service import QuizService

app = typer.Typer(
    name="quiz-game",
    help="Spot the real interpretation: image quizzes against a generated distractor",
    add_completion=False,
)

console = Console()

EXIT_SERVER_ERROR = 1
EXIT_CLIENT_ERROR = 2
EXIT_WRONG_ANSWER = 3


def load_settings() -> Settings:
    """Load settings, exiting cleanly on invalid configuration."""
    try:
        return get_settings()
    except ValidationError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}", style="bold")
        raise typer.Exit(code=EXIT_SERVER_ERROR)


def get_service() -> QuizService:
    """Build the quiz service, exiting cleanly when a backend cannot be set up."""
    settings = load_settings()
    try:
        return create_quiz_service(settings)
    except (QuizError, ValueError) as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}", style="bold")
        raise typer.Exit(code=EXIT_SERVER_ERROR)


@contextmanager
def handle_quiz_errors() -> Iterator[None]:
    """Turn quiz errors into a message and an exit code."""
    try:
        yield
    except QuizError as e:
        kind = "Invalid request" if e.is_client_error else "Error"
        console.print(f"[red]{kind}:[/red] {escape(str(e))}", style="bold")
        raise typer.Exit(code=EXIT_CLIENT_ERROR if e.is_client_error else EXIT_SERVER_ERROR)


@app.command()
def create(
    image: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Image to upload (jpg, jpeg or png)",
    ),
    interpretation: str = typer.Option(
        ...,
        "--interpretation",
        "-i",
        help="Your own interpretation of the image",
    ),
) -> None:
    """
    Upload an image with your interpretation and create a quiz.

    Example:
        quiz-game create sunset.jpg -i "a sunset over water"
    """
    service = get_service()

    with handle_quiz_errors():
        with console.status("[cyan]Generating a competing interpretation..."):
            with image.open("rb") as f:
                quiz = service.create_quiz_from_upload(f, image.name, interpretation)
        image_url = service.get_signed_image_url(quiz.image_path)

    display_created_quiz(quiz, image_url)


@app.command()
def show(quiz_id: str = typer.Argument(..., help="Quiz id")) -> None:
    """Show a quiz the way a player sees it."""
    service = get_service()

    with handle_quiz_errors():
        view = service.build_quiz_view(service.get_quiz(quiz_id))

    display_quiz_view(view)


@app.command("list")
def list_quizzes() -> None:
    """List all quizzes, oldest first."""
    service = get_service()

    with handle_quiz_errors():
        summaries = service.get_quiz_summaries()

    if not summaries:
        console.print("[yellow]No quizzes yet.[/yellow]")
        return

    table = Table(title="Quizzes", border_style="cyan")
    table.add_column("#", style="cyan")
    table.add_column("ID", style="white")
    table.add_column("Created", style="white")

    for i, summary in enumerate(summaries, start=1):
        table.add_row(str(i), summary.id, summary.created_at.isoformat(timespec="seconds"))

    console.print()
    console.print(table)


@app.command()
def play(quiz_id: str = typer.Argument(..., help="Quiz id")) -> None:
    """Play a quiz interactively: pick the interpretation the uploader wrote."""
    service = get_service()

    with handle_quiz_errors():
        quiz = service.get_quiz(quiz_id)
        view = service.build_quiz_view(quiz)

    display_quiz_view(view)

    choice = typer.prompt("Which one did the uploader write? (1/2)", type=int)
    if choice not in (1, 2):
        console.print("[red]Invalid choice:[/red] answer 1 or 2", style="bold")
        raise typer.Exit(code=EXIT_CLIENT_ERROR)

    if service.verify_answer(quiz, view.interpretations[choice - 1]):
        console.print("\n[green bold]Correct![/green bold] That was the uploader's own words.")
    else:
        console.print("\n[red bold]Fooled![/red bold] That one was generated.")
        console.print(f"The uploader wrote: [cyan]{escape(quiz.author_interpretation)}[/cyan]")


@app.command()
def answer(
    quiz_id: str = typer.Argument(..., help="Quiz id"),
    selected: str = typer.Argument(..., help="The interpretation you think is the uploader's"),
) -> None:
    """Check an answer without prompting. Exits with 3 when the answer is wrong."""
    service = get_service()

    with handle_quiz_errors():
        quiz = service.get_quiz(quiz_id)

    if service.verify_answer(quiz, selected):
        console.print("[green]Correct[/green]")
        return

    console.print("[red]Wrong[/red]")
    raise typer.Exit(code=EXIT_WRONG_ANSWER)


@app.command()
def clear(
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip the confirmation prompt",
    ),
) -> None:
    """Delete every quiz."""
    if not yes:
        typer.confirm("Delete ALL quizzes?", abort=True)

    service = get_service()
    with handle_quiz_errors():
        service.delete_all_quizzes()

    console.print("[green]✓[/green] All quizzes deleted.")


@app.command()
def info() -> None:
    """Display the effective configuration."""
    settings = load_settings()

    table = Table(title="Quiz Game Configuration", show_header=False, border_style="cyan")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Storage backend", settings.storage_backend.value)
    if settings.bucket_name:
        table.add_row("Bucket", settings.bucket_name)
    table.add_row("Local storage dir", settings.local_storage_dir)
    table.add_row("Metadata path", settings.metadata_path)
    table.add_row("Metadata consistency", settings.metadata_consistency.value)
    table.add_row("Max upload size", f"{settings.max_file_size} bytes")
    table.add_row("Signed URL TTL", f"{settings.signed_url_ttl_minutes} min")
    table.add_row("Generator backend", settings.generator_backend.value)
    table.add_row("Model", settings.model_name)

    console.print()
    console.print(table)


def display_created_quiz(quiz: Quiz, image_url: str) -> None:
    """Display a freshly created quiz."""
    text = f"""[bold]ID:[/bold] {quiz.id}
[bold]Image:[/bold] {image_url}

[bold]Your interpretation:[/bold]      {escape(quiz.author_interpretation)}
[bold]Generated interpretation:[/bold] {escape(quiz.ai_interpretation)}"""
    console.print(Panel(text, title="Quiz Created", border_style="green"))


def display_quiz_view(view: QuizView) -> None:
    """Display a quiz with its interpretations numbered in presentation order."""
    table = Table(title=f"Quiz {view.id}", border_style="cyan")
    table.add_column("#", style="cyan")
    table.add_column("Interpretation", style="white")

    for i, text in enumerate(view.interpretations, start=1):
        table.add_row(str(i), escape(text))

    console.print()
    console.print(f"[bold]Image:[/bold] {view.image_url}")
    console.print(table)


@app.callback()
def callback() -> None:
    """
    Interpretation Quiz - guess which interpretation the uploader wrote.
    """
    settings = load_settings()
    configure_logging(settings.log_level, settings.log_file)


if __name__ == "__main__":
    app()
