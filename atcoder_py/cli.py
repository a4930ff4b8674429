"""Command-line interface for atcoder_py."""

import getpass
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import click
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .client import AtCoderClient, AtCoderError, StatusError, SubmissionDetail
from .client.models import result_code
from .config import GlobalConfig, LocalConfig, session_file
from .tracker import track_submissions
from .utils.terminal import format_result_color


console = Console()


@contextmanager
def handle_errors():
    """Print atcoder_py errors and exit non-zero."""
    try:
        yield
    except AtCoderError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)


def resolve_contest(contest_id: Optional[str]) -> str:
    if contest_id:
        return contest_id
    config = LocalConfig.load()
    if config is None or not config.contest_id:
        raise click.UsageError(
            "No contest selected. Pass --contest or run `atcoder-py set-contest`."
        )
    return config.contest_id


def resolve_language(language: Optional[str]) -> str:
    if language:
        return language
    config = LocalConfig.load()
    if config is not None and config.language:
        return config.language
    return GlobalConfig.load().language


@click.group()
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, default=False, help="Enable debug output")
def cli(debug: bool):
    """atcoder_py - CLI client for the AtCoder judge."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if debug else "WARNING")


@cli.command()
def login():
    """Log in to AtCoder and keep the session."""
    username = input("Username: ")
    password = getpass.getpass("Password: ")

    with handle_errors(), AtCoderClient(session_file()) as client:
        client.clear_session()
        name = client.login(username, password)

    console.print(f"[green]Successfully logged in as {escape(name)}[/green]")


@cli.command(name="clear-session")
def clear_session():
    """Remove the saved session cookies."""
    path = session_file()
    if path.is_file():
        path.unlink()
    console.print("[green]Session cleared.[/green]")


@cli.command()
def info():
    """Show the logged-in user."""
    with handle_errors(), AtCoderClient(session_file()) as client:
        name = client.username()

    if name is None:
        console.print("[yellow]Not logged in.[/yellow]")
    else:
        console.print(f"Logged in as [bold cyan]{escape(name)}[/bold cyan].")


@cli.command(name="set-contest")
@click.argument("contest_id")
def set_contest(contest_id: str):
    """Select the contest used by the current directory."""
    config = LocalConfig.load()
    if config is None:
        config = LocalConfig()
    config.contest_id = contest_id
    config.save()

    console.print(f"[green]Switched to contest: {escape(contest_id)}[/green]")


@cli.command()
@click.option("-c", "--contest", "contest_id", help="Contest ID (default: from local config)")
def status(contest_id: Optional[str]):
    """Watch the status of all own submissions (Ctrl-C to stop)."""
    contest_id = resolve_contest(contest_id)
    config = GlobalConfig.load()

    with handle_errors(), AtCoderClient(session_file()) as client:
        try:
            track_submissions(
                client, contest_id, False, interval_ms=config.update_interval, console=console
            )
        except StatusError as e:
            if e.not_found:
                console.print(
                    f"[red]Contest {escape(contest_id)} not found, or you have not joined it yet.[/red]"
                )
                sys.exit(1)
            raise
        except KeyboardInterrupt:
            console.print("\n[yellow]Stopped[/yellow]")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-p", "--problem", help="Problem ID (default: extracted from filename)")
@click.option("-c", "--contest", "contest_id", help="Contest ID (default: from local config)")
@click.option("-l", "--lang", "language", help="Language name prefix (default: from config)")
@click.option("--watch/--no-watch", default=True, help="Watch submission results (default: true)")
def submit(
    file: Path,
    problem: Optional[str],
    contest_id: Optional[str],
    language: Optional[str],
    watch: bool,
):
    """Submit a solution file."""
    contest_id = resolve_contest(contest_id)
    language = resolve_language(language)
    config = GlobalConfig.load()

    # Extract from filename (e.g., "a.py" -> "a")
    if problem is None:
        problem = file.stem

    source = file.read_text(encoding="utf-8")

    with handle_errors(), AtCoderClient(session_file()) as client:
        task, language_name = client.submit(contest_id, problem, source, language)
        console.print(
            f"Submitted to problem [cyan]{escape(task)}[/cyan], "
            f"using language [magenta]{escape(language_name)}[/magenta]"
        )

        if not watch:
            return

        console.print("\n[cyan]Fetching submission result...[/cyan]")
        last_id = track_submissions(
            client, contest_id, True, interval_ms=config.update_interval, console=console
        )
        console.print()

        if last_id is None:
            return

        detail = client.submission_detail(contest_id, last_id)
        code = result_code(detail.submission.status)
        if code is not None and not code.accepted:
            console.print("[bold]Submission detail:[/bold]\n")
            print_full_result(detail, verbose=False)


@cli.command()
@click.argument("submission_id", type=int)
@click.option("-c", "--contest", "contest_id", help="Contest ID (default: from local config)")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show every test case")
def result(submission_id: int, contest_id: Optional[str], verbose: bool):
    """Show detailed results of a submission."""
    contest_id = resolve_contest(contest_id)

    with handle_errors(), AtCoderClient(session_file()) as client:
        detail = client.submission_detail(contest_id, submission_id)

    print_full_result(detail, verbose)


def print_full_result(detail: SubmissionDetail, verbose: bool) -> None:
    """Print a submission summary, with a breakdown when it is not accepted."""
    sub = detail.submission
    code = result_code(sub.status)
    stat = format_result_color(code, code.long_label) if code is not None else "N/A"

    console.print(f"Submission ID: [cyan]{sub.id}[/cyan]")
    console.print(f"Date:          {sub.submitted_at.astimezone():%Y-%m-%d %H:%M:%S}")
    console.print(f"Problem:       {escape(sub.problem)}")
    console.print(f"Language:      {escape(sub.language)}")
    console.print(f"Score:         {sub.score}")
    console.print(f"Code length:   {escape(sub.code_length)}")
    console.print(f"Result:        {stat}")
    console.print(f"Runtime:       {escape(sub.run_time or 'N/A')}")
    console.print(f"Memory:        {escape(sub.memory or 'N/A')}")

    if code is None or code.accepted or not detail.cases:
        return

    console.print("\n[bold cyan]Breakdown:[/bold cyan]")
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Result", style="white")
    table.add_column("Cases", style="cyan", justify="right")
    for case_code, count in detail.breakdown():
        table.add_row(format_result_color(case_code, case_code.long_label), str(count))
    console.print(table)

    if verbose:
        console.print("\n[bold cyan]Test Results:[/bold cyan]")
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Test", style="cyan")
        table.add_column("Result", style="white")
        table.add_column("Time", style="yellow")
        table.add_column("Memory", style="yellow")

        for case in detail.cases:
            case_code = result_code(case.status)
            table.add_row(
                escape(case.name),
                format_result_color(case_code) if case_code is not None else "N/A",
                escape(case.run_time or "N/A"),
                escape(case.memory or "N/A"),
            )

        console.print(table)


@cli.command()
def version():
    """Show version information."""
    console.print(f"[bold cyan]atcoder_py[/bold cyan] version [green]{__version__}[/green]")
    console.print("CLI client for the AtCoder judge")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
