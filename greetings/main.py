from __future__ import annotations

import sys
from typing import NoReturn, Optional

import typer

from greetings.config import get_settings
from greetings.domain.errors import GreetingStoreError
from greetings.domain.models import GreetingFilter
from greetings.reporter import print_records, records_to_json
from greetings.store import GreetingStore
from greetings.utils.logging import configure_logging

app = typer.Typer(help="Greeting store maintenance CLI.")

CLIENT_ERROR_EXIT_CODE = 2
STORAGE_ERROR_EXIT_CODE = 1


def _open_store(db_path: Optional[str]) -> GreetingStore:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    if db_path:
        return GreetingStore(
            db_path,
            timeout=settings.busy_timeout_seconds,
            attempts=settings.connect_attempts,
        )
    return GreetingStore.from_settings(settings)


def _fail(exc: GreetingStoreError) -> NoReturn:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(CLIENT_ERROR_EXIT_CODE if exc.client_error else STORAGE_ERROR_EXIT_CODE)


DbOption = typer.Option(
    None,
    "--db",
    help="SQLite database path (default from GREETINGS_DB_PATH).",
)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_path} | busy_timeout={settings.busy_timeout_seconds}s "
        f"attempts={settings.connect_attempts} | env={settings.app_env} "
        f"log_level={settings.log_level}"
    )


@app.command()
def init(db: Optional[str] = DbOption) -> None:
    """
    Create the greetings table if it does not exist.
    """
    try:
        with _open_store(db) as store:
            typer.echo(f"Greetings table ready in {store.db_path}")
    except GreetingStoreError as exc:
        _fail(exc)


@app.command()
def add(
    first_name: str = typer.Argument(..., help="Greeter's first name."),
    last_name: str = typer.Argument(..., help="Greeter's last name."),
    db: Optional[str] = DbOption,
) -> None:
    """
    Record a greeting and print its confirmation message.
    """
    try:
        with _open_store(db) as store:
            record = store.insert(first_name, last_name)
    except GreetingStoreError as exc:
        _fail(exc)
    typer.echo(record.message)


@app.command("list")
def list_greetings(
    db: Optional[str] = DbOption,
    as_json: bool = typer.Option(False, "--json", help="Print records as JSON."),
) -> None:
    """
    Show every stored greeting.
    """
    try:
        with _open_store(db) as store:
            records = store.list_all()
    except GreetingStoreError as exc:
        _fail(exc)
    if as_json:
        typer.echo(records_to_json(records))
    else:
        print_records(records)


@app.command()
def search(
    first_name: Optional[str] = typer.Option(None, "--first-name", "-f", help="Exact first name."),
    last_name: Optional[str] = typer.Option(None, "--last-name", "-l", help="Exact last name."),
    start_date: Optional[str] = typer.Option(
        None, "--start-date", help="Earliest date, inclusive (YYYY-MM-DD)."
    ),
    end_date: Optional[str] = typer.Option(
        None, "--end-date", help="Latest date, inclusive (YYYY-MM-DD)."
    ),
    db: Optional[str] = DbOption,
    as_json: bool = typer.Option(False, "--json", help="Print records as JSON."),
) -> None:
    """
    Show greetings matching all of the given filters.
    """
    criteria = GreetingFilter(
        first_name=first_name,
        last_name=last_name,
        start_date=start_date,
        end_date=end_date,
    )
    try:
        with _open_store(db) as store:
            records = store.search(criteria)
    except GreetingStoreError as exc:
        _fail(exc)
    if as_json:
        typer.echo(records_to_json(records))
    else:
        print_records(records, title="Search results")


@app.command()
def clear(
    db: Optional[str] = DbOption,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """
    Delete every stored greeting.
    """
    if not yes:
        typer.confirm("Delete all greetings?", abort=True)
    try:
        with _open_store(db) as store:
            removed = store.clear()
    except GreetingStoreError as exc:
        _fail(exc)
    typer.echo(f"Removed {removed} greeting(s).")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
