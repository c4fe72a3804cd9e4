from __future__ import annotations

import json
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from greetings.domain.models import Record


def records_to_json(records: Sequence[Record]) -> str:
    """Serialize records as a JSON array in the transport format."""
    return json.dumps([record.to_payload() for record in records], indent=2)


def print_records(
    records: Sequence[Record],
    title: str = "Greetings",
    console: Optional[Console] = None,
) -> None:
    """
    Render greeting records as a rich table, oldest first.
    """
    console = console or Console()

    if not records:
        console.print("[yellow]No greetings to display.[/yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        caption=f"{len(records):,} record(s)",
    )

    table.add_column("ID", justify="right", style="magenta", no_wrap=True)
    table.add_column("First Name", style="cyan")
    table.add_column("Last Name", style="cyan")
    table.add_column("Message", style="green")
    table.add_column("Timestamp", style="yellow", no_wrap=True)

    for record in records:
        table.add_row(
            str(record.id),
            record.first_name,
            record.last_name,
            record.message,
            record.timestamp,
        )

    console.print(table)


__all__ = ["print_records", "records_to_json"]
