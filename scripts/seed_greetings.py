"""
Sample data script for the greeting store.

Inserts deterministic pseudo-random greetings through the store, spreading
their timestamps over a range of past days so date filters have something to
match during local development.
"""

from __future__ import annotations

import random
import sys
import time
from datetime import datetime, timedelta
from typing import Callable, Iterator, List, Optional, Tuple

import typer

from greetings.config import get_settings
from greetings.store import GreetingStore
from greetings.utils.logging import configure_logging

app = typer.Typer(help="Seed the greeting store with sample greetings.")

FIRST_NAMES = ["Ann", "Ben", "Chloe", "Dev", "Eva", "Femi", "Grace", "Hiro"]
LAST_NAMES = ["Lee", "Kim", "Okafor", "Novak", "Silva", "Tanaka"]


def _generate_entries(
    count: int, days: int, seed: int, start: datetime
) -> List[Tuple[str, str, datetime]]:
    """
    Build (first_name, last_name, moment) triples in ascending time order.

    Moments fall within the `days` days ending at `start`.
    """
    rng = random.Random(seed)
    offsets = sorted(rng.randrange(days * 24 * 3600) for _ in range(count))
    origin = start - timedelta(days=days)
    return [
        (rng.choice(FIRST_NAMES), rng.choice(LAST_NAMES), origin + timedelta(seconds=offset))
        for offset in offsets
    ]


def _replay_clock(moments: List[datetime]) -> Callable[[], datetime]:
    """Clock that hands out the given moments one per call."""
    iterator: Iterator[datetime] = iter(moments)
    return lambda: next(iterator)


def seed_store(
    db_path: str, count: int, days: int, seed: int, now: Optional[datetime] = None
) -> int:
    entries = _generate_entries(count, days, seed, now or datetime.now())
    clock = _replay_clock([moment for _, _, moment in entries])
    with GreetingStore(db_path, clock=clock) as store:
        for first_name, last_name, _ in entries:
            store.insert(first_name, last_name)
    return len(entries)


@app.command()
def main(
    count: int = typer.Option(
        50,
        "--count",
        "-n",
        min=0,
        help="Number of greetings to insert.",
    ),
    days: int = typer.Option(
        30,
        "--days",
        "-d",
        min=1,
        help="Spread timestamps over this many past days.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    db: Optional[str] = typer.Option(
        None,
        "--db",
        help="Optional database path override (default from GREETINGS_DB_PATH).",
    ),
) -> None:
    """
    Insert sample greetings into the store.
    """
    settings = get_settings()
    configure_logging(level="WARNING", json_logs=settings.log_json)
    db_path = db or settings.db_path

    start = time.perf_counter()
    typer.echo(f"Seeding {count:,} greetings into {db_path} (days={days}, seed={seed})")
    inserted = seed_store(db_path, count=count, days=days, seed=seed)
    duration = time.perf_counter() - start
    typer.echo(f"Inserted {inserted:,} greetings in {duration:.2f}s")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
