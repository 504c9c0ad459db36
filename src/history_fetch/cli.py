"""Typer CLI for history_fetch."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .client import HistoryClient
from .config import ClientConfig, load_batch_file, load_client_config
from .errors import HistoryFetchError

app = typer.Typer(help="Concurrent historical data downloads")


def _build_client(config: ClientConfig) -> HistoryClient:
    return HistoryClient.from_config(config)


def _load_config(config_path: Optional[str]) -> ClientConfig:
    return load_client_config(Path(config_path) if config_path else None)


def _count_rows(body: str) -> int:
    lines = [line for line in body.splitlines()[1:] if line.strip()]
    return len(lines)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@app.command()
def fetch(
    symbol: str = typer.Argument(..., help="Ticker symbol"),
    start: str = typer.Argument(..., help="Start date"),
    end: str = typer.Argument(..., help="End date"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Client config YAML"),
) -> None:
    """Fetch one symbol and print the raw CSV."""
    client = _build_client(_load_config(config_path))
    captured: list[str] = []
    try:
        client.add_query(symbol, start, end, captured.append)
        client.run()
    except (HistoryFetchError, ValueError) as exc:
        rprint(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)
    typer.echo(captured[0], nl=False)


@app.command()
def batch(
    batch_path: str = typer.Argument(..., help="YAML file with a list of queries"),
    concurrency: Optional[int] = typer.Option(None, help="Override the concurrency cap"),
    memoize: Optional[bool] = typer.Option(None, "--memoize/--no-memoize", help="Cache repeated requests"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Client config YAML"),
) -> None:
    """Run every query in a batch file through one client."""
    config = _load_config(config_path)
    updates = {}
    if concurrency is not None:
        if concurrency < 1:
            raise typer.BadParameter("concurrency must be >= 1")
        updates["concurrency_cap"] = concurrency
    if memoize is not None:
        updates["memoize"] = memoize
    if updates:
        config = config.model_copy(update=updates)
    batch_file = load_batch_file(Path(batch_path))
    if not batch_file.queries:
        rprint("[yellow]No queries in batch file[/yellow]")
        return
    client = _build_client(config)
    for entry in batch_file.queries:
        client.add_query(entry.symbol, entry.start, entry.end)
    try:
        results = client.run()
    except HistoryFetchError as exc:
        rprint(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)
    table = Table(title=f"{len(results)} queries fetched")
    table.add_column("Symbol")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Rows", justify="right")
    for result in results:
        table.add_row(
            result.symbol,
            result.query.start.isoformat(),
            result.query.end.isoformat(),
            str(_count_rows(result.body)),
        )
    Console().print(table)


if __name__ == "__main__":
    app()
