"""CLI for persistent-set: show / add / remove / clear string sets."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from persistent_set.core.config import AppSettings, ObservabilityConfig, StoreConfig
from persistent_set.core.startup_checks import validate_settings
from persistent_set.exceptions import PersistentSetError
from persistent_set.logging_config import setup_logging
from persistent_set.persistent_set import PersistentSet
from persistent_set.stores import create_store
from persistent_set.string_set import create_string_set

app = typer.Typer(name="pset", help="Inspect and edit persistent string sets")
console = Console()

R = TypeVar("R")

BackendOption = typer.Option(None, "--backend", help="memory, file, redis or s3")
StorePathOption = typer.Option(None, "--store-path", help="Directory for the file backend")
VerboseOption = typer.Option(False, "--verbose", "-v")


def _build_settings(backend: Optional[str], store_path: Optional[Path], verbose: bool) -> AppSettings:
    """Build settings, overriding env defaults with CLI flags."""
    overrides: dict[str, Any] = {}
    if backend:
        overrides["backend"] = backend
    if store_path:
        overrides["store_path"] = store_path
    store = StoreConfig(**overrides)
    observability = ObservabilityConfig(log_level="DEBUG") if verbose else ObservabilityConfig()
    return AppSettings(store=store, observability=observability)


def _run(
    key: str,
    backend: Optional[str],
    store_path: Optional[Path],
    verbose: bool,
    action: Callable[[PersistentSet[str]], Awaitable[R]],
) -> R:
    """Load the string set at ``key`` and apply ``action`` to it."""
    try:
        settings = _build_settings(backend, store_path, verbose)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc
    setup_logging(settings.observability)
    try:
        validate_settings(settings)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    store = create_store(settings)

    async def _go() -> R:
        try:
            pset = await create_string_set(key, store)
            return await action(pset)
        finally:
            await store.aclose()

    try:
        return asyncio.run(_go())
    except PersistentSetError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


@app.command()
def show(
    key: str = typer.Argument(..., help="Store key of the set"),
    as_json: bool = typer.Option(False, "--json", help="Print members as a JSON array"),
    backend: Optional[str] = BackendOption,
    store_path: Optional[Path] = StorePathOption,
    verbose: bool = VerboseOption,
) -> None:
    """List the members of a set."""

    async def _members(pset: PersistentSet[str]) -> list[str]:
        return sorted(await pset.to_set())

    members = _run(key, backend, store_path, verbose, _members)

    if as_json:
        typer.echo(json.dumps(members))
        return

    table = Table(title=key)
    table.add_column("Value", style="cyan")
    for value in members:
        table.add_row(value)
    console.print(table)
    console.print(f"{len(members)} member(s)")


@app.command()
def add(
    key: str = typer.Argument(..., help="Store key of the set"),
    values: List[str] = typer.Argument(..., help="Values to add"),
    backend: Optional[str] = BackendOption,
    store_path: Optional[Path] = StorePathOption,
    verbose: bool = VerboseOption,
) -> None:
    """Add values to a set."""

    async def _add(pset: PersistentSet[str]) -> int:
        before = len(pset)
        await pset.add_all(values)
        return len(pset) - before

    added = _run(key, backend, store_path, verbose, _add)
    console.print(f"[green]Added {added} new value(s) to {key}[/green]")


@app.command()
def remove(
    key: str = typer.Argument(..., help="Store key of the set"),
    values: List[str] = typer.Argument(..., help="Values to remove"),
    backend: Optional[str] = BackendOption,
    store_path: Optional[Path] = StorePathOption,
    verbose: bool = VerboseOption,
) -> None:
    """Remove values from a set."""
    doomed = set(values)

    async def _remove(pset: PersistentSet[str]) -> int:
        before = len(pset)
        await pset.remove_where(lambda v: v in doomed)
        return before - len(pset)

    removed = _run(key, backend, store_path, verbose, _remove)
    console.print(f"[green]Removed {removed} value(s) from {key}[/green]")


@app.command()
def clear(
    key: str = typer.Argument(..., help="Store key of the set"),
    backend: Optional[str] = BackendOption,
    store_path: Optional[Path] = StorePathOption,
    verbose: bool = VerboseOption,
) -> None:
    """Delete a set from the store."""

    async def _clear(pset: PersistentSet[str]) -> None:
        await pset.clear()

    _run(key, backend, store_path, verbose, _clear)
    console.print(f"[green]Cleared {key}[/green]")


if __name__ == "__main__":
    app()
