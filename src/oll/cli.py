"""oll command-line interface."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from . import __version__
from .classifiers.base import Classifier
from .classifiers.registry import DEFAULT_FACTORY, UnsupportedAlgorithmError
from .config import Config, ConfigError, load_config, validate_table_name
from .evaluation import load_dataset, parse_label, progressive_validation
from .features import make_vector
from .logging import configure_logging
from .store import SqliteWeightStore, StorageError

app = typer.Typer(help="Online binary classifiers over a SQLite weight store.")
LOGGER = logging.getLogger(__name__)


@dataclass
class CLIState:
    """Stores shared CLI options."""

    config_path: Path | None
    database: Path | None = None
    table: str | None = None
    algorithm: str | None = None


@app.callback()
def _oll(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "-c",
            "--config",
            help="Path to oll config (env OLL_CONFIG or ~/.config/oll/config.yaml).",
        ),
    ] = None,
    database: Annotated[
        Path | None,
        typer.Option("--database", help="SQLite file holding the model."),
    ] = None,
    table: Annotated[
        str | None,
        typer.Option("--table", help="Table name of the model inside the database."),
    ] = None,
    algorithm: Annotated[
        str | None,
        typer.Option("-A", "--algorithm", help="Learning algorithm to use."),
    ] = None,
) -> None:
    """Capture global CLI options."""

    ctx.obj = CLIState(
        config_path=config.expanduser() if config else None,
        database=database.expanduser() if database else None,
        table=table,
        algorithm=algorithm,
    )


@app.command()
def train(
    ctx: typer.Context,
    label: Annotated[
        str,
        typer.Option("-l", "--label", help="Training label: +1 or -1."),
    ],
    text: Annotated[
        str | None,
        typer.Argument(help="Text to learn from ('-' or omitted reads stdin)."),
    ] = None,
) -> None:
    """Update the model with a single labelled text."""

    state = _state(ctx)
    try:
        y = parse_label(label)
    except ValueError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(2) from exc

    x = make_vector(_read_text(text))
    with _classifier(state) as (config, classifier):
        updated = classifier.train(x, y)
    typer.echo(
        f"{config.algorithm}: {'updated' if updated else 'no update'} "
        f"({len(x)} feature(s), label {y:+d})"
    )


@app.command()
def test(
    ctx: typer.Context,
    text: Annotated[
        str | None,
        typer.Argument(help="Text to score ('-' or omitted reads stdin)."),
    ] = None,
) -> None:
    """Score a text with the current model."""

    state = _state(ctx)
    x = make_vector(_read_text(text))
    with _classifier(state) as (_config, classifier):
        score = float(classifier.test(x))
    typer.echo(f"score: {score:.6f}")
    typer.echo(f"label: {'+1' if score > 0 else '-1'}")


@app.command()
def evaluate(
    ctx: typer.Context,
    dataset: Annotated[
        Path,
        typer.Argument(..., help="File of '<label>\\t<text>' lines, one example each."),
    ],
) -> None:
    """Run test-then-train over a labelled dataset and report metrics."""

    state = _state(ctx)
    path = dataset.expanduser()
    if not path.is_file():
        typer.secho(f"Dataset not found: {path}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from None
    try:
        examples = load_dataset(path)
    except ValueError as exc:
        typer.secho(f"Invalid dataset: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from exc

    with _classifier(state) as (config, classifier):
        report = progressive_validation(classifier, examples)

    typer.echo(f"Algorithm: {config.algorithm}")
    typer.echo(f"Examples: {report.examples}")
    typer.echo(f"Mistakes: {report.mistakes}")
    typer.echo(f"Updates: {report.updates}")
    typer.echo(f"Accuracy: {report.accuracy:.4f}")
    typer.echo(f"Precision: {report.precision:.4f}")
    typer.echo(f"Recall: {report.recall:.4f}")
    typer.echo(f"F1: {report.f1:.4f}")


@app.command()
def status(ctx: typer.Context) -> None:
    """Display configuration and model size."""

    state = _state(ctx)
    config = _load_environment(state)
    entries = 0
    if config.database.exists():
        store = SqliteWeightStore(config.database, table=config.table)
        try:
            store.open()
            entries = store.count()
        except StorageError as exc:
            _storage_failure(exc)
        finally:
            store.close()

    typer.echo("→ oll Status")
    typer.echo(f"Version: {__version__}")
    typer.echo(f"Config path: {_resolved_config_path(state.config_path)}")
    typer.echo(f"Database: {config.database}")
    typer.echo(f"Table: {config.table}")
    typer.echo(f"Algorithm: {config.algorithm}")
    typer.echo(f"Entries: {entries}")
    typer.echo(f"Available algorithms: {', '.join(DEFAULT_FACTORY.names())}")


@contextmanager
def _classifier(state: CLIState) -> Iterator[tuple[Config, Classifier]]:
    config = _load_environment(state)
    store = SqliteWeightStore(config.database, table=config.table)
    try:
        classifier = DEFAULT_FACTORY.create(config.algorithm, store)
        yield config, classifier
    except UnsupportedAlgorithmError as exc:
        _config_failure(exc)
    except StorageError as exc:
        _storage_failure(exc)
    finally:
        store.close()


def _state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise RuntimeError("CLI state missing from context.")
    return state


def _load_environment(state: CLIState) -> Config:
    try:
        config = load_config(state.config_path)
        overrides = {}
        if state.database is not None:
            overrides["database"] = state.database
        if state.table is not None:
            overrides["table"] = validate_table_name(state.table)
        if state.algorithm is not None:
            overrides["algorithm"] = state.algorithm.strip().lower()
        config = replace(config, **overrides)
        configure_logging(config.logging, config.root_dir)
    except ConfigError as exc:
        _config_failure(exc)
    return config


def _read_text(text: str | None) -> str:
    if text is None or text == "-":
        return sys.stdin.read()
    return text


def _config_failure(exc: ConfigError) -> NoReturn:
    typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(2) from exc


def _storage_failure(exc: StorageError) -> NoReturn:
    LOGGER.error("Storage failure: %s", exc)
    typer.secho(f"Storage error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(1) from exc


def _resolved_config_path(path: Path | None) -> Path:
    if path:
        return path
    env = os.environ.get("OLL_CONFIG")
    if env:
        return Path(env).expanduser()
    return Path("~/.config/oll/config.yaml").expanduser()


def main() -> None:  # pragma: no cover - delegated to Typer
    app()


__all__ = ["app", "main"]
