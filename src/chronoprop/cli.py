from __future__ import annotations

"""Command line interface for chronoprop using Typer."""

from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional

import json
import logging

import numpy as np
import typer
from pydantic import ValidationError

from .config import Settings, load_settings
from .objects import DynamicObjectCollection
from .utils.logging import get_logger
from .utils.timeparse import format_seconds, parse_duration, parse_iso8601

app = typer.Typer(help="Query time-dynamic object properties stored in JSON documents")
logger = logging.getLogger(__name__)


def bad_parameter(message: str, *, param_hint: str) -> NoReturn:
    raise typer.BadParameter(message, param_hint=param_hint)


def _parse_override_value(raw: str) -> object:
    lower = raw.lower()
    if lower in {"true", "false"}:
        return lower == "true"
    if lower in {"null", "none"}:
        return None
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        pass
    if raw.startswith("[") or raw.startswith("{"):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            raise typer.BadParameter(f"invalid JSON override value: {raw}") from None
    return raw


def _ensure_path(settings: Settings, keys: List[str]) -> None:
    current: object = settings
    for key in keys[:-1]:
        if not hasattr(current, key):
            raise typer.BadParameter(f"unknown configuration key: {'.'.join(keys)}")
        current = getattr(current, key)
    if not hasattr(current, keys[-1]):
        raise typer.BadParameter(f"unknown configuration key: {'.'.join(keys)}")


def _apply_override(data: Dict[str, object], keys: List[str], value: object) -> None:
    target = data
    for key in keys[:-1]:
        existing = target.get(key)
        if not isinstance(existing, dict):
            existing = {}
            target[key] = existing
        target = existing
    target[keys[-1]] = value


def _parse_time(text: str, param_hint: str) -> float:
    try:
        return float(text)
    except ValueError:
        pass
    try:
        return parse_iso8601(text)
    except ValueError as exc:
        bad_parameter(str(exc), param_hint=param_hint)


def _format_time(seconds: float, settings: Settings) -> str:
    if settings.timestamp.output_format == "seconds":
        return repr(float(seconds))
    return format_seconds(seconds)


def _as_numbers(value: Any) -> List[float]:
    if isinstance(value, (int, float)):
        return [float(value)]
    return [float(v) for v in value]


def _load_collection(document: Path, settings: Settings) -> DynamicObjectCollection:
    try:
        data = json.loads(document.read_text(encoding="utf8"))
    except (OSError, json.JSONDecodeError) as exc:
        bad_parameter(f"failed to read document: {exc}", param_hint="DOCUMENT")
    packets = data if isinstance(data, list) else [data]
    collection = DynamicObjectCollection(settings=settings)
    errors = collection.process_document(packets)
    if errors:
        logger.warning("%d packet(s) could not be fully applied", len(errors))
    return collection


def _lookup(collection: DynamicObjectCollection, object_id: str, name: str):
    obj = collection.get_object(object_id)
    if obj is None:
        bad_parameter(f"no object with id {object_id!r}", param_hint="OBJECT_ID")
    if obj.get_property(name) is None:
        known = ", ".join(obj.property_names) or "none"
        bad_parameter(f"object {object_id!r} has no property {name!r} (has: {known})", param_hint="PROPERTY")
    return obj


@app.callback()
def init(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        dir_okay=False,
        file_okay=True,
        exists=False,
        help="Path to a YAML or JSON configuration file.",
    ),
    set_overrides: List[str] = typer.Option(
        [],
        "--set",
        help="Override configuration values using dotted paths, e.g. interpolation.degree=3",
    ),
) -> None:
    """Initialise the Typer context with validated settings."""

    if config is not None and not config.exists():
        raise typer.BadParameter(f"configuration file not found: {config}")

    try:
        settings = load_settings(config) if config else Settings()
    except (OSError, TypeError, ValueError) as exc:
        raise typer.BadParameter(f"failed to load configuration: {exc}") from exc

    if set_overrides:
        data = settings.model_dump()
        for override in set_overrides:
            if "=" not in override:
                raise typer.BadParameter("overrides must be of the form --set section.key=value")
            key, raw_value = override.split("=", 1)
            if not key:
                raise typer.BadParameter("override key cannot be empty")
            keys = key.split(".")
            _ensure_path(settings, keys)
            _apply_override(data, keys, _parse_override_value(raw_value))
        try:
            settings = Settings.model_validate(data)
        except ValidationError as exc:
            raise typer.BadParameter(f"invalid configuration override: {exc}") from exc

    get_logger("chronoprop", settings.logging.level, settings.logging.format)
    ctx.obj = settings


@app.command()
def summary(
    ctx: typer.Context,
    document: Path = typer.Argument(..., exists=True, dir_okay=False),
) -> None:
    """List every object, its properties and how much data each holds."""

    cfg: Settings = ctx.obj
    collection = _load_collection(document, cfg)
    for obj in collection:
        typer.echo(f"{obj.id}")
        if obj.availability is not None:
            typer.echo(
                f"  availability: {_format_time(obj.availability.start, cfg)}"
                f" / {_format_time(obj.availability.stop, cfg)}"
            )
        for name in obj.property_names:
            prop = obj.get_property(name)
            samples = sum(len(interval.data) for interval in prop.intervals)
            typer.echo(f"  {name}: {prop.value_type.name}, {len(prop.intervals)} interval(s), {samples} sample(s)")


@app.command()
def query(
    ctx: typer.Context,
    document: Path = typer.Argument(..., exists=True, dir_okay=False),
    object_id: str = typer.Argument(...),
    property_name: str = typer.Argument(..., metavar="PROPERTY"),
    time: str = typer.Argument(..., help="ISO-8601 timestamp or seconds since the Unix epoch"),
) -> None:
    """Print the value of one property at one instant."""

    cfg: Settings = ctx.obj
    t = _parse_time(time, "TIME")
    collection = _load_collection(document, cfg)
    obj = _lookup(collection, object_id, property_name)
    value = obj.get_value(property_name, t)
    if value is None:
        typer.echo("no value")
        return
    typer.echo(" ".join(repr(v) for v in _as_numbers(value)))


@app.command()
def sample(
    ctx: typer.Context,
    document: Path = typer.Argument(..., exists=True, dir_okay=False),
    object_id: str = typer.Argument(...),
    property_name: str = typer.Argument(..., metavar="PROPERTY"),
    start: str = typer.Argument(...),
    stop: str = typer.Argument(...),
    step: str = typer.Option("60", "--step", "-s", help="Grid spacing as SS, MM:SS or HH:MM:SS"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Save rows to a .csv or .npy file"),
) -> None:
    """Evaluate a property on a regular time grid.

    Instants without a value are skipped.  Each row holds the time in
    seconds followed by the value's components.
    """

    cfg: Settings = ctx.obj
    t0 = _parse_time(start, "START")
    t1 = _parse_time(stop, "STOP")
    try:
        dt = parse_duration(step)
    except ValueError as exc:
        bad_parameter(str(exc), param_hint="--step")
    if dt <= 0:
        bad_parameter("step must be positive", param_hint="--step")
    if t1 < t0:
        bad_parameter("STOP is before START", param_hint="STOP")

    collection = _load_collection(document, cfg)
    obj = _lookup(collection, object_id, property_name)

    grid = t0 + dt * np.arange(int(np.floor((t1 - t0) / dt)) + 1)
    rows = []
    for t in grid:
        value = obj.get_value(property_name, float(t))
        if value is not None:
            rows.append([float(t)] + _as_numbers(value))

    if output:
        arr = np.asarray(rows, dtype=float)
        if output.endswith(".csv"):
            np.savetxt(output, arr, delimiter=",")
        else:
            np.save(output, arr)
        typer.echo(f"Saved {len(rows)} row(s) to {output}")
        return

    for row in rows:
        typer.echo(_format_time(row[0], cfg) + " " + " ".join(repr(v) for v in row[1:]))


if __name__ == "__main__":  # pragma: no cover
    app()
