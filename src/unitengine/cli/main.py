"""Command-line interface for unitengine."""

from __future__ import annotations

import json
import logging
from datetime import datetime

import click

from ..core.settings import StrideStyle, UnitSystem, get_settings, update_settings
from ..stats.date_buckets import CalendarUnit, schedule
from ..units.axis import MAX_KNOBS, axis_knobs, scale_axis
from ..units.convert import IncompatibleUnitsError, convert
from ..units.format import format_bytes, format_components, format_for_display, format_value
from ..units.registry import UnknownUnitError, get_registry


def _fail(exc: Exception) -> click.ClickException:
    return click.ClickException(str(exc))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option(
    "--system",
    type=click.Choice([system.value for system in UnitSystem]),
    default=None,
    help="Unit system used for display conversions.",
)
@click.option(
    "--stride-style",
    type=click.Choice([style.value for style in StrideStyle]),
    default=None,
    help="Stride counting convention used for display conversions.",
)
def cli(verbose: bool, system: str | None, stride_style: str | None) -> None:
    """unitengine command suite."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s",
    )
    changes = {}
    if system:
        changes["unit_system"] = system
    if stride_style:
        changes["stride_style"] = stride_style
    if changes:
        update_settings(**changes)


@cli.command("list")
@click.option("--compatible-with", default=None, help="Only list units convertible with this key.")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON instead of a table.")
def list_units(compatible_with: str | None, as_json: bool) -> None:
    """List registered units."""

    registry = get_registry()
    try:
        units = registry.compatible_units(compatible_with) if compatible_with else registry.units()
    except UnknownUnitError as exc:
        raise _fail(exc)

    if as_json:
        payload = [
            {"key": unit.key, "display": unit.display, "abbr": unit.abbr, "base": registry.terminus(unit)}
            for unit in units
        ]
        click.echo(json.dumps(payload, indent=2))
        return
    for unit in units:
        click.echo(f"{unit.key:<24} {unit.abbr:<10} {unit.display}")


@cli.command("convert")
@click.argument("value", type=float)
@click.argument("from_unit")
@click.argument("to_unit")
@click.option("--raw", is_flag=True, help="Print the unformatted number.")
def convert_cmd(value: float, from_unit: str, to_unit: str, raw: bool) -> None:
    """Convert VALUE from FROM_UNIT into TO_UNIT."""

    try:
        result = convert(value, from_unit, to_unit)
    except (UnknownUnitError, IncompatibleUnitsError) as exc:
        raise _fail(exc)
    if raw:
        click.echo(repr(result))
    else:
        click.echo(format_value(result, to_unit, add_abbr=True))


@cli.command("format")
@click.argument("value", type=float)
@click.argument("unit")
@click.option("--no-abbr", is_flag=True, help="Omit the unit abbreviation.")
@click.option("--components", is_flag=True, help="Split compound and fraction units.")
@click.option("--display", is_flag=True, help="Convert to the configured display unit first.")
def format_cmd(value: float, unit: str, no_abbr: bool, components: bool, display: bool) -> None:
    """Format VALUE expressed in UNIT."""

    registry = get_registry()
    add_abbr = not no_abbr
    try:
        target = registry.get(unit)
        if display:
            shown = registry.display_unit(target)
            if not components:
                click.echo(format_for_display(value, target, add_abbr=add_abbr))
                return
            value, target = convert(value, target, shown), shown
    except UnknownUnitError as exc:
        raise _fail(exc)

    if components:
        click.echo(" ".join(format_components(value, target, add_abbr=add_abbr)))
    else:
        click.echo(format_value(value, target, add_abbr=add_abbr))


@cli.command("knobs")
@click.argument("x_min", type=float)
@click.argument("x_max", type=float)
@click.option(
    "--count",
    "n_knobs",
    default=5,
    show_default=True,
    type=click.IntRange(0, MAX_KNOBS),
    help="Desired number of ticks.",
)
@click.option("--extend", is_flag=True, help="Snap the range outward to tick multiples.")
@click.option("--unit", default=None, help="Use the axis base of this unit.")
def knobs(x_min: float, x_max: float, n_knobs: int, extend: bool, unit: str | None) -> None:
    """Print nice axis ticks covering X_MIN..X_MAX."""

    base = 10.0
    if unit:
        try:
            base = get_registry().get(unit).axis_base
        except UnknownUnitError as exc:
            raise _fail(exc)
    scale = scale_axis(n_knobs, x_min, x_max, extend_to_knobs=extend, base=base)
    ticks = axis_knobs(n_knobs, x_min, x_max, extend_to_knobs=extend, base=base)
    click.echo(f"step={scale.step:g} min={scale.min:g} max={scale.max:g}")
    click.echo(" ".join(f"{tick:g}" for tick in ticks))


@cli.command("bytes")
@click.argument("count", type=float)
def bytes_cmd(count: float) -> None:
    """Render a byte COUNT with a binary suffix."""

    click.echo(format_bytes(count))


@cli.command("buckets")
@click.argument("unit", type=click.Choice([unit.value for unit in CalendarUnit]))
@click.argument("start", type=click.DateTime())
@click.argument("end", type=click.DateTime())
@click.option("--reference", type=click.DateTime(), default=None, help="Anchor buckets on this date.")
def buckets(unit: str, start: datetime, end: datetime, reference: datetime | None) -> None:
    """List bucket starts for UNIT between START and END."""

    if end < start:
        raise click.ClickException("END must not be before START.")
    calendar = get_settings().calendar
    for bucket_start in schedule(CalendarUnit(unit), start, end, reference_date=reference, calendar=calendar):
        click.echo(bucket_start.isoformat())


__all__ = ["cli"]


if __name__ == "__main__":  # pragma: no cover
    cli()
