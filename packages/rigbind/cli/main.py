"""Command-line interface for rigbind.

Inspection tools for rigs and binding files: normalize channel types,
resolve a selection against a catalog, preview autopilot tracks and list
bindings.
"""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from rigbind.core.autopilot.geometry import sample_track, to_pan_tilt
from rigbind.core.autopilot.models import TrackConfig, TrackShape
from rigbind.core.config.loader import (
    load_app_config,
    load_binding_registry,
    load_fixture_catalog,
)
from rigbind.core.controls.enums import SelectionMode
from rigbind.core.controls.normalizer import ChannelTypeNormalizer
from rigbind.core.controls.selection import Selection, resolve_selection
from rigbind.core.utils.logging import configure_logging

console = Console()
logger = logging.getLogger(__name__)


def _normalizer(args: argparse.Namespace) -> ChannelTypeNormalizer:
    app_config = load_app_config(args.app_config)
    return ChannelTypeNormalizer(app_config.normalizer.aliases)


def cmd_normalize(args: argparse.Namespace) -> int:
    """Print the canonical control for each raw channel type."""
    normalizer = _normalizer(args)

    table = Table(title="Channel types")
    table.add_column("Raw")
    table.add_column("Control")
    for raw in args.types:
        control = normalizer.normalize(raw)
        table.add_row(raw, control.value if control else "[dim]-[/dim]")

    console.print(table)
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    """Print the fixtures and DMX addresses a selection affects."""
    app_config = load_app_config(args.app_config)
    catalog = load_fixture_catalog(args.catalog)
    selection = Selection(
        mode=SelectionMode(args.mode),
        channels=set(args.channels or []),
        fixtures=args.fixtures or [],
        groups=args.groups or [],
        capabilities=args.capabilities or [],
    )
    affected = resolve_selection(
        selection,
        catalog.fixtures,
        catalog.groups,
        min_capability_fixtures=app_config.selection.min_capability_fixtures,
        normalizer=ChannelTypeNormalizer(app_config.normalizer.aliases),
    )

    if not affected:
        console.print("[yellow]Selection affects no fixtures[/yellow]")
        return 0

    table = Table(title=f"Affected fixtures ({selection.mode.value})")
    table.add_column("Fixture")
    table.add_column("Name")
    table.add_column("Control")
    table.add_column("Address", justify="right")
    for item in affected:
        for control, address in item.channels.items():
            table.add_row(item.fixture_id, item.fixture.name, control.value, str(address))

    console.print(table)
    return 0


def cmd_track(args: argparse.Namespace) -> int:
    """Print sampled points of an autopilot track."""
    track = TrackConfig(
        shape=TrackShape(args.shape),
        size=args.size,
        center_x=args.center_x,
        center_y=args.center_y,
    )
    points = sample_track(track, args.samples)

    table = Table(title=f"{track.shape.value} track")
    table.add_column("#", justify="right")
    table.add_column("X %", justify="right")
    table.add_column("Y %", justify="right")
    table.add_column("Pan", justify="right")
    table.add_column("Tilt", justify="right")
    for index, (x, y) in enumerate(points):
        pan, tilt = to_pan_tilt(float(x), float(y))
        table.add_row(str(index), f"{x:.2f}", f"{y:.2f}", str(pan), str(tilt))

    console.print(table)
    return 0


def cmd_bindings(args: argparse.Namespace) -> int:
    """Print the bindings in a settings file and flag collisions."""
    registry = load_binding_registry(args.path)

    table = Table(title=f"Bindings ({len(registry)})")
    table.add_column("Target")
    table.add_column("MIDI")
    table.add_column("Range")
    table.add_column("OSC")
    for binding in registry:
        table.add_row(
            binding.control,
            binding.midi_key or "-",
            f"{binding.min_value}-{binding.max_value}",
            binding.osc_address or "-",
        )
    console.print(table)

    for source, targets in registry.collisions().items():
        console.print(f"[yellow]⚠ {source} is bound to {', '.join(targets)}[/yellow]")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="rigbind",
        description="rigbind - control binding and dispatch for stage lighting rigs",
    )
    p.add_argument(
        "--app-config",
        default=None,
        help="Path to app config JSON/YAML (default: config.json if present)",
    )
    p.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    sub = p.add_subparsers(dest="cmd", required=True)

    normalize = sub.add_parser("normalize", help="Normalize raw channel type names")
    normalize.add_argument("types", nargs="+", help="Raw channel type strings")
    normalize.set_defaults(func=cmd_normalize)

    resolve = sub.add_parser("resolve", help="Resolve a selection against a fixture catalog")
    resolve.add_argument("--catalog", required=True, help="Path to fixture catalog JSON/YAML")
    resolve.add_argument(
        "--mode",
        choices=[m.value for m in SelectionMode],
        default=SelectionMode.FIXTURES.value,
        help="Selection mode (default: fixtures)",
    )
    resolve.add_argument("--channels", nargs="*", type=int, help="DMX addresses (channels mode)")
    resolve.add_argument("--fixtures", nargs="*", help="Fixture ids (fixtures mode)")
    resolve.add_argument("--groups", nargs="*", help="Group ids (groups mode)")
    resolve.add_argument("--capabilities", nargs="*", help="Control ids (capabilities mode)")
    resolve.set_defaults(func=cmd_resolve)

    track = sub.add_parser("track", help="Preview an autopilot track")
    track.add_argument(
        "--shape",
        choices=[s.value for s in TrackShape],
        default=TrackShape.CIRCLE.value,
        help="Track shape (default: circle)",
    )
    track.add_argument("--size", type=float, default=50.0, help="Diameter in percent")
    track.add_argument("--center-x", type=float, default=50.0, help="Horizontal centre in percent")
    track.add_argument("--center-y", type=float, default=50.0, help="Vertical centre in percent")
    track.add_argument("--samples", type=int, default=9, help="Number of points (default: 9)")
    track.set_defaults(func=cmd_track)

    bindings = sub.add_parser("bindings", help="List bindings in a settings file")
    bindings.add_argument("path", help="Path to exported binding settings")
    bindings.set_defaults(func=cmd_bindings)

    return p


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)
    configure_logging(level=args.log_level.upper())

    try:
        return args.func(args)
    except FileNotFoundError as e:
        console.print(f"[red]ERROR: File not found: {e}[/red]")
    except (ValueError, ValidationError) as e:
        console.print(f"[red]ERROR: {e}[/red]")
    return 1


if __name__ == "__main__":
    sys.exit(main())
