"""CLI entry point for geoscope-lookup."""

from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.table import Table

from geoscope import __version__
from geoscope.config import ENGINE_NAMES, GeoConfig
from geoscope.database import GeoIPDatabase, open_path, open_type
from geoscope.errors import GeoScopeError
from geoscope.models import Edition
from geoscope.result import Result

DEFAULT_TYPES = ["city", "country"]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="geoscope-lookup",
        description="Look up host names or IP addresses in a geolocation database",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"geoscope {__version__}",
    )
    parser.add_argument(
        "names",
        nargs="*",
        metavar="NAME",
        help="IP address(es) or hostname(s)",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to TOML config file",
    )
    parser.add_argument(
        "--db",
        metavar="PATH",
        help="Database file to open instead of the default locations",
    )
    parser.add_argument(
        "--type",
        dest="types",
        action="append",
        choices=[e.value for e in Edition],
        help="Default database type to try; repeat to set the order (default: city, country)",
    )
    parser.add_argument(
        "--engine",
        choices=ENGINE_NAMES,
        help="Database engine (default: auto)",
    )
    parser.add_argument(
        "--data-dir",
        metavar="DIR",
        help="Directory holding the default databases (default: /usr/share/GeoIP)",
    )
    parser.add_argument(
        "--fields",
        action="store_true",
        help="Show every field of each result",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug messages to stderr",
    )
    return parser.parse_args(argv)


def _open(args: argparse.Namespace, config: GeoConfig) -> GeoIPDatabase:
    if args.db:
        return open_path(args.db, config=config)
    return open_type(*(args.types or DEFAULT_TYPES), config=config)


def _fields_table(name: str, result: Result) -> Table:
    table = Table(title=f"{name}: {result}", show_header=True)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for field, value in result:
        table.add_row(field, str(value))
    return table


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    console = Console()
    err_console = Console(stderr=True)

    if not args.names:
        err_console.print("Arg: ip address(es) or hostname(s)")
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    overrides: dict = {}
    if args.engine:
        overrides["engine"] = args.engine
    if args.data_dir:
        overrides["data_dir"] = args.data_dir

    try:
        config = GeoConfig.load(config_path=args.config, overrides=overrides)
        db = _open(args, config)
    except GeoScopeError as e:
        err_console.print(f"[red]error:[/red] {e}", highlight=False)
        return 1

    with db:
        for name in args.names:
            try:
                result = db.lookup(name)
            except GeoScopeError as e:
                err_console.print(f"[red]error:[/red] {name}: {e}", highlight=False)
                return 1
            if result is None:
                console.print(f"{name}\t-", highlight=False)
                continue
            with result:
                if args.fields:
                    console.print(_fields_table(name, result))
                else:
                    console.print(f"{name}\t{result}", highlight=False, markup=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
