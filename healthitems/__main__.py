"""
Inspect a file of <thing> elements from the command line.

Run with: python -m healthitems things.xml [--strict] [--xml]
"""

import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from healthitems.config import configure_logging, get_config
from healthitems.domain.errors import HealthItemError
from healthitems.services.things import deserialize_items, serialize_item

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="healthitems", description="Parse health record things and summarize them."
    )
    parser.add_argument("file", type=Path, help="XML file with one <thing> or a group of them")
    parser.add_argument(
        "--strict", action="store_true", help="fail on item types that are not registered"
    )
    parser.add_argument("--xml", action="store_true", help="print each item re-serialized")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config()
    configure_logging(config)

    try:
        results = deserialize_items(args.file.read_bytes(), strict=args.strict or None)
    except OSError as exc:
        console.print(escape(f"Cannot read {args.file}: {exc}"), style="red")
        return 2
    except HealthItemError as exc:
        console.print(escape(f"Cannot parse {args.file}: {exc}"), style="red")
        return 1

    table = Table(title=str(args.file))
    table.add_column("#", style="dim", justify="right")
    table.add_column("Type", style="cyan")
    table.add_column("Date", style="magenta")
    table.add_column("Summary", style="green")

    failed = 0
    for index, result in enumerate(results, start=1):
        if result.is_err():
            failed += 1
            table.add_row(str(index), "error", "", escape(str(result.unwrap_err())), style="red")
            continue
        item = result.unwrap()
        when = item.effective_date or item.when_value
        table.add_row(
            str(index), item.type_name, when.isoformat() if when else "", escape(str(item))
        )

    console.print(table)

    if args.xml:
        for result in results:
            if result.is_ok():
                console.print(serialize_item(result.unwrap(), config=config), markup=False)

    console.print(f"{len(results) - failed}/{len(results)} things parsed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
