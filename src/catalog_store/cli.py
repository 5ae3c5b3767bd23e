"""Command line front end for a product catalog file."""
from __future__ import annotations

import argparse
import json
import logging
import random
from pathlib import Path
from typing import List, Optional, Sequence

from .catalog_io import append_product, read_products, write_products
from .collection import shuffle
from .config import Settings
from .errors import CatalogFormatError
from .models import Measure, Product

LOGGER = logging.getLogger(__name__)


def print_text(products: List[Product]) -> None:
    for product in products:
        print(product.describe())


def print_json(products: List[Product]) -> None:
    payload = {
        "count": len(products),
        "products": [product.to_record() for product in products],
    }
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _measure(value: str) -> Optional[Measure]:
    if value.casefold() == "null":
        return None
    try:
        return Measure[value]
    except KeyError:
        raise argparse.ArgumentTypeError(
            f"invalid measure {value!r} (choose from {', '.join(m.name for m in Measure)} or null)"
        ) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect and edit a product catalog file")
    parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Catalog file to use (defaults to $CATALOG_PATH or catalog/products.json)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    show = commands.add_parser("show", help="Print every product in the catalog")
    show.add_argument("--format", choices=("text", "json"), default="text", help="Output format")

    add = commands.add_parser("add", help="Append one product to the catalog")
    add.add_argument("--id", type=int, required=True)
    add.add_argument("--name", required=True)
    add.add_argument("--description", default="")
    add.add_argument("--price", type=float, required=True)
    add.add_argument("--amount", type=int, default=0)
    add.add_argument("--measure", type=_measure, default=None, help="XS, S, M, L, XL or null")

    mix = commands.add_parser("shuffle", help="Rewrite the catalog in random order")
    mix.add_argument("--seed", type=int, default=None, help="Seed for a reproducible order")
    mix.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the shuffled catalog here instead of overwriting the input",
    )
    return parser


def run(args: argparse.Namespace, settings: Settings) -> int:
    catalog = args.catalog or settings.catalog_path

    if args.command == "show":
        products = read_products(catalog)
        if args.format == "json":
            print_json(products)
        else:
            print_text(products)
    elif args.command == "add":
        product = Product(
            id=args.id,
            name=args.name,
            description=args.description,
            price=args.price,
            amount=args.amount,
            measure=args.measure,
        )
        append_product(catalog, product)
    else:
        products = read_products(catalog)
        shuffle(products, random.Random(args.seed))
        write_products(args.output or catalog, products)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level, format="[%(levelname)s] %(message)s")

    try:
        return run(args, settings)
    except (OSError, CatalogFormatError):
        LOGGER.exception("Catalog command %r failed", args.command)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
