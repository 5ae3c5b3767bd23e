"""Helpers for reading/writing product catalog files.

A catalog file is a JSON array of product objects. Reading is driven by a
pull parser so the decode step never holds the whole document tree; appending
splices one new object in front of the closing bracket of an existing array.
"""
from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import IO, Any, Iterable, Iterator, List, Optional, Tuple, Union

import ijson

from .errors import CatalogFormatError
from .models import NULL_MEASURE, Measure, Product

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]
Event = Tuple[str, str, Any]

_WHITESPACE = b" \t\r\n"
_BLOCK_SIZE = 64 * 1024


@dataclass
class _ProductDraft:
    """Mutable accumulator filled field by field while an object is decoded."""

    id: int = 0
    name: str = ""
    description: str = ""
    price: float = 0.0
    amount: int = 0
    measure: Optional[Measure] = None

    def build(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            description=self.description,
            price=self.price,
            amount=self.amount,
            measure=self.measure,
        )


def iter_products(path: PathLike) -> Iterator[Product]:
    """Yield products from a catalog file one at a time, in file order."""
    path = Path(path)
    with path.open("rb") as handle:
        events = ijson.parse(handle)
        _, event, _ = _next_event(events, path)
        if event != "start_array":
            raise CatalogFormatError("expected array", path)
        while True:
            _, event, _ = _next_event(events, path)
            if event == "end_array":
                return
            yield _read_product(event, events, path)


def read_products(path: PathLike) -> List[Product]:
    """Return every product stored in a catalog file.

    Raises ``OSError`` when the file cannot be read and
    ``CatalogFormatError`` when its content is malformed. Nothing is returned
    for a partially valid file.
    """
    products = list(iter_products(path))
    LOGGER.debug("Read %d products from %s", len(products), path)
    return products


def append_product(path: PathLike, product: Product) -> None:
    """Add ``product`` as the last element of an existing catalog array.

    The rewritten document is staged in a temporary file next to ``path`` and
    moved over it with ``os.replace``, so a failure leaves the original file
    as it was.
    """
    path = Path(path)
    record = json.dumps(product.to_record(), indent=2, ensure_ascii=False).encode("utf-8")
    with path.open("rb") as source:
        closing, previous = _find_closing_bracket(source, path)
        separator = b"\n" if previous == b"[" else b",\n"
        source.seek(0)
        with _staged_replacement(path) as target:
            _copy_bytes(source, target, closing)
            target.write(separator)
            target.write(record)
            target.write(b"]")
    LOGGER.info("Object [ %s ] was added to file [ %s ]", product.describe(), path)


def write_products(path: PathLike, products: Iterable[Product]) -> None:
    """Write products as a brand-new JSON array with trailing newline."""
    path = Path(path)
    array = [product.to_record() for product in products]
    path.write_text(json.dumps(array, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    LOGGER.info("Wrote %d products to %s", len(array), path)


def _next_event(events: Iterator[Event], path: Path) -> Event:
    try:
        return next(events)
    except StopIteration:
        raise CatalogFormatError("unexpected end of document", path) from None
    except ijson.JSONError as exc:
        raise CatalogFormatError(f"malformed JSON: {exc}", path) from exc


def _read_product(event: str, events: Iterator[Event], path: Path) -> Product:
    if event != "start_map":
        raise CatalogFormatError("expected object", path)

    draft = _ProductDraft()
    while True:
        _, event, key = _next_event(events, path)
        if event == "end_map":
            return draft.build()
        _, event, value = _next_event(events, path)

        if key == "id":
            draft.id = _as_int(value, key, path)
        elif key in ("name", "description"):
            setattr(draft, key, _as_text(value, key, path))
        elif key == "price":
            draft.price = _parse_price(value, path)
        elif key == "amount":
            draft.amount = _as_int(value, key, path)
        elif key == "measure":
            draft.measure = _parse_measure(value, path)
        else:
            _skip_value(event, events, path)


def _skip_value(event: str, events: Iterator[Event], path: Path) -> None:
    depth = 0
    while True:
        if event in ("start_map", "start_array"):
            depth += 1
        elif event in ("end_map", "end_array"):
            depth -= 1
        if depth == 0:
            return
        _, event, _ = _next_event(events, path)


def _as_text(value: Any, field: str, path: Path) -> str:
    if not isinstance(value, str):
        raise CatalogFormatError(f"field '{field}' must be a string, found {value!r}", path)
    return value


def _as_int(value: Any, field: str, path: Path) -> int:
    if isinstance(value, bool):
        raise CatalogFormatError(f"field '{field}' must be an integer, found {value!r}", path)
    if isinstance(value, int):
        return value
    if isinstance(value, Decimal) and value == value.to_integral_value():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
    raise CatalogFormatError(f"field '{field}' must be an integer, found {value!r}", path)


def _parse_price(value: Any, path: Path) -> float:
    text = _as_text(value, "price", path)
    if len(text) < 2:
        raise CatalogFormatError(f"price {text!r} needs a currency symbol and an amount", path)
    try:
        return float(text[1:])
    except ValueError:
        raise CatalogFormatError(f"price {text!r} is not numeric", path) from None


def _parse_measure(value: Any, path: Path) -> Optional[Measure]:
    # JSON null is read as absent too; files written here always use "null".
    if value is None:
        return None
    text = _as_text(value, "measure", path)
    if text.casefold() == NULL_MEASURE:
        return None
    try:
        return Measure[text]
    except KeyError:
        raise CatalogFormatError(f"unknown measure {text!r}", path) from None


def _find_closing_bracket(handle: IO[bytes], path: Path) -> Tuple[int, bytes]:
    """Return the offset of the final ``]`` and the significant byte before it."""
    handle.seek(0, os.SEEK_END)
    position = handle.tell()
    closing: Optional[int] = None
    while position > 0:
        step = min(_BLOCK_SIZE, position)
        position -= step
        handle.seek(position)
        block = handle.read(step)
        for index in range(len(block) - 1, -1, -1):
            byte = block[index:index + 1]
            if byte in _WHITESPACE:
                continue
            if closing is None:
                if byte != b"]":
                    raise CatalogFormatError("expected array terminated by ']'", path)
                closing = position + index
                continue
            return closing, byte
    raise CatalogFormatError("expected array", path)


def _copy_bytes(source: IO[bytes], target: IO[bytes], count: int) -> None:
    remaining = count
    while remaining:
        chunk = source.read(min(_BLOCK_SIZE, remaining))
        if not chunk:
            raise OSError(f"unexpected end of file while copying {source.name}")
        target.write(chunk)
        remaining -= len(chunk)


@contextmanager
def _staged_replacement(path: Path) -> Iterator[IO[bytes]]:
    """Yield a temporary file that is moved over ``path`` once the block succeeds."""
    handle = tempfile.NamedTemporaryFile(
        "wb", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
    )
    try:
        with handle:
            yield handle
            handle.flush()
            os.fsync(handle.fileno())
        shutil.copymode(path, handle.name)
        os.replace(handle.name, path)
    except BaseException:
        try:
            os.unlink(handle.name)
        except FileNotFoundError:
            pass
        raise
