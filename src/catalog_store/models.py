"""Catalog entity model."""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_serializer

CURRENCY_SYMBOL = "$"
NULL_MEASURE = "null"


class Measure(str, Enum):
    """Unit-of-sale size tag."""

    XS = "XS"
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"


class Product(BaseModel):
    """A single catalog entry.

    Instances are immutable. ``name`` and ``description`` are compared
    case-insensitively; every other field must match exactly.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    description: str
    price: float
    amount: int
    measure: Optional[Measure] = None

    def clone(self) -> "Product":
        return self.model_copy()

    def describe(self) -> str:
        measure = self.measure.value if self.measure is not None else NULL_MEASURE
        return f"{self.id} | {self.name} | {self.description} | {self.price} | {self.amount} | {measure}"

    def to_record(self) -> Dict[str, Any]:
        """Return the mapping stored in catalog files."""
        return self.model_dump()

    @field_serializer("price")
    def _serialize_price(self, price: float) -> str:
        return f"{CURRENCY_SYMBOL}{price!r}"

    @field_serializer("measure")
    def _serialize_measure(self, measure: Optional[Measure]) -> str:
        return measure.value if measure is not None else NULL_MEASURE

    def _equality_key(self) -> tuple:
        return (
            self.id,
            self.name.casefold(),
            self.description.casefold(),
            self.price,
            self.amount,
            self.measure,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Product):
            return NotImplemented
        return self._equality_key() == other._equality_key()

    def __hash__(self) -> int:
        return hash(self._equality_key())
