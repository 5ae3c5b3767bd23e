"""In-memory helpers for product lists."""
from __future__ import annotations

import random
from typing import List, Optional, TypeVar

T = TypeVar("T")


def shuffle(items: List[T], rng: Optional[random.Random] = None) -> None:
    """Shuffle ``items`` in place with a Fisher-Yates pass.

    Pass a seeded ``random.Random`` for a reproducible order; the module-level
    generator is used otherwise.
    """
    source = rng if rng is not None else random
    for i in range(len(items) - 1, 0, -1):
        j = source.randrange(i + 1)
        items[i], items[j] = items[j], items[i]
