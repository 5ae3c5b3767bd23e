"""Exceptions raised by the catalog store."""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class CatalogFormatError(ValueError):
    """Raised when a catalog file does not have the expected structure."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.message = message
        self.path = path
        super().__init__(f"{message} ({path})" if path is not None else message)
