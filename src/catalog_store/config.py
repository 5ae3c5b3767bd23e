"""Runtime settings read from the environment (and an optional .env file)."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

DEFAULT_CATALOG_PATH = Path("catalog") / "products.json"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    catalog_path: Path = DEFAULT_CATALOG_PATH
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        if environ is None:
            # Variables already set in the process win over the .env file
            load_dotenv()
            environ = os.environ
        catalog_path = environ.get("CATALOG_PATH") or DEFAULT_CATALOG_PATH
        log_level = environ.get("CATALOG_LOG_LEVEL") or DEFAULT_LOG_LEVEL
        return cls(catalog_path=Path(catalog_path), log_level=log_level.strip().upper())
