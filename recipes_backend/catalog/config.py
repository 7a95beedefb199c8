from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class CatalogConfig:
    """
    Where the recipe catalog is loaded from.
    """

    data_dir: Path = Path(os.getenv("RECIPES_DATA_DIR", str(_DEFAULT_DATA_DIR)))
    recipes_filename: str = "recipes.csv"
    ratings_filename: str = "ratings.csv"

    @property
    def recipes_path(self) -> Path:
        return self.data_dir / self.recipes_filename

    @property
    def ratings_path(self) -> Path:
        return self.data_dir / self.ratings_filename


DEFAULT_CATALOG_CONFIG = CatalogConfig()
