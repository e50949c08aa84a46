from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


def _split_ids(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class AppConfig:
    session_secret: str = os.getenv("SESSION_SECRET", "recipe-share-secret-change-in-production")
    guest_search_limit: int = 3
    guest_cookie_max_age: int = 24 * 60 * 60
    cookie_secure: bool = os.getenv("COOKIE_SECURE", "false").lower() == "true"
    featured_recipe_ids: tuple[str, ...] = _split_ids(
        os.getenv("FEATURED_RECIPE_IDS", "r001,r004,r009")
    )
    seed_path: Path = Path(__file__).resolve().parent / "data" / "recipes.csv"


DEFAULT_APP_CONFIG = AppConfig()
