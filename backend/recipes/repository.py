from __future__ import annotations

import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

import pandas as pd

from ..config import DEFAULT_APP_CONFIG
from .models import Category, Recipe, RecipeCreate, RecipeUpdate

# Multi-valued CSV cells are pipe separated
_LIST_SEP = "|"


class RecipeRepository(ABC):
    """Storage contract for recipe records."""

    @abstractmethod
    def add(self, data: RecipeCreate) -> Recipe: ...

    @abstractmethod
    def get(self, recipe_id: str) -> Recipe | None: ...

    @abstractmethod
    def list_all(self) -> list[Recipe]: ...

    @abstractmethod
    def list_by_category(self, category: Category | None) -> list[Recipe]: ...

    @abstractmethod
    def list_by_ids(self, recipe_ids: Iterable[str]) -> list[Recipe]: ...

    @abstractmethod
    def update(self, recipe_id: str, changes: RecipeUpdate) -> Recipe | None: ...

    @abstractmethod
    def find_by_ingredient_substring(self, tokens: list[str]) -> list[Recipe]:
        """
        Return every recipe with at least one stored ingredient containing
        at least one token (case-insensitive substring).
        """


def _newest_first(recipes: Iterable[Recipe]) -> list[Recipe]:
    return sorted(recipes, key=lambda r: r.created_at, reverse=True)


class InMemoryRecipeRepository(RecipeRepository):
    def __init__(self, recipes: Iterable[Recipe] = ()) -> None:
        self._recipes: dict[str, Recipe] = {r.id: r for r in recipes}
        self._lock = threading.Lock()

    def add(self, data: RecipeCreate) -> Recipe:
        now = datetime.now(timezone.utc)
        recipe = Recipe(
            id=uuid.uuid4().hex[:24],
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )
        with self._lock:
            self._recipes[recipe.id] = recipe
        return recipe

    def _snapshot(self) -> list[Recipe]:
        with self._lock:
            return list(self._recipes.values())

    def get(self, recipe_id: str) -> Recipe | None:
        with self._lock:
            return self._recipes.get(recipe_id)

    def list_all(self) -> list[Recipe]:
        return _newest_first(self._snapshot())

    def list_by_category(self, category: Category | None) -> list[Recipe]:
        if category is None:
            return self.list_all()
        return _newest_first(r for r in self._snapshot() if r.category == category)

    def list_by_ids(self, recipe_ids: Iterable[str]) -> list[Recipe]:
        wanted = set(recipe_ids)
        return [r for r in self._snapshot() if r.id in wanted]

    def update(self, recipe_id: str, changes: RecipeUpdate) -> Recipe | None:
        with self._lock:
            recipe = self._recipes.get(recipe_id)
            if recipe is None:
                return None
            # Empty strings and lists keep the stored value
            values = {k: v for k, v in changes.model_dump().items() if v not in (None, "", [])}
            values["updated_at"] = datetime.now(timezone.utc)
            updated = recipe.model_copy(update=values)
            self._recipes[recipe_id] = updated
        return updated

    def find_by_ingredient_substring(self, tokens: list[str]) -> list[Recipe]:
        needles = [t.lower() for t in tokens if t]
        if not needles:
            return []
        matches: list[Recipe] = []
        for recipe in self._snapshot():
            stored = [ing.lower() for ing in recipe.ingredients]
            if any(needle in ing for needle in needles for ing in stored):
                matches.append(recipe)
        return matches


def _split_cell(value: object) -> list[str]:
    if pd.isna(value):
        return []
    return [part.strip() for part in str(value).split(_LIST_SEP) if part.strip()]


def load_seed_recipes(path: Path) -> list[Recipe]:
    """Read the bundled seed catalog into ``Recipe`` records."""
    df = pd.read_csv(path, dtype=str).fillna("")
    df["created_at"] = pd.to_datetime(df["created_at"], utc=True)

    recipes: list[Recipe] = []
    for _, row in df.iterrows():
        created = row["created_at"].to_pydatetime()
        recipes.append(Recipe(
            id=row["id"],
            title=row["title"],
            image=row["image"],
            ingredients=_split_cell(row["ingredients"]),
            steps=_split_cell(row["steps"]),
            category=row["category"],
            difficulty=row["difficulty"] or "Easy",
            description=row["description"],
            estimated_time=row["estimated_time"],
            created_at=created,
            updated_at=created,
        ))
    return recipes


_default_repository: InMemoryRecipeRepository | None = None
_default_lock = threading.Lock()


def get_recipe_repository() -> RecipeRepository:
    """Return the process-wide repository, seeding it on first call."""
    global _default_repository
    with _default_lock:
        if _default_repository is None:
            _default_repository = InMemoryRecipeRepository(
                load_seed_recipes(DEFAULT_APP_CONFIG.seed_path)
            )
    return _default_repository
