from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from ..errors import NotFoundError, RankingError, ValidationError
from .models import Recipe
from .repository import RecipeRepository

logger = logging.getLogger(__name__)

TOP_K = 15
MISSING_PENALTY = 0.5


class Ranker(Protocol):
    def rank(self, candidates: list[Recipe], tokens: list[str]) -> list[str]:
        """Return recipe ids best-to-worst, or raise ``RankingError``."""
        ...


@dataclass(frozen=True)
class ScoredCandidate:
    recipe: Recipe
    match_count: int
    missing_count: int
    score: float


def normalize_query(raw: str | None) -> list[str]:
    """Split a comma-separated query into lower-cased, trimmed, non-empty tokens."""
    if raw is None or not raw.strip():
        raise ValidationError("Ingredient query missing")
    tokens = [part.strip().lower() for part in raw.split(",")]
    return [t for t in tokens if t]


def score_recipe(tokens: list[str], recipe: Recipe) -> ScoredCandidate:
    stored = [ing.lower() for ing in recipe.ingredients]
    match_count = sum(1 for t in tokens if any(t in ing for ing in stored))
    # Penalizes recipe size, not unmatched query tokens
    missing_count = len(stored) - match_count
    score = match_count - MISSING_PENALTY * missing_count
    return ScoredCandidate(recipe, match_count, missing_count, score)


def score_candidates(
    tokens: list[str],
    recipes: list[Recipe],
    limit: int = TOP_K,
) -> list[ScoredCandidate]:
    """Score every candidate and keep the best ``limit`` (stable on ties)."""
    scored = [score_recipe(tokens, r) for r in recipes]
    scored.sort(key=lambda c: c.score, reverse=True)
    return scored[:limit]


def assemble_results(top: list[Recipe], ranked_ids: list[str]) -> list[Recipe]:
    """Ranker order first, then whatever it left out in local order."""
    by_id = {r.id: r for r in top}
    ordered: list[Recipe] = []
    seen: set[str] = set()
    for rid in ranked_ids:
        rid = str(rid)
        if rid in by_id and rid not in seen:
            ordered.append(by_id[rid])
            seen.add(rid)
    ordered.extend(r for r in top if r.id not in seen)
    return ordered


def search_recipes(
    raw_query: str | None,
    repository: RecipeRepository,
    ranker: Ranker,
) -> list[Recipe]:
    tokens = normalize_query(raw_query)
    return search_tokens(tokens, repository, ranker)


def search_tokens(
    tokens: list[str],
    repository: RecipeRepository,
    ranker: Ranker,
) -> list[Recipe]:
    matches = repository.find_by_ingredient_substring(tokens)
    if not matches:
        raise NotFoundError("No recipes found with those ingredients")

    top = [c.recipe for c in score_candidates(tokens, matches)]

    try:
        ranked_ids = ranker.rank(top, tokens)
    except RankingError:
        logger.warning("AI ranking failed, using local ranking only", exc_info=True)
        return top
    except Exception:
        logger.exception("Ranker raised unexpectedly, using local ranking only")
        return top

    return assemble_results(top, ranked_ids)
