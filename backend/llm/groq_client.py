from __future__ import annotations

import json
import logging
import re
import threading

from groq import Groq

from ..errors import RankingError
from ..recipes.models import Recipe
from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)

# Greedy, so a nested or multi-line array is taken whole
_JSON_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)


def _build_prompt(candidates: list[Recipe], tokens: list[str]) -> str:
    recipe_data = [
        {
            "id": r.id,
            "title": r.title,
            "ingredients": r.ingredients,
            "category": r.category.value,
        }
        for r in candidates
    ]
    return (
        f'The user searched for: "{", ".join(tokens)}".\n'
        "Rank the recipes below by ingredient match quality, best match first.\n"
        "Return ONLY a valid JSON array of recipe IDs, for example "
        '["id1", "id2"], and nothing else.\n\n'
        f"{json.dumps(recipe_data, indent=2)}"
    )


def extract_ranked_ids(content: str) -> list[str]:
    """Pull the first ``[...]`` span out of free-form model output."""
    match = _JSON_ARRAY_RE.search(content.strip())
    if not match:
        raise RankingError("No JSON array in ranking response")
    try:
        parsed = json.loads(match.group(0))
    except (ValueError, RecursionError) as exc:
        raise RankingError("Ranking response is not valid JSON") from exc
    return [str(rid) for rid in parsed]


class GroqRanker:
    """
    Re-rank search candidates with a single Groq chat completion.

    Any failure (disabled, missing key, API error, timeout, unparsable
    output) raises ``RankingError`` so the caller keeps the local order.
    """

    def __init__(self, config: LLMConfig = DEFAULT_LLM_CONFIG, client: Groq | None = None) -> None:
        self.config = config
        self._client = client

    def _get_client(self) -> Groq:
        if self._client is None:
            self._client = Groq(
                api_key=self.config.api_key,
                timeout=self.config.timeout,
                max_retries=0,
            )
        return self._client

    def rank(self, candidates: list[Recipe], tokens: list[str]) -> list[str]:
        if not self.config.enabled or not self.config.api_key:
            raise RankingError("AI ranking is disabled")
        if not candidates:
            raise RankingError("No candidates to rank")

        try:
            response = self._get_client().chat.completions.create(
                model=self.config.model,
                messages=[{"role": "user", "content": _build_prompt(candidates, tokens)}],
                max_tokens=self.config.max_tokens,
                temperature=0,
            )
            content = response.choices[0].message.content or ""
        except Exception as exc:
            raise RankingError("Groq ranking call failed") from exc

        ranked = extract_ranked_ids(content)
        logger.debug("Groq ranked %d of %d candidates", len(ranked), len(candidates))
        return ranked


_default_ranker: GroqRanker | None = None
_default_lock = threading.Lock()


def get_ranker() -> GroqRanker:
    global _default_ranker
    with _default_lock:
        if _default_ranker is None:
            _default_ranker = GroqRanker()
    return _default_ranker
