from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone

from ..errors import ValidationError
from .models import Feedback, FeedbackCreate, FeedbackSort

DEFAULT_PAGE_SIZE = 6


class FeedbackStore:
    """In-memory feedback records, newest appended last."""

    def __init__(self) -> None:
        self._feedback: list[Feedback] = []
        self._lock = threading.Lock()

    def add(self, data: FeedbackCreate) -> Feedback:
        if not data.rate or data.rate < 1 or not (data.feedback or "").strip():
            raise ValidationError("Rating and feedback are required.")
        entry = Feedback(
            id=uuid.uuid4().hex[:24],
            name=(data.name or "").strip() or "Anonymous",
            rate=data.rate,
            feedback=data.feedback,
            exp=data.exp or "",
            image=data.image or "",
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._feedback.append(entry)
        return entry

    def list_page(
        self,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        sort: FeedbackSort = FeedbackSort.newest,
    ) -> list[Feedback]:
        # Newest first; equal timestamps keep the later insert first
        with self._lock:
            ordered = list(reversed(self._feedback))
        ordered.sort(key=lambda f: f.created_at, reverse=True)
        if sort == FeedbackSort.stars_desc:
            ordered.sort(key=lambda f: f.rate, reverse=True)
        elif sort == FeedbackSort.stars_asc:
            ordered.sort(key=lambda f: f.rate)
        start = (page - 1) * limit
        return ordered[start:start + limit]

    def count(self) -> int:
        return len(self._feedback)


_default_store: FeedbackStore | None = None
_default_lock = threading.Lock()


def get_feedback_store() -> FeedbackStore:
    global _default_store
    with _default_lock:
        if _default_store is None:
            _default_store = FeedbackStore()
    return _default_store
