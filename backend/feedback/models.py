from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class FeedbackSort(str, Enum):
    newest = "newest"
    stars_desc = "stars_desc"
    stars_asc = "stars_asc"


class FeedbackCreate(BaseModel):
    name: str | None = None
    rate: int | None = Field(default=None, le=5)
    feedback: str | None = None
    exp: str = ""
    image: str = Field(default="", description="Public URL of an already hosted image")


class Feedback(BaseModel):
    id: str
    name: str
    rate: int
    feedback: str
    exp: str
    image: str
    created_at: datetime


class FeedbackCreatedResponse(BaseModel):
    success: bool = True
    message: str
    data: Feedback


class FeedbackListResponse(BaseModel):
    results: list[Feedback]
