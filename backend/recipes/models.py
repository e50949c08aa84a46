from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Category(str, Enum):
    breakfast = "Breakfast"
    lunch = "Lunch"
    dinner = "Dinner"
    dessert = "Dessert"


class Difficulty(str, Enum):
    easy = "Easy"
    medium = "Medium"
    hard = "Hard"


class Recipe(BaseModel):
    id: str
    title: str
    image: str
    ingredients: list[str]
    steps: list[str]
    category: Category
    difficulty: Difficulty = Difficulty.easy
    description: str = ""
    estimated_time: str = ""
    created_at: datetime
    updated_at: datetime


class RecipeCreate(BaseModel):
    title: str = Field(..., min_length=1)
    image: str = Field(..., min_length=1, description="Public URL of an already hosted image")
    ingredients: list[str] = Field(..., min_length=1)
    steps: list[str] = Field(..., min_length=1)
    category: Category
    difficulty: Difficulty = Difficulty.easy
    description: str = ""
    estimated_time: str = ""


class RecipeUpdate(BaseModel):
    """Partial update; empty or missing fields keep the stored value."""

    title: str | None = None
    image: str | None = None
    ingredients: list[str] | None = None
    steps: list[str] | None = None
    category: Category | None = None
    difficulty: Difficulty | None = None
    description: str | None = None
    estimated_time: str | None = None


class RecipeListResponse(BaseModel):
    results: list[Recipe]


class RecipeResponse(BaseModel):
    results: Recipe


class FeaturedRecipesResponse(BaseModel):
    success: bool = True
    results: list[Recipe]


class RecipeMutationResponse(BaseModel):
    message: str
    recipe: Recipe
