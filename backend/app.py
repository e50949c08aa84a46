from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.middleware.sessions import SessionMiddleware

from .auth.guest import consume_guest_search, set_guest_cookie
from .auth.session import (
    end_session,
    get_current_user,
    require_user,
    start_session,
)
from .auth.users import authenticate, register
from .config import DEFAULT_APP_CONFIG
from .errors import AppError, NotFoundError, error_response
from .feedback.models import (
    FeedbackCreate,
    FeedbackCreatedResponse,
    FeedbackListResponse,
    FeedbackSort,
)
from .feedback.store import DEFAULT_PAGE_SIZE, FeedbackStore, get_feedback_store
from .llm.groq_client import get_ranker
from .recipes.models import (
    Category,
    FeaturedRecipesResponse,
    RecipeCreate,
    RecipeListResponse,
    RecipeMutationResponse,
    RecipeResponse,
    RecipeUpdate,
)
from .recipes.repository import RecipeRepository, get_recipe_repository
from .recipes.search import Ranker, normalize_query, search_tokens

logger = logging.getLogger(__name__)

app = FastAPI(title="Recipe Share API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=DEFAULT_APP_CONFIG.session_secret,
    https_only=DEFAULT_APP_CONFIG.cookie_secure,
)


@app.exception_handler(AppError)
async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    return error_response(exc)


class Credentials(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    username: str
    password: str


def _positive_int(raw: str | None, default: int) -> int:
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        return default
    return value if value > 0 else default


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/signup", status_code=201)
def signup(body: Credentials, request: Request) -> dict:
    user = register(body.username, body.password)
    start_session(request, user)
    return {"status": "ok", "user": user}


@app.post("/auth/signin")
def signin(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    start_session(request, user)
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    end_session(request)
    return {"status": "logged_out"}


@app.get("/auth/check-session")
def check_session(user: dict = Depends(require_user)) -> dict:
    return {"authenticated": True, "user": user}


# ── Recipe endpoints ─────────────────────────────────────────────────────


@app.post("/recipe/add", status_code=201, response_model=RecipeMutationResponse)
def add_recipe(
    body: RecipeCreate,
    user: dict = Depends(require_user),
    repository: RecipeRepository = Depends(get_recipe_repository),
) -> RecipeMutationResponse:
    recipe = repository.add(body)
    logger.info("Recipe %s created by %s", recipe.id, user.get("username"))
    return RecipeMutationResponse(message="Recipe created", recipe=recipe)


@app.get("/recipe/search")
def search(
    request: Request,
    ingredient: str | None = None,
    repository: RecipeRepository = Depends(get_recipe_repository),
    ranker: Ranker = Depends(get_ranker),
) -> JSONResponse:
    # 1. Validate before touching quota or storage
    tokens = normalize_query(ingredient)

    # 2. Guests spend one search from the cookie quota
    guest_count = None
    if get_current_user(request) is None:
        guest_count = consume_guest_search(request)

    # 3. Retrieve, score, rank
    try:
        results = search_tokens(tokens, repository, ranker)
        response = JSONResponse({"results": jsonable_encoder(results)})
    except AppError as exc:
        response = error_response(exc)
    except Exception:
        logger.exception("Recipe search failed for %r", tokens)
        response = error_response(AppError("AI search failed"))

    # 4. Re-issue the guest counter whatever the outcome
    if guest_count is not None:
        set_guest_cookie(response, guest_count)
    return response


@app.get("/recipe/category", response_model=RecipeListResponse)
def recipes_by_category(
    category: str | None = None,
    repository: RecipeRepository = Depends(get_recipe_repository),
) -> RecipeListResponse:
    if not category or category == "All":
        return RecipeListResponse(results=repository.list_all())
    try:
        wanted = Category(category)
    except ValueError:
        return RecipeListResponse(results=[])
    return RecipeListResponse(results=repository.list_by_category(wanted))


@app.get("/recipe/all", response_model=RecipeListResponse)
def all_recipes(
    repository: RecipeRepository = Depends(get_recipe_repository),
) -> RecipeListResponse:
    return RecipeListResponse(results=repository.list_all())


@app.get("/recipe/featured", response_model=FeaturedRecipesResponse)
def featured_recipes(
    repository: RecipeRepository = Depends(get_recipe_repository),
) -> FeaturedRecipesResponse:
    recipes = repository.list_by_ids(DEFAULT_APP_CONFIG.featured_recipe_ids)
    return FeaturedRecipesResponse(results=recipes)


@app.get("/recipe/{recipe_id}", response_model=RecipeResponse)
def get_recipe(
    recipe_id: str,
    repository: RecipeRepository = Depends(get_recipe_repository),
) -> RecipeResponse:
    recipe = repository.get(recipe_id)
    if recipe is None:
        raise NotFoundError("Recipe not found")
    return RecipeResponse(results=recipe)


@app.put("/recipe/{recipe_id}", response_model=RecipeMutationResponse)
def edit_recipe(
    recipe_id: str,
    body: RecipeUpdate,
    user: dict = Depends(require_user),
    repository: RecipeRepository = Depends(get_recipe_repository),
) -> RecipeMutationResponse:
    recipe = repository.update(recipe_id, body)
    if recipe is None:
        raise NotFoundError("Recipe not found")
    logger.info("Recipe %s updated by %s", recipe_id, user.get("username"))
    return RecipeMutationResponse(message="Recipe updated successfully", recipe=recipe)


# ── Feedback endpoints ───────────────────────────────────────────────────


@app.post("/feedback/create", status_code=201, response_model=FeedbackCreatedResponse)
def create_feedback(
    body: FeedbackCreate,
    store: FeedbackStore = Depends(get_feedback_store),
) -> FeedbackCreatedResponse:
    entry = store.add(body)
    logger.info("Feedback %s recorded (%d stars)", entry.id, entry.rate)
    return FeedbackCreatedResponse(message="Feedback submitted successfully", data=entry)


@app.get("/feedback/all", response_model=FeedbackListResponse)
def all_feedback(
    page: str | None = None,
    limit: str | None = None,
    sort: str | None = None,
    store: FeedbackStore = Depends(get_feedback_store),
) -> FeedbackListResponse:
    try:
        order = FeedbackSort(sort) if sort else FeedbackSort.newest
    except ValueError:
        order = FeedbackSort.newest
    results = store.list_page(
        page=_positive_int(page, 1),
        limit=_positive_int(limit, DEFAULT_PAGE_SIZE),
        sort=order,
    )
    return FeedbackListResponse(results=results)
