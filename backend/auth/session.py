from __future__ import annotations

from fastapi import HTTPException, Request

# Session data lives in the cookie signed by SessionMiddleware
SESSION_USER_KEY = "user"


def start_session(request: Request, user: dict) -> None:
    request.session[SESSION_USER_KEY] = user


def end_session(request: Request) -> None:
    request.session.clear()


def get_current_user(request: Request) -> dict | None:
    """Return the signed-in user, or ``None`` for guests and bad cookies."""
    return request.session.get(SESSION_USER_KEY)


def require_user(request: Request) -> dict:
    user = get_current_user(request)
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user
