"""
Guest search quota.

Unauthenticated callers get a small number of searches per day. The count
is kept client-side in a cookie signed with ``itsdangerous``; the signature
timestamp enforces the 24 hour window. A client that drops the cookie
starts over, so this is a soft quota, not an access control.
"""
from __future__ import annotations

from fastapi import Request, Response
from itsdangerous import BadSignature, TimestampSigner

from ..config import DEFAULT_APP_CONFIG, AppConfig
from ..errors import QuotaExceededError

GUEST_COOKIE = "guest_search_count"
_SALT = "guest-search-count"


def _signer(config: AppConfig) -> TimestampSigner:
    return TimestampSigner(config.session_secret, salt=_SALT)


def read_guest_count(request: Request, config: AppConfig = DEFAULT_APP_CONFIG) -> int:
    """Current guest count; missing, tampered or expired cookies read as 0."""
    raw = request.cookies.get(GUEST_COOKIE)
    if not raw:
        return 0
    try:
        value = _signer(config).unsign(raw, max_age=config.guest_cookie_max_age)
        return max(0, int(value.decode()))
    except (BadSignature, ValueError):
        return 0


def consume_guest_search(request: Request, config: AppConfig = DEFAULT_APP_CONFIG) -> int:
    """
    Check the quota and return the incremented count to re-issue.

    Raises ``QuotaExceededError`` once the limit has been reached.
    """
    count = read_guest_count(request, config)
    if count >= config.guest_search_limit:
        raise QuotaExceededError(
            "Guest search limit reached. Please Sign in or Sign up to continue."
        )
    return count + 1


def set_guest_cookie(
    response: Response,
    count: int,
    config: AppConfig = DEFAULT_APP_CONFIG,
) -> None:
    signed = _signer(config).sign(str(count)).decode()
    response.set_cookie(
        GUEST_COOKIE,
        signed,
        max_age=config.guest_cookie_max_age,
        httponly=True,
        samesite="lax",
        secure=config.cookie_secure,
    )
