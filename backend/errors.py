from __future__ import annotations

from fastapi.responses import JSONResponse


class AppError(Exception):
    """Base error rendered as ``{success, status_code, message}``."""

    status_code = 500

    def __init__(self, message: str = "Internal Server Error") -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400


class QuotaExceededError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class RankingError(AppError):
    """Soft failure of the remote ranker. Never shown to the client."""


def error_response(exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "status_code": exc.status_code,
            "message": exc.message,
        },
    )
