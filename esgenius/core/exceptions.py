"""
Domain errors and global exception handlers — prevents stack-trace leakage to clients.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


# ── Domain errors ───────────────────────────────────────────────────
class TaxonomyError(ValueError):
    """Invalid taxonomy write (dangling parent or cycle)."""


class TaxonomyCycleError(TaxonomyError):
    pass


class UnknownReportTypeError(ValueError):
    def __init__(self, report_type: str, available: list[str]):
        super().__init__(
            f"Unknown report type '{report_type}'. Available: {', '.join(available)}"
        )
        self.report_type = report_type


# ── Handlers ────────────────────────────────────────────────────────
async def _http_exception_handler(_request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "success": False},
        headers=getattr(exc, "headers", None),
    )


async def _taxonomy_error_handler(_request: Request, exc: TaxonomyError) -> JSONResponse:
    logger.warning("Rejected taxonomy write: %s", exc)
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "success": False},
    )


async def _report_type_error_handler(
    _request: Request, exc: UnknownReportTypeError
) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "success": False},
    )


async def _integrity_error_handler(_request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("Database integrity error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=409,
        content={"detail": "Database constraint violation", "success": False},
    )


async def _sqlalchemy_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal database error", "success": False},
    )


async def _generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "success": False},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the FastAPI app."""
    app.add_exception_handler(HTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(TaxonomyError, _taxonomy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(UnknownReportTypeError, _report_type_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
