"""
Translation of domain errors and database failures into HTTP responses.

Routers wrap every write in ``write_guard`` so a failed commit is rolled
back, logged once, and reported as 503 without being retried.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from facility_ops.core.exceptions import (
    DeliveryError,
    DomainError,
    HandoverAlreadySentError,
    HandoverValidationError,
    InvalidTransitionError,
    NotFoundError,
    PhotoTooLargeError,
    StorageError,
)

logger = logging.getLogger(__name__)

# Most specific first: PhotoTooLargeError is also a StorageError
_STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidTransitionError, status.HTTP_409_CONFLICT),
    (HandoverAlreadySentError, status.HTTP_409_CONFLICT),
    (HandoverValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (PhotoTooLargeError, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE),
    (StorageError, status.HTTP_502_BAD_GATEWAY),
    (DeliveryError, status.HTTP_502_BAD_GATEWAY),
]


def to_http(exc: DomainError) -> HTTPException:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@asynccontextmanager
async def write_guard(db: AsyncSession, action: str) -> AsyncIterator[None]:
    try:
        yield
    except DomainError as exc:
        raise to_http(exc) from exc
    except SQLAlchemyError as exc:
        logger.exception("Database error while %s", action)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Data store is temporarily unavailable, please try again",
        ) from exc
