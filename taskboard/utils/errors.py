import logging
from contextlib import contextmanager

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "Email already exists"


@contextmanager
def query_guard(message: str, duplicate_message: str | None = None):
    """
    Map database failures inside the block to HTTP errors.

    Query errors become a 500 carrying only ``message``; the driver detail is
    logged. When ``duplicate_message`` is given, constraint violations are
    reported as a 400 with that text instead.
    """
    try:
        yield
    except IntegrityError as exc:
        if duplicate_message is None:
            logger.error("%s: %s", message, exc.orig)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message) from exc
        logger.info("Constraint violation (%s): %s", duplicate_message, exc.orig)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=duplicate_message) from exc
    except SQLAlchemyError as exc:
        logger.error("%s: %s", message, exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message) from exc
