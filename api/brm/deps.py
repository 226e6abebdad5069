import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException

from .errors import ConflictError, IncompleteSubmissionError, NotFoundError

logger = logging.getLogger(__name__)

PASSTHROUGH_ERRORS = (HTTPException, NotFoundError, ConflictError, IncompleteSubmissionError)


@contextmanager
def failure_message(message: str) -> Iterator[None]:
    """Report anything other than a domain error as a 500 with ``message``."""
    try:
        yield
    except PASSTHROUGH_ERRORS:
        raise
    except Exception as exc:
        logger.exception("[API] %s", message)
        raise HTTPException(status_code=500, detail=message) from exc
