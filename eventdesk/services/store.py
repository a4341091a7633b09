from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from eventdesk.services.error_codes import ErrorCode
from eventdesk.services.exceptions import TransientError


@contextmanager
def store_errors(db: Session) -> Iterator[None]:
    """Translate driver timeouts and lost connections into TransientError."""
    try:
        yield
    except (OperationalError, PoolTimeoutError) as exc:
        db.rollback()
        raise TransientError(
            ErrorCode.STORE_UNAVAILABLE.value, "storage temporarily unavailable"
        ) from exc
