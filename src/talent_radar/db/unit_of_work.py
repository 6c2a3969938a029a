"""Transaction boundary shared by the service layer."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from talent_radar.core.exceptions import StorageError, TalentRadarError

logger = logging.getLogger(__name__)


@contextmanager
def unit_of_work(
    db: Session,
    operation: str,
    on_conflict: Callable[[], TalentRadarError] | None = None,
) -> Iterator[Session]:
    """Run the enclosed block as one transaction and commit it.

    Domain errors raised inside the block roll the transaction back and
    propagate unchanged. Database errors roll back and surface as
    ``StorageError``; when ``on_conflict`` is given, an ``IntegrityError``
    is reported through the exception it builds instead.

    Args:
        db: Session owning the transaction.
        operation: Short label used in logs and in the storage error message.
        on_conflict: Factory for the error reported on a unique-key clash.
    """
    try:
        yield db
        db.commit()
    except TalentRadarError:
        db.rollback()
        raise
    except IntegrityError as exc:
        db.rollback()
        if on_conflict is not None:
            logger.warning("Conflicting write during %s: %s", operation, exc.orig)
            raise on_conflict() from exc
        logger.error("Integrity error during %s", operation, exc_info=True)
        raise StorageError(operation, exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Database error during %s", operation, exc_info=True)
        raise StorageError(operation, exc) from exc
