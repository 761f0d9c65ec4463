"""
Transaction boundary shared by the business managers.

Everything written inside ``unit_of_work`` commits together or not at all.
Business errors roll back and propagate unchanged; driver errors roll back
and surface as StorageError; anything else rolls back and propagates.
"""

from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from fieldservice import db
from fieldservice.buisness.errors import FieldServiceError, StorageError
from fieldservice.utils.logger import get_logger

logger = get_logger("fieldservice.buisness.core.unit_of_work")


@contextmanager
def unit_of_work(action: str):
    """
    Args:
        action: Short description used in the error log, e.g. "debit part 3"
    """
    try:
        yield db.session
        db.session.commit()
    except FieldServiceError:
        db.session.rollback()
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Storage failure during {action}: {e}", exc_info=True)
        raise StorageError() from e
    except Exception:
        db.session.rollback()
        logger.error(f"Unexpected failure during {action}, transaction rolled back", exc_info=True)
        raise
