import logging
from contextlib import contextmanager

from sqlalchemy.exc import DataError, SQLAlchemyError
from sqlalchemy.orm import Session

from inventory.exceptions import StoreError, ValidationError

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(db: Session, message: str):
    """
    Translate SQLAlchemy failures into inventory exceptions.

    Values the database rejects as out of range (DataError) become a
    ValidationError; anything else becomes StoreError.

    The session is rolled back and the original error logged; callers only
    ever see a short message.

    Example:
        with store_errors(self.db, "Error al crear categoría"):
            self.db.add(category)
            self.db.commit()
    """
    try:
        yield
    except DataError as e:
        db.rollback()
        logger.warning(f"{message}: value rejected by the database: {e}")
        raise ValidationError("Valor fuera de rango") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"{message}: {e}")
        raise StoreError(message) from e
