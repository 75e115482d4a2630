import logging
from sqlalchemy.exc import SQLAlchemyError
from models import db
from core.errors import PersistenceError

logger = logging.getLogger(__name__)

def save(*records):
    """Guarda los registros en un único commit; cada llamada es independiente."""
    try:
        db.session.add_all(records)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error saving {[type(r).__name__ for r in records]}: {e}")
        raise PersistenceError(str(e)) from e
    return records[0] if len(records) == 1 else records

def remove(*records):
    try:
        for record in records:
            db.session.delete(record)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error deleting {[type(r).__name__ for r in records]}: {e}")
        raise PersistenceError(str(e)) from e

def commit():
    """Confirma cambios hechos sobre registros ya cargados en la sesión."""
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error committing changes: {e}")
        raise PersistenceError(str(e)) from e
