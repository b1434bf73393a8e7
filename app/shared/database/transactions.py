# app/shared/database/transactions.py
from contextlib import contextmanager
from typing import Iterator
import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.exceptions import ConflictError, StoreUnavailableError

logger = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session, action: str, conflict_detail: str = None) -> Iterator[Session]:
    """
    Ejecutar un bloque como una sola transacción.

    Commit al salir sin errores. Cualquier error hace rollback, así que
    ningún estado intermedio (p. ej. serial_no negativos) queda visible:
    - HTTPException: se re-lanza tal cual
    - IntegrityError, StaleDataError: ConflictError (409)
    - OperationalError: StoreUnavailableError (503)
    """
    try:
        yield db
        db.commit()
    except HTTPException as e:
        logger.info(f"{action}: rollback ({e.status_code} - {e.detail})")
        db.rollback()
        raise
    except IntegrityError as e:
        logger.warning(f"{action}: violación de unicidad - {e.orig}")
        db.rollback()
        raise ConflictError(conflict_detail or f"{action}: conflicto con una escritura concurrente, reintente")
    except StaleDataError as e:
        logger.warning(f"{action}: fila modificada por otro escritor - {e}")
        db.rollback()
        raise ConflictError(f"{action}: el registro cambió durante la operación, reintente")
    except OperationalError as e:
        logger.error(f"{action}: base de datos no disponible - {e.orig}")
        db.rollback()
        raise StoreUnavailableError()
    except Exception:
        logger.exception(f"Error inesperado en {action}")
        db.rollback()
        raise
