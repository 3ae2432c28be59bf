"""Map domain exceptions raised inside a request onto HTTP errors"""

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finance_tracker.domain.exceptions import InvalidRecordError, RecordNotFoundError, StorageError


@contextmanager
def domain_errors(db: Session, request_id: str) -> Iterator[None]:
    """Roll back and translate: not found -> 404, invalid record -> 422, storage -> 503"""
    try:
        yield
    except RecordNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidRecordError as e:
        db.rollback()
        logging.warning(f"Invalid record: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    except (StorageError, SQLAlchemyError) as e:
        db.rollback()
        logging.error(f"Storage error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Storage service unavailable")
