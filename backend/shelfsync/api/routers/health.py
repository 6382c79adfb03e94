import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from ...dependencies import get_db

router = APIRouter(prefix="/health", tags=["health"])
logger = logging.getLogger(__name__)

@router.get("/ready")
def ready(db: Session = Depends(get_db)):
    """Ready when the database answers."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Database not reachable: %s", e)
        raise HTTPException(status_code=503, detail="Database unavailable")
    return {"status": "ok"}
