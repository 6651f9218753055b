"""
Service status endpoints for deployment monitoring.
"""
import logging
from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.db.base import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/status", tags=["Status"])

API_VERSION = "1.0.0"


def _payments_status(request: Request) -> dict:
    service = getattr(request.app.state, "payments", None)
    if service is None:
        return {"initialized": False, "available": False, "error": "Payment service not started"}
    return service.status()


@router.get("")
def service_status(request: Request, db: Session = Depends(get_db)):
    """
    Returns "healthy" when the database answers, "degraded" otherwise.
    """
    status = "healthy"

    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        logger.error(f"Database check failed: {e}")
        db_status = "error"
        status = "degraded"

    payments = _payments_status(request)

    return {
        "status": status,
        "timestamp": utcnow().isoformat(),
        "database": db_status,
        "payments": "available" if payments["available"] else "unavailable",
        "version": API_VERSION,
    }


@router.get("/payments")
def payments_status(request: Request):
    """Stripe configuration state, without secrets."""
    return _payments_status(request)
