from fastapi import APIRouter, Depends
from sqlalchemy import text

from storefront.api.deps import get_payment_adapter
from storefront.db import engine

router = APIRouter()


@router.get("/health", tags=["health"])
def health(payment_adapter=Depends(get_payment_adapter)):
    db_ok = False
    payment_ok = False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            db_ok = True
    except Exception:
        db_ok = False
    try:
        payment_ok = payment_adapter.health_check()
    except Exception:
        payment_ok = False

    return {
        "status": "ok" if db_ok and payment_ok else "degraded",
        "db": db_ok,
        "payment_adapter": payment_ok,
    }
