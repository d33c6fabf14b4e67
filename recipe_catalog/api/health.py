# api/health.py

from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter()


@router.get("")
def health():
    """
    Liveness check. Needs no token.
    """
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
