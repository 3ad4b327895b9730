from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health_check():
    # No rate limiting or logging - uptime monitors hit this constantly
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
