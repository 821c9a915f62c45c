# sge/api/endpoints/status.py

from fastapi import APIRouter

from sge.core.utils import utcnow

router = APIRouter()


@router.get("/health", tags=["Status"])
async def health_check():
    return {"status": "ok", "timestamp": utcnow().isoformat() + "Z"}
