from fastapi import APIRouter

router = APIRouter(prefix="/health", tags=["Health Check"])


@router.get("/check", summary="Health Check")
def healthcheck():
    """Liveness probe; public, no API key required."""
    return {"status": "ok"}
