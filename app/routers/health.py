# app/routers/health.py
from fastapi import APIRouter, Depends

from app.config import Settings, get_settings

# Liveness & readiness probes.
router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live")
def live():
    """
    Liveness probe. Always 200 while the process is up.
    Do not add downstream checks here; an SOW service outage must not restart the pod.
    """
    return {"status": "ok"}


@router.get("/ready")
def ready(settings: Settings = Depends(get_settings)):
    # No probe of the SOW service: the form still works (manual SOW entry) without it.
    return {
        "status": "ok",
        "sowApiUrl": settings.sow_api_url,
        "sowTimeoutSeconds": settings.sow_timeout_seconds,
    }
