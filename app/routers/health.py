from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from app.config import get_settings
from app.core.constants import LIVENESS_MESSAGE

router = APIRouter(tags=["Health"])


@router.get("/", response_class=PlainTextResponse)
def root():
    return LIVENESS_MESSAGE


@router.get("/health")
def health_check():
    settings = get_settings()
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "time": datetime.now(timezone.utc).isoformat(),
    }
