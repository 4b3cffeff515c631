# helphood_chat/ops.py
"""
Liveness/readiness probes.

- /live  : 200 while the process can serve requests
- /ready : 200 once the lifespan startup ran, 503 before that and during shutdown

Readiness does not depend on Gemini: without a key the service still answers
from the fallback classifier, so `ai_configured` is reported but not gated on.
"""

from fastapi import APIRouter, Request, Response, status

router = APIRouter(tags=["ops"])


@router.get("/live")
async def live() -> dict:
    return {"status": "live"}


@router.get("/ready")
async def ready(request: Request):
    is_ready = getattr(request.app.state, "is_ready", False)
    if is_ready:
        service = getattr(request.app.state, "chat_service", None)
        return {"status": "ready", "ai_configured": bool(service and service.ai_configured)}
    return Response(
        content='{"status":"not_ready"}',
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        media_type="application/json",
    )
