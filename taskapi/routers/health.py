from datetime import datetime, UTC

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from taskapi.config import VERSION

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request):
    connected = request.app.state.database.ping()
    body = {
        "status": "healthy" if connected else "unhealthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "version": VERSION,
        "database": "connected" if connected else "disconnected",
    }
    return JSONResponse(status_code=200 if connected else 503, content=body)
