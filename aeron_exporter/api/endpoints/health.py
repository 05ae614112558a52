from __future__ import annotations

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

router = APIRouter()


@router.get("/health/live")
async def live():
    return {"status": "ok"}


@router.get("/health/ready")
def ready(request: Request):
    """
    Readiness reflects whether a media driver has published cnc.dat.
    Scrapes still succeed when it has not; they report aeron_cncread_error.
    """
    cnc_path = request.app.state.cnc_file_reader.cnc_path
    if not cnc_path.exists():
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "problems": [f"missing_file:{cnc_path}"]},
        )
    return {"status": "ready", "cnc_file": str(cnc_path)}
