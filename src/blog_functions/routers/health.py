from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..lib.response import send_success

router = APIRouter(tags=["health"])


@router.get("/health")
async def healthcheck() -> JSONResponse:
    return send_success("ok", {"status": "ok"})
