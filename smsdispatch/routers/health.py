from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from server.config import Settings, get_settings
from smsdispatch.services import Dispatcher, get_dispatcher

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(
    settings: Settings = Depends(get_settings),
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> JSONResponse:
    """Report whether the service can send right now.

    Returns 503 while any provider setting is missing, so load balancers keep
    traffic away from an instance that would answer every send with a 500.
    """
    missing = dispatcher.missing_configuration()
    body = {
        "ok": not missing,
        "service": "sms-dispatch",
        "version": settings.app_version,
        "provider": settings.sms_provider,
        "max_concurrency": dispatcher.max_concurrency,
        "missing_configuration": missing,
    }
    code = status.HTTP_503_SERVICE_UNAVAILABLE if missing else status.HTTP_200_OK
    return JSONResponse(body, status_code=code)
