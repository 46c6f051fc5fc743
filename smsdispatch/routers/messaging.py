from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from smsdispatch.services import Dispatcher, get_dispatcher
from smsdispatch.types import (
    DispatchError,
    ErrorResponse,
    SendSmsRequest,
    SendSmsResponse,
    UnexpectedError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["messaging"])


@router.post(
    "/send-sms",
    response_model=SendSmsResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing or malformed numbers/message"},
        500: {"model": ErrorResponse, "description": "Server misconfiguration or unexpected error"},
    },
)
async def send_sms(
    payload: SendSmsRequest,
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> SendSmsResponse:
    """Send one message to every number in the batch.

    - 200 whenever the batch was attempted, even if some recipients failed.
      `succeeded`, `failed` and `errors` carry the per-recipient detail.
    - 400 when `numbers` or `message` is missing, empty or malformed.
    - 500 when provider credentials are missing or something unexpected broke.
    """
    logger.info("Received send-sms request for %d number(s)", len(payload.numbers or ()))
    try:
        result = await dispatcher.dispatch(payload.to_dispatch_request())
    except DispatchError:
        raise
    except Exception as e:
        raise UnexpectedError(f"Dispatch failed: {e}") from e
    return SendSmsResponse.from_result(result)
