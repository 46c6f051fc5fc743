from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from server.config import Settings, get_settings
from smsdispatch.types import (
    ConfigurationError,
    MessagingAdapter,
    ProviderError,
    SendResult,
)
from smsdispatch.utils import mask_phone

logger = logging.getLogger(__name__)

# Statuses Twilio reports for a message it has accepted for delivery.
ACCEPTED_STATUSES = ("accepted", "queued", "sending", "sent", "scheduled")


class TwilioClient(MessagingAdapter):
    """Twilio adapter implementing the MessagingAdapter protocol.

    Notes:
    - Credentials and API base come from `Settings` (TWILIO_* variables).
    - One instance is created per process and shared by concurrent sends; it
      holds read-only configuration only.
    - When an `httpx.AsyncClient` is injected it is reused for every send,
      otherwise each send opens a short-lived client.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        settings = settings or get_settings()
        self.account_sid = settings.twilio_account_sid or ""
        self.auth_token = settings.twilio_auth_token or ""
        self.api_base = settings.twilio_api_base.rstrip("/")
        self.timeout = settings.twilio_timeout_seconds
        self._http_client = http_client

    def send_endpoint(self) -> str:
        """Return the Messages resource URL for the configured account."""
        return f"{self.api_base}/2010-04-01/Accounts/{self.account_sid}/Messages.json"

    def ensure_configured(self) -> None:
        missing = []
        if not self.account_sid:
            missing.append("TWILIO_ACCOUNT_SID")
        if not self.auth_token:
            missing.append("TWILIO_AUTH_TOKEN")
        if missing:
            raise ConfigurationError(
                f"Missing Twilio credentials: {', '.join(missing)}", missing=missing
            )

    # --- Outbound ---
    async def send(self, sender: str, recipient: str, body: str) -> SendResult:
        """Send an SMS via Twilio using the Messages API.

        Uses Twilio's REST API: POST /Accounts/{AccountSid}/Messages.json
        Requires: To, From, Body parameters (form-encoded)
        Authentication: Basic Auth with AccountSid:AuthToken

        Raises:
            ProviderError: Twilio rejected the message, returned an unusable
                response, timed out, or could not be reached.
        """
        self.ensure_configured()

        data = {
            "To": recipient,
            "From": sender,
            "Body": body,
        }

        try:
            if self._http_client is not None:
                response = await self._post(self._http_client, data)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await self._post(client, data)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise self._status_error(e.response) from e
        except httpx.TimeoutException as e:
            raise ProviderError("Provider request timed out") from e
        except httpx.RequestError as e:
            raise ProviderError(f"Network error: {e}") from e

        twilio_data = self._json_or_none(response)
        if twilio_data is None:
            raise ProviderError("Provider returned a non-JSON response", response.status_code)

        # Twilio returns "sid" as the message ID
        message_id = twilio_data.get("sid")
        if not message_id:
            raise ProviderError("Provider response missing message id", response.status_code)

        status = twilio_data.get("status", "")
        if status and status not in ACCEPTED_STATUSES:
            raise ProviderError(f"Provider reported status {status}", response.status_code)

        logger.debug(
            "Twilio accepted message %s for %s (status=%s)",
            message_id,
            mask_phone(recipient),
            status,
        )
        return SendResult(
            message_id=message_id,
            ok=True,
            data=twilio_data,
        )

    async def _post(self, client: httpx.AsyncClient, data: Dict[str, str]) -> httpx.Response:
        return await client.post(
            self.send_endpoint(),
            data=data,
            auth=(self.account_sid, self.auth_token),
        )

    @staticmethod
    def _json_or_none(response: httpx.Response) -> Optional[Dict[str, Any]]:
        try:
            payload = response.json()
        except ValueError:
            return None
        return payload if isinstance(payload, dict) else None

    def _status_error(self, response: httpx.Response) -> ProviderError:
        # Twilio error bodies look like {"code": 21211, "message": "...", "status": 400}
        error_data = self._json_or_none(response) or {}
        message = error_data.get("message") or f"HTTP {response.status_code}"
        code = error_data.get("code")
        return ProviderError(
            str(message),
            status_code=response.status_code,
            code=code if isinstance(code, int) else None,
        )
