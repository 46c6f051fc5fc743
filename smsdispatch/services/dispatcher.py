"""Fan-out of one SMS body to a batch of recipients.

The Dispatcher checks the request and configuration up front, then sends to
every valid recipient concurrently and folds the per-recipient outcomes into a
single `DispatchResult`. Request-level problems raise; per-recipient problems
become data in the result.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from smsdispatch.types import (
    ConfigurationError,
    DispatchRequest,
    DispatchResult,
    MessagingAdapter,
    ProviderError,
    RecipientFormatError,
    SendOutcome,
    ValidationError,
)
from smsdispatch.utils import mask_phone, validate_recipient

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 10
UNEXPECTED_PROVIDER_REASON = "unexpected provider error"
TIMED_OUT_REASON = "dispatch timed out"
NOT_ACCEPTED_REASON = "provider did not accept the message"


class Dispatcher:
    """Send one message to many recipients through a messaging adapter.

    Args:
        adapter: Provider client handle, shared by all concurrent sends.
        default_sender: Number used when the request does not name a sender.
        max_concurrency: Upper bound on in-flight provider calls.
        timeout: Optional overall budget in seconds for one dispatch. Sends
            still running when it expires are abandoned and reported failed.
    """

    def __init__(
        self,
        adapter: MessagingAdapter,
        default_sender: Optional[str],
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        timeout: Optional[float] = None,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.adapter = adapter
        self.default_sender = default_sender
        self.max_concurrency = max_concurrency
        self.timeout = timeout

    async def dispatch(self, request: DispatchRequest) -> DispatchResult:
        """Validate `request`, send to each valid recipient and aggregate.

        Raises:
            ValidationError: no recipients, or an empty body.
            ConfigurationError: provider credentials or default sender missing.
        """
        self._check_request(request)
        self._check_configuration()

        sender = request.sender or self.default_sender
        outcomes: list[Optional[SendOutcome]] = [None] * len(request.recipients)
        semaphore = asyncio.Semaphore(self.max_concurrency)
        tasks: dict[asyncio.Task, int] = {}

        for index, recipient in enumerate(request.recipients):
            try:
                validate_recipient(recipient)
            except RecipientFormatError as exc:
                logger.warning("Skipping recipient %s: %s", mask_phone(recipient), exc)
                outcomes[index] = SendOutcome.failure(recipient, str(exc))
                continue
            task = asyncio.create_task(
                self._send_one(semaphore, outcomes, index, sender, recipient, request.body)
            )
            tasks[task] = index

        if tasks:
            try:
                _, pending = await asyncio.wait(list(tasks), timeout=self.timeout)
            except asyncio.CancelledError:
                await self._abandon(tasks)
                completed = sum(1 for outcome in outcomes if outcome is not None)
                logger.warning(
                    "Dispatch cancelled with %d of %d outcomes recorded",
                    completed,
                    len(outcomes),
                )
                raise
            if pending:
                logger.warning(
                    "Dispatch timed out after %ss with %d send(s) in flight",
                    self.timeout,
                    len(pending),
                )
                await self._abandon(pending)
                for task in pending:
                    index = tasks[task]
                    if outcomes[index] is None:
                        outcomes[index] = SendOutcome.failure(
                            request.recipients[index], TIMED_OUT_REASON
                        )

        result = DispatchResult.from_outcomes(o for o in outcomes if o is not None)
        logger.info(
            "Dispatch complete: %d succeeded, %d failed",
            result.succeeded,
            result.failed,
        )
        return result

    async def _send_one(
        self,
        semaphore: asyncio.Semaphore,
        outcomes: list[Optional[SendOutcome]],
        index: int,
        sender: str,
        recipient: str,
        body: str,
    ) -> None:
        # Each task writes only its own slot, so no locking is needed.
        async with semaphore:
            try:
                sent = await self.adapter.send(sender, recipient, body)
            except ProviderError as exc:
                logger.warning("Send to %s failed: %s", mask_phone(recipient), exc)
                outcomes[index] = SendOutcome.failure(recipient, str(exc) or "provider error")
            except Exception:
                logger.exception("Unexpected error sending to %s", mask_phone(recipient))
                outcomes[index] = SendOutcome.failure(recipient, UNEXPECTED_PROVIDER_REASON)
            else:
                if sent.ok is False:
                    logger.warning("Provider did not accept message for %s", mask_phone(recipient))
                    outcomes[index] = SendOutcome.failure(recipient, NOT_ACCEPTED_REASON)
                else:
                    outcomes[index] = SendOutcome.success(recipient, sent.message_id)

    @staticmethod
    async def _abandon(tasks) -> None:
        unfinished = [task for task in tasks if not task.done()]
        for task in unfinished:
            task.cancel()
        # Let cancelled sends unwind and close their HTTP clients.
        await asyncio.gather(*unfinished, return_exceptions=True)

    @staticmethod
    def _check_request(request: DispatchRequest) -> None:
        if not request.recipients:
            raise ValidationError("Numbers (array) and message are required.")
        if not request.body or not request.body.strip():
            raise ValidationError("Numbers (array) and message are required.")

    def missing_configuration(self) -> list[str]:
        """Names of the settings that must be set before anything can be sent."""
        missing: list[str] = []
        try:
            self.adapter.ensure_configured()
        except ConfigurationError as exc:
            missing.extend(exc.missing or ["provider credentials"])
        if not self.default_sender:
            missing.append("TWILIO_PHONE_NUMBER")
        return missing

    def _check_configuration(self) -> None:
        missing = self.missing_configuration()
        if missing:
            raise ConfigurationError(
                f"Missing provider configuration: {', '.join(missing)}", missing=missing
            )
