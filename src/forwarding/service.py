"""End-to-end acceptance of a Gmail forwarding confirmation.

Workflow per request:
    validate URL -> launch browser -> navigate -> already confirmed?
    -> click confirm -> settle -> re-verify (with retries) -> result

The browser is launched through BrowserLauncher.session(), so it is closed
exactly once whichever step ends the request. accept_forwarding() never
raises; every outcome is a ForwardingResult.
"""

import asyncio
import time
import uuid
from typing import Optional

from loguru import logger

from src.analytics.metrics import ForwardingMetrics
from src.browser.launcher import BrowserLauncher
from src.config.settings import Settings
from src.forwarding.activation import click_confirmation_button
from src.forwarding.detection import is_forwarding_confirmed
from src.forwarding.errors import (
    ConfirmationFailed,
    ErrorCode,
    ForwardingError,
    InvalidUrlFormat,
    UNKNOWN_ERROR_MESSAGE,
)
from src.forwarding.models import ForwardingRequest, ForwardingResult
from src.forwarding.navigation import navigate_to_confirmation
from src.forwarding.validation import is_valid_confirmation_url
from src.utils.retry import retry_async


def _elapsed_ms(started: float) -> int:
    return max(0, int((time.monotonic() - started) * 1000))


class ForwardingService:
    """Accepts forwarding confirmations, one browser per request"""

    def __init__(
        self,
        settings: Settings,
        launcher: Optional[BrowserLauncher] = None,
        metrics: Optional[ForwardingMetrics] = None
    ):
        self.settings = settings
        self.metrics = metrics or ForwardingMetrics()
        self.launcher = launcher or BrowserLauncher(settings, metrics=self.metrics)

    async def accept_forwarding(
        self,
        request: ForwardingRequest,
        correlation_id: Optional[str] = None
    ) -> ForwardingResult:
        """
        Accept one forwarding confirmation.

        Args:
            request: Confirmation URL (and optional forwarding address)
            correlation_id: ID for logging context; generated when missing

        Returns:
            ForwardingResult; failures are encoded in it, never raised
        """
        correlation_id = correlation_id or uuid.uuid4().hex[:12]
        metrics_start = self.metrics.record_start()
        started = time.monotonic()

        logger.info(f"[{correlation_id}] Email forwarding started: {request.email or 'unknown'} -> {request.url}")

        try:
            result = await self._run(request, started, correlation_id)
        except ForwardingError as e:
            result = self._failure(request, started, e.message, email=e.email, url=e.url)
            self.metrics.record_error(e.code.value)
            logger.error(f"[{correlation_id}] Email forwarding failed ({e.code.value}): {e.message} ({result.response_time}ms)")
        except Exception as e:
            result = self._failure(request, started, UNKNOWN_ERROR_MESSAGE)
            self.metrics.record_error(ErrorCode.UNKNOWN.value)
            logger.exception(f"[{correlation_id}] Unexpected error during email forwarding: {e}")

        self.metrics.record_end(metrics_start, result.success)
        return result

    async def _run(self, request: ForwardingRequest, started: float, correlation_id: str) -> ForwardingResult:
        url = request.url

        if not is_valid_confirmation_url(url):
            raise InvalidUrlFormat(email=request.email, url=url)

        async with self.launcher.session(correlation_id) as browser:
            page = await browser.new_page()
            await navigate_to_confirmation(page, url, self.settings, correlation_id)

            if await is_forwarding_confirmed(page, correlation_id=correlation_id):
                result = ForwardingResult(
                    success=True,
                    message="Email forwarding already confirmed",
                    email=request.email,
                    url=url,
                    response_time=_elapsed_ms(started),
                    already_confirmed=True,
                )
                logger.info(f"[{correlation_id}] Email forwarding already confirmed")
                return result

            await click_confirmation_button(page, correlation_id=correlation_id)
            await asyncio.sleep(self.settings.click_settle_delay)

            confirmed = await retry_async(
                lambda: is_forwarding_confirmed(page, correlation_id=correlation_id),
                attempts=self.settings.verify_attempts,
                delay_seconds=self.settings.verify_retry_delay,
                until=bool,
                description="Confirmation check",
                correlation_id=correlation_id,
            )
            if not confirmed:
                raise ConfirmationFailed(url=url)

            result = ForwardingResult(
                success=True,
                message="Email forwarding confirmed successfully",
                email=request.email,
                url=url,
                response_time=_elapsed_ms(started),
                already_confirmed=False,
            )
            logger.success(f"[{correlation_id}] Email forwarding confirmed ({result.response_time}ms)")
            return result

    def _failure(
        self,
        request: ForwardingRequest,
        started: float,
        message: str,
        email: Optional[str] = None,
        url: Optional[str] = None
    ) -> ForwardingResult:
        return ForwardingResult(
            success=False,
            message=message,
            email=email or request.email,
            url=url or request.url,
            response_time=_elapsed_ms(started),
        )
