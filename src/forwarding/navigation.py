"""Navigation to the confirmation URL with bounded retries"""

import asyncio

from loguru import logger

from src.browser.driver import PageHandle
from src.config.settings import Settings
from src.forwarding.errors import NavigationFailed
from src.utils.retry import retry_async


async def navigate_to_confirmation(
    page: PageHandle,
    url: str,
    settings: Settings,
    correlation_id: str = "N/A"
) -> None:
    """
    Load the confirmation page and give client-side rendering time to finish.

    Waits for DOMContentLoaded only, not the full resource load. Transient
    network/TLS failures are retried with a fixed delay.

    Args:
        page: Page to navigate
        url: Confirmation URL
        settings: Timeout, attempt count and delays
        correlation_id: ID for logging context

    Raises:
        NavigationFailed: Every attempt failed
    """
    attempts = settings.navigation_attempts

    async def _goto():
        await page.navigate(url, wait_until="domcontentloaded", timeout_ms=settings.browser_timeout_ms)
        return True

    try:
        await retry_async(
            _goto,
            attempts=attempts,
            delay_seconds=settings.navigation_retry_delay,
            description="Navigation",
            correlation_id=correlation_id,
        )
    except Exception as e:
        logger.error(f"[{correlation_id}] Navigation failed after {attempts} attempts: {e}")
        raise NavigationFailed(url=url, attempts=attempts, cause=e) from e

    logger.debug(f"[{correlation_id}] Page loaded, settling for {settings.page_settle_delay}s")
    await asyncio.sleep(settings.page_settle_delay)
