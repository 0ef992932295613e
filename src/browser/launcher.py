"""Browser launch with an ordered fallback chain.

Production images usually start on the first configuration. Container
images that ship Chromium somewhere unusual, or an older Chromium that
rejects the new headless mode, fall through to the common install paths
and finally to Playwright's own auto-detection.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from loguru import logger

from src.analytics.metrics import ForwardingMetrics
from src.browser.driver import BrowserHandle, PlaywrightDriver
from src.config.settings import Settings
from src.forwarding.errors import BrowserLaunchFailed
from src.forwarding.models import HeadlessMode, LaunchConfig
from src.utils.strategies import StrategiesExhausted, first_success


# Hardened set for the primary attempt (containerized, no GPU)
HARDENED_ARGS = (
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-dev-shm-usage',
    '--disable-accelerated-2d-canvas',
    '--no-first-run',
    '--no-zygote',
    '--disable-gpu',
    '--disable-web-security',
    '--disable-features=VizDisplayCompositor',
    '--disable-background-timer-throttling',
    '--disable-backgrounding-occluded-windows',
    '--disable-renderer-backgrounding',
)

MINIMAL_ARGS = (
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-dev-shm-usage',
    '--disable-gpu',
)

# Tried in order after the primary configuration fails
COMMON_BROWSER_PATHS = (
    '/usr/bin/chromium',
    '/usr/bin/chromium-browser',
    '/usr/bin/google-chrome',
    '/usr/bin/google-chrome-stable',
    '/opt/google/chrome/chrome',
    '/snap/bin/chromium',
    '/Applications/Google Chrome.app/Contents/MacOS/Google Chrome',
)

HEADLESS_VARIANTS = (HeadlessMode.NEW, HeadlessMode.LEGACY)


def build_launch_chain(settings: Settings) -> List[LaunchConfig]:
    """
    Build the priority-ordered launch configurations.

    1. Configured path (if any) + hardened args + new headless
    2. Each common install path x both headless modes, minimal args
    3. Auto-detection x both headless modes, minimal args
    """
    primary_args = HARDENED_ARGS
    if settings.is_production:
        primary_args = primary_args + ('--single-process',)

    chain = [
        LaunchConfig(
            executable_path=settings.resolved_executable_path,
            headless_mode=HeadlessMode.NEW,
            args=primary_args,
        )
    ]

    for path in COMMON_BROWSER_PATHS:
        for mode in HEADLESS_VARIANTS:
            chain.append(LaunchConfig(executable_path=path, headless_mode=mode, args=MINIMAL_ARGS))

    for mode in HEADLESS_VARIANTS:
        chain.append(LaunchConfig(executable_path=None, headless_mode=mode, args=MINIMAL_ARGS))

    return chain


class BrowserLauncher:
    """Acquires one browser per request from the fallback chain"""

    def __init__(
        self,
        settings: Settings,
        driver: Optional[PlaywrightDriver] = None,
        metrics: Optional[ForwardingMetrics] = None,
        chain: Optional[List[LaunchConfig]] = None
    ):
        self.settings = settings
        self.driver = driver or PlaywrightDriver()
        self.metrics = metrics
        self.chain = chain if chain is not None else build_launch_chain(settings)

    async def launch(self, correlation_id: str = "N/A") -> BrowserHandle:
        """
        Launch a browser using the first configuration that works.

        Each attempt gets the full browser timeout.

        Raises:
            BrowserLaunchFailed: Every configuration failed
        """
        total = len(self.chain)

        async def _attempt(config: LaunchConfig) -> BrowserHandle:
            return await self.driver.launch(config, self.settings.browser_timeout_ms)

        def _on_failure(number: int, config: LaunchConfig, error: Optional[BaseException]):
            logger.warning(f"[{correlation_id}] Browser launch attempt {number}/{total} failed: {config.label} - {error}")
            if self.metrics:
                self.metrics.record_launch_attempt(config.label, success=False)

        try:
            outcome = await first_success(self.chain, _attempt, on_failure=_on_failure)
        except StrategiesExhausted as e:
            logger.error(f"[{correlation_id}] All {e.attempts} browser launch configurations failed")
            raise BrowserLaunchFailed(attempts=e.attempts) from e

        if self.metrics:
            self.metrics.record_launch_attempt(outcome.candidate.label, success=True)
        if outcome.attempt > 1:
            logger.info(f"[{correlation_id}] Browser launched on fallback attempt {outcome.attempt}: {outcome.candidate.label}")
        else:
            logger.info(f"[{correlation_id}] Browser launched: {outcome.candidate.label}")
        return outcome.result

    @asynccontextmanager
    async def session(self, correlation_id: str = "N/A") -> AsyncIterator[BrowserHandle]:
        """
        Scoped browser: launched on entry, closed exactly once on every exit path.

        A close failure is logged and never replaces the block's own outcome.
        """
        browser = await self.launch(correlation_id)
        if self.metrics:
            self.metrics.record_browser_opened()
        try:
            yield browser
        finally:
            try:
                await browser.close()
                logger.info(f"[{correlation_id}] Browser closed")
            except Exception as e:
                logger.warning(f"[{correlation_id}] Failed to close browser: {e}")
            finally:
                if self.metrics:
                    self.metrics.record_browser_closed()
