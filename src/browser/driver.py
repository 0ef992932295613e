"""Playwright adapter exposing the small browser contract the workflow needs.

The forwarding workflow only ever launches a browser, opens one page,
navigates, reads text, queries elements and clicks. Keeping that surface
narrow lets tests swap in in-memory fakes with the same methods.
"""

from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    ElementHandle as PlaywrightElement,
    Page,
    Playwright,
)

from src.forwarding.models import HeadlessMode, LaunchConfig
from src.forwarding.patterns import USER_AGENT, VIEWPORT


class BrowserClosedError(RuntimeError):
    """A closed browser handle was used again"""


class ElementHandle:
    """One element on the page"""

    def __init__(self, element: PlaywrightElement, timeout_ms: int):
        self._element = element
        self._timeout_ms = timeout_ms

    async def click(self):
        await self._element.click(timeout=self._timeout_ms)

    async def is_visible(self) -> bool:
        return await self._element.is_visible()

    async def text_or_value(self) -> str:
        """Input value for <input> elements, text content otherwise"""
        text = await self._element.evaluate(
            "el => (el.tagName === 'INPUT' ? el.value : el.textContent) || ''"
        )
        return text.strip()

    async def describe(self) -> Dict[str, Any]:
        """Tag/type/value/text snapshot for diagnostics"""
        return await self._element.evaluate("""
            el => ({
                tag: el.tagName.toLowerCase(),
                type: el.getAttribute('type'),
                value: el.value === undefined ? null : el.value,
                text: (el.textContent || '').trim().slice(0, 100),
            })
        """)


class PageHandle:
    """The single page a request works on"""

    def __init__(self, page: Page, timeout_ms: int):
        self._page = page
        self._timeout_ms = timeout_ms

    @property
    def url(self) -> str:
        return self._page.url

    async def navigate(self, url: str, wait_until: str = "domcontentloaded", timeout_ms: Optional[int] = None):
        await self._page.goto(url, wait_until=wait_until, timeout=timeout_ms or self._timeout_ms)

    async def visible_text(self) -> str:
        return await self._page.inner_text("body", timeout=self._timeout_ms)

    async def query_selector(self, selector: str) -> Optional[ElementHandle]:
        element = await self._page.query_selector(selector)
        return ElementHandle(element, self._timeout_ms) if element else None

    async def query_all(self, selector: str) -> List[ElementHandle]:
        elements = await self._page.query_selector_all(selector)
        return [ElementHandle(element, self._timeout_ms) for element in elements]


class BrowserHandle:
    """A launched browser process owned by exactly one request"""

    def __init__(self, playwright: Playwright, browser: Browser, config: LaunchConfig, timeout_ms: int):
        self._playwright = playwright
        self._browser = browser
        self._context: Optional[BrowserContext] = None
        self.config = config
        self._timeout_ms = timeout_ms
        self.closed = False

    async def new_page(self) -> PageHandle:
        if self.closed:
            raise BrowserClosedError("Browser handle already closed")
        if self._context is None:
            self._context = await self._browser.new_context(
                user_agent=USER_AGENT,
                viewport=VIEWPORT,
            )
        page = await self._context.new_page()
        return PageHandle(page, self._timeout_ms)

    async def close(self):
        """Close the browser and stop Playwright. Later calls are no-ops."""
        if self.closed:
            return
        self.closed = True
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()


class PlaywrightDriver:
    """Launches Chromium through Playwright"""

    async def launch(self, config: LaunchConfig, timeout_ms: int) -> BrowserHandle:
        """
        Start one browser process for a launch configuration.

        Args:
            config: Executable path, headless mode and arguments to use
            timeout_ms: Upper bound for the launch itself

        Returns:
            BrowserHandle owning the process

        Raises:
            Whatever Playwright raises; the Playwright instance is stopped first
        """
        args = list(config.args)
        if config.headless_mode == HeadlessMode.NEW:
            # Playwright passes plain --headless first; the later switch wins
            args.append("--headless=new")

        playwright = await async_playwright().start()
        try:
            browser = await playwright.chromium.launch(
                executable_path=config.executable_path,
                headless=True,
                args=args,
                timeout=timeout_ms,
            )
        except BaseException:
            await playwright.stop()
            raise

        logger.debug(f"Browser process started: {config.label}")
        return BrowserHandle(playwright, browser, config, timeout_ms)
