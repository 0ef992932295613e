"""Locate and click the forwarding confirmation control"""

from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from src.browser.driver import ElementHandle, PageHandle
from src.forwarding.errors import ButtonNotFound
from src.forwarding.models import SelectorKind, SelectorStrategy
from src.forwarding.patterns import BUTTON_LIKE_SELECTOR, CONFIRMATION_STRATEGIES
from src.utils.strategies import StrategiesExhausted, first_success


async def _first_visible(elements: List[ElementHandle]) -> Optional[ElementHandle]:
    for element in elements:
        try:
            if await element.is_visible():
                return element
        except Exception:
            continue
    return None


async def _find_by_text(page: PageHandle, keyword: str) -> Optional[ElementHandle]:
    """Enumerate button-like elements and keep the first visible one whose text matches"""
    keyword = keyword.lower()
    for element in await page.query_all(BUTTON_LIKE_SELECTOR):
        try:
            if not await element.is_visible():
                continue
            text = await element.text_or_value()
        except Exception:
            continue
        if keyword in text.lower():
            return element
    return None


async def find_confirmation_control(page: PageHandle, strategy: SelectorStrategy) -> Optional[ElementHandle]:
    """Resolve one strategy to a visible element, or None"""
    if strategy.kind == SelectorKind.TEXT:
        return await _find_by_text(page, strategy.value)
    return await _first_visible(await page.query_all(strategy.value))


async def collect_button_inventory(page: PageHandle) -> List[Dict[str, Any]]:
    """Type/value/text of every button-like element, for diagnostics"""
    inventory = []
    try:
        for element in await page.query_all(BUTTON_LIKE_SELECTOR):
            try:
                inventory.append(await element.describe())
            except Exception as e:
                inventory.append({"error": str(e)})
    except Exception as e:
        logger.debug(f"Button inventory unavailable: {e}")
    return inventory


async def click_confirmation_button(
    page: PageHandle,
    strategies: Sequence[SelectorStrategy] = CONFIRMATION_STRATEGIES,
    correlation_id: str = "N/A"
) -> SelectorStrategy:
    """
    Click the first visible control matched by the strategies, once.

    Strategies are tried in declared order. A strategy fails when it finds
    nothing visible or its click raises.

    Args:
        page: Page showing the confirmation form
        strategies: Ordered selector strategies
        correlation_id: ID for logging context

    Returns:
        The strategy that found and clicked the control

    Raises:
        ButtonNotFound: No strategy produced a clickable control
    """
    async def _attempt(strategy: SelectorStrategy) -> Optional[SelectorStrategy]:
        element = await find_confirmation_control(page, strategy)
        if element is None:
            return None
        await element.click()
        return strategy

    def _on_failure(number: int, strategy: SelectorStrategy, error: Optional[BaseException]):
        if error is not None:
            logger.debug(f"[{correlation_id}] Failed to click with selector: {strategy.description} - {error}")

    try:
        outcome = await first_success(strategies, _attempt, on_failure=_on_failure)
    except StrategiesExhausted:
        inventory = await collect_button_inventory(page)
        logger.warning(f"[{correlation_id}] No confirmation button found. Buttons on page: {inventory}")
        raise ButtonNotFound(url=page.url)

    logger.info(f"[{correlation_id}] Clicked confirmation button: {outcome.candidate.description}")
    return outcome.candidate
