"""Confirmation state detection from rendered page text"""

from typing import Iterable, Optional

from loguru import logger

from src.browser.driver import PageHandle
from src.forwarding.patterns import CONFIRMATION_PHRASES


def matched_confirmation_phrase(
    page_text: str,
    phrases: Iterable[str] = CONFIRMATION_PHRASES
) -> Optional[str]:
    """
    Check page text for a confirmation phrase.

    Args:
        page_text: Visible text of the page
        phrases: Lower-cased phrases; any match counts

    Returns:
        The matched phrase if found, None otherwise
    """
    page_text_lower = page_text.lower()
    for phrase in phrases:
        if phrase in page_text_lower:
            return phrase
    return None


async def is_forwarding_confirmed(
    page: PageHandle,
    phrases: Iterable[str] = CONFIRMATION_PHRASES,
    correlation_id: str = "N/A"
) -> bool:
    """
    Whether the page currently shows forwarding as confirmed.

    A page that cannot be read yet is reported as not confirmed; callers
    that care retry.
    """
    try:
        text = await page.visible_text()
    except Exception as e:
        logger.debug(f"[{correlation_id}] Could not check confirmation status: {e}")
        return False

    phrase = matched_confirmation_phrase(text or "", phrases)
    if phrase:
        logger.debug(f"[{correlation_id}] Confirmation phrase found: '{phrase}'")
        return True
    return False
