"""Unit tests for confirmation state detection"""

import pytest
from pathlib import Path
import sys

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from browser_fakes import CONFIRMED_TEXT, PENDING_TEXT, FakePage
from src.forwarding.detection import is_forwarding_confirmed, matched_confirmation_phrase
from src.forwarding.patterns import CONFIRMATION_PHRASES


class TestConfirmationPhrases:
    """Test the phrase set"""

    def test_phrases_are_lower_case(self):
        """Test phrases can be compared against lower-cased page text"""
        assert all(phrase == phrase.lower() for phrase in CONFIRMATION_PHRASES)

    def test_known_phrases_present(self):
        """Test the phrases Gmail is known to show"""
        assert "may now forward mail to" in CONFIRMATION_PHRASES
        assert "forwarding is enabled" in CONFIRMATION_PHRASES


class TestMatchedConfirmationPhrase:
    """Test the pure text check"""

    def test_match(self):
        assert matched_confirmation_phrase(CONFIRMED_TEXT) in CONFIRMATION_PHRASES

    def test_case_insensitive(self):
        """Test mixed-case page text still matches"""
        assert matched_confirmation_phrase("Forwarding Is Enabled for this account") == "forwarding is enabled"

    def test_pending_page_does_not_match(self):
        """Test the confirmation request page is not mistaken for success"""
        assert matched_confirmation_phrase(PENDING_TEXT) is None

    def test_empty_text(self):
        assert matched_confirmation_phrase("") is None

    def test_custom_phrases(self):
        assert matched_confirmation_phrase("All done", phrases=["all done"]) == "all done"


class TestIsForwardingConfirmed:
    """Test detection against a page"""

    @pytest.mark.asyncio
    async def test_confirmed_page(self):
        assert await is_forwarding_confirmed(FakePage(text=CONFIRMED_TEXT)) is True

    @pytest.mark.asyncio
    async def test_pending_page(self):
        assert await is_forwarding_confirmed(FakePage(text=PENDING_TEXT)) is False

    @pytest.mark.asyncio
    async def test_read_failure_reports_not_confirmed(self):
        """Test a page that cannot be read is reported as not confirmed"""
        page = FakePage(text_error=RuntimeError("Execution context was destroyed"))

        assert await is_forwarding_confirmed(page) is False
        assert page.text_reads == 1

    @pytest.mark.asyncio
    async def test_none_text(self):
        """Test a page returning no text at all"""
        page = FakePage(text=None)

        assert await is_forwarding_confirmed(page) is False
