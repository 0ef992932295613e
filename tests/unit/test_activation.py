"""Unit tests for locating and clicking the confirmation control"""

import pytest
from pathlib import Path
import sys

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from browser_fakes import FakeElement, FakePage
from src.forwarding.activation import click_confirmation_button, collect_button_inventory
from src.forwarding.errors import ButtonNotFound
from src.forwarding.models import SelectorKind, SelectorStrategy
from src.forwarding.patterns import CONFIRMATION_STRATEGIES

EXACT = "input[type='submit'][value='Confirm']"
PARTIAL = "input[type='submit'][value*='Confirm' i]"
SUBMIT_BUTTON = "button[type='submit']"


class TestStrategyOrder:
    """Test the declared selector priority"""

    def test_css_strategies_precede_text_scan(self):
        """Test every CSS strategy comes before the text scans"""
        kinds = [strategy.kind for strategy in CONFIRMATION_STRATEGIES]
        first_text = kinds.index(SelectorKind.TEXT)

        assert all(kind == SelectorKind.CSS for kind in kinds[:first_text])
        assert all(kind == SelectorKind.TEXT for kind in kinds[first_text:])

    def test_exact_value_first(self):
        """Test the exact Confirm input is the top priority"""
        assert CONFIRMATION_STRATEGIES[0].value == EXACT

    def test_text_scan_keywords(self):
        """Test the text scan looks for confirm, then yes"""
        keywords = [s.value for s in CONFIRMATION_STRATEGIES if s.kind == SelectorKind.TEXT]
        assert keywords == ["confirm", "yes"]


class TestClickConfirmationButton:
    """Test control activation"""

    @pytest.mark.asyncio
    async def test_exact_value_input_preferred(self):
        """Test the exact-value input wins over a generic submit button"""
        page = FakePage()
        generic = page.add(FakeElement(tag="button", type="submit", text="Submit"), SUBMIT_BUTTON)
        exact = page.add(FakeElement(tag="input", type="submit", value="Confirm"), EXACT, PARTIAL)

        strategy = await click_confirmation_button(page)

        assert strategy.value == EXACT
        assert exact.clicks == 1
        assert generic.clicks == 0

    @pytest.mark.asyncio
    async def test_partial_value_input(self):
        """Test partial-value inputs are matched when no exact value exists"""
        page = FakePage()
        partial = page.add(FakeElement(tag="input", type="submit", value="Confirm forwarding"), PARTIAL)

        strategy = await click_confirmation_button(page)

        assert strategy.value == PARTIAL
        assert partial.clicks == 1

    @pytest.mark.asyncio
    async def test_invisible_match_skipped(self):
        """Test hidden controls are passed over for the next strategy"""
        page = FakePage()
        hidden = page.add(FakeElement(tag="input", type="submit", value="Confirm", visible=False), EXACT)
        submit = page.add(FakeElement(tag="button", type="submit", text="OK"), SUBMIT_BUTTON)

        strategy = await click_confirmation_button(page)

        assert strategy.value == SUBMIT_BUTTON
        assert hidden.clicks == 0
        assert submit.clicks == 1

    @pytest.mark.asyncio
    async def test_only_first_visible_match_clicked(self):
        """Test later matches of the winning selector are ignored"""
        page = FakePage()
        first = page.add(FakeElement(tag="button", type="submit", text="Confirm"), SUBMIT_BUTTON)
        second = page.add(FakeElement(tag="button", type="submit", text="Confirm"), SUBMIT_BUTTON)

        await click_confirmation_button(page)

        assert first.clicks == 1
        assert second.clicks == 0

    @pytest.mark.asyncio
    async def test_text_scan_case_insensitive(self):
        """Test a plain button is found by its text"""
        page = FakePage()
        other = page.add(FakeElement(tag="button", text="Cancel"))
        button = page.add(FakeElement(tag="button", text="CONFIRM Forwarding"))

        strategy = await click_confirmation_button(page)

        assert strategy.kind == SelectorKind.TEXT
        assert strategy.value == "confirm"
        assert button.clicks == 1
        assert other.clicks == 0

    @pytest.mark.asyncio
    async def test_text_scan_yes(self):
        """Test 'yes' buttons are the last resort"""
        page = FakePage()
        button = page.add(FakeElement(tag="button", text="Yes, proceed"))

        strategy = await click_confirmation_button(page)

        assert strategy.value == "yes"
        assert button.clicks == 1

    @pytest.mark.asyncio
    async def test_text_scan_reads_input_values(self):
        """Test input buttons are matched on their value"""
        page = FakePage()
        button = page.add(FakeElement(tag="input", type="button", value="Confirm"))

        await click_confirmation_button(page)

        assert button.clicks == 1

    @pytest.mark.asyncio
    async def test_click_error_moves_to_next_strategy(self):
        """Test a control that raises on click does not end the search"""
        page = FakePage()
        broken = page.add(
            FakeElement(tag="input", type="submit", value="Confirm", click_error=RuntimeError("detached")),
            EXACT,
        )
        submit = page.add(FakeElement(tag="button", type="submit", text="Go"), SUBMIT_BUTTON)

        strategy = await click_confirmation_button(page)

        assert strategy.value == SUBMIT_BUTTON
        assert broken.clicks == 0
        assert submit.clicks == 1

    @pytest.mark.asyncio
    async def test_no_control_found(self):
        """Test exhausting every strategy"""
        page = FakePage()
        page.add(FakeElement(tag="button", text="Cancel"))

        with pytest.raises(ButtonNotFound) as exc_info:
            await click_confirmation_button(page)

        assert exc_info.value.message == "No confirmation button found"
        assert exc_info.value.url == page.url

    @pytest.mark.asyncio
    async def test_custom_strategies(self):
        """Test callers can supply their own strategy list"""
        page = FakePage()
        button = page.add(FakeElement(tag="a", text="Verify"), "a.verify")

        strategy = await click_confirmation_button(
            page, strategies=[SelectorStrategy(kind=SelectorKind.CSS, value="a.verify")]
        )

        assert strategy.value == "a.verify"
        assert button.clicks == 1


class TestButtonInventory:
    """Test diagnostic capture"""

    @pytest.mark.asyncio
    async def test_inventory_lists_button_like_elements(self):
        """Test tag/type/value/text is captured for each element"""
        page = FakePage()
        page.add(FakeElement(tag="button", text="Cancel"))
        page.add(FakeElement(tag="input", type="submit", value="Send"))

        inventory = await collect_button_inventory(page)

        assert inventory == [
            {"tag": "button", "type": None, "value": None, "text": "Cancel"},
            {"tag": "input", "type": "submit", "value": "Send", "text": ""},
        ]

    @pytest.mark.asyncio
    async def test_inventory_empty_page(self):
        """Test an empty page yields an empty inventory"""
        assert await collect_button_inventory(FakePage()) == []
