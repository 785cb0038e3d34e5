"""Transaction feed: home, personal, public and contacts tabs."""

from __future__ import annotations

import logging
import re

from rwaprobe.exceptions import OutcomeError
from rwaprobe.outcome.probes import css_spec, visible
from rwaprobe.outcome.types import PollResult, SelectorSpec
from rwaprobe.pages.base import BasePage

logger = logging.getLogger(__name__)

_AMOUNT_RE = re.compile(r"\$(\d{1,3}(?:,\d{3})+|\d+)(\.\d{2})?")
_LOAD_MORE = re.compile(r"load more", re.IGNORECASE)
_NO_TRANSACTIONS = re.compile(r"no transactions", re.IGNORECASE)
_TRANSACTION_TIMEOUT_MS = 10_000


def parse_amount(text: str | None) -> float | None:
    """Extract the first dollar amount from *text* (``"$1,234.50"`` -> ``1234.5``)."""
    if not text:
        return None
    match = _AMOUNT_RE.search(text)
    if match is None:
        return None
    return float(match.group(1).replace(",", "") + (match.group(2) or ""))


class FeedPage(BasePage):
    """Home feed of transactions."""

    @property
    def nav_home_spec(self) -> SelectorSpec:
        return css_spec(
            self.page,
            '[data-test="sidenav-home"]',
            '[data-test="nav-home"], [data-testid="nav-home"], #nav-home',
            'a:has-text("Home")',
        )

    @property
    def transaction_list(self):
        return self.page.get_by_test_id("transaction-list")

    @property
    def transaction_items(self):
        return self.transaction_list.locator('[data-test^="transaction-item-"]')

    @property
    def load_more_button(self):
        return self.page.get_by_text(_LOAD_MORE)

    @property
    def empty_state(self):
        return self.page.get_by_text(_NO_TRANSACTIONS)

    def _tab(self, name: str):
        return self.page.get_by_test_id(f"nav-{name}-tab")

    # ---- navigation ----

    async def navigate_to_home(self) -> None:
        await self._click(self.nav_home_spec, "home link")
        await self.expect_feed_loaded()

    async def switch_to_personal_feed(self) -> None:
        await self.navigate_to_home()
        await self._tab("personal").click()
        await self.expect_feed_loaded()

    async def switch_to_public_feed(self) -> None:
        await self._tab("public").click()
        await self.expect_feed_loaded()

    async def switch_to_contacts_feed(self) -> None:
        await self._tab("contacts").click()
        await self.expect_feed_loaded()

    async def refresh_feed(self) -> None:
        await self.page.reload()
        await self.expect_feed_loaded()

    # ---- assertions ----

    async def expect_feed_loaded(self) -> PollResult:
        """Wait for either a transaction list or the empty-feed message."""
        result = await self._expect(
            [
                visible(self.transaction_list, "transaction list"),
                visible(self.empty_state, "empty feed"),
            ],
            "load feed",
        )
        await self.page.wait_for_load_state("networkidle")
        return result

    async def expect_transactions_present(self) -> None:
        await self.expect_feed_loaded()
        await self._expect_visible(self.transaction_items, "first transaction")

    async def expect_transaction_visible(self, amount: int | float, note: str | None = None) -> None:
        await self._expect_visible(
            self.page.get_by_text(f"${amount}"), f"amount ${amount}", _TRANSACTION_TIMEOUT_MS
        )
        if note:
            await self._expect_visible(self.page.get_by_text(note), f"note {note!r}")
        await self.navigate_to_home()

    # ---- reading ----

    async def transaction_count(self) -> int:
        await self.expect_feed_loaded()
        return await self.transaction_items.count()

    async def first_transaction_details(self) -> dict[str, object]:
        await self.expect_transactions_present()
        first = self.transaction_items.first
        text = await first.text_content()
        return {"text": text, "amount": parse_amount(text), "visible": await first.is_visible()}

    async def search_transaction(self, term: str):
        """Return the first feed item whose text contains *term*, or ``None``."""
        items = self.transaction_items
        for i in range(await items.count()):
            item = items.nth(i)
            text = await item.text_content()
            if text and term in text:
                return item
        return None

    async def load_more_transactions(self) -> int:
        """Click "Load more" when offered and require the list to grow."""
        initial = await self.transaction_count()
        if not await self.load_more_button.is_visible():
            logger.debug("No 'Load more' button — feed has %d item(s).", initial)
            return initial
        await self.load_more_button.click()
        await self.page.wait_for_load_state("networkidle")
        updated = await self.transaction_count()
        if updated <= initial:
            raise OutcomeError(
                "load more transactions",
                message=f"Feed did not grow after 'Load more' ({initial} -> {updated}).",
            )
        return updated
