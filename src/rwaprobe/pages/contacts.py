"""Contacts tab: navigation with selector fallback and contact selection."""

from __future__ import annotations

import logging
import random
import re

from rwaprobe.exceptions import OutcomeError
from rwaprobe.outcome.probes import css_spec, text_visible, url_matches, visible
from rwaprobe.outcome.types import PollResult, SelectorSpec
from rwaprobe.pages.base import BasePage

logger = logging.getLogger(__name__)

_CONTACTS_TEXT = re.compile(r"contacts", re.IGNORECASE)
_SELECT_TIMEOUT_MS = 10_000
_RANDOM_POOL = 5


class ContactsPage(BasePage):
    """Contacts list reached from the top navigation tabs."""

    @property
    def nav_contacts_spec(self) -> SelectorSpec:
        return css_spec(
            self.page,
            '[data-test="nav-contacts-tab"]',
            '[data-testid="nav-contacts"]',
            '[data-test="nav-contacts"]',
            '[aria-label="Contacts"]',
            'button:has-text("Contacts")',
        )

    @property
    def transaction_list(self):
        return self.page.get_by_test_id("transaction-list")

    @property
    def contact_items(self):
        return self.transaction_list.locator('[data-test^="transaction-item-"]')

    async def navigate_to_contacts(self) -> None:
        await self.page.wait_for_load_state("domcontentloaded")
        resolved = await self._click(self.nav_contacts_spec, "contacts tab")
        logger.debug("Contacts tab clicked via %s.", resolved.strategy.name)
        await self._expect_visible(self.page.get_by_text(_CONTACTS_TEXT), "contacts heading")
        await self.page.wait_for_load_state("networkidle")

    async def select_first_contact(self) -> None:
        await self.navigate_to_contacts()
        await self._expect_visible(self.transaction_list, "contact list", _SELECT_TIMEOUT_MS)
        await self.contact_items.first.click()
        await self._expect(
            [url_matches(self.page, r"/transaction/", "transaction detail url")],
            "open first contact",
        )

    async def select_random_contact(self) -> PollResult:
        """Click one of the first few contacts at random."""
        await self.navigate_to_contacts()
        await self._expect_visible(self.transaction_list, "contact list", _SELECT_TIMEOUT_MS)
        count = await self.contact_items.count()
        if count == 0:
            raise OutcomeError("select contact", message="No contacts available to select.")
        index = random.randrange(min(count, _RANDOM_POOL))
        await self.contact_items.nth(index).click()
        return await self.expect_contact_selected()

    async def expect_contact_selected(self) -> PollResult:
        return await self._expect(
            [
                visible(self.page.get_by_test_id("user-profile"), "user profile"),
                visible(self.page.get_by_test_id("contact-info"), "contact info"),
                text_visible(self.page, r"pay", "pay action"),
            ],
            "select contact",
            _SELECT_TIMEOUT_MS,
        )

    async def expect_contacts_page_loaded(self) -> None:
        await self._expect_visible(self.page.get_by_text(_CONTACTS_TEXT), "contacts heading", _SELECT_TIMEOUT_MS)
        await self._expect_visible(self.transaction_list, "contact list", _SELECT_TIMEOUT_MS)

    async def available_contacts(self, limit: int = 10) -> list[str]:
        """Return the visible text of up to *limit* contacts."""
        await self.navigate_to_contacts()
        items = self.contact_items
        contacts: list[str] = []
        for i in range(min(await items.count(), limit)):
            text = await items.nth(i).text_content()
            if text and text.strip():
                contacts.append(text.strip())
        return contacts
