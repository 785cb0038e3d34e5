"""New-transaction form: payment flow, field validation and confirmation detection."""

from __future__ import annotations

import logging

from rwaprobe.outcome.probes import text_visible, url_matches, visible
from rwaprobe.outcome.types import Outcome, PollResult, Probe
from rwaprobe.pages.base import BasePage

logger = logging.getLogger(__name__)

_USER_LIST_TIMEOUT_MS = 10_000


class PaymentPage(BasePage):
    """The "New" transaction wizard: pick a user, fill amount and note, submit."""

    @property
    def nav_new_transaction(self):
        return self.page.get_by_test_id("nav-top-new-transaction")

    @property
    def first_user_item(self):
        return self.page.locator('[data-test="users-list"] [data-test^="user-list-item-"]').first

    @property
    def amount_input(self):
        return self.page.locator("#amount")

    @property
    def note_input(self):
        return self.page.locator("#transaction-create-description-input")

    @property
    def pay_button(self):
        return self.page.get_by_test_id("transaction-create-submit-payment")

    @property
    def request_button(self):
        return self.page.get_by_test_id("transaction-create-submit-request")

    @property
    def amount_error(self):
        return self.page.locator("#transaction-create-amount-input-helper-text")

    @property
    def note_error(self):
        return self.page.locator("#transaction-create-description-input-helper-text")

    @property
    def success_message(self):
        return self.page.locator('[data-test*="alert"], .success-message, [role="alert"]')

    # ---- navigation ----

    async def navigate_to_new_transaction(self) -> None:
        await self.nav_new_transaction.click()
        await self.expect_payment_form_visible()

    async def expect_payment_form_visible(self) -> None:
        """Pick the first user in the list and wait for the amount form."""
        await self._expect_visible(self.nav_new_transaction, "new transaction button")
        await self._expect_visible(self.first_user_item, "first user in list", _USER_LIST_TIMEOUT_MS)
        await self.first_user_item.scroll_into_view_if_needed()
        await self.first_user_item.click()
        await self._expect_visible(self.amount_input, "amount input")
        await self._expect_visible(self.note_input, "note input")

    # ---- flows ----

    async def fill_form(self, amount: int | float | None = None, note: str | None = None) -> None:
        if amount is not None:
            await self.amount_input.fill(str(amount))
        if note is not None:
            await self.note_input.fill(note)

    async def clear_form(self) -> None:
        await self.amount_input.clear()
        await self.note_input.clear()

    async def send_payment(self, amount: int | float, note: str) -> PollResult:
        await self.navigate_to_new_transaction()
        await self.clear_form()
        await self.fill_form(amount, note)
        await self._expect_enabled(self.pay_button, "pay button")
        await self.pay_button.click()
        result = await self.expect_payment_success()
        logger.info("Payment of %s sent (%s).", amount, result.label)
        return result

    async def send_payment_with_validation(self, amount: int | float, note: str) -> PollResult:
        """Pay while checking the button only enables once the form is complete."""
        await self.navigate_to_new_transaction()
        await self._expect_disabled(self.pay_button, "pay button")
        await self.fill_form(amount=amount)
        await self._expect_disabled(self.pay_button, "pay button")
        await self.fill_form(note=note)
        await self._expect_enabled(self.pay_button, "pay button")
        await self.pay_button.click()
        return await self.expect_payment_success()

    # ---- outcome detection ----

    def _form_error_probes(self) -> list[Probe]:
        return [
            visible(self.amount_error, "amount validation error", Outcome.ERROR),
            visible(self.note_error, "note validation error", Outcome.ERROR),
        ]

    def payment_result_probes(self) -> list[Probe]:
        page = self.page
        return [
            text_visible(page, r"paid", "paid text"),
            text_visible(page, r"transaction complete", "transaction complete text"),
            text_visible(page, r"payment sent", "payment sent text"),
            visible(self.success_message, "success alert"),
            url_matches(page, r"/transaction/(?!new\b)[\w-]+", "transaction detail url"),
            *self._form_error_probes(),
        ]

    async def expect_payment_success(self) -> PollResult:
        return await self._expect(self.payment_result_probes(), "send payment")

    # ---- field validation ----

    async def validate_amount_input(self, amount: str, should_be_valid: bool = True) -> None:
        await self.amount_input.clear()
        await self.amount_input.fill(amount)
        if should_be_valid:
            await self._expect_hidden(self.amount_error, "amount validation error")
        else:
            await self._expect_visible(self.amount_error, "amount validation error")

    async def validate_note_input(self, note: str, should_be_valid: bool = True) -> None:
        await self.note_input.clear()
        await self.note_input.fill(note)
        if should_be_valid:
            await self._expect_hidden(self.note_error, "note validation error")
        else:
            await self._expect_visible(self.note_error, "note validation error")

    async def expect_form_validation(self) -> None:
        """Both submit buttons stay disabled until amount and note are valid."""
        for amount in (None, "0", "25"):
            if amount is not None:
                await self.amount_input.fill(amount)
            await self._expect_disabled(self.pay_button, "pay button")
            await self._expect_disabled(self.request_button, "request button")
        await self.note_input.fill("Test payment")
        await self._expect_enabled(self.pay_button, "pay button")

    async def form_state(self) -> dict[str, object]:
        return {
            "amount": await self.amount_input.input_value(),
            "note": await self.note_input.input_value(),
            "submit_enabled": await self.pay_button.is_enabled(),
            "request_enabled": await self.request_button.is_enabled(),
        }
