"""Smoke-run coordinator — Launch → Check → Classify → Report."""

from __future__ import annotations

import logging
import re
import time
from typing import Awaitable, Callable

from rwaprobe.api.client import RwaApiClient
from rwaprobe.browser.base import BrowserAdapter
from rwaprobe.browser.playwright_adapter import PlaywrightAdapter
from rwaprobe.exceptions import IndeterminateOutcomeError, OutcomeError
from rwaprobe.models import CheckRecord, RunMetrics
from rwaprobe.outcome.probes import url_matches
from rwaprobe.outcome.poller import require_success
from rwaprobe.pages.contacts import ContactsPage
from rwaprobe.pages.feed import FeedPage
from rwaprobe.pages.login import LoginPage
from rwaprobe.pages.payment import PaymentPage
from rwaprobe.reporting.console import print_banner, print_check, print_run_report
from rwaprobe.settings import AppSettings
from rwaprobe.testdata import (
    DEFAULT_NOTE,
    PAYMENT_MIN_AMOUNT,
    DatabaseSnapshot,
    UserRoster,
    random_amount,
    unique_note,
)

logger = logging.getLogger(__name__)

Check = Callable[[], Awaitable[None]]


class SmokeRunner:
    """Runs the smoke checks in order and classifies each outcome."""

    def __init__(self, settings: AppSettings, adapter: BrowserAdapter | None = None) -> None:
        self._settings = settings
        self._adapter = adapter or PlaywrightAdapter()
        self._metrics = RunMetrics()
        self._roster: UserRoster | None = None
        self._last_payment_note: str | None = None

    @property
    def metrics(self) -> RunMetrics:
        return self._metrics

    async def run(self) -> RunMetrics:
        """Execute every check against a freshly launched browser."""
        password = self._settings.require_password()
        snapshot = DatabaseSnapshot.load(self._settings.database_path)
        self._roster = UserRoster.from_snapshot(snapshot, password)

        print_banner(self._settings.base_url)
        await self._adapter.launch(
            base_url=self._settings.base_url,
            headless=self._settings.headless,
            slow_mo=self._settings.slow_mo,
            viewport=(self._settings.viewport_width, self._settings.viewport_height),
            default_timeout_ms=self._settings.timeout_ms,
        )
        try:
            for index, (name, check) in enumerate(self.checks(), start=1):
                record = await self.run_check(name, check)
                print_check(record, index)
        finally:
            await self._adapter.close()

        self._metrics.finalize()
        print_run_report(self._metrics)
        return self._metrics

    def checks(self) -> list[tuple[str, Check]]:
        return [
            ("app loads", self._check_app_loads),
            ("invalid login rejected", self._check_invalid_login),
            ("valid login", self._check_valid_login),
            ("feed loads", self._check_feed_loads),
            ("contacts navigation", self._check_contacts),
            ("payment form validates", self._check_payment_form),
            ("payment shows in feed", self._check_payment),
            ("feed views", self._check_feed_views),
            ("payment listed by api", self._check_payment_api),
            ("payments from every user", self._check_payments_for_each_user),
            ("logout", self._check_logout),
        ]

    async def run_check(self, name: str, check: Check) -> CheckRecord:
        """Run one check and record it as passed, failed, indeterminate or errored."""
        started = time.monotonic()
        outcome, detail = "passed", ""
        try:
            await check()
        except IndeterminateOutcomeError as exc:
            outcome, detail = "indeterminate", str(exc)
            logger.warning("Check %r indeterminate: %s", name, exc)
        except OutcomeError as exc:
            outcome, detail = "failed", str(exc)
            logger.warning("Check %r failed: %s", name, exc)
        except Exception as exc:
            outcome, detail = "errored", f"{type(exc).__name__}: {exc}"
            logger.exception("Check %r errored.", name)
        else:
            logger.info("Check %r passed.", name)

        record = CheckRecord(
            name=name,
            outcome=outcome,
            detail=detail,
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        self._metrics.add(record)
        return record

    # ---- helpers ----

    def _login_page(self) -> LoginPage:
        return LoginPage(self._adapter.page, self._settings)

    async def _sign_in(self) -> LoginPage:
        assert self._roster is not None
        await self._adapter.reset_session()
        login = self._login_page()
        await login.goto()
        await login.login(self._roster.primary.username, self._roster.password)
        return login

    # ---- checks ----

    async def _check_app_loads(self) -> None:
        await self._adapter.reset_session()
        await self._login_page().goto()

    async def _check_invalid_login(self) -> None:
        await self._adapter.reset_session()
        login = self._login_page()
        await login.goto()
        result = await login.login_with_validation("invalid_user", "invalid_pass")
        if result.is_timeout:
            raise IndeterminateOutcomeError("reject invalid login", self._settings.login_timeout_ms)
        if result.is_success:
            raise OutcomeError(
                "reject invalid login", result.label, "Invalid credentials were accepted."
            )
        await login.expect_login_error()
        await login.clear_form()
        await login.expect_login_form_visible()

    async def _check_valid_login(self) -> None:
        login = await self._sign_in()
        await login.expect_login_success()

    async def _check_feed_loads(self) -> None:
        await self._sign_in()
        await FeedPage(self._adapter.page, self._settings).navigate_to_home()

    async def _check_contacts(self) -> None:
        await self._sign_in()
        contacts = ContactsPage(self._adapter.page, self._settings)
        await contacts.navigate_to_contacts()
        await contacts.expect_contacts_page_loaded()

    async def _check_payment(self) -> None:
        assert self._roster is not None
        await self._sign_in()
        amount = random_amount()
        note = unique_note(f"Smoke payment by {self._roster.primary.username}")
        await PaymentPage(self._adapter.page, self._settings).send_payment(amount, note)
        self._last_payment_note = note
        await FeedPage(self._adapter.page, self._settings).expect_transaction_visible(amount, note)

    async def _check_payment_form(self) -> None:
        await self._sign_in()
        page = self._adapter.page
        await ContactsPage(page, self._settings).select_first_contact()
        payment = PaymentPage(page, self._settings)
        await payment.navigate_to_new_transaction()
        await payment.expect_form_validation()
        await payment.validate_amount_input(str(PAYMENT_MIN_AMOUNT))
        await payment.validate_note_input(DEFAULT_NOTE)
        state = await payment.form_state()
        if not state["submit_enabled"]:
            raise OutcomeError(
                "validate payment form", message=f"Pay button disabled for a complete form: {state}."
            )

    async def _check_feed_views(self) -> None:
        await self._sign_in()
        feed = FeedPage(self._adapter.page, self._settings)
        await feed.switch_to_personal_feed()
        await feed.expect_transactions_present()
        await feed.switch_to_public_feed()
        await feed.expect_transactions_present()
        await feed.switch_to_contacts_feed()
        await feed.expect_transactions_present()
        details = await feed.first_transaction_details()
        logger.info("Contacts feed leads with %r.", details["text"])

    async def _check_payment_api(self) -> None:
        assert self._roster is not None
        if self._last_payment_note is None:
            raise OutcomeError("find payment via api", message="No payment was sent earlier in this run.")
        async with RwaApiClient(self._settings.api_url, timeout_ms=self._settings.timeout_ms) as api:
            await api.login(self._roster.primary.username, self._roster.password)
            txn = await api.wait_for_transaction(
                self._last_payment_note, self._settings.poll_config()
            )
            logger.info("Payment %s listed by the API.", txn.get("id"))

    async def _check_payments_for_each_user(self) -> None:
        """Every roster user signs in, pays a contact and sees it in the feed."""
        assert self._roster is not None
        for user in self._roster.all():
            if not user.username:
                logger.warning("Skipping roster user %s without a username.", user.id)
                continue
            await self._adapter.reset_session()
            login = self._login_page()
            await login.goto()
            await login.login(user.username, self._roster.password)
            page = self._adapter.page
            await ContactsPage(page, self._settings).select_first_contact()
            amount = random_amount()
            note = unique_note(f"Test for {user.username}")
            await PaymentPage(page, self._settings).send_payment_with_validation(amount, note)
            await FeedPage(page, self._settings).expect_transaction_visible(amount, note)
            await login.logout()

    async def _check_logout(self) -> None:
        login = await self._sign_in()
        await login.logout()
        await require_success(
            [url_matches(self._adapter.page, re.compile(r"/signin"), "sign-in url")],
            self._settings.poll_config(),
            action="return to sign-in page",
        )
