"""Sign-in page: credential entry, login outcome detection and sign-out."""

from __future__ import annotations

import logging
import re

from rwaprobe.outcome.poller import poll
from rwaprobe.outcome.probes import (
    css_spec,
    locator_strategy,
    title_matches,
    url_not_matching,
    visible,
)
from rwaprobe.outcome.types import Outcome, PollResult, Probe, SelectorSpec
from rwaprobe.pages.base import BasePage

logger = logging.getLogger(__name__)

_APP_TITLE = re.compile(r"Cypress Real World App")
_SIGNIN_URL = re.compile(r"/signin")
_SIGN_OUT_TEXT = re.compile(r"sign out|logout", re.IGNORECASE)

# The sidenav renders differently across viewports, so any of these counts.
_LOGGED_IN_SELECTORS = (
    '[data-test="sidenav-user-full-name"]',
    '[data-test="sidenav-username"]',
    ".NavDrawer-avatar img",
    '[data-test="sidenav-home"], [data-testid="sidenav-home"]',
    '[data-test="nav-home"], [data-testid="nav-home"], #nav-home',
)

_SIGNOUT_TIMEOUT_MS = 2_000


class LoginPage(BasePage):
    """Sign-in form of the app."""

    # ---- locators ----

    @property
    def username_input(self):
        return self.page.locator("input#username")

    @property
    def password_input(self):
        return self.page.locator("input#password")

    @property
    def submit_spec(self) -> SelectorSpec:
        return css_spec(
            self.page,
            '[data-test="signin-submit"]',
            '[data-testid="signin-submit"]',
            'button:has-text("Sign In")',
        )

    @property
    def remember_me(self):
        return self.page.locator(
            '[data-test="signin-remember-me"], [data-testid="signin-remember-me"], input[name="remember"]'
        )

    @property
    def error_message(self):
        return self.page.locator(
            '[data-test*="signin-error"], [data-testid*="signin-error"], .error-message, [role="alert"]'
        )

    @property
    def sign_out_spec(self) -> SelectorSpec:
        page = self.page
        return SelectorSpec(
            primary=locator_strategy(
                page.locator('[data-test="sidenav-signout"], [data-testid="sidenav-signout"]'),
                "sidenav sign-out",
            ),
            fallbacks=(
                locator_strategy(
                    page.locator('[data-test="nav-signout"], [data-testid="nav-signout"]'),
                    "top-nav sign-out",
                ),
                locator_strategy(page.get_by_role("button", name=_SIGN_OUT_TEXT), "sign-out button"),
                locator_strategy(page.get_by_text(_SIGN_OUT_TEXT), "sign-out text"),
            ),
        )

    # ---- outcome detection ----

    def login_result_probes(self) -> list[Probe]:
        """Logged-in indicators plus the sign-in error banner."""
        probes = [visible(self.page.locator(sel), sel) for sel in _LOGGED_IN_SELECTORS]
        probes.append(visible(self.error_message, "sign-in error", Outcome.ERROR))
        return probes

    async def wait_for_login_result(self, timeout_ms: float | None = None) -> PollResult:
        timeout = self._settings.login_timeout_ms if timeout_ms is None else timeout_ms
        return await poll(self.login_result_probes(), self._config(timeout))

    # ---- actions ----

    async def goto(self) -> None:
        await self.page.goto("/")
        await self._expect([title_matches(self.page, _APP_TITLE, "app title")], "load app")
        await self.expect_login_form_visible()

    async def _submit_credentials(
        self, username: str, password: str, remember_me: bool = False
    ) -> None:
        await self.username_input.fill(username)
        await self.password_input.fill(password)
        if remember_me:
            await self._tick_remember_me()
        await self._click(self.submit_spec, "sign-in button")

    async def _tick_remember_me(self) -> None:
        checkbox = self.remember_me.first
        try:
            if await checkbox.get_attribute("type") == "checkbox":
                if not await checkbox.is_checked():
                    await checkbox.check()
                return
        except Exception as exc:
            logger.debug("Checkbox API failed on remember-me (%s); clicking instead.", exc)
        await checkbox.click()

    async def login(self, username: str, password: str, remember_me: bool = False) -> PollResult:
        """Sign in and require a logged-in indicator.

        Raises :class:`OutcomeError` when the error banner shows and
        :class:`IndeterminateOutcomeError` when neither signal appears.
        """
        await self._submit_credentials(username, password, remember_me)
        result = await self._expect(
            self.login_result_probes(),
            f"login as {username}",
            self._settings.login_timeout_ms,
        )
        await self._expect(
            [url_not_matching(self.page, _SIGNIN_URL, "left sign-in page")],
            "leave sign-in page",
        )
        logger.info("Logged in as %s (%s).", username, result.label)
        return result

    async def login_with_validation(self, username: str, password: str) -> PollResult:
        """Sign in and return the classified result instead of raising."""
        await self._submit_credentials(username, password)
        return await self.wait_for_login_result()

    async def logout(self) -> None:
        resolved = await self._click(self.sign_out_spec, "sign-out control", _SIGNOUT_TIMEOUT_MS)
        logger.debug("Signed out via %s.", resolved.strategy.name)
        await self._expect_visible(self.username_input, "username input")

    async def clear_form(self) -> None:
        await self.username_input.fill("")
        await self.password_input.fill("")

    # ---- assertions ----

    async def expect_login_form_visible(self) -> None:
        await self._expect_visible(self.username_input, "username input")
        await self._expect_visible(self.password_input, "password input")
        await self._expect_control(self.submit_spec, "sign-in button")
        await self._expect_visible(
            self.page.get_by_role("heading", name=re.compile(r"sign in", re.IGNORECASE)),
            "sign-in heading",
        )

    async def expect_login_error(self, error_text: str | None = None) -> None:
        await self._expect_visible(self.error_message, "sign-in error")
        if error_text:
            await self._expect_visible(self.page.get_by_text(error_text), f"error text {error_text!r}")

    async def expect_login_success(self) -> None:
        await self._expect_visible(
            self.page.locator('[data-test="nav-home"], [data-testid="nav-home"], #nav-home, a:has-text("Home")'),
            "home link",
        )
        await self._expect(
            [url_not_matching(self.page, _SIGNIN_URL, "left sign-in page")],
            "leave sign-in page",
        )
