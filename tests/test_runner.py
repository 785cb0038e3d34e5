"""Tests for the smoke runner (mock browser)."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from rwaprobe.exceptions import ConfigurationError, IndeterminateOutcomeError, OutcomeError
from rwaprobe.runner import SmokeRunner
from rwaprobe.settings import AppSettings
from rwaprobe.testdata import DatabaseSnapshot, UserRoster


@pytest.fixture()
def settings(tmp_database_json):
    return AppSettings(test_password="s3cret", database_path=str(tmp_database_json))


async def _passes() -> None:
    return None


async def _fails() -> None:
    raise OutcomeError("send payment", "amount validation error")


async def _undecided() -> None:
    raise IndeterminateOutcomeError("send payment", 500)


async def _crashes() -> None:
    raise RuntimeError("browser went away")


@pytest.mark.asyncio
async def test_run_check_classifies_outcomes(settings):
    runner = SmokeRunner(settings, adapter=AsyncMock())
    passed = await runner.run_check("ok", _passes)
    failed = await runner.run_check("bad", _fails)
    undecided = await runner.run_check("slow", _undecided)
    errored = await runner.run_check("crash", _crashes)

    assert passed.outcome == "passed"
    assert failed.outcome == "failed"
    assert "amount validation error" in failed.detail
    assert undecided.outcome == "indeterminate"
    assert errored.outcome == "errored"
    assert errored.detail == "RuntimeError: browser went away"

    metrics = runner.metrics
    assert [r.name for r in metrics.records] == ["ok", "bad", "slow", "crash"]
    assert metrics.count("failed") == 1
    assert metrics.count("indeterminate") == 1
    assert not metrics.all_passed


@pytest.mark.asyncio
async def test_run_requires_password(tmp_database_json, monkeypatch):
    monkeypatch.delenv("RWAPROBE_TEST_PASSWORD", raising=False)
    adapter = AsyncMock()
    runner = SmokeRunner(AppSettings(database_path=str(tmp_database_json)), adapter=adapter)
    with pytest.raises(ConfigurationError):
        await runner.run()
    adapter.launch.assert_not_awaited()


@pytest.mark.asyncio
async def test_run_launches_checks_and_closes(settings):
    adapter = AsyncMock()
    runner = SmokeRunner(settings, adapter=adapter)
    with patch.object(SmokeRunner, "checks", return_value=[("one", _passes), ("two", _fails)]):
        metrics = await runner.run()

    adapter.launch.assert_awaited_once()
    assert adapter.launch.await_args.kwargs["base_url"] == "http://localhost:3000"
    adapter.close.assert_awaited_once()
    assert [r.outcome for r in metrics.records] == ["passed", "failed"]
    assert metrics.ended_at


@pytest.mark.asyncio
async def test_browser_closed_when_check_loop_breaks(settings):
    adapter = AsyncMock()
    runner = SmokeRunner(settings, adapter=adapter)
    with patch.object(SmokeRunner, "run_check", side_effect=RuntimeError("boom")):
        with pytest.raises(RuntimeError):
            await runner.run()
    adapter.close.assert_awaited_once()


def test_default_check_order(settings):
    names = [name for name, _ in SmokeRunner(settings, adapter=AsyncMock()).checks()]
    assert names[0] == "app loads"
    assert names.index("payment shows in feed") < names.index("payment listed by api")
    assert names[-1] == "logout"


@pytest.mark.asyncio
async def test_api_check_fails_without_earlier_payment(settings):
    runner = SmokeRunner(settings, adapter=AsyncMock())
    runner._roster = object()
    record = await runner.run_check("payment listed by api", runner._check_payment_api)
    assert record.outcome == "failed"


def _pages():
    """Patch every page object the runner builds; returns name -> instance mock."""
    instances = {name: AsyncMock() for name in ("LoginPage", "ContactsPage", "PaymentPage", "FeedPage")}
    patchers = [
        patch(f"rwaprobe.runner.{name}", return_value=instance) for name, instance in instances.items()
    ]
    return instances, patchers


@pytest.mark.asyncio
async def test_every_roster_user_pays_and_signs_out(settings, tmp_database_json):
    runner = SmokeRunner(settings, adapter=AsyncMock())
    runner._roster = UserRoster.from_snapshot(DatabaseSnapshot.load(tmp_database_json), "s3cret")
    pages, patchers = _pages()
    for p in patchers:
        p.start()
    try:
        record = await runner.run_check("payments from every user", runner._check_payments_for_each_user)
    finally:
        for p in patchers:
            p.stop()

    assert record.outcome == "passed"
    logins = [c.args for c in pages["LoginPage"].login.await_args_list]
    assert logins == [("rich_public", "s3cret"), ("rich_contacts", "s3cret"), ("Dina20", "s3cret")]
    assert pages["PaymentPage"].send_payment_with_validation.await_count == 3
    assert pages["ContactsPage"].select_first_contact.await_count == 3
    assert pages["LoginPage"].logout.await_count == 3
    notes = [c.args[1] for c in pages["FeedPage"].expect_transaction_visible.await_args_list]
    assert notes[2].startswith("Test for Dina20 - ")


@pytest.mark.asyncio
async def test_payment_form_check_fails_when_pay_stays_disabled(settings, tmp_database_json):
    runner = SmokeRunner(settings, adapter=AsyncMock())
    runner._roster = UserRoster.from_snapshot(DatabaseSnapshot.load(tmp_database_json), "s3cret")
    pages, patchers = _pages()
    pages["PaymentPage"].form_state.return_value = {"submit_enabled": False}
    for p in patchers:
        p.start()
    try:
        record = await runner.run_check("payment form validates", runner._check_payment_form)
    finally:
        for p in patchers:
            p.stop()

    assert record.outcome == "failed"
    pages["PaymentPage"].expect_form_validation.assert_awaited_once()
    pages["PaymentPage"].validate_amount_input.assert_awaited_once_with("5")


@pytest.mark.asyncio
async def test_feed_views_visits_every_tab(settings, tmp_database_json):
    runner = SmokeRunner(settings, adapter=AsyncMock())
    runner._roster = UserRoster.from_snapshot(DatabaseSnapshot.load(tmp_database_json), "s3cret")
    pages, patchers = _pages()
    for p in patchers:
        p.start()
    try:
        record = await runner.run_check("feed views", runner._check_feed_views)
    finally:
        for p in patchers:
            p.stop()

    feed = pages["FeedPage"]
    assert record.outcome == "passed"
    feed.switch_to_personal_feed.assert_awaited_once()
    feed.switch_to_public_feed.assert_awaited_once()
    feed.switch_to_contacts_feed.assert_awaited_once()
    assert feed.expect_transactions_present.await_count == 3
