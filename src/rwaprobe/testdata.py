"""Seeded test data: users, contacts and transactions of the app database."""

from __future__ import annotations

import json
import logging
import random
import string
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rwaprobe.models import Contact, Transaction, User

logger = logging.getLogger(__name__)

PAYMENT_MIN_AMOUNT = 5
PAYMENT_MAX_AMOUNT = 100
DEFAULT_NOTE = "QA Automation Test Payment"
VALID_AMOUNTS = (5, 10, 25, 50, 100)
INVALID_AMOUNTS = (-1, 0, 1_000_000)
MAX_NOTE_LENGTH = 255

ENDPOINTS = {
    "login": "/login",
    "logout": "/logout",
    "transactions": "/transactions",
    "users": "/users",
    "contacts": "/contacts",
    "bank_accounts": "/bankAccounts",
    "notifications": "/notifications",
}

_MIN_TEST_BALANCE = 1000
_MAX_VALID_USERS = 5

_DEFAULT_USERS: list[dict[str, Any]] = [
    {
        "id": "uBmeaz5pX",
        "username": "Heath93",
        "firstName": "Ted",
        "lastName": "Parisian",
        "email": "Santos.Runte65@gmail.com",
        "phoneNumber": "398-225-9900",
        "defaultPrivacyLevel": "public",
        "balance": 150953,
        "createdAt": "2023-03-09T22:26:40.101Z",
    },
]

# Used when the database has fewer valid users than roles to fill.
_FALLBACK_ROSTER = (
    User(id="uBmeaz5pX", username="Heath93", first_name="Ted",
         last_name="Parisian", email="Santos.Runte65@gmail.com"),
    User(id="GjWovtg2hr", username="Arvilla_Hegmann", first_name="Kristian",
         last_name="Bradtke", email="Skyla.Stamm@yahoo.com"),
    User(id="_XblMqbuoP", username="Dina20", first_name="Darrel",
         last_name="Ortiz", email="Marielle_Wiza@yahoo.com"),
)


class DatabaseSnapshot:
    """Read-only view over the app's seeded ``database.json``."""

    def __init__(self, data: dict[str, Any]) -> None:
        self._users = [User.from_dict(u) for u in data.get("users", [])]
        self._contacts = [Contact.from_dict(c) for c in data.get("contacts", [])]
        self._transactions = [Transaction.from_dict(t) for t in data.get("transactions", [])]

    @classmethod
    def load(cls, path: str | Path) -> "DatabaseSnapshot":
        """Load *path*, falling back to a built-in one-user dataset."""
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not load %s (%s); using default data.", path, exc)
            data = {"users": _DEFAULT_USERS}
        return cls(data)

    @property
    def users(self) -> list[User]:
        return list(self._users)

    def valid_users(self) -> list[User]:
        """Public users with enough balance to pay from."""
        return [
            u
            for u in self._users
            if u.username
            and u.balance > _MIN_TEST_BALANCE
            and u.default_privacy_level != "private"
        ][:_MAX_VALID_USERS]

    def user_by_username(self, username: str) -> User | None:
        return next((u for u in self._users if u.username == username), None)

    def contacts_of(self, user_id: str) -> list[Contact]:
        return [c for c in self._contacts if c.user_id == user_id]

    def contact_user(self, contact: Contact) -> User | None:
        return next((u for u in self._users if u.id == contact.contact_user_id), None)

    def transactions_of(self, user_id: str) -> list[Transaction]:
        return [
            t for t in self._transactions
            if t.sender_id == user_id or t.receiver_id == user_id
        ]

    def recent_transactions(self, limit: int = 10) -> list[Transaction]:
        return sorted(
            self._transactions, key=lambda t: _parse_ts(t.created_at), reverse=True
        )[:limit]


def _parse_ts(value: str) -> datetime:
    """Parse an ISO timestamp as UTC; naive values are taken as UTC, junk sorts oldest."""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class UserRoster:
    """The three accounts checks log in with."""

    primary: User
    secondary: User
    tertiary: User
    password: str = ""

    @classmethod
    def from_snapshot(cls, snapshot: DatabaseSnapshot, password: str = "") -> "UserRoster":
        valid = snapshot.valid_users()
        picked = [
            valid[i] if i < len(valid) else fallback
            for i, fallback in enumerate(_FALLBACK_ROSTER)
        ]
        return cls(*picked, password=password)

    def all(self) -> list[User]:
        return [self.primary, self.secondary, self.tertiary]

    def random_user(self) -> User:
        return random.choice(self.all())


def random_amount(min_amount: int = PAYMENT_MIN_AMOUNT, max_amount: int = PAYMENT_MAX_AMOUNT) -> int:
    return random.randint(min_amount, max_amount)


def unique_note(prefix: str = DEFAULT_NOTE) -> str:
    """Return *prefix* tagged with a timestamp and random suffix."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{prefix} - {datetime.now(timezone.utc).isoformat()} - {suffix}"
