"""Domain models for rwaprobe."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class User:
    """Immutable view of a seeded application user."""

    id: str
    username: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    password: str = ""
    phone_number: str = ""
    default_privacy_level: str = "public"
    balance: int = 0
    created_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        return cls(
            id=str(data.get("id", "")),
            username=str(data.get("username", "")),
            first_name=str(data.get("firstName", "")),
            last_name=str(data.get("lastName", "")),
            email=str(data.get("email", "")),
            password=str(data.get("password", "")),
            phone_number=str(data.get("phoneNumber", "")),
            default_privacy_level=str(data.get("defaultPrivacyLevel", "public")),
            balance=int(data.get("balance") or 0),
            created_at=str(data.get("createdAt", "")),
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class Contact:
    id: str
    user_id: str
    contact_user_id: str
    created_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Contact":
        return cls(
            id=str(data.get("id", "")),
            user_id=str(data.get("userId", "")),
            contact_user_id=str(data.get("contactUserId", "")),
            created_at=str(data.get("createdAt", "")),
        )


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: int
    description: str = ""
    sender_id: str = ""
    receiver_id: str = ""
    status: str = ""
    request_status: str = ""
    privacy_level: str = "public"
    created_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        return cls(
            id=str(data.get("id", "")),
            amount=int(data.get("amount") or 0),
            description=str(data.get("description", "")),
            sender_id=str(data.get("senderId", "")),
            receiver_id=str(data.get("receiverId", "")),
            status=str(data.get("status", "")),
            request_status=str(data.get("requestStatus", "")),
            privacy_level=str(data.get("privacyLevel", "public")),
            created_at=str(data.get("createdAt", "")),
        )


@dataclass
class CheckRecord:
    """Outcome of a single functional check."""

    name: str
    outcome: str  # passed, failed, indeterminate, errored
    detail: str = ""
    duration_ms: int = 0


@dataclass
class RunMetrics:
    """Aggregated counters for one check run."""

    run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    started_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    ended_at: str = ""
    records: list[CheckRecord] = field(default_factory=list)

    def add(self, record: CheckRecord) -> None:
        self.records.append(record)

    def count(self, outcome: str) -> int:
        return sum(1 for r in self.records if r.outcome == outcome)

    @property
    def all_passed(self) -> bool:
        return all(r.outcome == "passed" for r in self.records)

    def finalize(self) -> None:
        self.ended_at = datetime.now(timezone.utc).isoformat()
