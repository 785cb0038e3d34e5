"""Shared test fixtures."""

from __future__ import annotations

import json

import pytest


@pytest.fixture()
def tmp_settings_yaml(tmp_path):
    """Write a minimal settings.yaml and return its path."""
    content = """\
base_url: "http://rwa.test:3000/"
api_url: "http://rwa.test:3001"
test_password: "s3cret"
headless: false
expect_timeout_ms: 4000
login_timeout_ms: 2500
poll_interval_ms: 50
database_path: "{db}"
""".format(db=str(tmp_path / "database.json"))
    p = tmp_path / "settings.yaml"
    p.write_text(content)
    return p


@pytest.fixture()
def tmp_database_json(tmp_path):
    """Write a small seeded database.json and return its path."""
    data = {
        "users": [
            {"id": "u1", "username": "rich_public", "firstName": "Ada", "lastName": "Lovelace",
             "balance": 50_000, "defaultPrivacyLevel": "public"},
            {"id": "u2", "username": "poor_public", "balance": 500, "defaultPrivacyLevel": "public"},
            {"id": "u3", "username": "rich_private", "balance": 90_000, "defaultPrivacyLevel": "private"},
            {"id": "u4", "username": "rich_contacts", "balance": 2_000, "defaultPrivacyLevel": "contacts"},
            {"id": "u5", "username": "", "balance": 9_000, "defaultPrivacyLevel": "public"},
        ],
        "contacts": [
            {"id": "c1", "userId": "u1", "contactUserId": "u4"},
            {"id": "c2", "userId": "u4", "contactUserId": "u1"},
        ],
        "transactions": [
            {"id": "t1", "amount": 1000, "description": "old", "senderId": "u1",
             "receiverId": "u4", "createdAt": "2023-01-01T00:00:00.000Z"},
            {"id": "t2", "amount": 2500, "description": "new", "senderId": "u4",
             "receiverId": "u2", "createdAt": "2024-06-01T12:00:00.000Z"},
            {"id": "t3", "amount": 700, "description": "mid", "senderId": "u2",
             "receiverId": "u3", "createdAt": "2023-08-15T08:30:00.000Z"},
        ],
    }
    p = tmp_path / "database.json"
    p.write_text(json.dumps(data))
    return p
