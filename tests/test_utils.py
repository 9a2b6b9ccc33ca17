"""Unit tests for utils.parsing and utils.security."""

from datetime import datetime, timedelta, timezone

import pytest

from utils.parsing import (
    clean_text,
    format_timestamp,
    new_id,
    normalize_email,
    normalize_skills,
    parse_timestamp,
    to_int,
    tokenize_search,
)
from utils.security import hash_password, verify_password


class TestParsing:
    def test_clean_text(self):
        assert clean_text(None) == ""
        assert clean_text("  hi ") == "hi"
        assert clean_text(42) == "42"

    def test_normalize_email(self):
        assert normalize_email("  Rajesh@Example.COM ") == "rajesh@example.com"

    @pytest.mark.parametrize("value,expected", [
        (5, 5),
        (5.0, 5),
        ("12", 12),
        (" 800000 ", 800000),
        ("3.0", 3),
        ("3.5", None),
        (2.5, None),
        ("abc", None),
        ("", None),
        (None, None),
        (True, None),
        (2**63 - 1, 2**63 - 1),
        (-2**63, -2**63),
        (2**63, None),
        (10**20, None),
        ("1e20", None),
        ("99999999999999999999", None),
    ])
    def test_to_int(self, value, expected):
        assert to_int(value) == expected

    def test_normalize_skills(self):
        assert normalize_skills("React, node.js, , react") == ["React", "node.js"]
        assert normalize_skills(["Python", " SQL ", ""]) == ["Python", "SQL"]
        assert normalize_skills(None) == []

    def test_tokenize_search(self):
        assert tokenize_search("React, react  NODE.js") == ["react", "node", "js"]
        assert tokenize_search(None) == []
        assert tokenize_search("  ") == []

    def test_timestamps_sort_lexically(self):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        earlier = format_timestamp(base)
        later = format_timestamp(base + timedelta(microseconds=1))
        much_later = format_timestamp(base + timedelta(seconds=10))
        assert earlier < later < much_later
        assert earlier == "2024-01-01T00:00:00.000000+00:00"

    def test_naive_timestamps_are_utc(self):
        assert format_timestamp(datetime(2024, 1, 1)) == "2024-01-01T00:00:00.000000+00:00"

    def test_parse_timestamp(self):
        moment = datetime(2024, 1, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)
        assert parse_timestamp(format_timestamp(moment)) == moment
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None

    def test_new_id_unique(self):
        assert len({new_id() for _ in range(100)}) == 100


class TestPasswordHashing:
    def test_hash_and_verify(self):
        stored = hash_password("password123", iterations=1000)
        assert stored.startswith("pbkdf2_sha256$1000$")
        assert "password123" not in stored
        assert verify_password("password123", stored)
        assert not verify_password("password124", stored)

    def test_salted(self):
        assert hash_password("same", iterations=1000) != hash_password("same", iterations=1000)

    @pytest.mark.parametrize("stored", ["", "plain-text", "md5$1$abc$def", "pbkdf2_sha256$x$abc$def", None])
    def test_malformed_hash_never_matches(self, stored):
        assert not verify_password("anything", stored)

    @pytest.mark.parametrize("password", [None, 1234567, b"password123"])
    def test_non_string_password_never_matches(self, password):
        assert not verify_password(password, hash_password("password123", iterations=1000))
