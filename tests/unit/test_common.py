"""Unit tests for common utils (pure functions only; DB-backed ones need integration)."""
from datetime import date, datetime

import pytest

from quickstudy.models.models import User
from quickstudy.utils.common import display_name, iso_date, iso_format


@pytest.mark.unit
class TestIsoFormat:
    def test_appends_z(self):
        dt = datetime(2025, 1, 15, 12, 30, 0)
        result = iso_format(dt)
        assert result == "2025-01-15T12:30:00Z"

    def test_iso_date(self):
        assert iso_date(date(2025, 1, 15)) == "2025-01-15"
        assert iso_date(None) is None


@pytest.mark.unit
class TestDisplayName:
    def test_display_name_set(self):
        user = User(email="u@example.com", hashed_password="", display_name="  Alice ")
        assert display_name(user) == "Alice"

    def test_fallback_to_email_prefix(self):
        user = User(email="bob.smith@example.com", hashed_password="", display_name=None)
        assert display_name(user) == "bob.smith"

    def test_blank_name_falls_back(self):
        user = User(email="carol@example.com", hashed_password="", display_name="   ")
        assert display_name(user) == "carol"
