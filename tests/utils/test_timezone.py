"""Tests for utils/timezone.py - UTC stamps and business-local dates."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest

from utils.timezone import days_from_today, now_utc, today_in


class TestNowUtc:
    """Tests for now_utc()."""

    def test_returns_timezone_aware(self):
        """Result must have tzinfo set (not naive)."""
        assert now_utc().tzinfo is not None

    def test_is_utc(self):
        assert now_utc().tzinfo == timezone.utc


class TestBusinessDates:
    """Tests for today_in() and days_from_today()."""

    def test_late_evening_is_still_today_locally(self):
        """01:30 UTC is 22:30 the previous day in Sao Paulo."""
        fixed = datetime(2026, 3, 2, 1, 30, tzinfo=timezone.utc)

        with patch("utils.timezone.now_utc", return_value=fixed):
            assert today_in("America/Sao_Paulo").isoformat() == "2026-03-01"
            assert today_in("UTC").isoformat() == "2026-03-02"

    def test_days_from_today(self):
        fixed = datetime(2026, 3, 2, 15, 0, tzinfo=timezone.utc)

        with patch("utils.timezone.now_utc", return_value=fixed):
            assert days_from_today(15).isoformat() == "2026-03-17"

    def test_matches_zoneinfo(self):
        expected = now_utc().astimezone(ZoneInfo("America/Sao_Paulo")).date() + timedelta(days=3)

        assert days_from_today(3, "America/Sao_Paulo") == expected

    def test_negative_days_rejected(self):
        with pytest.raises(ValueError):
            days_from_today(-1)

    def test_unknown_timezone(self):
        with pytest.raises(ValueError, match="Unknown timezone"):
            today_in("Mars/Olympus_Mons")
