"""Tests for AuthConfig bounds and defaults."""

import pytest
from pydantic import ValidationError

from auth.config import AuthConfig


class TestAuthConfig:

    def test_defaults(self):
        config = AuthConfig()

        assert config.quote_validity_days == 15
        assert config.default_production_days == 15
        assert config.business_timezone == "America/Sao_Paulo"

    def test_short_password_rejected(self):
        with pytest.raises(ValidationError, match="share_password"):
            AuthConfig(share_password="abc")

    @pytest.mark.parametrize("days", [0, 366])
    def test_validity_bounds(self, days):
        with pytest.raises(ValidationError, match="quote_validity_days"):
            AuthConfig(quote_validity_days=days)

    def test_zero_production_days_allowed(self):
        assert AuthConfig(default_production_days=0).default_production_days == 0
