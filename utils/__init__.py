"""Utility modules for cross-cutting concerns."""

from utils.timezone import now_utc, today_in, days_from_today
from utils.formatting import round_cents, format_currency
