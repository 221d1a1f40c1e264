"""
Operator input parsing.

Everything typed into the editor passes through here before it reaches a
model or the pricing engine. Each parser returns a typed, range-checked
value or raises QuoteValidationError naming the field.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from core.exceptions import QuoteValidationError
from core.models import MAX_AMOUNT_CENTS, MAX_INSTALLMENTS, MAX_PRODUCTION_DAYS


def _normalize_separators(text: str) -> str:
    """
    Reduce typed separators to a single decimal point.

    A lone comma or dot is the decimal point ("0.500" is half a real).
    Dots are thousands separators only when a comma decimal follows them
    ("1.234,56"); commas are when a dot decimal follows ("1,234.56").
    """
    if "," in text and "." in text:
        if text.rfind(",") > text.rfind("."):
            return text.replace(".", "").replace(",", ".")
        return text.replace(",", "")
    return text.replace(",", ".")


def _to_decimal(raw: str | int | float | Decimal, field: str) -> Decimal:
    if isinstance(raw, bool):
        raise QuoteValidationError(f"{field}: expected a number")

    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, int):
        value = Decimal(raw)
    elif isinstance(raw, float):
        # str() keeps the shortest repr, so 0.1 stays 0.1
        value = Decimal(str(raw))
    else:
        text = str(raw).strip().replace("R$", "").replace(" ", "")
        if not text:
            raise QuoteValidationError(f"{field}: value is required")
        try:
            value = Decimal(_normalize_separators(text))
        except InvalidOperation:
            raise QuoteValidationError(f"{field}: '{raw}' is not a number")

    if not value.is_finite():
        raise QuoteValidationError(f"{field}: '{raw}' is not a number")
    return value


def _to_whole(value: Decimal, field: str, message: str) -> int:
    if value != value.to_integral_value():
        raise QuoteValidationError(f"{field}: {message}")
    return int(value)


def parse_amount(raw: str | int | float | Decimal, field: str = "amount") -> int:
    """
    Parse a currency amount in the base unit into integer cents.

    Accepts comma or dot decimals ("1500,50", "1.500,50", "1500.5").
    Sub-cent input is rounded half up.

    Raises:
        QuoteValidationError: If the value is not a number, is negative or
            is above MAX_AMOUNT_CENTS.
    """
    value = _to_decimal(raw, field)
    if value < 0:
        raise QuoteValidationError(f"{field}: must not be negative")
    if value > Decimal(MAX_AMOUNT_CENTS) / 100:
        raise QuoteValidationError(f"{field}: amount is too large")
    try:
        cents = (value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise QuoteValidationError(f"{field}: '{raw}' is not a valid amount")
    return int(cents)


def parse_percent(raw: str | int | float | Decimal, field: str = "discount_percent") -> Decimal:
    """
    Parse a discount percentage.

    Raises:
        QuoteValidationError: If the value is outside 0-100.
    """
    value = _to_decimal(raw, field)
    if value < 0 or value > 100:
        raise QuoteValidationError(f"{field}: must be between 0 and 100")
    return value


def parse_installments(raw: str | int, field: str = "installments") -> int:
    """
    Parse an installment count.

    Raises:
        QuoteValidationError: If the value is not a whole number from 1 to
            MAX_INSTALLMENTS.
    """
    value = _to_decimal(raw, field)
    if value < 1 or value > MAX_INSTALLMENTS:
        raise QuoteValidationError(f"{field}: must be between 1 and {MAX_INSTALLMENTS}")
    return _to_whole(value, field, "must be a whole number")


def parse_production_days(raw: str | int, field: str = "production_days") -> int:
    """Parse a whole number of production days, 0 to MAX_PRODUCTION_DAYS."""
    value = _to_decimal(raw, field)
    message = f"must be a whole number of days, 0 to {MAX_PRODUCTION_DAYS}"
    if value < 0 or value > MAX_PRODUCTION_DAYS:
        raise QuoteValidationError(f"{field}: {message}")
    return _to_whole(value, field, message)


def parse_quote_payload(payload: dict) -> dict:
    """
    Normalize raw editor input for a quote before model validation.

    Line items may arrive with a typed `amount` ("1.500,00") instead of
    `amount_cents`; payment options may carry typed percentages and
    installment counts. Returns a new dict; the input is not modified.

    Raises:
        QuoteValidationError: On the first unparseable value, naming its field.
    """
    data = dict(payload)

    items = []
    for index, raw_item in enumerate(data.get("items") or []):
        item = dict(raw_item)
        if "amount" in item:
            item["amount_cents"] = parse_amount(item.pop("amount"), f"items[{index}].amount")
        items.append(item)
    if "items" in data:
        data["items"] = items

    if data.get("payment_options") is not None:
        options = []
        for index, raw_option in enumerate(data["payment_options"]):
            option = dict(raw_option)
            if "discount_percent" in option:
                option["discount_percent"] = parse_percent(
                    option["discount_percent"], f"payment_options[{index}].discount_percent"
                )
            if "installments" in option:
                option["installments"] = parse_installments(
                    option["installments"], f"payment_options[{index}].installments"
                )
            options.append(option)
        data["payment_options"] = options

    if "production_days" in data:
        data["production_days"] = parse_production_days(data["production_days"])

    return data
