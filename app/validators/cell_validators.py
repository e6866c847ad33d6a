"""
app/validators/cell_validators.py

Stateless single-cell checks and string-to-type transformers.

Every ``validate_*`` function returns an error message or ``None``. Blank
values always pass: presence is the job of required-column checks.
"""

from __future__ import annotations

import math
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Iterable

DATE_FORMAT_HINT = "YYYY-MM-DD"

TRUE_TOKENS = frozenset({"true", "yes", "1"})
FALSE_TOKENS = frozenset({"false", "no", "0"})

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_PHONE_RE = re.compile(r"^[+\d\s-]+$")
_TAGS_RE = re.compile(r"^[a-zA-Z0-9_\-,\s]+$")
_WRAPPING_QUOTES_RE = re.compile(r'^"(.*)"$', re.DOTALL)


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    return str(value).strip() == ""


def validate_email(value: Any) -> str | None:
    if is_blank(value):
        return None
    if not _EMAIL_RE.match(str(value).strip()):
        return "Invalid email address format"
    return None


def validate_date(value: Any) -> str | None:
    if is_blank(value):
        return None
    raw = str(value).strip()
    if not _DATE_RE.match(raw):
        return f"Invalid date format. Expected {DATE_FORMAT_HINT}"
    try:
        date.fromisoformat(raw)
    except ValueError:
        return "Invalid date"
    return None


def parse_date(value: Any) -> date | None:
    """
    Parse a ``YYYY-MM-DD`` cell; blank or unparseable input yields ``None``.
    """

    if isinstance(value, date):
        return value
    if is_blank(value):
        return None
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        return None


def validate_phone(value: Any) -> str | None:
    if is_blank(value):
        return None
    if not _PHONE_RE.match(str(value).strip()):
        return "Invalid phone number format"
    return None


def validate_boolean(value: Any) -> str | None:
    if is_blank(value):
        return None
    if str(value).strip().lower() not in TRUE_TOKENS | FALSE_TOKENS:
        return "Invalid boolean value. Expected true/false, yes/no, or 1/0"
    return None


def to_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if is_blank(value):
        return False
    return str(value).strip().lower() in TRUE_TOKENS


def is_false_token(value: Any) -> bool:
    if isinstance(value, bool):
        return not value
    if is_blank(value):
        return False
    return str(value).strip().lower() in FALSE_TOKENS


def validate_enum(allowed_values: Iterable[str]) -> Callable[[Any], str | None]:
    """
    Build a validator accepting only the given values (case-sensitive).
    """

    allowed = tuple(allowed_values)
    allowed_set = frozenset(allowed)

    def _validate(value: Any) -> str | None:
        if is_blank(value):
            return None
        if str(value).strip() not in allowed_set:
            return f"Invalid value. Expected one of: {', '.join(allowed)}"
        return None

    return _validate


def _strip_wrapping_quotes(value: str) -> str:
    return _WRAPPING_QUOTES_RE.sub(r"\1", value)


def validate_tags(value: Any) -> str | None:
    if is_blank(value):
        return None
    cleaned = _strip_wrapping_quotes(str(value).strip())
    if not _TAGS_RE.match(cleaned):
        return "Invalid tags format. Tags should be comma-separated"
    return None


def to_tags(value: Any) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [str(tag).strip() for tag in value if str(tag).strip()]
    if is_blank(value):
        return []
    cleaned = _strip_wrapping_quotes(str(value).strip())
    return [tag.strip() for tag in cleaned.split(",") if tag.strip()]


def validate_number(value: Any) -> str | None:
    if is_blank(value):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return "Invalid number format"
    if not number.is_finite() or not math.isfinite(float(number)):
        return "Invalid number format"
    return None


def to_number(value: Any) -> int | float:
    """
    Convert a numeric cell to ``int`` when integral, otherwise ``float``.
    """

    if is_blank(value):
        return 0
    number = Decimal(str(value).strip())
    if number == number.to_integral_value():
        return int(number)
    return float(number)


def validate_integer(value: Any) -> str | None:
    message = validate_number(value)
    if message or is_blank(value):
        return message
    number = Decimal(str(value).strip())
    if number != number.to_integral_value():
        return "Invalid whole number. Decimals are not allowed"
    return None


def to_integer(value: Any) -> int:
    if is_blank(value):
        return 0
    return int(Decimal(str(value).strip()))


def validate_number_range(
    minimum: int | float,
    maximum: int | float,
    *,
    integer: bool = False,
) -> Callable[[Any], str | None]:
    """
    Build a validator for numbers within ``[minimum, maximum]``.

    With ``integer=True`` fractional values are rejected as well.
    """

    base_check = validate_integer if integer else validate_number
    lower, upper = Decimal(str(minimum)), Decimal(str(maximum))

    def _validate(value: Any) -> str | None:
        message = base_check(value)
        if message or is_blank(value):
            return message
        number = Decimal(str(value).strip())
        if number < lower or number > upper:
            return f"Value must be between {minimum} and {maximum}"
        return None

    return _validate


def validate_max_length(limit: int) -> Callable[[Any], str | None]:
    def _validate(value: Any) -> str | None:
        if is_blank(value):
            return None
        if len(str(value).strip()) > limit:
            return f"Value is too long. Maximum length is {limit} characters"
        return None

    return _validate


def all_of(*validators: Callable[[Any], str | None]) -> Callable[[Any], str | None]:
    """
    Chain plain validators; the first message returned wins.
    """

    def _validate(value: Any) -> str | None:
        for validator in validators:
            message = validator(value)
            if message:
                return message
        return None

    return _validate