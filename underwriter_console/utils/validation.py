"""Input validation helpers shared by forms and search boxes"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
BVN_PATTERN = re.compile(r"^\d{11}$")
ACCOUNT_NUMBER_PATTERN = re.compile(r"^\d{10}$")


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email or ""))


def is_valid_bvn(bvn: str) -> bool:
    """BVNs are exactly 11 digits"""
    return bool(BVN_PATTERN.match(bvn or ""))


def is_valid_account_number(account_number: str) -> bool:
    """NUBAN account numbers are exactly 10 digits"""
    return bool(ACCOUNT_NUMBER_PATTERN.match(account_number or ""))


def is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def parse_positive_amount(raw: Optional[str]) -> Optional[Decimal]:
    """
    Parse a money amount typed by a user.

    Accepts thousands separators ("50,000") and surrounding whitespace.
    Returns None for anything that is not a finite number greater than zero.
    """
    if is_blank(raw):
        return None
    cleaned = str(raw).strip().replace(",", "")
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    return amount
