"""
Field Validators

Each validator is called with a field value and returns an error message, or
None when the value is acceptable. Format validators (`is_format = True`) may be
skipped by the form controller when a value is unchanged from what is already
stored, so records that predate a stricter pattern can still be edited.
"""

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional


IFSC_PATTERN = re.compile(r'^[A-Z]{4}0[A-Z0-9]{6}$')
PAN_PATTERN = re.compile(r'^[A-Z]{5}[0-9]{4}[A-Z]$')
AADHAAR_PATTERN = re.compile(r'^\d{12}$')
PHONE_PATTERN = re.compile(r'^[1-9]\d{9}$')
ACCOUNT_NUMBER_PATTERN = re.compile(r'^\d{9,18}$')


def parse_amount(value: Any) -> Optional[Decimal]:
    """Parse a numeric input into a finite Decimal, or None"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


class Validator:
    """Base validator"""
    is_format = False
    message = "Invalid value"

    def __call__(self, value: Any) -> Optional[str]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Required(Validator):
    """Non-empty after trimming"""

    def __init__(self, label: str = "This field", message: Optional[str] = None):
        self.message = message or f"{label} is required"

    def __call__(self, value: Any) -> Optional[str]:
        if value is None or not str(value).strip():
            return self.message
        return None


class Pattern(Validator):
    """Full-match a regular expression; empty values are left to Required"""
    is_format = True

    def __init__(self, pattern: "re.Pattern", message: str, upper: bool = False):
        self.pattern = pattern
        self.message = message
        self.upper = upper

    def __call__(self, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        if not text:
            return None
        if self.upper:
            text = text.upper()
        if not self.pattern.match(text):
            return self.message
        return None


class NonNegativeAmount(Validator):
    """Finite number >= 0"""

    def __init__(self, label: str = "Amount", message: Optional[str] = None):
        self.label = label
        self.message = message or f"{label} cannot be negative"

    def __call__(self, value: Any) -> Optional[str]:
        amount = parse_amount(value)
        if amount is None:
            return f"{self.label} must be a valid number"
        if amount < 0:
            return self.message
        return None


class PositiveAmount(Validator):
    """Finite number > 0"""

    def __init__(self, label: str = "Amount", message: Optional[str] = None):
        self.label = label
        self.message = message or f"Please enter a valid {label.lower()} greater than 0"

    def __call__(self, value: Any) -> Optional[str]:
        amount = parse_amount(value)
        if amount is None or amount <= 0:
            return self.message
        return None


class MaxAmount(Validator):
    """Number <= limit"""

    def __init__(self, limit: Any, label: str = "Amount", message: Optional[str] = None):
        self.limit = Decimal(str(limit))
        self.message = message or f"Maximum {label.lower()} is {self.limit:,}"

    def __call__(self, value: Any) -> Optional[str]:
        amount = parse_amount(value)
        if amount is not None and amount > self.limit:
            return self.message
        return None


def required(label: str = "This field") -> Required:
    return Required(label)


def routing_code() -> Pattern:
    """IFSC: 4 letters, a literal zero, 6 alphanumerics (case-normalised)"""
    return Pattern(IFSC_PATTERN, "Invalid IFSC code format (e.g., SBIN0001234)", upper=True)


def tax_id() -> Pattern:
    """PAN: 5 letters, 4 digits, 1 letter"""
    return Pattern(PAN_PATTERN, "Invalid PAN number format. Should be like: ABCDE1234F")


def national_id() -> Pattern:
    """Aadhaar: exactly 12 digits"""
    return Pattern(AADHAAR_PATTERN, "Invalid Aadhar number. Should be 12 digits")


def phone() -> Pattern:
    """10 digits, not starting with zero"""
    return Pattern(PHONE_PATTERN, "Invalid phone number")


def account_number() -> Pattern:
    return Pattern(ACCOUNT_NUMBER_PATTERN, "Account number must be 9-18 digits")


def non_negative_amount(label: str = "Amount") -> NonNegativeAmount:
    return NonNegativeAmount(label)


def positive_amount(label: str = "Amount", message: Optional[str] = None) -> PositiveAmount:
    return PositiveAmount(label, message)


def max_amount(limit: Any, label: str = "Amount", message: Optional[str] = None) -> MaxAmount:
    return MaxAmount(limit, label, message)
