"""
Tests for field validators
"""

from decimal import Decimal

import pytest

from admin_console.validators import (
    MaxAmount,
    NonNegativeAmount,
    PositiveAmount,
    Required,
    account_number,
    national_id,
    parse_amount,
    phone,
    routing_code,
    tax_id,
)


class TestParseAmount:
    """Test numeric input parsing"""

    def test_valid_amounts(self):
        assert parse_amount("100") == Decimal("100")
        assert parse_amount(" 12.50 ") == Decimal("12.50")
        assert parse_amount(7) == Decimal("7")

    @pytest.mark.parametrize("value", [None, "", "abc", float("nan"), float("inf"), True, "NaN"])
    def test_rejected_amounts(self, value):
        assert parse_amount(value) is None


class TestRequired:
    """Test the required validator"""

    def test_blank_values(self):
        validator = Required("Bank name")
        assert validator("") == "Bank name is required"
        assert validator("   ") == "Bank name is required"
        assert validator(None) == "Bank name is required"

    def test_present_value(self):
        assert Required("Bank name")("SBI") is None

    def test_custom_message(self):
        assert Required(message="Please select a service")("") == "Please select a service"


class TestPatterns:
    """Test format validators"""

    def test_ifsc(self):
        validator = routing_code()
        assert validator("SBIN0001234") is None
        assert validator("sbin0001234") is None
        assert validator("HDFC0ABC123") is None
        assert validator("SBIN1001234") == "Invalid IFSC code format (e.g., SBIN0001234)"
        assert validator("SBIN000123") is not None
        assert validator.is_format is True

    def test_empty_left_to_required(self):
        """Test format validators pass empty input"""
        assert routing_code()("") is None
        assert phone()(None) is None

    def test_pan(self):
        validator = tax_id()
        assert validator("ABCDE1234F") is None
        assert validator("ABCD1234F") == "Invalid PAN number format. Should be like: ABCDE1234F"

    def test_aadhaar(self):
        validator = national_id()
        assert validator("123412341234") is None
        assert validator("12341234123") == "Invalid Aadhar number. Should be 12 digits"

    def test_phone(self):
        validator = phone()
        assert validator("9876543210") is None
        assert validator("0876543210") == "Invalid phone number"
        assert validator("98765") == "Invalid phone number"

    def test_account_number(self):
        validator = account_number()
        assert validator("123456789") is None
        assert validator("123456789012345678") is None
        assert validator("12345678") == "Account number must be 9-18 digits"
        assert validator("1234567890123456789") == "Account number must be 9-18 digits"
        assert validator("12345678A") == "Account number must be 9-18 digits"


class TestAmounts:
    """Test numeric validators"""

    def test_non_negative(self):
        validator = NonNegativeAmount("Limit amount")
        assert validator(0) is None
        assert validator("10.5") is None
        assert validator(-5) == "Limit amount cannot be negative"
        assert validator("abc") == "Limit amount must be a valid number"
        assert validator.is_format is False

    def test_positive(self):
        validator = PositiveAmount(message="Please enter a valid amount greater than 0.")
        assert validator("1") is None
        assert validator("0") == "Please enter a valid amount greater than 0."
        assert validator("") == "Please enter a valid amount greater than 0."

    def test_positive_default_message(self):
        assert PositiveAmount("Amount")(0) == "Please enter a valid amount greater than 0"

    def test_max(self):
        validator = MaxAmount("10000000")
        assert validator("10000000") is None
        assert validator("10000000.01") is not None
        assert validator("abc") is None
