"""
Tests for response envelope normalisation
"""

import pytest

from admin_console.envelope import extract_message, unwrap_list, unwrap_record


BANKS = [{"bank_id": 1, "bank_name": "SBI"}]


class TestUnwrapList:
    """Test list extraction across the backend's envelope shapes"""

    @pytest.mark.parametrize("raw", [
        BANKS,
        {"data": BANKS},
        {"status": "success", "data": {"bank": BANKS}},
        {"status": "success", "data": {"banks": BANKS}},
        {"banks": BANKS},
    ])
    def test_known_shapes(self, raw):
        assert unwrap_list(raw, "bank") == BANKS

    @pytest.mark.parametrize("raw", [
        None,
        "oops",
        {},
        {"data": None},
        {"data": {"other": BANKS}},
        {"status": "success", "message": "ok"},
    ])
    def test_unknown_shapes_are_empty(self, raw):
        assert unwrap_list(raw, "bank") == []

    def test_bare_list_wins(self):
        """Test the first matching shape is used"""
        assert unwrap_list([], "bank") == []


class TestUnwrapRecord:
    """Test single-record extraction"""

    def test_keyed_data(self):
        raw = {"status": "success", "data": {"retailer": {"retailer_id": "R1"}}}
        assert unwrap_record(raw, "retailer") == {"retailer_id": "R1"}

    def test_plain_data(self):
        raw = {"data": {"retailer_id": "R1"}}
        assert unwrap_record(raw, "retailer") == {"retailer_id": "R1"}

    def test_bare_record(self):
        assert unwrap_record({"retailer_id": "R1"}) == {"retailer_id": "R1"}

    def test_envelope_without_payload(self):
        assert unwrap_record({"status": "error", "message": "not found"}) is None
        assert unwrap_record({}) is None
        assert unwrap_record([{"retailer_id": "R1"}]) is None


class TestExtractMessage:
    """Test message lookup"""

    def test_message_fields(self):
        assert extract_message({"message": "Bank created"}) == "Bank created"
        assert extract_message({"detail": "Not allowed"}) == "Not allowed"
        assert extract_message({"error": "boom"}) == "boom"

    def test_plain_text_body(self):
        assert extract_message("Internal Server Error") == "Internal Server Error"

    def test_default(self):
        assert extract_message({}, default="fallback") == "fallback"
        assert extract_message({"message": ""}, default="fallback") == "fallback"
        assert extract_message(None) == ""
