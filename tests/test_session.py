"""
Tests for session tokens and admin identity
"""

import time

import pytest

from admin_console.errors import SessionExpiredError
from admin_console.session import (
    InMemorySessionStore,
    StaticSessionProvider,
    decode_token,
    identity_from_token,
    is_expired,
)
from conftest import make_token


class TestTokenDecoding:
    """Test local JWT decoding"""

    def test_decode_valid_token(self):
        claims = decode_token(make_token("ADM042"))
        assert claims["admin_id"] == "ADM042"

    def test_decode_garbage(self):
        assert decode_token("not-a-token") is None

    def test_is_expired(self):
        now = time.time()
        assert is_expired({"exp": now - 10}, now) is True
        assert is_expired({"exp": now + 10}, now) is False
        assert is_expired({}, now) is False

    def test_unreadable_exp_counts_as_expired(self):
        assert is_expired({"exp": "tomorrow"}) is True
        assert is_expired({"exp": ["1"]}) is True


class TestIdentity:
    """Test identity extraction"""

    def test_identity_from_token(self):
        identity = identity_from_token(make_token("ADM042", "Kiran"))
        assert identity.id == "ADM042"
        assert identity.name == "Kiran"
        assert identity.expires_at is not None

    def test_identity_falls_back_to_sub(self):
        token = make_token(admin_id="", sub="ADM007")
        assert identity_from_token(token).id == "ADM007"

    def test_expired_token_has_no_identity(self):
        assert identity_from_token(make_token(expires_in=-60)) is None

    def test_malformed_exp_has_no_identity(self):
        token = make_token(expires_in=None, exp="tomorrow")
        assert identity_from_token(token) is None
        assert StaticSessionProvider(token).get_identity() is None

    def test_custom_claim(self):
        token = make_token(uid="U9")
        assert identity_from_token(token, id_claim="uid").id == "U9"


class TestSessionProviders:
    """Test session provider implementations"""

    def test_static_provider(self):
        session = StaticSessionProvider(make_token("ADM001"))
        assert session.require_identity().id == "ADM001"

    def test_missing_token(self):
        session = StaticSessionProvider(None)
        assert session.get_token() is None
        assert session.get_identity() is None
        with pytest.raises(SessionExpiredError) as exc_info:
            session.require_identity()
        assert exc_info.value.message == "Session expired. Please login again."

    def test_store_drops_expired_token(self):
        store = InMemorySessionStore(make_token(expires_in=-60))
        assert store.get_token() is None

    def test_store_set_and_clear(self):
        store = InMemorySessionStore()
        token = make_token("ADM002")
        store.set_token(token)
        assert store.get_token() == token
        assert store.get_identity().id == "ADM002"

        store.clear()
        assert store.get_token() is None
