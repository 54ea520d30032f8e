"""
Session / Identity Module

Supplies the bearer token for API calls and the acting admin's identity,
decoded locally from the token. Tokens are never validated against the
network here: signature checks belong to the backend.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import jwt

from .config import get_config
from .errors import SessionExpiredError

logger = logging.getLogger("admin_console.session")


@dataclass(frozen=True)
class AdminIdentity:
    """Identity of the admin acting through the console"""
    id: str
    name: Optional[str] = None
    expires_at: Optional[float] = None  # epoch seconds


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode JWT claims without verifying the signature. None if malformed."""
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid authentication token: {e}")
        return None


def is_expired(claims: Dict[str, Any], now: Optional[float] = None) -> bool:
    """Check the `exp` claim; tokens without one never expire locally"""
    exp = claims.get("exp")
    if exp is None:
        return False
    now = time.time() if now is None else now
    try:
        return float(exp) < now
    except (TypeError, ValueError):
        logger.warning(f"Unreadable exp claim: {exp!r}")
        return True


def identity_from_token(token: str, id_claim: Optional[str] = None,
                        name_claim: Optional[str] = None) -> Optional[AdminIdentity]:
    """Build an AdminIdentity from a token, or None if unusable"""
    config = get_config()
    id_claim = id_claim or config.token_claim_admin_id
    name_claim = name_claim or config.token_claim_name
    
    claims = decode_token(token)
    if not claims or is_expired(claims):
        return None
    
    admin_id = claims.get(id_claim) or claims.get("sub")
    if not admin_id:
        return None
    
    return AdminIdentity(
        id=str(admin_id),
        name=claims.get(name_claim),
        expires_at=claims.get("exp")
    )


class SessionProvider(ABC):
    """Capability passed to every client and controller"""
    
    @abstractmethod
    def get_token(self) -> Optional[str]:
        """Current bearer token, if any"""
        pass
    
    def get_identity(self) -> Optional[AdminIdentity]:
        """Acting admin decoded from the current token"""
        token = self.get_token()
        if not token:
            return None
        return identity_from_token(token)
    
    def require_identity(self) -> AdminIdentity:
        """Identity or SessionExpiredError"""
        identity = self.get_identity()
        if identity is None:
            raise SessionExpiredError()
        return identity


class StaticSessionProvider(SessionProvider):
    """Session backed by a fixed token, e.g. one forwarded from a request"""
    
    def __init__(self, token: Optional[str]):
        self._token = token or None
    
    def get_token(self) -> Optional[str]:
        return self._token


class InMemorySessionStore(SessionProvider):
    """Mutable token store; expired tokens are dropped on read"""
    
    def __init__(self, token: Optional[str] = None):
        self._token = token
    
    def set_token(self, token: str) -> None:
        self._token = token
    
    def clear(self) -> None:
        self._token = None
    
    def get_token(self) -> Optional[str]:
        if self._token is None:
            return None
        claims = decode_token(self._token)
        if claims is not None and is_expired(claims):
            logger.info("Session token expired, clearing")
            self._token = None
        return self._token
