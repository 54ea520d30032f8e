"""
Console Error Taxonomy

Every failure a console action can hit is one of these. None of them is fatal
to the caller: controllers turn them into notices and result objects.
"""

from typing import Any, Optional


class ConsoleError(Exception):
    """Base class for all console errors"""
    
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransportError(ConsoleError):
    """Network failure or timeout talking to the backend"""
    pass


class ServerError(ConsoleError):
    """Error reported by the backend; the message is passed through verbatim"""
    
    def __init__(self, status_code: int, message: str, payload: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class ConflictError(ServerError):
    """A known uniqueness conflict, rewritten into a friendlier message"""
    pass


class SessionExpiredError(ConsoleError):
    """No usable session token (missing, undecodable or expired)"""
    
    def __init__(self, message: str = "Session expired. Please login again."):
        super().__init__(message)
