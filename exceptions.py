# exceptions.py
from typing import Any, Optional


class SonicError(Exception):
    """Base class for every error raised while processing an account."""


class NetworkError(SonicError):
    """HTTP request failed, timed out, or could not be made (e.g. no auth token)."""


class ServerBusinessError(SonicError):
    """The API answered with an error message, e.g. 'already claimed'."""

    def __init__(self, message: Any, status_code: Optional[int] = None):
        message = message if isinstance(message, str) else str(message)
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SignatureError(SonicError):
    """Signing the auth challenge or a transaction failed."""


class ChainSubmissionError(SonicError):
    """RPC rejected the transaction or confirmation failed."""
