"""
Broadcast error types.

Every failure of a send (or of a deferred inclusion check) surfaces as one of
these. The per-attempt "not yet included" failures inside the poller are the
only ones swallowed.
"""

from typing import Any, Optional


class BroadcastError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details


class TransportError(BroadcastError):
    """Network/HTTP failure before any usable JSON was available."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("transport_error", message, details)


class MalformedResponseError(BroadcastError):
    """JSON arrived but was neither a tx hash nor a list of them."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("malformed_response", message, details)


class ChainRejectionError(BroadcastError):
    """Well-formed envelope carrying a nonzero execution code."""

    def __init__(
        self,
        message: str,
        chain_code: int,
        codespace: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__("chain_rejection", message, details)
        self.chain_code = chain_code
        self.codespace = codespace


class SigningError(BroadcastError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("signing_error", message, details)


class InclusionTimeoutError(BroadcastError):
    def __init__(self, message: str, attempts: int, details: Optional[dict[str, Any]] = None):
        super().__init__("inclusion_timeout", message, details)
        self.attempts = attempts
