"""
Exceptions raised by the smart account SDK.

Failures coming from the chain, the signer or the paymaster are not wrapped:
they reach the caller as raised by the underlying library.
"""
from typing import Any, Optional


class SmartAccountError(Exception):
    """Base exception for all SDK-raised errors."""
    pass


class ConfigurationError(SmartAccountError, ValueError):
    """Raised when required configuration is missing or malformed."""
    pass


class UnsupportedChainError(SmartAccountError):
    """Raised when no liquidity pool is registered for a destination chain."""

    def __init__(self, chain_id: int):
        self.chain_id = chain_id
        super().__init__(f"ChainId {chain_id} is not supported")


class PreconditionFailedError(SmartAccountError):
    """Raised when an admissibility check reports failure."""

    DEFAULT_MESSAGE = "Pre deposit check failed with unknown error"

    def __init__(self, reason: Optional[str] = None):
        self.reason = reason
        super().__init__(reason or self.DEFAULT_MESSAGE)


class NodeClientError(SmartAccountError):
    """Raised when the node service returns an error response."""

    def __init__(self, message: str, status_code: Optional[int] = None, response_body: Any = None):
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message)


class PaymasterError(SmartAccountError):
    """Raised when the paymaster signing service returns an unusable body."""
    pass
