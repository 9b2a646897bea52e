"""
Signer interface for the smart account SDK.

Any object with an ``address`` attribute and a ``sign(digest)`` method can
own a wallet; ``LocalSigner`` covers the common private-key case.
"""
from typing import Protocol, Union

from .local import LocalSigner

__all__ = ["Signer", "LocalSigner"]


class Signer(Protocol):
    """Protocol for digest signers"""
    address: str

    def sign(self, digest: Union[bytes, str]) -> str:
        """Sign a 32-byte digest and return the signature as 0x-prefixed hex"""
        ...
