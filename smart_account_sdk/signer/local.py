"""
Private-key signer backed by eth-account.
"""
from typing import Union

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount

from ..utils import hex_to_bytes, to_hex


class LocalSigner:
    """
    Signs request ids with a local private key.

    The digest is signed as an EIP-191 personal message over its raw bytes,
    which is what smart wallets recover against their owner.
    """

    def __init__(self, private_key: str):
        self._account: LocalAccount = Account.from_key(private_key)

    @property
    def address(self) -> str:
        return self._account.address

    def sign(self, digest: Union[bytes, str]) -> str:
        """
        Sign a 32-byte digest

        Args:
            digest: The digest as bytes or hex string

        Returns:
            65-byte signature (r || s || v) as hex string

        Raises:
            ValueError: If the digest is not 32 bytes long
        """
        digest_bytes = hex_to_bytes(digest)
        if len(digest_bytes) != 32:
            raise ValueError(f"Digest must be 32 bytes, got {len(digest_bytes)}")
        signed = self._account.sign_message(encode_defunct(primitive=digest_bytes))
        return to_hex(bytes(signed.signature))
