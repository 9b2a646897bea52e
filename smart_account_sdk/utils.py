"""
Utility functions for the smart account SDK.
"""
from typing import Any, Dict, List, Optional, Type, Union

from eth_abi import encode
from web3 import Web3
from web3.contract import Contract

from .models import UserOperation

_OFFLINE_W3 = Web3()

USER_OP_PACK_TYPES = [
    "address",   # sender
    "uint256",   # nonce
    "bytes32",   # keccak(initCode)
    "bytes32",   # keccak(callData)
    "uint256",   # callGasLimit
    "uint256",   # verificationGasLimit
    "uint256",   # preVerificationGas
    "uint256",   # maxFeePerGas
    "uint256",   # maxPriorityFeePerGas
    "bytes32",   # keccak(paymasterAndData)
]


def hex_to_bytes(value: Union[str, bytes, None]) -> bytes:
    """
    Convert a hex string (with or without 0x prefix) to bytes.

    ``None``, ``""`` and ``"0x"`` all convert to empty bytes.
    """
    if value is None:
        return b""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if value.startswith("0x") or value.startswith("0X"):
        value = value[2:]
    return bytes.fromhex(value)


def to_hex(value: Union[bytes, str]) -> str:
    """Render bytes as a 0x-prefixed hex string."""
    if isinstance(value, str):
        return value if value.startswith("0x") else "0x" + value
    return "0x" + bytes(value).hex()


def parse_number(value: Any) -> Optional[int]:
    """
    Parse an optional numeric value.

    ``None`` and ``""`` mean "not supplied" and return None; hex strings and
    decimal strings are converted; zero is a real value and is kept.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"Expected a number, got {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.lower().startswith("0x"):
        return int(text, 16)
    return int(text)


def function_selector(signature: str) -> bytes:
    """First four bytes of keccak256 of a canonical function signature."""
    return bytes(Web3.keccak(text=signature)[:4])


def offline_contract(abi: List[Dict[str, Any]]) -> Type[Contract]:
    """
    Contract object used only to ABI-encode calls.

    It has no address and is never connected to a node.
    """
    return _OFFLINE_W3.eth.contract(abi=abi)


def pack_user_op(op: UserOperation) -> bytes:
    """
    ABI-encode every field of a user operation except its signature.
    Dynamic byte fields are included by their keccak256 hash.
    """
    values: List[Any] = [
        Web3.to_checksum_address(op.sender),
        op.nonce,
        Web3.keccak(hex_to_bytes(op.init_code)),
        Web3.keccak(hex_to_bytes(op.call_data)),
        op.call_gas_limit,
        op.verification_gas_limit,
        op.pre_verification_gas,
        op.max_fee_per_gas or 0,
        op.max_priority_fee_per_gas or 0,
        Web3.keccak(hex_to_bytes(op.paymaster_and_data)),
    ]
    return encode(USER_OP_PACK_TYPES, values)


def get_request_id(op: UserOperation, entry_point: str, chain_id: int) -> str:
    """
    Compute the request id of a user operation, matching the entry point's
    on-chain computation: keccak256(abi.encode(keccak256(pack(op)), entryPoint, chainId)).

    The signature field of ``op`` does not take part in the hash.
    """
    op_hash = Web3.keccak(pack_user_op(op))
    encoded = encode(
        ["bytes32", "address", "uint256"],
        [op_hash, Web3.to_checksum_address(entry_point), chain_id],
    )
    return to_hex(Web3.keccak(encoded))
