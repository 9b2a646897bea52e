"""
Transaction batches.

A batch groups wallet transactions and carries the intent the operation
builder turns into a user operation: a single transaction is called
directly, several are bundled through a MultiSend delegate call.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from eth_abi.packed import encode_packed
from web3 import Web3

from .exceptions import ConfigurationError
from .models import TransactionBatch, TransactionIntent, UserOperation, WalletTransaction
from .utils import hex_to_bytes, offline_contract

logger = logging.getLogger(__name__)

MULTI_SEND_ABI = [
    {
        "inputs": [
            {"internalType": "bytes", "name": "transactions", "type": "bytes"}
        ],
        "name": "multiSend",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function"
    }
]

MULTI_SEND_TX_TYPES = ["uint8", "address", "uint256", "uint256", "bytes"]


def encode_multi_send(transactions: Sequence[WalletTransaction]) -> str:
    """
    Encode transactions for MultiSend.

    Each transaction is packed as
    operation (uint8) | to (address) | value (uint256) | data length (uint256) | data.

    Returns:
        Call data for ``multiSend(bytes)``
    """
    packed = b""
    for tx in transactions:
        data = hex_to_bytes(tx.data)
        packed += encode_packed(
            MULTI_SEND_TX_TYPES,
            [tx.operation, Web3.to_checksum_address(tx.to), tx.value, len(data), data]
        )
    return offline_contract(MULTI_SEND_ABI).encode_abi("multiSend", args=[packed])


class TransactionManager:
    """Creates transaction batches and hands them to an operation builder"""

    def __init__(self, multi_send_address: Optional[str] = None, logger: Optional[logging.Logger] = None):
        self.multi_send_address = multi_send_address
        self.logger = logger or logging.getLogger(__name__)

    def create_transaction_batch(
        self,
        version: str,
        transactions: Sequence[Union[WalletTransaction, Dict[str, Any]]],
        batch_id: int,
        chain_id: int
    ) -> TransactionBatch:
        """
        Create a batch of wallet transactions

        Args:
            version: Wallet contract version the batch targets
            transactions: Transactions to execute, in order
            batch_id: Nonce lane of the batch
            chain_id: Chain the batch executes on

        Returns:
            TransactionBatch with its builder intent

        Raises:
            ValueError: If no transactions are given
            ConfigurationError: If several transactions are given without a MultiSend address
        """
        txs: List[WalletTransaction] = [
            tx if isinstance(tx, WalletTransaction) else WalletTransaction.model_validate(tx)
            for tx in transactions
        ]
        if not txs:
            raise ValueError("A transaction batch needs at least one transaction")

        if len(txs) == 1:
            tx = txs[0]
            intent = TransactionIntent(
                target=tx.to,
                value=tx.value,
                data=tx.data,
                is_delegate_call=tx.operation == 1,
                batch_id=batch_id,
            )
        else:
            if not self.multi_send_address:
                raise ConfigurationError("multi_send_address is required to batch several transactions")
            intent = TransactionIntent(
                target=self.multi_send_address,
                value=0,
                data=encode_multi_send(txs),
                is_delegate_call=True,
                batch_id=batch_id,
            )

        batch = TransactionBatch(
            version=version,
            transactions=txs,
            batch_id=batch_id,
            chain_id=chain_id,
            intent=intent,
        )
        self.logger.debug(f"Created transaction batch: {batch.summary()}")
        return batch

    def build_user_operation(self, builder: Any, batch: TransactionBatch, sign: bool = True) -> UserOperation:
        """
        Turn a batch into a user operation

        Args:
            builder: UserOperationBuilder or SmartWalletAPI of the executing wallet
            batch: Batch created by create_transaction_batch
            sign: Whether to sign the operation

        Returns:
            The built operation, signed when ``sign`` is True
        """
        if sign:
            return builder.create_signed_operation(batch.intent)
        return builder.create_unsigned_operation(batch.intent)
