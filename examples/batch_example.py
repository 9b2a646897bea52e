#!/usr/bin/env python3
"""
Example of batching several calls into one user operation.
"""
import os

from web3 import Web3

from smart_account_sdk import (
    ClientConfig,
    LocalSigner,
    NetworkConfig,
    SmartWalletAPI,
    TransactionManager,
    WalletTransaction,
    Web3ChainReader,
)
from smart_account_sdk.utils import offline_contract

ERC20_ABI = [
    {
        "inputs": [
            {"name": "spender", "type": "address"},
            {"name": "amount", "type": "uint256"}
        ],
        "name": "approve",
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"}
        ],
        "name": "transfer",
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function"
    }
]


def main():
    """
    Approve a spender and transfer tokens in a single operation.
    """
    NETWORK = os.environ.get("NETWORK", "polygon-mumbai")
    PRIVATE_KEY = os.environ.get("PRIVATE_KEY")
    WALLET_ADDRESS = os.environ.get("WALLET_ADDRESS")
    TOKEN = os.environ.get("TOKEN_ADDRESS")
    SPENDER = os.environ.get("SPENDER_ADDRESS")

    if not PRIVATE_KEY or not WALLET_ADDRESS or not TOKEN or not SPENDER:
        print("ERROR: PRIVATE_KEY, WALLET_ADDRESS, TOKEN_ADDRESS and SPENDER_ADDRESS are required")
        return

    chain = Web3ChainReader(rpc_url=NetworkConfig.get_rpc_url(NETWORK))
    config = ClientConfig.from_network(NETWORK)
    spender = Web3.to_checksum_address(SPENDER)
    token = offline_contract(ERC20_ABI)
    wallet = SmartWalletAPI(chain, LocalSigner(PRIVATE_KEY), config, wallet_address=WALLET_ADDRESS)

    manager = TransactionManager(multi_send_address=config.multi_send_address)
    batch = manager.create_transaction_batch(
        version="1.0.1",
        transactions=[
            WalletTransaction(
                to=TOKEN,
                data=token.encode_abi("approve", args=[spender, 10**18]),
            ),
            WalletTransaction(
                to=TOKEN,
                data=token.encode_abi("transfer", args=[spender, 10**17]),
            ),
        ],
        batch_id=0,
        chain_id=config.chain_id,
    )
    print(f"Batch: {batch.summary()}")

    op = manager.build_user_operation(wallet, batch)
    print(f"Signed operation for {op.sender} with nonce {op.nonce}")


if __name__ == "__main__":
    main()
