#!/usr/bin/env python3
"""
Simple example of building a signed user operation.
"""
import json
import os

from smart_account_sdk import (
    ClientConfig,
    LocalSigner,
    NetworkConfig,
    SmartWalletAPI,
    TransactionIntent,
    Web3ChainReader,
)


def main():
    """
    Demonstrate basic usage of the SmartWalletAPI.

    This example shows how to:
    1. Build a wallet client from a network configuration
    2. Resolve the wallet's counterfactual address
    3. Create and sign a user operation sending native tokens
    """
    NETWORK = os.environ.get("NETWORK", "polygon-mumbai")
    PRIVATE_KEY = os.environ.get("PRIVATE_KEY")
    WALLET_FACTORY = os.environ.get("WALLET_FACTORY_ADDRESS")
    FALLBACK_HANDLER = os.environ.get("FALLBACK_HANDLER_ADDRESS")
    RECIPIENT = os.environ.get("RECIPIENT", "0x000000000000000000000000000000000000dEaD")

    if not PRIVATE_KEY:
        print("ERROR: PRIVATE_KEY environment variable is required")
        return
    if not WALLET_FACTORY or not FALLBACK_HANDLER:
        print("ERROR: WALLET_FACTORY_ADDRESS and FALLBACK_HANDLER_ADDRESS are required")
        return

    chain = Web3ChainReader(rpc_url=NetworkConfig.get_rpc_url(NETWORK))
    config = ClientConfig.from_network(
        NETWORK,
        wallet_factory_address=WALLET_FACTORY,
        fallback_handler_address=FALLBACK_HANDLER,
    )
    wallet = SmartWalletAPI(chain, LocalSigner(PRIVATE_KEY), config).init()

    print(f"Wallet address: {wallet.address}")
    print(f"Deployed: {wallet.is_deployed()}")

    op = wallet.create_signed_operation(
        TransactionIntent(target=RECIPIENT, data="0x", value=10**15)
    )
    print(json.dumps(op.to_rpc_dict(), indent=2))


if __name__ == "__main__":
    main()
