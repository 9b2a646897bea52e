#!/usr/bin/env python3
"""
Example of preparing a cross-chain deposit-and-call.
"""
import os

from smart_account_sdk import NodeClient, TransactionManager
from smart_account_sdk.ccmp import CCMPUtils, DepositAndCallManager, LiquidityPool, LiquidityPoolUtils
from smart_account_sdk.exceptions import PreconditionFailedError, UnsupportedChainError
from smart_account_sdk.models import RouterAdaptor, TokenTransferArgs


def main():
    """
    Deposit tokens on Goerli and have them delivered on Mumbai.
    """
    NODE_URL = os.environ.get("NODE_URL")
    WALLET_ADDRESS = os.environ.get("WALLET_ADDRESS")
    POOL_ADDRESS = os.environ.get("MUMBAI_LIQUIDITY_POOL")
    TOKEN = os.environ.get("TOKEN_ADDRESS")

    if not NODE_URL or not WALLET_ADDRESS or not POOL_ADDRESS or not TOKEN:
        print("ERROR: NODE_URL, WALLET_ADDRESS, MUMBAI_LIQUIDITY_POOL and TOKEN_ADDRESS are required")
        return

    node_client = NodeClient(NODE_URL)
    manager = DepositAndCallManager(
        supported_chains=[5, 80001],
        transaction_manager=TransactionManager(),
        chain_to_liquidity_pool={80001: LiquidityPool(POOL_ADDRESS)},
        liquidity_pool_utils=LiquidityPoolUtils(node_client),
        ccmp_utils=CCMPUtils(node_client),
        node_client=node_client,
    )

    transfer = TokenTransferArgs(
        from_chain_id=5,
        to_chain_id=80001,
        token_address=TOKEN,
        receiver=WALLET_ADDRESS,
        amount=10**18,
        adaptor_name=RouterAdaptor.WORMHOLE,
        router_args={"consistency_level": 1},
    )

    try:
        batch = manager.create_deposit_and_call_transaction(WALLET_ADDRESS, transfer)
    except UnsupportedChainError as e:
        print(f"ERROR: {e}")
        return
    except PreconditionFailedError as e:
        print(f"Deposit rejected: {e.reason or e}")
        return

    print(f"Deposit batch: {batch.summary()}")
    print(f"Call data: {batch.transactions[0].data}")


if __name__ == "__main__":
    main()
