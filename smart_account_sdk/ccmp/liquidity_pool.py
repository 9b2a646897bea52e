"""
Liquidity pool contract encoding.
"""
from typing import Any, List, Sequence

from web3 import Web3

from ..models import GasFeeEstimate, TokenTransferArgs, WalletTransaction
from ..utils import hex_to_bytes, offline_contract


class LiquidityPool:
    """A cross-chain liquidity pool deployed at ``address``"""

    # ABI for the depositAndCall entry of the liquidity pool
    LIQUIDITY_POOL_ABI = [
        {
            "inputs": [
                {
                    "components": [
                        {"internalType": "uint256", "name": "toChainId", "type": "uint256"},
                        {"internalType": "address", "name": "tokenAddress", "type": "address"},
                        {"internalType": "address", "name": "receiver", "type": "address"},
                        {"internalType": "uint256", "name": "amount", "type": "uint256"},
                        {"internalType": "string", "name": "tag", "type": "string"},
                        {
                            "components": [
                                {"internalType": "address", "name": "to", "type": "address"},
                                {"internalType": "bytes", "name": "_calldata", "type": "bytes"}
                            ],
                            "internalType": "struct CCMPMessagePayload[]",
                            "name": "payloads",
                            "type": "tuple[]"
                        },
                        {
                            "components": [
                                {"internalType": "address", "name": "feeTokenAddress", "type": "address"},
                                {"internalType": "uint256", "name": "feeAmount", "type": "uint256"},
                                {"internalType": "address", "name": "relayer", "type": "address"}
                            ],
                            "internalType": "struct GasFeePaymentArgs",
                            "name": "gasFeePaymentArgs",
                            "type": "tuple"
                        },
                        {"internalType": "string", "name": "adaptorName", "type": "string"},
                        {"internalType": "bytes", "name": "routerArgs", "type": "bytes"},
                        {"internalType": "bytes[]", "name": "hyphenArgs", "type": "bytes[]"}
                    ],
                    "internalType": "struct DepositAndCallArgs",
                    "name": "args",
                    "type": "tuple"
                }
            ],
            "name": "depositAndCall",
            "outputs": [],
            "stateMutability": "payable",
            "type": "function"
        }
    ]

    def __init__(self, address: str):
        self.address = Web3.to_checksum_address(address)

    def encode_deposit_and_call(
        self,
        transfer_args: TokenTransferArgs,
        gas_fee_payment_args: GasFeeEstimate,
        router_args: bytes,
        hyphen_args: Sequence[bytes]
    ) -> str:
        """
        Encode a ``depositAndCall`` call

        Args:
            transfer_args: Destination chain, token, receiver, amount and payloads
            gas_fee_payment_args: Relayer fee for the cross-chain message
            router_args: ABI-encoded arguments for the router adaptor
            hyphen_args: ABI-encoded arguments for the bridge

        Returns:
            Call data as a 0x-prefixed hex string
        """
        payloads: List[Any] = [
            (Web3.to_checksum_address(p.to), hex_to_bytes(p.calldata))
            for p in transfer_args.payloads
        ]
        args = (
            transfer_args.to_chain_id,
            Web3.to_checksum_address(transfer_args.token_address),
            Web3.to_checksum_address(transfer_args.receiver),
            transfer_args.amount,
            transfer_args.tag,
            payloads,
            (
                Web3.to_checksum_address(gas_fee_payment_args.fee_token_address),
                gas_fee_payment_args.fee_amount,
                Web3.to_checksum_address(gas_fee_payment_args.relayer),
            ),
            transfer_args.adaptor_name.value,
            bytes(router_args),
            [bytes(a) for a in hyphen_args],
        )
        return offline_contract(self.LIQUIDITY_POOL_ABI).encode_abi("depositAndCall", args=[args])

    def deposit_and_call_transaction(self, call_data: str) -> WalletTransaction:
        return WalletTransaction(to=self.address, value=0, data=call_data)
