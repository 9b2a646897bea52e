"""
Cross-chain deposit-and-call transactions.

A deposit moves tokens into the liquidity pool of the source chain and has
the destination chain execute the attached payloads once the tokens arrive.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from eth_abi import encode
from web3 import Web3

from ..exceptions import PreconditionFailedError, UnsupportedChainError
from ..models import (
    EstimateTransferFeeResponse,
    OptionalTokenTransferArgs,
    RouterAdaptor,
    TokenTransferArgs,
    TransactionBatch,
)
from ..node_client import GetTokenTransferFeeEstimateDto, NodeClient
from ..transactions import TransactionManager
from .ccmp_utils import CCMPUtils
from .liquidity_pool import LiquidityPool
from .liquidity_pool_utils import LiquidityPoolUtils

logger = logging.getLogger(__name__)

DEPOSIT_BATCH_VERSION = "1.0.1"
DEPOSIT_BATCH_ID = 1


class DepositAndCallManager:
    """
    Builds deposit-and-call transaction batches.

    Example:
        >>> manager = DepositAndCallManager(
        ...     supported_chains=[5, 80001],
        ...     transaction_manager=TransactionManager(),
        ...     chain_to_liquidity_pool={80001: LiquidityPool("0x...")},
        ...     liquidity_pool_utils=LiquidityPoolUtils(node_client),
        ...     ccmp_utils=CCMPUtils(node_client),
        ...     node_client=node_client,
        ... )
        >>> batch = manager.create_deposit_and_call_transaction(wallet.address, transfer_args)
    """

    def __init__(
        self,
        supported_chains: Optional[Sequence[int]],
        transaction_manager: TransactionManager,
        chain_to_liquidity_pool: Mapping[int, LiquidityPool],
        liquidity_pool_utils: LiquidityPoolUtils,
        ccmp_utils: CCMPUtils,
        node_client: NodeClient,
        logger: Optional[logging.Logger] = None
    ):
        self.supported_chains = list(supported_chains or [])
        self.transaction_manager = transaction_manager
        self.chain_to_liquidity_pool = dict(chain_to_liquidity_pool)
        self.liquidity_pool_utils = liquidity_pool_utils
        self.ccmp_utils = ccmp_utils
        self.node_client = node_client
        self.logger = logger or logging.getLogger(__name__)

    def create_deposit_and_call_transaction(
        self,
        account: Any,
        transfer_args: Union[TokenTransferArgs, Dict[str, Any]],
        optional_args: Optional[Union[OptionalTokenTransferArgs, Dict[str, Any]]] = None
    ) -> TransactionBatch:
        """
        Create the transaction batch for a cross-chain deposit

        Args:
            account: Sending wallet, or its address
            transfer_args: What to send where
            optional_args: Minimum amount, reclaimer and fee token

        Returns:
            Single-transaction batch calling ``depositAndCall`` on the pool

        Raises:
            UnsupportedChainError: If the source chain is not supported or no liquidity
                pool is registered for the destination chain
            PreconditionFailedError: If the pre deposit check fails
        """
        transfer_args = _as_model(TokenTransferArgs, transfer_args)
        optional_args = _as_model(OptionalTokenTransferArgs, optional_args or {})
        account_address = account if isinstance(account, str) else account.address

        # An empty supported_chains list accepts any source chain
        if self.supported_chains and transfer_args.from_chain_id not in self.supported_chains:
            raise UnsupportedChainError(transfer_args.from_chain_id)
        liquidity_pool = self.chain_to_liquidity_pool.get(transfer_args.to_chain_id)
        if liquidity_pool is None:
            raise UnsupportedChainError(transfer_args.to_chain_id)

        check = self.liquidity_pool_utils.pre_deposit_check(
            transfer_args.token_address,
            account_address,
            transfer_args.from_chain_id,
            transfer_args.to_chain_id,
            transfer_args.amount,
        )
        if not check.status:
            raise PreconditionFailedError(check.reason)

        fee_estimate = self.estimate_transfer_fee(account_address, transfer_args, optional_args)

        call_data = liquidity_pool.encode_deposit_and_call(
            transfer_args,
            fee_estimate.gas_fee,
            self.get_router_args(transfer_args),
            self.get_hyphen_args(optional_args),
        )
        self.logger.debug(
            f"Deposit and call from {account_address} to chain {transfer_args.to_chain_id} "
            f"through {liquidity_pool.address}"
        )
        return self.transaction_manager.create_transaction_batch(
            version=DEPOSIT_BATCH_VERSION,
            transactions=[liquidity_pool.deposit_and_call_transaction(call_data)],
            batch_id=DEPOSIT_BATCH_ID,
            chain_id=transfer_args.to_chain_id,
        )

    def estimate_transfer_fee(
        self,
        from_address: str,
        transfer_args: Union[TokenTransferArgs, Dict[str, Any]],
        optional_args: Optional[Union[OptionalTokenTransferArgs, Dict[str, Any]]] = None
    ) -> EstimateTransferFeeResponse:
        return self.node_client.get_token_transfer_fee_estimate(
            GetTokenTransferFeeEstimateDto(
                from_address=from_address,
                token_transfer_args=_as_model(TokenTransferArgs, transfer_args),
                optional_transfer_args=_as_model(OptionalTokenTransferArgs, optional_args or {}),
            )
        )

    @staticmethod
    def get_hyphen_args(optional_args: OptionalTokenTransferArgs) -> List[bytes]:
        """Bridge arguments; only sent when both a minimum amount and a reclaimer are set."""
        if optional_args.min_amount and optional_args.reclaimer_eoa:
            return [
                encode(
                    ["uint256", "address"],
                    [optional_args.min_amount, Web3.to_checksum_address(optional_args.reclaimer_eoa)],
                )
            ]
        return []

    @staticmethod
    def get_router_args(transfer_args: TokenTransferArgs) -> bytes:
        if transfer_args.adaptor_name == RouterAdaptor.WORMHOLE:
            return encode(["uint256"], [transfer_args.router_args.consistency_level])
        return encode(["uint256"], [0])


def _as_model(model: Any, value: Any) -> Any:
    if isinstance(value, model):
        return value
    return model.model_validate(value)
