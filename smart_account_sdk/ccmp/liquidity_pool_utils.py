"""
Liquidity pool queries backed by the node service.
"""
import logging
from typing import Any, List, Optional, Union

from ..node_client import NodeClient, PreDepositCheckDto, PreDepositCheckResponse
from ..node_client.types import GetPoolInfoDto
from ..utils import parse_number


class LiquidityPoolUtils:

    def __init__(self, node_client: NodeClient, logger: Optional[logging.Logger] = None):
        self.node_client = node_client
        self.logger = logger or logging.getLogger(__name__)

    def pre_deposit_check(
        self,
        token_address: str,
        from_address: str,
        from_chain_id: int,
        to_chain_id: int,
        amount: Union[int, str]
    ) -> PreDepositCheckResponse:
        """
        Ask whether a deposit can be made, e.g. whether the destination pool
        holds enough liquidity.

        Returns:
            PreDepositCheckResponse; ``reason`` is set when the check fails
        """
        dto = PreDepositCheckDto(
            token_address=token_address,
            from_address=from_address,
            from_chain_id=from_chain_id,
            to_chain_id=to_chain_id,
            amount=parse_number(amount),
        )
        result = self.node_client.pre_deposit_check(dto)
        self.logger.debug(f"Pre deposit check for {token_address} -> chain {to_chain_id}: {result.status}")
        return result

    def get_supported_tokens(self, chain_id: int) -> List[str]:
        return self.node_client.get_cross_chain_supported_tokens(chain_id)

    def get_pool_information(self, token_address: str, from_chain_id: int, to_chain_id: int) -> Any:
        return self.node_client.get_liquidity_pool_info(
            GetPoolInfoDto(
                token_address=token_address,
                from_chain_id=from_chain_id,
                to_chain_id=to_chain_id,
            )
        )
