"""
Cross-chain message gas fee estimation.
"""
from typing import Union

from ..models import GasFeeEstimate
from ..node_client import CrossChainGasEstimateDto, NodeClient
from ..utils import hex_to_bytes, to_hex


class CCMPUtils:
    """Fee estimation for cross-chain messages"""

    def __init__(self, node_client: NodeClient):
        self.node_client = node_client

    def get_gas_fee_estimate(
        self,
        from_address: str,
        to: str,
        calldata: Union[str, bytes],
        chain_id: int,
        fee_token_address: str
    ) -> GasFeeEstimate:
        """Return the relayer and fee amount for delivering ``calldata`` to ``to`` on ``chain_id``."""
        return self.node_client.get_cross_chain_gas_estimate(
            CrossChainGasEstimateDto(
                from_address=from_address,
                to=to,
                calldata=to_hex(hex_to_bytes(calldata)),
                chain_id=chain_id,
                fee_token_address=fee_token_address,
            )
        )
