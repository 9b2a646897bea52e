"""
Node service client.
"""
from .client import NodeClient
from .types import (
    BalancesDto,
    CrossChainGasEstimateDto,
    EstimateGasDto,
    GetPoolInfoDto,
    GetTokenTransferFeeEstimateDto,
    PreDepositCheckDto,
    PreDepositCheckResponse,
)

__all__ = [
    "NodeClient",
    "BalancesDto",
    "CrossChainGasEstimateDto",
    "EstimateGasDto",
    "GetPoolInfoDto",
    "GetTokenTransferFeeEstimateDto",
    "PreDepositCheckDto",
    "PreDepositCheckResponse",
]
