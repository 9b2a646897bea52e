"""
Request and response DTOs for the node service.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models import OptionalTokenTransferArgs, TokenTransferArgs


class BalancesDto(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chain_id: int = Field(..., alias="chainId")
    eoa_address: str = Field(..., alias="eoaAddress")
    token_addresses: list = Field(default_factory=list, alias="tokenAddresses")


class EstimateGasDto(BaseModel):
    """Body of the gas estimator endpoints"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    chain_id: int = Field(..., alias="chainId")
    wallet_address: Optional[str] = Field(None, alias="walletAddress")
    transaction: Optional[Dict[str, Any]] = None


class PreDepositCheckDto(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token_address: str = Field(..., alias="tokenAddress")
    from_address: str = Field(..., alias="fromAddress")
    from_chain_id: int = Field(..., alias="fromChainId")
    to_chain_id: int = Field(..., alias="toChainId")
    amount: int


class PreDepositCheckResponse(BaseModel):
    """Admissibility of a deposit; ``reason`` explains a failed check when given"""
    model_config = ConfigDict(extra="allow")

    status: bool
    reason: Optional[str] = None


class GetPoolInfoDto(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token_address: str = Field(..., alias="tokenAddress")
    from_chain_id: int = Field(..., alias="fromChainId")
    to_chain_id: int = Field(..., alias="toChainId")


class CrossChainGasEstimateDto(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_address: str = Field(..., alias="from")
    to: str
    calldata: str
    chain_id: int = Field(..., alias="chainId")
    fee_token_address: str = Field(..., alias="feeTokenAddress")


class GetTokenTransferFeeEstimateDto(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_address: str = Field(..., alias="fromAddress")
    token_transfer_args: TokenTransferArgs = Field(..., alias="tokenTransferArgs")
    optional_transfer_args: OptionalTokenTransferArgs = Field(
        default_factory=OptionalTokenTransferArgs, alias="optionalTransferArgs"
    )
