"""
Data models for the smart account SDK.
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

EMPTY_BYTES = "0x"


class TransactionIntent(BaseModel):
    """Caller-supplied description of the action a wallet should perform"""
    model_config = ConfigDict(populate_by_name=True)

    target: str = ""
    data: str = ""
    value: Optional[Union[int, str]] = None
    gas_limit: Optional[Union[int, str]] = Field(None, alias="gasLimit")
    max_fee_per_gas: Optional[int] = Field(None, alias="maxFeePerGas")
    max_priority_fee_per_gas: Optional[int] = Field(None, alias="maxPriorityFeePerGas")
    is_delegate_call: bool = Field(False, alias="isDelegateCall")
    batch_id: int = Field(0, alias="batchId")

    def is_transfer_placeholder(self) -> bool:
        """An intent with neither target nor payload is a no-op transfer placeholder."""
        return self.target == "" and self.data == ""


class UserOperation(BaseModel):
    """ERC-4337 user operation. Complete only once `signature` is non-empty."""
    model_config = ConfigDict(populate_by_name=True)

    sender: str
    nonce: int
    init_code: str = Field(EMPTY_BYTES, alias="initCode")
    call_data: str = Field(EMPTY_BYTES, alias="callData")
    call_gas_limit: int = Field(..., alias="callGasLimit")
    verification_gas_limit: int = Field(..., alias="verificationGasLimit")
    pre_verification_gas: int = Field(..., alias="preVerificationGas")
    max_fee_per_gas: Optional[int] = Field(None, alias="maxFeePerGas")
    max_priority_fee_per_gas: Optional[int] = Field(None, alias="maxPriorityFeePerGas")
    paymaster_and_data: str = Field(EMPTY_BYTES, alias="paymasterAndData")
    signature: str = EMPTY_BYTES

    def is_signed(self) -> bool:
        return self.signature not in ("", EMPTY_BYTES)

    def to_rpc_dict(self) -> Dict[str, str]:
        """
        Render the operation the way bundler JSON-RPC endpoints expect it:
        camelCase keys, integers as hex quantities.
        """
        result: Dict[str, str] = {}
        for key, value in self.model_dump(by_alias=True).items():
            if isinstance(value, int):
                result[key] = hex(value)
            elif value is None:
                result[key] = hex(0)
            else:
                result[key] = value or EMPTY_BYTES
        return result


class FeeData(BaseModel):
    """Current fee estimate reported by the chain"""
    max_fee_per_gas: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None
    gas_price: Optional[int] = None


class GasFeeEstimate(BaseModel):
    """Gas fee payment arguments for a cross-chain message"""
    model_config = ConfigDict(populate_by_name=True)

    relayer: str
    fee_token_address: str = Field(..., alias="feeTokenAddress")
    fee_amount: int = Field(..., alias="feeAmount")


class WalletTransaction(BaseModel):
    """A single call executed by the wallet"""
    to: str
    value: int = 0
    data: str = EMPTY_BYTES
    operation: int = 0  # 0 = call, 1 = delegatecall


class TransactionBatch(BaseModel):
    """
    A batch of wallet transactions together with the intent the
    operation builder consumes for it.
    """
    model_config = ConfigDict(populate_by_name=True)

    version: str
    transactions: List[WalletTransaction]
    batch_id: int = Field(0, alias="batchId")
    chain_id: int = Field(..., alias="chainId")
    intent: TransactionIntent

    def summary(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "chainId": self.chain_id,
            "batchId": self.batch_id,
            "transactions": len(self.transactions),
        }


# Cross-chain transfers

class RouterAdaptor(str, Enum):
    """Cross-chain message routers a liquidity pool can deposit through"""
    WORMHOLE = "wormhole"
    AXELAR = "axelar"
    ABACUS = "abacus"


class CCMPMessagePayload(BaseModel):
    """A call executed on the destination chain"""
    model_config = ConfigDict(populate_by_name=True)

    to: str
    calldata: str = Field(EMPTY_BYTES, alias="_calldata")


class RouterArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    consistency_level: int = Field(0, alias="consistencyLevel")


class TokenTransferArgs(BaseModel):
    """A cross-chain token transfer request"""
    model_config = ConfigDict(populate_by_name=True)

    from_chain_id: int = Field(..., alias="fromChainId")
    to_chain_id: int = Field(..., alias="toChainId")
    token_address: str = Field(..., alias="tokenAddress")
    receiver: str
    amount: int
    tag: str = ""
    payloads: List[CCMPMessagePayload] = Field(default_factory=list)
    adaptor_name: RouterAdaptor = Field(..., alias="adaptorName")
    router_args: RouterArgs = Field(default_factory=RouterArgs, alias="routerArgs")


class OptionalTokenTransferArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    min_amount: Optional[int] = Field(None, alias="minAmount")
    reclaimer_eoa: Optional[str] = Field(None, alias="reclaimerEoa")
    fee_token_address: Optional[str] = Field(None, alias="feeTokenAddress")


class EstimateTransferFeeResponse(BaseModel):
    """Fee estimate for a cross-chain token transfer"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    gas_fee: GasFeeEstimate = Field(..., alias="gasFee")
    amount: Optional[int] = None
    transfer_fee: Optional[int] = Field(None, alias="transferFee")
    transfer_fee_percentage: Optional[float] = Field(None, alias="transferFeePercentage")
    reward: Optional[int] = None
