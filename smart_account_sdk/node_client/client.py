"""
Client for the wallet node service REST API.
"""
import base64
import json
import logging
import threading
from typing import Any, Dict, List, Optional, Union

import requests
from cachetools import TTLCache

from .._rate_limited_log import rate_limited_log
from .._session import create_session
from ..config import validate_service_url
from ..exceptions import NodeClientError
from ..models import EstimateTransferFeeResponse, GasFeeEstimate
from .types import (
    BalancesDto,
    CrossChainGasEstimateDto,
    EstimateGasDto,
    GetPoolInfoDto,
    GetTokenTransferFeeEstimateDto,
    PreDepositCheckDto,
    PreDepositCheckResponse,
)

logger = logging.getLogger(__name__)


class NodeClient:
    """
    Thin wrapper around the node service endpoints.

    Chain descriptions rarely change, so ``get_all_supported_chains`` and
    ``get_chain_by_id`` are answered from a TTL cache.
    """

    def __init__(
        self,
        tx_service_url: str,
        retry_count: int = 3,
        timeout: int = 30,
        cache_ttl: int = 300,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the node client

        Args:
            tx_service_url: Base URL of the node service
            retry_count: Number of retries for HTTP requests
            timeout: Timeout for HTTP requests in seconds
            cache_ttl: Seconds chain lookups stay cached
            session: Optional pre-configured requests session
            logger: Optional logger instance

        Raises:
            ConfigurationError: If the URL is not https (localhost excepted)
        """
        self.base_url = validate_service_url(tx_service_url, "tx_service_url")
        self.timeout = timeout
        self.session = session or create_session(retry_count)
        self.logger = logger or logging.getLogger(__name__)

        self._cache: TTLCache = TTLCache(maxsize=256, ttl=cache_ttl)
        self._cache_lock = threading.RLock()

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Any] = None
    ) -> Any:
        url = f"{self.base_url}{path}"
        self.logger.debug(f"{method} {url}")
        response = self.session.request(
            method,
            url,
            params=params,
            json=body,
            timeout=self.timeout
        )

        if not 200 <= response.status_code < 300:
            try:
                response_body = response.json()
            except ValueError:
                response_body = response.text
            message = None
            if isinstance(response_body, dict):
                message = response_body.get("message") or response_body.get("error")
            raise NodeClientError(
                f"Node service request {method} {path} failed with status "
                f"{response.status_code}: {message or response.reason}",
                status_code=response.status_code,
                response_body=response_body
            )

        content_type = response.headers.get("Content-Type", "")
        if "application/json" not in content_type:
            rate_limited_log(
                f"Unexpected Content-Type: {content_type} (expected application/json)",
                level="warning",
                logger_instance=self.logger
            )
        try:
            return response.json()
        except ValueError as e:
            raise NodeClientError(
                f"Invalid JSON response from node service: {e}",
                status_code=response.status_code,
                response_body=response.text
            )

    def _cached_get(self, path: str) -> Any:
        with self._cache_lock:
            if path in self._cache:
                return self._cache[path]
        result = self._request("GET", path)
        with self._cache_lock:
            self._cache[path] = result
        return result

    def clear_cache(self) -> None:
        with self._cache_lock:
            self._cache.clear()

    # Chains and tokens

    def get_all_supported_chains(self) -> Any:
        return self._cached_get("/chains/")

    def get_chain_by_id(self, chain_id: int) -> Any:
        return self._cached_get(f"/chains/{chain_id}")

    def get_token_prices_by_chain_id(self, chain_id: int) -> Any:
        return self._request("GET", f"/chains/chainId/{chain_id}/price")

    def get_all_tokens(self) -> Any:
        return self._request("GET", "/tokens/")

    def get_tokens_by_chain_id(self, chain_id: int) -> Any:
        return self._request("GET", f"/tokens/chainId/{chain_id}")

    def get_token_by_chain_id_and_address(self, chain_id: int, token_address: str) -> Any:
        return self._request("GET", f"/tokens/chainId/{chain_id}/address/{token_address}")

    # Smart accounts

    def get_smart_accounts_by_owner(self, chain_id: int, owner: str) -> Any:
        return self._request("GET", f"/smart-accounts/chainId/{chain_id}/owner/{owner}")

    def get_all_token_balances(self, dto: Union[BalancesDto, Dict[str, Any]]) -> Any:
        return self._request("POST", "/smart-accounts/balances", body=_dump(BalancesDto, dto))

    def get_total_balance_in_usd(self, dto: Union[BalancesDto, Dict[str, Any]]) -> Any:
        return self._request("POST", "/smart-accounts/balance", body=_dump(BalancesDto, dto))

    # Gas estimation

    def estimate_external_gas(self, dto: Union[EstimateGasDto, Dict[str, Any]]) -> Any:
        return self._request("POST", "/estimator/external", body=_dump(EstimateGasDto, dto))

    def estimate_required_tx_gas(self, dto: Union[EstimateGasDto, Dict[str, Any]]) -> Any:
        return self._request("POST", "/estimator/required", body=_dump(EstimateGasDto, dto))

    def estimate_handle_payment_gas(self, dto: Union[EstimateGasDto, Dict[str, Any]]) -> Any:
        return self._request("POST", "/estimator/handle-payment", body=_dump(EstimateGasDto, dto))

    def estimate_required_tx_gas_override(self, dto: Union[EstimateGasDto, Dict[str, Any]]) -> Any:
        return self._request("POST", "/estimator/required-override", body=_dump(EstimateGasDto, dto))

    def estimate_handle_payment_gas_override(self, dto: Union[EstimateGasDto, Dict[str, Any]]) -> Any:
        return self._request(
            "POST", "/estimator/handle-payment-override", body=_dump(EstimateGasDto, dto)
        )

    def estimate_undeployed_contract_gas(self, dto: Union[EstimateGasDto, Dict[str, Any]]) -> Any:
        return self._request("POST", "/estimator/undeployed", body=_dump(EstimateGasDto, dto))

    # Transactions

    def get_transaction_by_address(self, chain_id: int, address: str) -> Any:
        return self._request("GET", f"/transactions/chainId/{chain_id}/address/{address}")

    def get_transaction_by_hash(self, tx_hash: str) -> Any:
        return self._request("GET", f"/transactions/txHash/{tx_hash}")

    # Cross-chain

    def get_cross_chain_gas_estimate(
        self, dto: Union[CrossChainGasEstimateDto, Dict[str, Any]]
    ) -> GasFeeEstimate:
        result = self._request(
            "GET",
            "/cross-chain/gas-estimate",
            params=_dump(CrossChainGasEstimateDto, dto)
        )
        return GasFeeEstimate.model_validate(_unwrap(result))

    def get_liquidity_pool_info(self, dto: Union[GetPoolInfoDto, Dict[str, Any]]) -> Any:
        return self._request(
            "GET",
            "/cross-chain/liquidity-pool/gas-estimate",
            params=_dump(GetPoolInfoDto, dto)
        )

    def pre_deposit_check(
        self, dto: Union[PreDepositCheckDto, Dict[str, Any]]
    ) -> PreDepositCheckResponse:
        result = self._request(
            "POST",
            "/cross-chain/liquidity-pool/pre-deposit-check",
            body=_dump(PreDepositCheckDto, dto)
        )
        return PreDepositCheckResponse.model_validate(_unwrap(result))

    def get_cross_chain_supported_tokens(self, chain_id: int) -> List[str]:
        result = self._request("GET", f"/cross-chain/liquidity-pool/tokens/chainId/{chain_id}")
        return _unwrap(result)

    def get_token_transfer_fee_estimate(
        self, dto: Union[GetTokenTransferFeeEstimateDto, Dict[str, Any]]
    ) -> EstimateTransferFeeResponse:
        """
        Estimate the fees of a cross-chain token transfer.

        The whole request travels base64-encoded in the ``params`` query argument.
        """
        payload = json.dumps(_dump(GetTokenTransferFeeEstimateDto, dto), separators=(",", ":"))
        result = self._request(
            "GET",
            "/cross-chain/liquidity-pool/estimate-token-transfer-fee",
            params={"params": base64.b64encode(payload.encode("utf-8")).decode("ascii")}
        )
        return EstimateTransferFeeResponse.model_validate(_unwrap(result))


def _dump(model: Any, dto: Any) -> Dict[str, Any]:
    if not isinstance(dto, model):
        dto = model.model_validate(dto)
    return dto.model_dump(by_alias=True, exclude_none=True, mode="json")


def _unwrap(result: Any) -> Any:
    """Strip the ``{"code": ..., "data": ...}`` envelope some endpoints answer with."""
    if isinstance(result, dict) and "data" in result and ("code" in result or "statusCode" in result):
        return result["data"]
    return result
