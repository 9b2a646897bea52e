"""
Read-only chain access used by the operation builder.
"""
import logging
from typing import Any, Dict, Optional, Protocol

from eth_abi import decode
from web3 import Web3
from web3.exceptions import ContractLogicError

from .config import ZERO_ADDRESS, validate_service_url
from .models import FeeData
from .utils import function_selector, hex_to_bytes, to_hex

logger = logging.getLogger(__name__)

# Priority fee suggested on EIP-1559 chains, matching the common client default
DEFAULT_PRIORITY_FEE_PER_GAS = 1_500_000_000  # 1.5 gwei

# Entry points from v0.6 on report the counterfactual address by reverting with this error
SENDER_ADDRESS_RESULT_SELECTOR = function_selector("SenderAddressResult(address)")


class ChainReader(Protocol):
    """Protocol for read-only chain access"""

    def get_code(self, address: str) -> bytes:
        """Return the deployed bytecode at an address (empty if none)"""
        ...

    def estimate_gas(self, transaction: Dict[str, Any]) -> int:
        """Estimate the gas a call would use"""
        ...

    def get_fee_data(self) -> FeeData:
        """Return the current fee estimate"""
        ...

    def get_sender_address(self, entry_point: str, init_code: str) -> str:
        """Static-call the entry point's counterfactual address function"""
        ...

    def estimate_get_sender_address_gas(self, entry_point: str, init_code: str) -> int:
        """Estimate the counterfactual address call from the zero address"""
        ...

    def get_chain_id(self) -> int:
        """Return the chain id of the connected network"""
        ...

    def call(self, transaction: Dict[str, Any]) -> bytes:
        """Execute a static call and return the raw result"""
        ...


class Web3ChainReader:
    """
    ChainReader backed by a web3 client.

    Failures raised by web3 are not caught here, apart from the
    ``SenderAddressResult`` revert of the counterfactual address lookup.
    """

    # ABI for the entry point's counterfactual address lookup
    ENTRY_POINT_ABI = [
        {
            "inputs": [
                {"internalType": "bytes", "name": "initCode", "type": "bytes"}
            ],
            "name": "getSenderAddress",
            "outputs": [{"internalType": "address", "name": "", "type": "address"}],
            "stateMutability": "nonpayable",
            "type": "function"
        },
        {
            "inputs": [
                {"internalType": "address", "name": "sender", "type": "address"}
            ],
            "name": "SenderAddressResult",
            "type": "error"
        }
    ]

    def __init__(
        self,
        w3: Optional[Web3] = None,
        rpc_url: Optional[str] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the reader

        Args:
            w3: Existing Web3 instance (takes precedence over rpc_url)
            rpc_url: RPC endpoint URL used to build a Web3 instance
            logger: Optional logger instance

        Raises:
            ValueError: If neither w3 nor rpc_url is provided
        """
        if w3 is None and not rpc_url:
            raise ValueError("Either w3 or rpc_url must be provided")
        if w3 is None:
            w3 = Web3(Web3.HTTPProvider(validate_service_url(rpc_url, "rpc_url")))
        self.w3 = w3
        self.logger = logger or logging.getLogger(__name__)
        self._chain_id: Optional[int] = None

    def _entry_point(self, entry_point: str):
        return self.w3.eth.contract(
            address=Web3.to_checksum_address(entry_point),
            abi=self.ENTRY_POINT_ABI
        )

    def get_code(self, address: str) -> bytes:
        return bytes(self.w3.eth.get_code(Web3.to_checksum_address(address)))

    def estimate_gas(self, transaction: Dict[str, Any]) -> int:
        return int(self.w3.eth.estimate_gas(transaction))

    def get_fee_data(self) -> FeeData:
        """
        Current fee data. On chains without a base fee only ``gas_price``
        is set; otherwise max fee is twice the base fee plus the priority fee.
        """
        block = self.w3.eth.get_block("latest")
        gas_price = int(self.w3.eth.gas_price)
        base_fee = block.get("baseFeePerGas")
        if base_fee is None:
            self.logger.debug("Latest block has no base fee, returning legacy fee data")
            return FeeData(gas_price=gas_price)

        priority_fee = DEFAULT_PRIORITY_FEE_PER_GAS
        return FeeData(
            max_fee_per_gas=int(base_fee) * 2 + priority_fee,
            max_priority_fee_per_gas=priority_fee,
            gas_price=gas_price,
        )

    def get_sender_address(self, entry_point: str, init_code: str) -> str:
        """
        Counterfactual wallet address for ``init_code``.

        Older entry points return the address; newer ones always revert
        with ``SenderAddressResult(address)``, which is decoded here.
        """
        fn = self._entry_point(entry_point).functions.getSenderAddress(hex_to_bytes(init_code))
        try:
            address = fn.call()
        except ContractLogicError as e:
            address = _sender_address_from_revert(e)
            if address is None:
                raise
        return Web3.to_checksum_address(address)

    def estimate_get_sender_address_gas(self, entry_point: str, init_code: str) -> int:
        """
        Gas for the counterfactual address lookup.

        When the entry point answers with ``SenderAddressResult`` the lookup
        cannot be estimated, so the factory call inside ``init_code`` is
        estimated instead, sent from the entry point.
        """
        fn = self._entry_point(entry_point).functions.getSenderAddress(hex_to_bytes(init_code))
        try:
            return int(fn.estimate_gas({"from": ZERO_ADDRESS}))
        except ContractLogicError as e:
            if _sender_address_from_revert(e) is None:
                raise
        code = hex_to_bytes(init_code)
        self.logger.debug("getSenderAddress reverts with its result, estimating the factory call")
        return self.estimate_gas({
            "from": Web3.to_checksum_address(entry_point),
            "to": Web3.to_checksum_address(to_hex(code[:20])),
            "data": to_hex(code[20:]),
        })

    def get_chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = int(self.w3.eth.chain_id)
        return self._chain_id

    def call(self, transaction: Dict[str, Any]) -> bytes:
        return bytes(self.w3.eth.call(transaction))


def _sender_address_from_revert(error: ContractLogicError) -> Optional[str]:
    """Address carried by a ``SenderAddressResult`` revert, or None for any other revert."""
    data = error.data
    if not isinstance(data, (str, bytes)):
        return None
    try:
        raw = hex_to_bytes(data)
    except ValueError:
        return None
    if raw[:4] != SENDER_ADDRESS_RESULT_SELECTOR or len(raw) < 36:
        return None
    return decode(["address"], raw[4:36])[0]
