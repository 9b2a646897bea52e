"""
Smart wallet client.

Implements the wallet-specific half of user operation building for the
counterfactual smart wallet family: deployment through the wallet factory,
per-batch nonces and ``execFromEntryPoint`` call encoding.
"""
import logging
from typing import Any, Dict, Optional, Union

from eth_abi import decode
from web3 import Web3

from .chain import ChainReader
from .config import ClientConfig
from .exceptions import ConfigurationError
from .models import TransactionIntent, UserOperation
from .paymaster import PaymasterAPI, SigningServicePaymaster
from .signer import Signer
from .utils import hex_to_bytes, offline_contract, to_hex
from .wallet_api import EventHook, UserOperationBuilder

logger = logging.getLogger(__name__)

OPERATION_CALL = 0
OPERATION_DELEGATE_CALL = 1


class SmartWalletAPI:
    """
    Client for one smart wallet owned by a signer.

    Example:
        >>> chain = Web3ChainReader(rpc_url="https://rpc.ankr.com/polygon_mumbai")
        >>> config = ClientConfig.from_network(
        ...     "polygon-mumbai",
        ...     wallet_factory_address="0x...",
        ...     fallback_handler_address="0x...",
        ... )
        >>> wallet = SmartWalletAPI(chain, LocalSigner(private_key), config).init()
        >>> op = wallet.create_signed_operation(
        ...     TransactionIntent(target="0x...", data="0x", value=10**15)
        ... )
    """

    # ABI for the counterfactual wallet factory
    WALLET_FACTORY_ABI = [
        {
            "inputs": [
                {"internalType": "address", "name": "_owner", "type": "address"},
                {"internalType": "address", "name": "_entryPoint", "type": "address"},
                {"internalType": "address", "name": "_handler", "type": "address"},
                {"internalType": "uint256", "name": "_index", "type": "uint256"}
            ],
            "name": "deployCounterFactualWallet",
            "outputs": [{"internalType": "address", "name": "proxy", "type": "address"}],
            "stateMutability": "nonpayable",
            "type": "function"
        }
    ]

    # ABI for the wallet contract (entry point facing functions only)
    WALLET_ABI = [
        {
            "inputs": [
                {"internalType": "address", "name": "dest", "type": "address"},
                {"internalType": "uint256", "name": "value", "type": "uint256"},
                {"internalType": "bytes", "name": "func", "type": "bytes"},
                {"internalType": "enum Enum.Operation", "name": "operation", "type": "uint8"},
                {"internalType": "uint256", "name": "gasLimit", "type": "uint256"}
            ],
            "name": "execFromEntryPoint",
            "outputs": [{"internalType": "bool", "name": "success", "type": "bool"}],
            "stateMutability": "nonpayable",
            "type": "function"
        },
        {
            "inputs": [
                {"internalType": "uint256", "name": "batchId", "type": "uint256"}
            ],
            "name": "getNonce",
            "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
            "stateMutability": "view",
            "type": "function"
        }
    ]

    def __init__(
        self,
        chain: ChainReader,
        owner: Signer,
        config: ClientConfig,
        wallet_address: Optional[str] = None,
        index: int = 0,
        paymaster: Optional[PaymasterAPI] = None,
        event_hook: Optional[EventHook] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the wallet client

        Args:
            chain: Read-only chain access
            owner: Signer that owns the wallet
            config: Entry point, factory and service configuration
            wallet_address: Known wallet address (derived from the factory call when omitted)
            index: Wallet index for the owner, part of the counterfactual address
            paymaster: Paymaster to use; built from config.signing_service_url when omitted
            event_hook: Optional callback receiving build events
            logger: Optional logger instance
        """
        self.chain = chain
        self.owner = owner
        self.config = config
        self.index = index
        self.logger = logger or logging.getLogger(__name__)

        if paymaster is None and config.signing_service_url:
            paymaster = SigningServicePaymaster(
                config.signing_service_url,
                dapp_api_key=config.dapp_api_key,
                paymaster_address=config.paymaster_address,
                logger=self.logger
            )

        self.builder = UserOperationBuilder(
            chain=chain,
            capabilities=self,
            entry_point_address=config.entry_point_address,
            wallet_address=wallet_address,
            paymaster=paymaster,
            gas=config.gas,
            event_hook=event_hook,
            logger=self.logger
        )

    def init(self) -> "SmartWalletAPI":
        """Resolve the wallet address up front."""
        self.builder.resolve_address()
        return self

    @property
    def address(self) -> str:
        return self.builder.resolve_address()

    # Wallet capabilities

    def derive_init_code(self) -> str:
        """
        Return the factory address followed by the deployCounterFactualWallet
        call for this owner and index.

        Raises:
            ConfigurationError: If the factory or fallback handler address is missing
        """
        factory = self.config.wallet_factory_address
        handler = self.config.fallback_handler_address
        if not factory or not handler:
            raise ConfigurationError(
                "wallet_factory_address and fallback_handler_address are required to deploy a wallet"
            )
        deploy_call = offline_contract(self.WALLET_FACTORY_ABI).encode_abi(
            "deployCounterFactualWallet",
            args=[
                Web3.to_checksum_address(self.owner.address),
                Web3.to_checksum_address(self.config.entry_point_address),
                Web3.to_checksum_address(handler),
                self.index,
            ]
        )
        return to_hex(hex_to_bytes(factory) + hex_to_bytes(deploy_call))

    def current_nonce(self, batch_id: int) -> int:
        """Nonce of a batch lane; zero while the wallet is not deployed."""
        if not self.builder.is_deployed():
            return 0
        raw = self.chain.call({
            "to": Web3.to_checksum_address(self.builder.resolve_address()),
            "data": offline_contract(self.WALLET_ABI).encode_abi("getNonce", args=[batch_id]),
        })
        return int(decode(["uint256"], hex_to_bytes(raw))[0])

    def encode_call(self, target: str, value: int, data: str, is_delegate_call: bool) -> str:
        operation = OPERATION_DELEGATE_CALL if is_delegate_call else OPERATION_CALL
        return offline_contract(self.WALLET_ABI).encode_abi(
            "execFromEntryPoint",
            args=[
                Web3.to_checksum_address(target),
                value,
                hex_to_bytes(data),
                operation,
                self.config.gas.exec_gas_limit,
            ]
        )

    def sign_digest(self, request_id: str) -> str:
        return self.owner.sign(request_id)

    # Operation building

    def is_deployed(self) -> bool:
        return self.builder.is_deployed()

    def create_unsigned_operation(
        self, intent: Union[TransactionIntent, Dict[str, Any]]
    ) -> UserOperation:
        return self.builder.create_unsigned_operation(intent)

    def sign_operation(self, operation: UserOperation) -> UserOperation:
        return self.builder.sign_operation(operation)

    def create_signed_operation(
        self, intent: Union[TransactionIntent, Dict[str, Any]]
    ) -> UserOperation:
        return self.builder.create_signed_operation(intent)
