"""
Smart account SDK.

Builds and signs ERC-4337 user operations for counterfactual smart wallets
and prepares cross-chain deposit transactions.
"""
from .chain import ChainReader, Web3ChainReader
from .config import ClientConfig, GasDefaults, NetworkConfig
from .exceptions import (
    ConfigurationError,
    NodeClientError,
    PaymasterError,
    PreconditionFailedError,
    SmartAccountError,
    UnsupportedChainError,
)
from .models import (
    FeeData,
    GasFeeEstimate,
    TransactionBatch,
    TransactionIntent,
    UserOperation,
    WalletTransaction,
)
from .node_client import NodeClient
from .paymaster import PaymasterAPI, SigningServicePaymaster
from .signer import LocalSigner, Signer
from .smart_wallet import SmartWalletAPI
from .transactions import TransactionManager
from .version import __version__
from .wallet_api import UserOperationBuilder, WalletCapabilities

__all__ = [
    "ChainReader",
    "Web3ChainReader",
    "ClientConfig",
    "GasDefaults",
    "NetworkConfig",
    "SmartAccountError",
    "ConfigurationError",
    "NodeClientError",
    "PaymasterError",
    "PreconditionFailedError",
    "UnsupportedChainError",
    "FeeData",
    "GasFeeEstimate",
    "TransactionBatch",
    "TransactionIntent",
    "UserOperation",
    "WalletTransaction",
    "NodeClient",
    "PaymasterAPI",
    "SigningServicePaymaster",
    "LocalSigner",
    "Signer",
    "SmartWalletAPI",
    "TransactionManager",
    "UserOperationBuilder",
    "WalletCapabilities",
    "__version__",
]
