"""
Pytest fixtures for the smart account SDK tests.
"""
import pytest
from unittest.mock import MagicMock

from eth_abi import encode

from smart_account_sdk._rate_limited_log import reset_rate_limits
from smart_account_sdk.config import ClientConfig, NetworkConfig
from smart_account_sdk.models import FeeData
from smart_account_sdk.signer import LocalSigner
from smart_account_sdk.wallet_api import UserOperationBuilder

# Constants for testing
TEST_PRIV_KEY = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
TEST_CHAIN_ID = 80001
ENTRY_POINT = "0x5ff137d4b0fdcd49dca30c7cf57e578a026d2789"
WALLET_FACTORY = "0x1111111111111111111111111111111111111111"
FALLBACK_HANDLER = "0x2222222222222222222222222222222222222222"
COUNTERFACTUAL_ADDRESS = "0x3333333333333333333333333333333333333333"
EXPLICIT_ADDRESS = "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
TARGET = "0x4444444444444444444444444444444444444444"
MULTI_SEND = "0xa238cbeb142c10ef7ad8442c6d1f9e89e07e7761"

INIT_CODE = WALLET_FACTORY + "deadbeef"
ENCODED_CALL = "0xabcdef"
DEPLOY_GAS = 250000
CALL_GAS = 50000
MAX_FEE = 3_000_000_000
PRIORITY_FEE = 1_500_000_000
DEPLOYED_CODE = bytes.fromhex("6080604052")


@pytest.fixture(autouse=True)
def _reset_shared_state():
    """Forget throttled log messages and the cached network registry between tests."""
    reset_rate_limits()
    NetworkConfig._networks_cache = None
    yield
    reset_rate_limits()
    NetworkConfig._networks_cache = None


@pytest.fixture
def mock_chain():
    """Chain reader for an undeployed wallet on Mumbai"""
    chain = MagicMock()
    chain.get_code.return_value = b""
    chain.estimate_gas.return_value = CALL_GAS
    chain.get_fee_data.return_value = FeeData(
        max_fee_per_gas=MAX_FEE,
        max_priority_fee_per_gas=PRIORITY_FEE,
        gas_price=1_000_000_000
    )
    chain.get_sender_address.return_value = COUNTERFACTUAL_ADDRESS
    chain.estimate_get_sender_address_gas.return_value = DEPLOY_GAS
    chain.get_chain_id.return_value = TEST_CHAIN_ID
    chain.call.return_value = encode(["uint256"], [7])
    return chain


@pytest.fixture
def mock_capabilities():
    """Wallet capabilities with fixed answers"""
    capabilities = MagicMock()
    capabilities.derive_init_code.return_value = INIT_CODE
    capabilities.current_nonce.return_value = 0
    capabilities.encode_call.return_value = ENCODED_CALL
    capabilities.sign_digest.return_value = "0x5167"
    return capabilities


@pytest.fixture
def make_builder(mock_chain, mock_capabilities):
    """Factory for builders wired to the mock chain and capabilities"""
    def _make(**kwargs):
        kwargs.setdefault("chain", mock_chain)
        kwargs.setdefault("capabilities", mock_capabilities)
        kwargs.setdefault("entry_point_address", ENTRY_POINT)
        return UserOperationBuilder(**kwargs)
    return _make


@pytest.fixture
def signer():
    """Deterministic owner key"""
    return LocalSigner(TEST_PRIV_KEY)


@pytest.fixture
def client_config():
    return ClientConfig(
        entry_point_address=ENTRY_POINT,
        chain_id=TEST_CHAIN_ID,
        wallet_factory_address=WALLET_FACTORY,
        fallback_handler_address=FALLBACK_HANDLER,
        multi_send_address=MULTI_SEND,
    )
