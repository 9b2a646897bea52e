"""
Tests for the web3-backed chain reader.
"""
import pytest
from unittest.mock import MagicMock

from eth_abi import encode
from web3 import Web3
from web3.exceptions import ContractCustomError, ContractLogicError

from smart_account_sdk.chain import DEFAULT_PRIORITY_FEE_PER_GAS, SENDER_ADDRESS_RESULT_SELECTOR, Web3ChainReader
from smart_account_sdk.config import ZERO_ADDRESS, ClientConfig
from smart_account_sdk.exceptions import ConfigurationError
from smart_account_sdk.smart_wallet import SmartWalletAPI
from conftest import (
    COUNTERFACTUAL_ADDRESS,
    DEPLOYED_CODE,
    ENTRY_POINT,
    FALLBACK_HANDLER,
    INIT_CODE,
    TARGET,
    WALLET_FACTORY,
)

SENDER_ADDRESS_RESULT = "0x" + (
    SENDER_ADDRESS_RESULT_SELECTOR + encode(["address"], [COUNTERFACTUAL_ADDRESS])
).hex()


@pytest.fixture
def mock_w3():
    w3 = MagicMock(spec=Web3)
    w3.eth = MagicMock()
    w3.eth.chain_id = 80001
    w3.eth.gas_price = 1_000_000_000
    w3.eth.get_code.return_value = DEPLOYED_CODE
    w3.eth.estimate_gas.return_value = 42000
    w3.eth.call.return_value = b"\x01"
    return w3


@pytest.fixture
def reader(mock_w3):
    return Web3ChainReader(w3=mock_w3)


def test_requires_w3_or_url():
    with pytest.raises(ValueError):
        Web3ChainReader()


def test_rejects_plain_http_rpc():
    with pytest.raises(ConfigurationError):
        Web3ChainReader(rpc_url="http://rpc.example.com")


def test_get_code(reader, mock_w3):
    assert reader.get_code(TARGET) == DEPLOYED_CODE
    mock_w3.eth.get_code.assert_called_once_with(Web3.to_checksum_address(TARGET))


def test_estimate_gas(reader, mock_w3):
    tx = {"from": ENTRY_POINT, "to": TARGET, "data": "0x"}
    assert reader.estimate_gas(tx) == 42000
    mock_w3.eth.estimate_gas.assert_called_once_with(tx)


def test_fee_data_with_base_fee(reader, mock_w3):
    mock_w3.eth.get_block.return_value = {"baseFeePerGas": 10_000_000_000}

    fee_data = reader.get_fee_data()

    assert fee_data.max_priority_fee_per_gas == DEFAULT_PRIORITY_FEE_PER_GAS
    assert fee_data.max_fee_per_gas == 2 * 10_000_000_000 + DEFAULT_PRIORITY_FEE_PER_GAS
    assert fee_data.gas_price == 1_000_000_000
    mock_w3.eth.get_block.assert_called_once_with("latest")


def test_fee_data_without_base_fee(reader, mock_w3):
    mock_w3.eth.get_block.return_value = {"number": 1}

    fee_data = reader.get_fee_data()

    assert fee_data.max_fee_per_gas is None
    assert fee_data.max_priority_fee_per_gas is None
    assert fee_data.gas_price == 1_000_000_000


def test_get_sender_address(reader, mock_w3):
    contract = mock_w3.eth.contract.return_value
    contract.functions.getSenderAddress.return_value.call.return_value = COUNTERFACTUAL_ADDRESS

    assert reader.get_sender_address(ENTRY_POINT, INIT_CODE) == Web3.to_checksum_address(COUNTERFACTUAL_ADDRESS)
    assert mock_w3.eth.contract.call_args.kwargs["address"] == Web3.to_checksum_address(ENTRY_POINT)
    contract.functions.getSenderAddress.assert_called_once_with(bytes.fromhex(INIT_CODE[2:]))


def test_estimate_get_sender_address_gas(reader, mock_w3):
    fn = mock_w3.eth.contract.return_value.functions.getSenderAddress.return_value
    fn.estimate_gas.return_value = 250000

    assert reader.estimate_get_sender_address_gas(ENTRY_POINT, INIT_CODE) == 250000
    fn.estimate_gas.assert_called_once_with({"from": ZERO_ADDRESS})


def test_sender_address_result_selector():
    assert SENDER_ADDRESS_RESULT_SELECTOR.hex() == "6ca7b806"


def test_get_sender_address_from_revert(reader, mock_w3):
    fn = mock_w3.eth.contract.return_value.functions.getSenderAddress.return_value
    fn.call.side_effect = ContractCustomError(SENDER_ADDRESS_RESULT, data=SENDER_ADDRESS_RESULT)

    assert reader.get_sender_address(ENTRY_POINT, INIT_CODE) == Web3.to_checksum_address(COUNTERFACTUAL_ADDRESS)


@pytest.mark.parametrize("data", ["0x08c379a0" + "00" * 32, None, {"message": "boom"}])
def test_get_sender_address_other_reverts_propagate(reader, mock_w3, data):
    fn = mock_w3.eth.contract.return_value.functions.getSenderAddress.return_value
    fn.call.side_effect = ContractLogicError("execution reverted", data=data)

    with pytest.raises(ContractLogicError):
        reader.get_sender_address(ENTRY_POINT, INIT_CODE)


def test_estimate_falls_back_to_factory_call(reader, mock_w3):
    fn = mock_w3.eth.contract.return_value.functions.getSenderAddress.return_value
    fn.estimate_gas.side_effect = ContractCustomError(SENDER_ADDRESS_RESULT, data=SENDER_ADDRESS_RESULT)
    mock_w3.eth.estimate_gas.return_value = 180000

    assert reader.estimate_get_sender_address_gas(ENTRY_POINT, INIT_CODE) == 180000
    mock_w3.eth.estimate_gas.assert_called_once_with({
        "from": Web3.to_checksum_address(ENTRY_POINT),
        "to": Web3.to_checksum_address(WALLET_FACTORY),
        "data": "0xdeadbeef",
    })


def test_estimate_other_reverts_propagate(reader, mock_w3):
    fn = mock_w3.eth.contract.return_value.functions.getSenderAddress.return_value
    fn.estimate_gas.side_effect = ContractLogicError("execution reverted", data="0x")

    with pytest.raises(ContractLogicError):
        reader.estimate_get_sender_address_gas(ENTRY_POINT, INIT_CODE)
    mock_w3.eth.estimate_gas.assert_not_called()


def test_chain_id_is_memoized(reader, mock_w3):
    assert reader.get_chain_id() == 80001
    mock_w3.eth.chain_id = 5
    assert reader.get_chain_id() == 80001


def test_call(reader, mock_w3):
    assert reader.call({"to": TARGET, "data": "0x"}) == b"\x01"


def test_web3_errors_propagate(reader, mock_w3):
    mock_w3.eth.get_code.side_effect = ConnectionError("rpc down")
    with pytest.raises(ConnectionError):
        reader.get_code(TARGET)


def test_wallet_resolves_address_with_packaged_entry_point(monkeypatch, mock_w3, signer):
    monkeypatch.delenv("SMART_ACCOUNT_NETWORKS_PATH", raising=False)
    fn = mock_w3.eth.contract.return_value.functions.getSenderAddress.return_value
    fn.call.side_effect = ContractCustomError(SENDER_ADDRESS_RESULT, data=SENDER_ADDRESS_RESULT)
    config = ClientConfig.from_network(
        "polygon-mumbai",
        wallet_factory_address=WALLET_FACTORY,
        fallback_handler_address=FALLBACK_HANDLER,
    )

    wallet = SmartWalletAPI(Web3ChainReader(w3=mock_w3), signer, config).init()

    assert wallet.address == Web3.to_checksum_address(COUNTERFACTUAL_ADDRESS)
    assert mock_w3.eth.contract.call_args.kwargs["address"] == Web3.to_checksum_address(config.entry_point_address)
