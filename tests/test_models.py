"""
Tests for the data models.
"""
from smart_account_sdk.models import (
    CCMPMessagePayload,
    TransactionIntent,
    UserOperation,
)
from conftest import EXPLICIT_ADDRESS, TARGET


def test_intent_aliases():
    intent = TransactionIntent.model_validate({
        "target": TARGET,
        "gasLimit": "0x5208",
        "maxFeePerGas": 0,
        "isDelegateCall": True,
        "batchId": 2,
    })
    assert intent.gas_limit == "0x5208"
    assert intent.max_fee_per_gas == 0
    assert intent.max_priority_fee_per_gas is None
    assert intent.is_delegate_call is True
    assert intent.batch_id == 2


def test_transfer_placeholder():
    assert TransactionIntent().is_transfer_placeholder()
    assert not TransactionIntent(target=TARGET).is_transfer_placeholder()
    assert not TransactionIntent(data="0x12").is_transfer_placeholder()


def test_user_operation_rpc_dict():
    op = UserOperation(
        sender=EXPLICIT_ADDRESS,
        nonce=1,
        call_gas_limit=21000,
        verification_gas_limit=100000,
        pre_verification_gas=21000,
        max_fee_per_gas=None,
        max_priority_fee_per_gas=0,
    )

    assert op.to_rpc_dict() == {
        "sender": EXPLICIT_ADDRESS,
        "nonce": "0x1",
        "initCode": "0x",
        "callData": "0x",
        "callGasLimit": "0x5208",
        "verificationGasLimit": "0x186a0",
        "preVerificationGas": "0x5208",
        "maxFeePerGas": "0x0",
        "maxPriorityFeePerGas": "0x0",
        "paymasterAndData": "0x",
        "signature": "0x",
    }
    assert not op.is_signed()


def test_payload_alias():
    payload = CCMPMessagePayload.model_validate({"to": TARGET, "_calldata": "0x12"})
    assert payload.calldata == "0x12"
    assert payload.model_dump(by_alias=True) == {"to": TARGET, "_calldata": "0x12"}
