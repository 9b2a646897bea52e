"""
User operation construction and signing.

``UserOperationBuilder`` turns a ``TransactionIntent`` into a signed
``UserOperation`` for one wallet, hiding whether that wallet is deployed yet.
Wallet-specific behaviour (deployment code, nonce lookup, call encoding,
signing) is supplied through a ``WalletCapabilities`` object.

A builder memoizes the wallet address and its deployment state and is meant
for sequential use: run one build at a time per instance, or create one
instance per concurrent flow.
"""
import logging
from typing import Any, Callable, Dict, Optional, Protocol, Tuple, Union

from .chain import ChainReader
from .config import GasDefaults
from .models import EMPTY_BYTES, TransactionIntent, UserOperation
from .paymaster import PaymasterAPI
from .utils import get_request_id, hex_to_bytes, parse_number

logger = logging.getLogger(__name__)

EventHook = Callable[[str, Dict[str, Any]], None]


class WalletCapabilities(Protocol):
    """Operations a concrete wallet kind must provide"""

    def derive_init_code(self) -> str:
        """
        Return the initCode that deploys the wallet: the factory address
        followed by the factory call. Must be deterministic for a given
        wallet configuration.
        """
        ...

    def current_nonce(self, batch_id: int) -> int:
        """Return the wallet's replay-protection counter for a batch lane"""
        ...

    def encode_call(self, target: str, value: int, data: str, is_delegate_call: bool) -> str:
        """Encode the call from the entry point through the wallet to the target"""
        ...

    def sign_digest(self, request_id: str) -> str:
        """Sign a 32-byte request id"""
        ...


class UserOperationBuilder:
    """
    Builds and signs user operations for a single wallet.

    The user can use the following APIs:
    - create_unsigned_operation: fill every field of an operation except the signature
    - sign_operation: compute the request id of an operation and sign it
    - create_signed_operation: both of the above

    Failures of the chain reader, the paymaster and the signer propagate
    unchanged; nothing is retried.
    """

    def __init__(
        self,
        chain: ChainReader,
        capabilities: WalletCapabilities,
        entry_point_address: str,
        wallet_address: Optional[str] = None,
        paymaster: Optional[PaymasterAPI] = None,
        gas: Optional[GasDefaults] = None,
        event_hook: Optional[EventHook] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the builder

        Args:
            chain: Read-only chain access
            capabilities: Wallet-specific operations
            entry_point_address: Entry point the operations are sent through
            wallet_address: Known wallet address; derived from the initCode when omitted
            paymaster: Optional paymaster providing paymasterAndData
            gas: Gas figures (defaults to GasDefaults())
            event_hook: Optional callback receiving (event_name, details) for each build step
            logger: Optional logger instance
        """
        self.chain = chain
        self.capabilities = capabilities
        self.entry_point_address = entry_point_address
        self.wallet_address = wallet_address
        self.paymaster = paymaster
        self.gas = gas or GasDefaults()
        self.event_hook = event_hook
        self.logger = logger or logging.getLogger(__name__)

        self._resolved_address: Optional[str] = None
        # Flips to False once code is seen at the address, never back
        self._is_phantom = True

    def _emit(self, event: str, **details: Any) -> None:
        self.logger.debug(f"{event}: {details}")
        if self.event_hook is not None:
            self.event_hook(event, details)

    def resolve_address(self) -> str:
        """
        Return the wallet's address, valid even before deployment.

        An explicit address given at construction is returned as is. Otherwise
        the counterfactual address is asked from the entry point once and
        cached for the lifetime of the builder.
        """
        if self.wallet_address is not None:
            return self.wallet_address
        if self._resolved_address is None:
            init_code = self.capabilities.derive_init_code()
            self._resolved_address = self.chain.get_sender_address(self.entry_point_address, init_code)
            self._emit("address_resolved", address=self._resolved_address)
        return self._resolved_address

    def is_deployed(self) -> bool:
        """
        Check whether the wallet has code on chain.

        Once the wallet has been seen deployed the chain is not asked again.
        """
        if not self._is_phantom:
            return True
        address = self.resolve_address()
        code = self.chain.get_code(address)
        if len(hex_to_bytes(code)) > 0:
            self._is_phantom = False
            self._emit("wallet_deployed", address=address)
        return not self._is_phantom

    def build_init_code(self) -> str:
        """Return the deployment initCode while undeployed, "0x" afterwards."""
        if self.is_deployed():
            init_code = EMPTY_BYTES
        else:
            init_code = self.capabilities.derive_init_code()
        self._emit("init_code_built", length=len(hex_to_bytes(init_code)))
        return init_code

    def build_call_data_and_gas_limit(
        self, intent: Union[TransactionIntent, Dict[str, Any]]
    ) -> Tuple[str, int]:
        """
        Encode the wallet call for an intent and resolve its call gas limit

        Args:
            intent: The requested action

        Returns:
            Tuple of (call_data, call_gas_limit)
        """
        intent = _as_intent(intent)
        if intent.is_transfer_placeholder():
            return self.gas.transfer_call_data, self.gas.transfer_call_gas_limit

        value = parse_number(intent.value)
        if value is None:
            value = 0
        call_data = self.capabilities.encode_call(
            intent.target,
            value,
            intent.data,
            intent.is_delegate_call
        )

        call_gas_limit = parse_number(intent.gas_limit)
        if call_gas_limit is None:
            call_gas_limit = self.chain.estimate_gas({
                "from": self.entry_point_address,
                "to": self.resolve_address(),
                "data": call_data,
            })
        self._emit("call_data_built", call_gas_limit=call_gas_limit)
        return call_data, call_gas_limit

    def build_verification_gas_limit(self, init_code: str) -> int:
        """
        Return the verification gas allowance; when the operation deploys the
        wallet, the cost of the counterfactual address computation is added.
        """
        verification_gas_limit = self.gas.verification_gas_limit
        if len(hex_to_bytes(init_code)) > 0:
            verification_gas_limit += self.chain.estimate_get_sender_address_gas(
                self.entry_point_address, init_code
            )
        return verification_gas_limit

    def build_pre_verification_gas(self, partial_op: UserOperation) -> int:
        """
        Should cover the cost of putting the operation's calldata on chain
        and some overhead; the overhead depends on the expected bundle size.
        """
        # TODO: add the calldata cost of partial_op once bundles carry more than one operation
        pre_verification_gas = self.gas.pre_verification_gas_cost // self.gas.bundle_size
        self._emit("pre_verification_gas", value=pre_verification_gas)
        return pre_verification_gas

    def build_fee_fields(
        self, intent: Union[TransactionIntent, Dict[str, Any]]
    ) -> Tuple[Optional[int], Optional[int]]:
        """
        Resolve (max_fee_per_gas, max_priority_fee_per_gas).

        Fields supplied by the intent are kept, zero included; only absent
        fields are filled from the chain's current fee data.
        """
        intent = _as_intent(intent)
        max_fee_per_gas = intent.max_fee_per_gas
        max_priority_fee_per_gas = intent.max_priority_fee_per_gas
        if max_fee_per_gas is None or max_priority_fee_per_gas is None:
            fee_data = self.chain.get_fee_data()
            if max_fee_per_gas is None:
                max_fee_per_gas = fee_data.max_fee_per_gas
            if max_priority_fee_per_gas is None:
                max_priority_fee_per_gas = fee_data.max_priority_fee_per_gas
        self._emit(
            "fee_fields_resolved",
            max_fee_per_gas=max_fee_per_gas,
            max_priority_fee_per_gas=max_priority_fee_per_gas
        )
        return max_fee_per_gas, max_priority_fee_per_gas

    def compute_request_id(self, operation: UserOperation) -> str:
        """
        Return the request id to sign. Matches the entry point's own
        computation; the operation's signature field is ignored.
        """
        chain_id = self.chain.get_chain_id()
        request_id = get_request_id(operation, self.entry_point_address, chain_id)
        self._emit("request_id_computed", request_id=request_id, chain_id=chain_id)
        return request_id

    def create_unsigned_operation(
        self, intent: Union[TransactionIntent, Dict[str, Any]]
    ) -> UserOperation:
        """
        Create a UserOperation, filling all details except the signature.

        - if the wallet is not yet deployed, initCode deploys it and its
          creation cost is added to the verification gas
        - gas limit, fees and nonce missing from the intent are read from the chain

        Args:
            intent: The requested action

        Returns:
            UserOperation with an empty signature
        """
        intent = _as_intent(intent)
        call_data, call_gas_limit = self.build_call_data_and_gas_limit(intent)
        init_code = self.build_init_code()
        verification_gas_limit = self.build_verification_gas_limit(init_code)
        max_fee_per_gas, max_priority_fee_per_gas = self.build_fee_fields(intent)
        nonce = self.capabilities.current_nonce(intent.batch_id)

        operation = UserOperation(
            sender=self.resolve_address(),
            nonce=nonce,
            init_code=init_code,
            call_data=call_data,
            call_gas_limit=call_gas_limit,
            verification_gas_limit=verification_gas_limit,
            pre_verification_gas=0,
            max_fee_per_gas=max_fee_per_gas,
            max_priority_fee_per_gas=max_priority_fee_per_gas,
            paymaster_and_data=EMPTY_BYTES,
            signature=EMPTY_BYTES,
        )
        operation = operation.model_copy(
            update={"pre_verification_gas": self.build_pre_verification_gas(operation)}
        )

        if self.paymaster is not None:
            paymaster_and_data = self.paymaster.get_paymaster_and_data(operation)
            operation = operation.model_copy(update={"paymaster_and_data": paymaster_and_data})
        return operation

    def sign_operation(self, operation: UserOperation) -> UserOperation:
        """
        Sign a filled operation.

        Args:
            operation: The operation to sign (its signature field is ignored)

        Returns:
            A copy of the operation with the signature populated
        """
        request_id = self.compute_request_id(operation)
        signature = self.capabilities.sign_digest(request_id)
        self._emit("operation_signed", sender=operation.sender, request_id=request_id)
        return operation.model_copy(update={"signature": signature})

    def create_signed_operation(
        self, intent: Union[TransactionIntent, Dict[str, Any]]
    ) -> UserOperation:
        """Create a user operation for an intent and sign it."""
        return self.sign_operation(self.create_unsigned_operation(intent))


def _as_intent(intent: Union[TransactionIntent, Dict[str, Any]]) -> TransactionIntent:
    if isinstance(intent, TransactionIntent):
        return intent
    return TransactionIntent.model_validate(intent)
