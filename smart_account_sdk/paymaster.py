"""
Paymaster integration.

A paymaster sponsors the gas of a user operation; the wallet only needs the
bytes to put into the operation's ``paymasterAndData`` field.
"""
import logging
from typing import Any, Dict, Optional, Protocol

import requests

from ._rate_limited_log import rate_limited_log
from ._session import create_session
from .config import validate_service_url
from .exceptions import PaymasterError
from .models import EMPTY_BYTES, UserOperation


class PaymasterAPI(Protocol):
    """Protocol for paymaster data providers"""

    def get_paymaster_and_data(self, partial_op: UserOperation) -> str:
        """Return the paymasterAndData bytes for an operation ("0x" for none)"""
        ...


class SigningServicePaymaster:
    """
    Paymaster backed by a remote signing service.

    The service receives the partially filled operation and answers with
    the paymaster address and its signature packed into paymasterAndData.
    """

    def __init__(
        self,
        signing_service_url: Optional[str],
        dapp_api_key: Optional[str] = None,
        paymaster_address: Optional[str] = None,
        retry_count: int = 3,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the paymaster client

        Args:
            signing_service_url: Signing service endpoint (may be empty to disable sponsorship)
            dapp_api_key: API key sent in the ``x-api-key`` header
            paymaster_address: Paymaster contract address (may be empty to disable sponsorship)
            retry_count: Number of retries for HTTP requests
            timeout: Timeout for HTTP requests in seconds
            session: Optional pre-configured requests session
            logger: Optional logger instance
        """
        self.signing_service_url = (
            validate_service_url(signing_service_url, "signing_service_url")
            if signing_service_url else None
        )
        self.dapp_api_key = dapp_api_key
        self.paymaster_address = paymaster_address
        self.timeout = timeout
        self.session = session or create_session(retry_count)
        self.logger = logger or logging.getLogger(__name__)

    @property
    def enabled(self) -> bool:
        return bool(self.signing_service_url and self.paymaster_address)

    def get_paymaster_and_data(self, partial_op: UserOperation) -> str:
        """
        Ask the signing service to sponsor an operation

        Args:
            partial_op: Operation with every field but the signature filled in

        Returns:
            paymasterAndData hex string, "0x" when sponsorship is disabled or declined

        Raises:
            requests.RequestException: If the HTTP request fails
            PaymasterError: If an accepted response carries no paymasterAndData
        """
        if not self.enabled:
            return EMPTY_BYTES

        headers: Dict[str, str] = {}
        if self.dapp_api_key:
            headers["x-api-key"] = self.dapp_api_key

        body = {"userOp": partial_op.model_dump(by_alias=True, exclude={"signature"})}
        self.logger.debug(f"Requesting paymaster data for sender {partial_op.sender}")
        response = self.session.post(
            self.signing_service_url,
            json=body,
            headers=headers,
            timeout=self.timeout
        )
        response.raise_for_status()
        result: Dict[str, Any] = response.json()

        if result.get("statusCode") != 200:
            rate_limited_log(
                f"Paymaster declined sponsorship (statusCode={result.get('statusCode')})",
                level="warning",
                logger_instance=self.logger
            )
            return EMPTY_BYTES

        data = result.get("data") or {}
        paymaster_and_data = data.get("paymasterAndData")
        if not paymaster_and_data:
            raise PaymasterError(f"Missing paymasterAndData in signing service response: {result}")
        return paymaster_and_data
