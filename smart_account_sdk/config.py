"""
Configuration for the smart account SDK.

Network defaults are read from the packaged ``networks.json``. A different
registry can be supplied through the ``SMART_ACCOUNT_NETWORKS_PATH``
environment variable, and any RPC URL can be overridden with
``<NETWORK_NAME>_RPC_URL``.
"""
import importlib.resources
import json
import logging
import os
import urllib.parse
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def validate_service_url(url: str, url_name: str = "url") -> str:
    """
    Require https:// for remote services, allowing plain http only for
    localhost and 127.0.0.1.

    Returns:
        The URL without a trailing slash

    Raises:
        ConfigurationError: If the URL uses another scheme for a remote host
    """
    parsed = urllib.parse.urlparse(url)
    host = parsed.netloc.split(':')[0] if parsed.netloc else ''
    is_local = host in ('localhost', '127.0.0.1')
    if parsed.scheme != 'https' and not is_local:
        raise ConfigurationError(f"{url_name} must use https:// for security (got: {parsed.scheme}://)")
    return url.rstrip('/')


class GasDefaults(BaseModel):
    """
    Fixed gas figures used while filling a user operation.

    ``bundle_size`` divides ``pre_verification_gas_cost``; it stays 1 until
    bundles carry more than one operation.
    """
    verification_gas_limit: int = 100000
    pre_verification_gas_cost: int = 21000
    bundle_size: int = Field(1, ge=1)
    transfer_call_data: str = "0x"
    transfer_call_gas_limit: int = 21000
    exec_gas_limit: int = 500000


class ClientConfig(BaseModel):
    """Addresses and service endpoints a wallet client works against"""
    entry_point_address: str
    chain_id: Optional[int] = None
    wallet_factory_address: Optional[str] = None
    fallback_handler_address: Optional[str] = None
    multi_send_address: Optional[str] = None
    signing_service_url: Optional[str] = None
    dapp_api_key: Optional[str] = None
    paymaster_address: Optional[str] = None
    gas: GasDefaults = Field(default_factory=GasDefaults)

    @classmethod
    def from_network(cls, network: str, **overrides: Any) -> "ClientConfig":
        """
        Build a config from the network registry, letting keyword
        arguments override or complete the registry values.
        """
        net = NetworkConfig.get_network(network)
        values: Dict[str, Any] = {
            "entry_point_address": net.get("entryPoint"),
            "chain_id": net.get("chainId"),
            "wallet_factory_address": net.get("walletFactory"),
            "fallback_handler_address": net.get("fallbackHandler"),
            "multi_send_address": net.get("multiSend"),
        }
        values.update(overrides)
        if not values.get("entry_point_address"):
            raise ConfigurationError(f"No entry point address configured for network '{network}'")
        return cls(**values)


class NetworkConfig:
    """Registry of known networks and their contract addresses"""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load the network registry, caching it after the first read.

        Returns:
            Mapping of network name to its configuration
        """
        if cls._networks_cache is not None:
            return cls._networks_cache

        custom_path = os.environ.get("SMART_ACCOUNT_NETWORKS_PATH")
        if custom_path:
            logger.debug(f"Loading networks from {custom_path}")
            with Path(custom_path).open("r") as f:
                networks = json.load(f)
        else:
            resource = importlib.resources.files("smart_account_sdk").joinpath("networks.json")
            networks = json.loads(resource.read_text())

        cls._networks_cache = networks
        return networks

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        """
        Get the configuration of a single network.

        Raises:
            ConfigurationError: If the network is not in the registry
        """
        networks = cls.load_networks()
        if network not in networks:
            available = ", ".join(sorted(networks.keys()))
            raise ConfigurationError(f"Unknown network '{network}'. Available networks: {available}")
        return networks[network]

    @classmethod
    def get_rpc_url(cls, network: str, override: Optional[str] = None) -> str:
        """
        Resolve the RPC URL: explicit override, then the
        ``<NETWORK>_RPC_URL`` environment variable, then the registry.
        """
        if override:
            return override
        env_name = network.upper().replace("-", "_") + "_RPC_URL"
        env_value = os.environ.get(env_name)
        if env_value:
            return env_value
        return cls.get_network(network)["rpc"]

    @classmethod
    def get_chain_id(cls, network: str) -> int:
        return int(cls.get_network(network)["chainId"])

    @classmethod
    def _get_address(cls, network: str, key: str) -> str:
        address = cls.get_network(network).get(key)
        if not address:
            raise ConfigurationError(f"Network '{network}' has no '{key}' address configured")
        return address

    @classmethod
    def get_entry_point_address(cls, network: str) -> str:
        return cls._get_address(network, "entryPoint")

    @classmethod
    def get_multi_send_address(cls, network: str) -> str:
        return cls._get_address(network, "multiSend")

    @classmethod
    def get_wallet_factory_address(cls, network: str) -> str:
        return cls._get_address(network, "walletFactory")
