"""Runtime settings, read from the environment and an optional .env file."""

import os
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping, Optional

from dotenv import load_dotenv

from .builder import GAS_PRICE_FACTOR
from .client import DEFAULT_RPC_URL
from .errors import ConfigurationError

DEFAULT_SOURCE_PATH = "contracts/Token.sol"
DEFAULT_SOLC_VERSION = "0.8.19"

# Fixed rather than estimated; a transfer that needs more gas fails.
GAS_LIMIT = 200_000

# Values tied to contracts/Token.sol.
CONTRACT_NAME = "Token"
INITIAL_SUPPLY = 1_000_000
TRANSFER_AMOUNT = 100


def load_env() -> None:
    """Load a .env file into os.environ without overriding set variables."""
    load_dotenv()


def _truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    rpc_url: str = DEFAULT_RPC_URL
    source_path: str = DEFAULT_SOURCE_PATH
    contract_name: str = CONTRACT_NAME
    solc_version: Optional[str] = DEFAULT_SOLC_VERSION
    install_solc: bool = False
    gas_limit: int = GAS_LIMIT
    gas_price_factor: Decimal = GAS_PRICE_FACTOR
    receipt_timeout: float = 120.0
    poll_latency: float = 0.5
    request_timeout: Optional[float] = None
    expected_initial_balance: int = INITIAL_SUPPLY
    transfer_amount: int = TRANSFER_AMOUNT
    expected_destination_balance: int = TRANSFER_AMOUNT
    balance_method: str = field(default="balances")
    transfer_method: str = field(default="transfer")

    def validate(self) -> None:
        if self.gas_limit <= 0:
            raise ConfigurationError("gas_limit must be > 0")
        if self.gas_price_factor < 1:
            raise ConfigurationError("gas_price_factor must be >= 1")
        if self.receipt_timeout <= 0:
            raise ConfigurationError("receipt_timeout must be > 0")
        if self.poll_latency <= 0:
            raise ConfigurationError("poll_latency must be > 0")
        if self.transfer_amount < 0:
            raise ConfigurationError("transfer_amount must be >= 0")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``env`` (``os.environ`` after loading .env by default)."""
        if env is None:
            load_env()
            env = os.environ
        request_timeout = _float(env, "RPC_REQUEST_TIMEOUT", 0) or None
        settings = cls(
            rpc_url=env.get("RPC_URL") or DEFAULT_RPC_URL,
            source_path=env.get("SOURCE_PATH") or DEFAULT_SOURCE_PATH,
            solc_version=env.get("SOLC_VERSION") or DEFAULT_SOLC_VERSION,
            install_solc=_truthy(env.get("INSTALL_SOLC")),
            receipt_timeout=_float(env, "RECEIPT_TIMEOUT", 120.0),
            poll_latency=_float(env, "POLL_LATENCY", 0.5),
            request_timeout=request_timeout,
        )
        settings.validate()
        return settings
