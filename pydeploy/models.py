"""Strongly-typed data models for the deploy-and-invoke workflow."""

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from eth_account import Account
from eth_typing import ChecksumAddress

from .errors import AbiError, ConfigurationError
from .types import BytesLike, as_address, as_bytes, as_private_key


@dataclass(frozen=True)
class Session:
    """
    The sending account for one run.

    Holds the address, the private key used for local signing, and the
    nonce for the next transaction. The key stays out of ``repr`` so a
    session can be logged or shown in a traceback safely.
    """

    address: ChecksumAddress
    private_key: bytes = field(repr=False)
    nonce: int = 0

    def validate(self) -> None:
        if self.nonce < 0:
            raise ValueError("nonce must be >= 0")

    def next_nonce(self) -> "Session":
        """Return a copy of this session with the nonce advanced by one."""
        return replace(self, nonce=self.nonce + 1)

    def with_nonce(self, nonce: int) -> "Session":
        return replace(self, nonce=nonce)

    @classmethod
    def from_key(
        cls,
        private_key: BytesLike,
        nonce: int = 0,
        address: Optional[BytesLike] = None,
    ) -> "Session":
        """Create a Session, checking ``address`` against the key if given."""
        try:
            key = as_private_key(private_key)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(str(exc)) from None
        try:
            derived = Account.from_key(key).address
        except ValueError:
            raise ConfigurationError("private key is not a valid secp256k1 key") from None
        if address is not None:
            try:
                expected = as_address(address)
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(f"invalid account address: {exc}") from None
            if expected != derived:
                raise ConfigurationError(
                    f"private key does not belong to account {expected}"
                )
        return cls(address=derived, private_key=key, nonce=nonce)


@dataclass(frozen=True)
class CompiledArtifact:
    """Bytecode and ABI produced by compiling one contract."""

    contract_name: str
    bytecode: bytes
    abi: tuple[dict[str, Any], ...]

    def function_abi(self, name: str) -> dict[str, Any]:
        for entry in self.abi:
            if entry.get("type", "function") == "function" and entry.get("name") == name:
                return entry
        raise AbiError(f"{self.contract_name} has no function named {name!r}")

    @classmethod
    def create(
        cls, contract_name: str, bytecode: BytesLike, abi: list
    ) -> "CompiledArtifact":
        """Create a CompiledArtifact with automatic type coercion."""
        if isinstance(bytecode, str) and bytecode and not bytecode.startswith("0x"):
            bytecode = "0x" + bytecode
        return cls(
            contract_name=contract_name,
            bytecode=as_bytes(bytecode),
            abi=tuple(abi),
        )


@dataclass(frozen=True)
class TransactionParams:
    """
    Legacy (gas price) transaction, prior to signing.

    ``to`` is None for a contract-creation transaction, in which case
    ``data`` carries the contract bytecode.
    """

    nonce: int
    gas_price: int
    gas_limit: int
    data: bytes
    chain_id: Optional[int] = None
    to: Optional[ChecksumAddress] = None

    @property
    def is_contract_creation(self) -> bool:
        return self.to is None

    def validate(self) -> None:
        """Validate the transaction fields."""
        if self.nonce < 0:
            raise ValueError("nonce must be >= 0")
        if self.gas_price < 0:
            raise ValueError("gas_price must be >= 0")
        if self.gas_limit <= 0:
            raise ValueError("gas_limit must be > 0")
        if self.chain_id is not None and self.chain_id <= 0:
            raise ValueError("chain_id must be > 0")
        if self.is_contract_creation and not self.data:
            raise ValueError("contract creation requires bytecode")

    def as_dict(self) -> dict[str, Any]:
        """Return the dict eth-account signs."""
        self.validate()
        tx: dict[str, Any] = {
            "nonce": self.nonce,
            "gasPrice": self.gas_price,
            "gas": self.gas_limit,
            "value": 0,
            "data": "0x" + self.data.hex(),
        }
        if self.to is not None:
            tx["to"] = self.to
        if self.chain_id is not None:
            tx["chainId"] = self.chain_id
        return tx


@dataclass(frozen=True)
class SignedTransaction:
    """A transaction serialized and signed with the sender's key."""

    raw_transaction: bytes
    tx_hash: bytes
    nonce: int
    gas_price: int


class ReceiptStatus(enum.Enum):
    PENDING = "pending"
    MINED = "mined"
    FAILED = "failed"


@dataclass(frozen=True)
class Receipt:
    """Outcome of waiting for a submitted transaction."""

    status: ReceiptStatus
    tx_hash: bytes
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    contract_address: Optional[ChecksumAddress] = None

    @property
    def mined(self) -> bool:
        return self.status is ReceiptStatus.MINED

    @classmethod
    def pending(cls, tx_hash: bytes) -> "Receipt":
        return cls(status=ReceiptStatus.PENDING, tx_hash=tx_hash)


@dataclass(frozen=True)
class ContractHandle:
    """A deployed contract: its address plus the ABI used to call it."""

    address: ChecksumAddress
    artifact: CompiledArtifact

    @property
    def abi(self) -> tuple[dict[str, Any], ...]:
        return self.artifact.abi
