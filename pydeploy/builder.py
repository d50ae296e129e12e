"""Builder pattern for constructing transactions."""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from eth_typing import ChecksumAddress

from .models import TransactionParams
from .types import BytesLike, as_address, as_bytes

# Inflate the node's suggested price so a stalled transaction can be replaced
# by one with a strictly higher price.
GAS_PRICE_FACTOR = Decimal("1.2")


def inflate_gas_price(
    gas_price: int, factor: Union[Decimal, str] = GAS_PRICE_FACTOR
) -> int:
    """Return ceil(gas_price * factor), computed exactly for integer wei values."""
    if gas_price < 0:
        raise ValueError("gas_price must be >= 0")
    return math.ceil(Decimal(gas_price) * Decimal(factor))


@dataclass
class TransactionBuilder:
    """
    Fluent builder for constructing legacy transactions.

    Example:
        tx = (TransactionBuilder(chain_id=1337)
            .set_nonce(7)
            .set_gas_price(1_200_000_000)
            .set_gas(200_000)
            .add_call("0xToken...", data=calldata)
            .build())
    """

    chain_id: Optional[int] = None
    nonce: int = 0
    gas_price: int = 0
    gas_limit: int = 21_000
    to: Optional[ChecksumAddress] = None
    data: bytes = b""

    def set_nonce(self, nonce: int) -> "TransactionBuilder":
        """Set the nonce."""
        self.nonce = nonce
        return self

    def set_gas_price(self, gas_price: int) -> "TransactionBuilder":
        """Set the gas price in wei."""
        self.gas_price = gas_price
        return self

    def set_gas(self, gas_limit: int) -> "TransactionBuilder":
        """Set the gas limit."""
        self.gas_limit = gas_limit
        return self

    def add_call(self, to: BytesLike, data: BytesLike = b"") -> "TransactionBuilder":
        """Target a deployed contract with encoded call data."""
        self.to = as_address(to)
        self.data = as_bytes(data)
        return self

    def add_contract_creation(self, bytecode: BytesLike) -> "TransactionBuilder":
        """Make this a contract-creation transaction carrying ``bytecode``."""
        self.to = None
        self.data = as_bytes(bytecode)
        return self

    def build(self) -> TransactionParams:
        """
        Build and validate the transaction.

        Returns:
            A validated, immutable TransactionParams

        Raises:
            ValueError: If validation fails
        """
        tx = TransactionParams(
            nonce=self.nonce,
            gas_price=self.gas_price,
            gas_limit=self.gas_limit,
            data=self.data,
            chain_id=self.chain_id,
            to=self.to,
        )
        tx.validate()
        return tx
