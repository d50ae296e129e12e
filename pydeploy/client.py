"""Thin RPC client over web3.py.

Only the handful of requests the workflow needs are exposed, each one
wrapping web3 and transport errors in RpcError.
"""

import logging
from typing import Any, Callable, Optional, TypeVar

from eth_typing import ChecksumAddress
from requests.exceptions import RequestException
from web3 import Web3
from web3.exceptions import TimeExhausted, Web3Exception

from .errors import RpcError
from .models import Receipt, ReceiptStatus
from .types import as_address

logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "http://127.0.0.1:8545"

T = TypeVar("T")


class NodeClient:
    """RPC boundary to an Ethereum-compatible node."""

    def __init__(self, w3: Web3):
        self.w3 = w3

    @classmethod
    def from_url(
        cls, rpc_url: str = DEFAULT_RPC_URL, request_timeout: Optional[float] = None
    ) -> "NodeClient":
        """Create a client for an HTTP endpoint. No request is made yet."""
        request_kwargs = {"timeout": request_timeout} if request_timeout else None
        return cls(Web3(Web3.HTTPProvider(rpc_url, request_kwargs=request_kwargs)))

    def _request(self, method: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except (Web3Exception, RequestException, ValueError) as exc:
            raise RpcError(method, exc) from exc

    def gas_price(self) -> int:
        return self._request("eth_gasPrice", lambda: int(self.w3.eth.gas_price))

    def chain_id(self) -> int:
        return self._request("eth_chainId", lambda: int(self.w3.eth.chain_id))

    def transaction_count(self, address: ChecksumAddress) -> int:
        """Number of transactions sent from ``address``, including pending ones."""
        return self._request(
            "eth_getTransactionCount",
            lambda: int(self.w3.eth.get_transaction_count(address, "pending")),
        )

    def send_raw_transaction(self, raw_transaction: bytes) -> bytes:
        return self._request(
            "eth_sendRawTransaction",
            lambda: bytes(self.w3.eth.send_raw_transaction(raw_transaction)),
        )

    def wait_for_receipt(
        self, tx_hash: bytes, timeout: float = 120, poll_latency: float = 0.5
    ) -> Receipt:
        """
        Poll for the receipt of ``tx_hash``.

        Returns:
            A MINED or FAILED receipt, or a PENDING one if ``timeout``
            seconds passed without the transaction being mined
        """
        try:
            raw = self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=timeout, poll_latency=poll_latency
            )
        except TimeExhausted:
            logger.debug("no receipt for 0x%s after %ss", tx_hash.hex(), timeout)
            return Receipt.pending(tx_hash)
        except (Web3Exception, RequestException, ValueError) as exc:
            raise RpcError("eth_getTransactionReceipt", exc) from exc
        return _to_receipt(tx_hash, raw)

    def call(self, to: ChecksumAddress, data: bytes) -> bytes:
        """Execute a read-only call against the latest block."""
        return self._request(
            "eth_call", lambda: bytes(self.w3.eth.call({"to": to, "data": data}))
        )


def _to_receipt(tx_hash: bytes, raw: Any) -> Receipt:
    status = ReceiptStatus.MINED if raw.get("status", 1) == 1 else ReceiptStatus.FAILED
    contract_address = raw.get("contractAddress")
    return Receipt(
        status=status,
        tx_hash=tx_hash,
        block_number=raw.get("blockNumber"),
        gas_used=raw.get("gasUsed"),
        contract_address=as_address(contract_address) if contract_address else None,
    )
