"""Shared fixtures: a recording fake node and a stub compiler."""

import pytest
import rlp
from eth_abi import decode, encode
from eth_account import Account
from eth_utils import keccak, to_checksum_address

from pydeploy import CompiledArtifact, Receipt, ReceiptStatus, Session, Settings

PRIVATE_KEY = "0x7eafbf9699b30c9ed8e3d6bbae57dd4f047544fde34d4c982dd591c2bee39ad0"
DESTINATION = to_checksum_address("0xf0109fc8df283027b6285cc889f5aa624eac1f55")
CONTRACT_ADDRESS = to_checksum_address("0x86a2ee8faf9a840f7a2c64ca3d51209f9a02081d")

TOKEN_ABI = [
    {"type": "constructor", "inputs": [], "stateMutability": "nonpayable"},
    {
        "type": "function",
        "name": "balances",
        "stateMutability": "view",
        "inputs": [{"name": "", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "transfer",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "value", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "type": "event",
        "name": "Transfer",
        "anonymous": False,
        "inputs": [
            {"indexed": True, "name": "from", "type": "address"},
            {"indexed": True, "name": "to", "type": "address"},
            {"indexed": False, "name": "value", "type": "uint256"},
        ],
    },
]

TOKEN_BYTECODE = "6080604052348015600f57600080fd5b50603f80601d6000396000f3fe"

TRANSFER_SELECTOR = bytes.fromhex("a9059cbb")
BALANCES_SELECTOR = bytes.fromhex("27e235e3")


class FakeNode:
    """
    In-memory stand-in for NodeClient.

    Decodes the raw signed transactions it receives and keeps token
    balances so reads after a transfer observe its effect.
    """

    def __init__(
        self,
        gas_price=1_000_000_001,
        chain_id=1337,
        transaction_count=7,
        initial_supply=1_000_000,
        receipt_status=ReceiptStatus.MINED,
    ):
        self.gas_price_value = gas_price
        self.chain_id_value = chain_id
        self.transaction_count_value = transaction_count
        self.initial_supply = initial_supply
        self.receipt_status = receipt_status
        self.requests = []
        self.sent = []
        self.balances = {}
        self._created = {}

    def gas_price(self):
        self.requests.append("eth_gasPrice")
        return self.gas_price_value

    def chain_id(self):
        self.requests.append("eth_chainId")
        return self.chain_id_value

    def transaction_count(self, address):
        self.requests.append("eth_getTransactionCount")
        return self.transaction_count_value

    def send_raw_transaction(self, raw):
        self.requests.append("eth_sendRawTransaction")
        nonce, gas_price, gas, to, value, data, v, r, s = rlp.decode(raw)
        sender = Account.recover_transaction(raw)
        tx = {
            "nonce": int.from_bytes(nonce, "big"),
            "gas_price": int.from_bytes(gas_price, "big"),
            "gas": int.from_bytes(gas, "big"),
            "to": to_checksum_address(to) if to else None,
            "data": data,
            "from": sender,
            "v": int.from_bytes(v, "big"),
        }
        self.sent.append(tx)
        tx_hash = keccak(raw)
        if self.receipt_status is ReceiptStatus.MINED:
            self._apply(tx, tx_hash)
        return tx_hash

    def _apply(self, tx, tx_hash):
        if tx["to"] is None:
            self.balances[tx["from"]] = self.initial_supply
            self._created[tx_hash] = CONTRACT_ADDRESS
        elif tx["data"][:4] == TRANSFER_SELECTOR:
            to, amount = decode(["address", "uint256"], tx["data"][4:])
            to = to_checksum_address(to)
            self.balances[tx["from"]] = self.balances.get(tx["from"], 0) - amount
            self.balances[to] = self.balances.get(to, 0) + amount

    def wait_for_receipt(self, tx_hash, timeout=120, poll_latency=0.5):
        self.requests.append("eth_getTransactionReceipt")
        if self.receipt_status is ReceiptStatus.PENDING:
            return Receipt.pending(tx_hash)
        return Receipt(
            status=self.receipt_status,
            tx_hash=tx_hash,
            block_number=len(self.sent),
            gas_used=21_000,
            contract_address=self._created.get(tx_hash),
        )

    def call(self, to, data):
        self.requests.append("eth_call")
        assert data[:4] == BALANCES_SELECTOR
        (account,) = decode(["address"], data[4:])
        return encode(["uint256"], [self.balances.get(to_checksum_address(account), 0)])


class StubCompiler:
    """Records compile requests and returns a fixed Token artifact."""

    def __init__(self):
        self.calls = []

    def __call__(self, path, contract_name, solc_version=None, install=False):
        self.calls.append((path, contract_name, solc_version, install))
        return CompiledArtifact.create(contract_name, TOKEN_BYTECODE, TOKEN_ABI)


@pytest.fixture
def session():
    return Session.from_key(PRIVATE_KEY)


@pytest.fixture
def node():
    return FakeNode()


@pytest.fixture
def compiler():
    return StubCompiler()


@pytest.fixture
def settings():
    return Settings(receipt_timeout=5, poll_latency=0.01)


@pytest.fixture
def artifact():
    return CompiledArtifact.create("Token", TOKEN_BYTECODE, TOKEN_ABI)
