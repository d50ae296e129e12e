"""Tests for the web3-backed NodeClient."""

from unittest.mock import MagicMock

import pytest
from requests.exceptions import ConnectionError as RequestsConnectionError
from web3.exceptions import TimeExhausted

from pydeploy import NodeClient, ReceiptStatus, RpcError

from .conftest import CONTRACT_ADDRESS, DESTINATION

TX_HASH = b"\xab" * 32


@pytest.fixture
def w3():
    return MagicMock()


@pytest.fixture
def client(w3):
    return NodeClient(w3)


class TestReads:
    def test_gas_price(self, client, w3):
        w3.eth.gas_price = 1_000_000_000
        assert client.gas_price() == 1_000_000_000

    def test_chain_id(self, client, w3):
        w3.eth.chain_id = 1337
        assert client.chain_id() == 1337

    def test_transaction_count_uses_pending(self, client, w3):
        w3.eth.get_transaction_count.return_value = 4
        assert client.transaction_count(DESTINATION) == 4
        w3.eth.get_transaction_count.assert_called_once_with(DESTINATION, "pending")

    def test_call(self, client, w3):
        w3.eth.call.return_value = b"\x00" * 31 + b"\x64"
        assert client.call(CONTRACT_ADDRESS, b"\x27\xe2\x35\xe3") == b"\x00" * 31 + b"\x64"
        w3.eth.call.assert_called_once_with(
            {"to": CONTRACT_ADDRESS, "data": b"\x27\xe2\x35\xe3"}
        )

    def test_connection_error_wrapped(self, client, w3):
        w3.eth.get_transaction_count.side_effect = RequestsConnectionError("refused")
        with pytest.raises(RpcError, match="eth_getTransactionCount failed: refused") as excinfo:
            client.transaction_count(DESTINATION)
        assert excinfo.value.method == "eth_getTransactionCount"

    def test_rpc_error_payload_wrapped(self, client, w3):
        w3.eth.call.side_effect = ValueError({"code": -32000, "message": "execution reverted"})
        with pytest.raises(RpcError, match="execution reverted"):
            client.call(CONTRACT_ADDRESS, b"")


class TestSend:
    def test_send_raw_transaction(self, client, w3):
        w3.eth.send_raw_transaction.return_value = TX_HASH
        assert client.send_raw_transaction(b"\xf8") == TX_HASH
        w3.eth.send_raw_transaction.assert_called_once_with(b"\xf8")

    def test_rejected_submission(self, client, w3):
        w3.eth.send_raw_transaction.side_effect = ValueError("insufficient funds for gas")
        with pytest.raises(RpcError, match="insufficient funds"):
            client.send_raw_transaction(b"\xf8")


class TestWaitForReceipt:
    def test_mined_with_contract_address(self, client, w3):
        w3.eth.wait_for_transaction_receipt.return_value = {
            "status": 1,
            "blockNumber": 12,
            "gasUsed": 150_000,
            "contractAddress": CONTRACT_ADDRESS.lower(),
        }
        receipt = client.wait_for_receipt(TX_HASH, timeout=3, poll_latency=0.1)
        assert receipt.status is ReceiptStatus.MINED
        assert receipt.block_number == 12
        assert receipt.contract_address == CONTRACT_ADDRESS
        w3.eth.wait_for_transaction_receipt.assert_called_once_with(
            TX_HASH, timeout=3, poll_latency=0.1
        )

    def test_failed_status(self, client, w3):
        w3.eth.wait_for_transaction_receipt.return_value = {
            "status": 0,
            "blockNumber": 12,
            "gasUsed": 200_000,
            "contractAddress": None,
        }
        receipt = client.wait_for_receipt(TX_HASH)
        assert receipt.status is ReceiptStatus.FAILED
        assert receipt.contract_address is None

    def test_timeout_is_pending(self, client, w3):
        w3.eth.wait_for_transaction_receipt.side_effect = TimeExhausted("not mined")
        receipt = client.wait_for_receipt(TX_HASH, timeout=1)
        assert receipt.status is ReceiptStatus.PENDING
        assert receipt.tx_hash == TX_HASH

    def test_transport_error_wrapped(self, client, w3):
        w3.eth.wait_for_transaction_receipt.side_effect = RequestsConnectionError("reset")
        with pytest.raises(RpcError, match="eth_getTransactionReceipt"):
            client.wait_for_receipt(TX_HASH)


def test_from_url_makes_no_request():
    client = NodeClient.from_url("http://127.0.0.1:1", request_timeout=2)
    assert client.w3.provider.endpoint_uri == "http://127.0.0.1:1"
