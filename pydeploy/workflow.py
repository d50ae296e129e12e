"""Compile, deploy and exercise the token contract.

The run is strictly linear and any failing step ends it:

    compile -> gas price, chain id and nonce -> deploy -> await receipt
    -> read sender balance -> transfer -> read destination balance

The nonce is fetched once. The transfer uses that nonce plus one, so no
other transaction may be sent from the same account during a run.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from eth_typing import ChecksumAddress

from .abi import decode_single, encode_call
from .builder import TransactionBuilder, inflate_gas_price
from .client import NodeClient
from .compiler import compile_file
from .config import Settings
from .errors import BalanceMismatchError, ReceiptTimeoutError, TransactionFailedError
from .models import (
    CompiledArtifact,
    ContractHandle,
    Receipt,
    ReceiptStatus,
    Session,
    TransactionParams,
)
from .signer import sign_transaction
from .types import BytesLike, as_address

logger = logging.getLogger(__name__)

Compiler = Callable[..., CompiledArtifact]


@dataclass(frozen=True)
class WorkflowResult:
    """What a completed run observed."""

    gas_price: int
    deploy_nonce: int
    transfer_nonce: int
    contract_address: ChecksumAddress
    initial_balance: int
    destination_balance: int
    deploy_receipt: Receipt
    transfer_receipt: Receipt


class DeployAndInvokeWorkflow:
    """
    Deploy the token contract and transfer tokens from the deployer.

    Args:
        client: RPC client for the target node
        session: Sending account; its nonce is replaced by the node's count
        destination: Account receiving the transfer
        settings: Gas, timeout and expected-balance configuration
        compiler: Callable with the signature of ``compile_file``
    """

    def __init__(
        self,
        client: NodeClient,
        session: Session,
        destination: BytesLike,
        settings: Optional[Settings] = None,
        compiler: Compiler = compile_file,
    ):
        self.client = client
        self.session = session
        self.destination = as_address(destination)
        self.settings = settings or Settings()
        self.compiler = compiler

    def compile(self) -> CompiledArtifact:
        """Compile the configured source. Makes no RPC request."""
        s = self.settings
        return self.compiler(
            s.source_path,
            s.contract_name,
            solc_version=s.solc_version,
            install=s.install_solc,
        )

    def price_and_nonce(self) -> tuple[int, int, Session]:
        """Fetch the inflated gas price, the chain id and the starting nonce."""
        node_price = self.client.gas_price()
        logger.info("gasPrice: %d", node_price)
        gas_price = inflate_gas_price(node_price, self.settings.gas_price_factor)
        logger.info("using gasPrice: %d", gas_price)

        chain_id = self.client.chain_id()
        logger.info("using account: %s", self.session.address)
        nonce = self.client.transaction_count(self.session.address)
        logger.info("nonce: %d", nonce)
        return gas_price, chain_id, self.session.with_nonce(nonce)

    def submit(self, params: TransactionParams, session: Session) -> Receipt:
        """Sign ``params``, send it and wait for a mined receipt.

        Raises:
            ReceiptTimeoutError: If no receipt arrives within the timeout
            TransactionFailedError: If the transaction was mined but failed
        """
        signed = sign_transaction(params, session)
        tx_hash = self.client.send_raw_transaction(signed.raw_transaction)
        logger.debug(
            "sent transaction 0x%s (nonce %d, gasPrice %d)",
            tx_hash.hex(),
            signed.nonce,
            signed.gas_price,
        )

        receipt = self.client.wait_for_receipt(
            tx_hash,
            timeout=self.settings.receipt_timeout,
            poll_latency=self.settings.poll_latency,
        )
        if receipt.status is ReceiptStatus.PENDING:
            raise ReceiptTimeoutError(
                f"transaction 0x{tx_hash.hex()} not mined after "
                f"{self.settings.receipt_timeout}s"
            )
        if receipt.status is ReceiptStatus.FAILED:
            raise TransactionFailedError(
                f"transaction 0x{tx_hash.hex()} failed in block {receipt.block_number} "
                f"(gas used {receipt.gas_used} of {params.gas_limit})"
            )
        return receipt

    def deploy(
        self, artifact: CompiledArtifact, session: Session, gas_price: int, chain_id: int
    ) -> tuple[ContractHandle, Receipt]:
        params = (
            TransactionBuilder(chain_id=chain_id)
            .set_nonce(session.nonce)
            .set_gas_price(gas_price)
            .set_gas(self.settings.gas_limit)
            .add_contract_creation(artifact.bytecode)
            .build()
        )
        receipt = self.submit(params, session)
        if receipt.contract_address is None:
            raise TransactionFailedError(
                f"receipt for 0x{receipt.tx_hash.hex()} has no contract address"
            )
        logger.info("smart contract deployed at address: %s", receipt.contract_address)
        return ContractHandle(address=receipt.contract_address, artifact=artifact), receipt

    def read_balance(self, contract: ContractHandle, account: ChecksumAddress) -> int:
        """Read-only balance query; not signed."""
        method = self.settings.balance_method
        data = encode_call(contract.abi, method, account)
        result = self.client.call(contract.address, data)
        return int(decode_single(contract.abi, method, result, arity=1))

    def transfer(
        self,
        contract: ContractHandle,
        session: Session,
        gas_price: int,
        chain_id: int,
    ) -> Receipt:
        data = encode_call(
            contract.abi,
            self.settings.transfer_method,
            self.destination,
            self.settings.transfer_amount,
        )
        params = (
            TransactionBuilder(chain_id=chain_id)
            .set_nonce(session.nonce)
            .set_gas_price(gas_price)
            .set_gas(self.settings.gas_limit)
            .add_call(contract.address, data)
            .build()
        )
        return self.submit(params, session)

    def run(self) -> WorkflowResult:
        """Run every step in order. Any error is raised to the caller."""
        artifact = self.compile()
        gas_price, chain_id, session = self.price_and_nonce()

        contract, deploy_receipt = self.deploy(artifact, session, gas_price, chain_id)

        initial = self.read_balance(contract, session.address)
        logger.info("smart contract has balance for account: %d", initial)
        _check_balance(session.address, self.settings.expected_initial_balance, initial)

        transfer_session = session.next_nonce()
        transfer_receipt = self.transfer(contract, transfer_session, gas_price, chain_id)

        destination_balance = self.read_balance(contract, self.destination)
        logger.info(
            "smart contract has balance for destination account: %d", destination_balance
        )
        _check_balance(
            self.destination,
            self.settings.expected_destination_balance,
            destination_balance,
        )

        return WorkflowResult(
            gas_price=gas_price,
            deploy_nonce=session.nonce,
            transfer_nonce=transfer_session.nonce,
            contract_address=contract.address,
            initial_balance=initial,
            destination_balance=destination_balance,
            deploy_receipt=deploy_receipt,
            transfer_receipt=transfer_receipt,
        )


def _check_balance(account: ChecksumAddress, expected: int, observed: int) -> None:
    if observed != expected:
        raise BalanceMismatchError(account, expected, observed)
