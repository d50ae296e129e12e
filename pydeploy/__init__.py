"""
PyDeploy - compile, deploy and call a Solidity contract with web3.py

Connects to an Ethereum-compatible node over RPC, compiles a Solidity
source with py-solc-x, deploys it in a locally signed transaction and then
reads from and transacts with the deployed contract.
"""

from .abi import decode_result, decode_single, encode_call
from .builder import TransactionBuilder, inflate_gas_price
from .client import NodeClient
from .compiler import compile_file, compile_source, read_source
from .config import Settings
from .errors import (
    AbiError,
    BalanceMismatchError,
    CompilationError,
    ConfigurationError,
    PyDeployError,
    ReceiptTimeoutError,
    RpcError,
    SourceNotFoundError,
    TransactionFailedError,
)
from .models import (
    CompiledArtifact,
    ContractHandle,
    Receipt,
    ReceiptStatus,
    Session,
    SignedTransaction,
    TransactionParams,
)
from .signer import sign_transaction
from .types import as_address, as_bytes, as_private_key
from .workflow import DeployAndInvokeWorkflow, WorkflowResult

__version__ = "0.1.0"

__all__ = [
    "AbiError",
    "BalanceMismatchError",
    "CompilationError",
    "CompiledArtifact",
    "ConfigurationError",
    "ContractHandle",
    "DeployAndInvokeWorkflow",
    "NodeClient",
    "PyDeployError",
    "Receipt",
    "ReceiptStatus",
    "ReceiptTimeoutError",
    "RpcError",
    "Session",
    "Settings",
    "SignedTransaction",
    "SourceNotFoundError",
    "TransactionBuilder",
    "TransactionFailedError",
    "TransactionParams",
    "WorkflowResult",
    "as_address",
    "as_bytes",
    "as_private_key",
    "compile_file",
    "compile_source",
    "decode_result",
    "decode_single",
    "encode_call",
    "inflate_gas_price",
    "read_source",
    "sign_transaction",
]
