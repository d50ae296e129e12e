"""Exception hierarchy for pydeploy."""


class PyDeployError(Exception):
    """Base class for every error raised by pydeploy."""


class ConfigurationError(PyDeployError):
    """Raised when the run is misconfigured before any network activity."""


class SourceNotFoundError(ConfigurationError):
    """Raised when the Solidity source file does not exist."""


class CompilationError(PyDeployError):
    """Raised when the Solidity compiler fails or the contract is missing."""


class AbiError(PyDeployError):
    """Raised when a call cannot be encoded or decoded against an ABI."""


class RpcError(PyDeployError):
    """Raised when the node rejects a request or cannot be reached."""

    def __init__(self, method: str, cause: Exception):
        super().__init__(f"{method} failed: {cause}")
        self.method = method
        self.cause = cause


class TransactionFailedError(PyDeployError):
    """Raised when a mined transaction reports a failed status."""


class ReceiptTimeoutError(PyDeployError):
    """Raised when no receipt is available before the timeout elapses."""


class BalanceMismatchError(PyDeployError):
    """Raised when an observed token balance differs from the expected one."""

    def __init__(self, account: str, expected: int, observed: int):
        super().__init__(f"balance is incorrect: {observed} (expected {expected} for {account})")
        self.account = account
        self.expected = expected
        self.observed = observed
