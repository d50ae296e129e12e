"""Compile Solidity sources with py-solc-x."""

import logging
from pathlib import Path
from typing import Optional, Union

import solcx
from solcx.exceptions import SolcError, SolcNotInstalled

from .errors import CompilationError, SourceNotFoundError
from .models import CompiledArtifact

logger = logging.getLogger(__name__)

OUTPUT_SELECTION = ["abi", "evm.bytecode.object"]


def read_source(path: Union[str, Path]) -> str:
    """Read a Solidity source file.

    Raises:
        SourceNotFoundError: If ``path`` does not exist or is not a file
    """
    source_path = Path(path)
    if not source_path.is_file():
        raise SourceNotFoundError(f"Solidity source not found: {source_path}")
    return source_path.read_text(encoding="utf-8")


def compile_source(
    source: str,
    contract_name: str,
    solc_version: Optional[str] = None,
    install: bool = False,
    filename: str = "contract.sol",
) -> CompiledArtifact:
    """
    Compile ``source`` and return the artifact for ``contract_name``.

    Args:
        source: Solidity source text
        contract_name: Name of the contract to extract from the output
        solc_version: Compiler version; the active solcx version if None
        install: Install ``solc_version`` first if it is not yet available
        filename: Unit name used for the source in the standard JSON input

    Raises:
        CompilationError: If solc fails or the contract is not in the output
    """
    if install and solc_version:
        logger.info("installing solc %s", solc_version)
        solcx.install_solc(solc_version)

    standard_input = {
        "language": "Solidity",
        "sources": {filename: {"content": source}},
        "settings": {"outputSelection": {"*": {"*": OUTPUT_SELECTION}}},
    }
    try:
        if solc_version:
            output = solcx.compile_standard(standard_input, solc_version=solc_version)
        else:
            output = solcx.compile_standard(standard_input)
    except (SolcError, SolcNotInstalled) as exc:
        raise CompilationError(f"solc failed: {exc}") from exc

    contracts = output.get("contracts", {}).get(filename, {})
    if contract_name not in contracts:
        available = ", ".join(sorted(contracts)) or "none"
        raise CompilationError(
            f"contract {contract_name!r} not found in {filename} (available: {available})"
        )
    compiled = contracts[contract_name]
    bytecode = compiled["evm"]["bytecode"]["object"]
    if not bytecode:
        raise CompilationError(f"contract {contract_name!r} has no bytecode (abstract?)")

    logger.debug("compiled %s: %d bytes of bytecode", contract_name, len(bytecode) // 2)
    return CompiledArtifact.create(
        contract_name=contract_name, bytecode=bytecode, abi=compiled["abi"]
    )


def compile_file(
    path: Union[str, Path],
    contract_name: str,
    solc_version: Optional[str] = None,
    install: bool = False,
) -> CompiledArtifact:
    """Read and compile a Solidity file."""
    source = read_source(path)
    return compile_source(
        source,
        contract_name,
        solc_version=solc_version,
        install=install,
        filename=Path(path).name,
    )
