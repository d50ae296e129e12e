"""Command line entry point: deploy the token contract and transfer from it."""

import argparse
import logging
import os
import sys
from dataclasses import replace
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from .client import DEFAULT_RPC_URL, NodeClient
from .config import DEFAULT_SOURCE_PATH, Settings, load_env
from .errors import ConfigurationError, PyDeployError
from .models import Session
from .types import as_address
from .workflow import DeployAndInvokeWorkflow

logger = logging.getLogger("pydeploy")

EXAMPLE = "%(prog)s -a 0x123... -p 0xabc... -d 0x456... -r http://myhost:8545"


def configure_logging(verbose: bool = False) -> None:
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root = logging.getLogger("pydeploy")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.propagate = False


def build_parser(env=os.environ) -> argparse.ArgumentParser:
    """Build the argument parser.

    Defaults come straight from ``env`` as strings; numeric settings are
    parsed afterwards so that ``--help`` works with a broken environment.
    """
    parser = argparse.ArgumentParser(
        prog="pydeploy",
        description="Deploy the Token contract and interact with it.",
        epilog=f"example: {EXAMPLE}",
    )
    parser.add_argument(
        "-a", "--account",
        default=env.get("ACCOUNT"),
        required=not env.get("ACCOUNT"),
        help="account owner for the smart contract",
    )
    parser.add_argument(
        "-p", "--private-key",
        default=env.get("PRIVATE_KEY"),
        required=not env.get("PRIVATE_KEY"),
        help="private key for the account, used to sign transactions",
    )
    parser.add_argument(
        "-d", "--destination-account",
        default=env.get("DESTINATION_ACCOUNT"),
        required=not env.get("DESTINATION_ACCOUNT"),
        help="destination account for the token transfer",
    )
    parser.add_argument(
        "-r", "--rpc",
        default=env.get("RPC_URL") or DEFAULT_RPC_URL,
        help="RPC URL of the Ethereum node (default: %(default)s)",
    )
    parser.add_argument(
        "-s", "--source",
        default=env.get("SOURCE_PATH") or DEFAULT_SOURCE_PATH,
        help="Solidity source file (default: %(default)s)",
    )
    parser.add_argument("--solc-version", help="solc version (default: SOLC_VERSION or 0.8.19)")
    parser.add_argument(
        "--install-solc",
        action="store_true",
        help="install the solc version before compiling",
    )
    parser.add_argument(
        "--receipt-timeout",
        type=float,
        help="seconds to wait for each transaction to be mined (default: RECEIPT_TIMEOUT or 120)",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_env()
    args = build_parser().parse_args(argv)

    try:
        base = Settings.from_env(os.environ)
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    configure_logging(args.verbose)

    settings = replace(
        base,
        rpc_url=args.rpc,
        source_path=args.source,
        solc_version=args.solc_version or base.solc_version,
        install_solc=args.install_solc or base.install_solc,
        receipt_timeout=(
            args.receipt_timeout if args.receipt_timeout is not None else base.receipt_timeout
        ),
    )

    try:
        settings.validate()
        session = Session.from_key(args.private_key, address=args.account)
        try:
            destination = as_address(args.destination_account)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"invalid destination account: {exc}") from None
        client = NodeClient.from_url(settings.rpc_url, settings.request_timeout)
        workflow = DeployAndInvokeWorkflow(client, session, destination, settings)
        workflow.run()
    except PyDeployError as exc:
        logger.error("%s", exc)
        return 1

    logger.info("done")
    return 0


if __name__ == "__main__":
    sys.exit(main())
