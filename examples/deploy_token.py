"""
Example: Deploy and transfer

Runs the whole workflow against a local node and prints what it observed.

Usage:
    PRIVATE_KEY=0x... DESTINATION_ACCOUNT=0x... python examples/deploy_token.py
"""

import logging
import os

from pydeploy import DeployAndInvokeWorkflow, NodeClient, Session, Settings

logging.basicConfig(level=logging.INFO, format="%(message)s")

private_key = os.environ.get("PRIVATE_KEY")
if not private_key:
    raise ValueError("PRIVATE_KEY environment variable not set")
destination = os.environ.get("DESTINATION_ACCOUNT")
if not destination:
    raise ValueError("DESTINATION_ACCOUNT environment variable not set")

settings = Settings.from_env()
client = NodeClient.from_url(settings.rpc_url)
session = Session.from_key(private_key)

result = DeployAndInvokeWorkflow(client, session, destination, settings).run()

print(f"Token deployed at {result.contract_address} (block {result.deploy_receipt.block_number})")
print(f"Nonces used: {result.deploy_nonce}, {result.transfer_nonce}")
print(f"Destination balance: {result.destination_balance}")
