"""
Example: Encode calls without a node

Compiles contracts/Token.sol and prints the calldata for a transfer and a
balance query, plus an unsigned transfer transaction.

Usage:
    python examples/encode_calls.py 0xDestination...
"""

import sys

from pydeploy import TransactionBuilder, compile_file, encode_call, inflate_gas_price

destination = sys.argv[1]

artifact = compile_file("contracts/Token.sol", "Token", solc_version="0.8.19", install=True)
print(f"Bytecode: {len(artifact.bytecode)} bytes")

transfer = encode_call(artifact.abi, "transfer", destination, 100)
print(f"transfer calldata: 0x{transfer.hex()}")
print(f"balances calldata: 0x{encode_call(artifact.abi, 'balances', destination).hex()}")

tx = (
    TransactionBuilder(chain_id=1337)
    .set_nonce(0)
    .set_gas_price(inflate_gas_price(1_000_000_000))
    .set_gas(200_000)
    .add_call(destination, data=transfer)
    .build()
)
print("Unsigned tx:", tx.as_dict())
