"""Encode contract calls and decode their results from an ABI.

Calls are encoded explicitly from the ABI entry rather than through
web3's generated contract methods:

    calldata = 4-byte selector || abi-encoded arguments

where the selector is the first 4 bytes of keccak256 of the canonical
signature, e.g. ``transfer(address,uint256)``.
"""

from typing import Any, Iterable, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError
from eth_utils import function_signature_to_4byte_selector
from eth_utils.abi import collapse_if_tuple

from .errors import AbiError


def _types(params: Iterable[dict[str, Any]]) -> list[str]:
    return [collapse_if_tuple(p) for p in params]


def find_function(abi: Sequence[dict[str, Any]], method: str, arity: int = -1) -> dict[str, Any]:
    """Find a function entry by name, narrowing overloads by arity when given."""
    candidates = [
        entry
        for entry in abi
        if entry.get("type", "function") == "function" and entry.get("name") == method
    ]
    if arity >= 0:
        candidates = [c for c in candidates if len(c.get("inputs", [])) == arity]
    if not candidates:
        taking = f" taking {arity} argument(s)" if arity >= 0 else ""
        raise AbiError(f"no function {method!r}{taking} in ABI")
    if len(candidates) > 1:
        raise AbiError(f"function {method!r} is ambiguous")
    return candidates[0]


def function_signature(entry: dict[str, Any]) -> str:
    """Canonical signature, e.g. ``balances(address)``."""
    return f"{entry['name']}({','.join(_types(entry.get('inputs', [])))})"


def function_selector(entry: dict[str, Any]) -> bytes:
    return function_signature_to_4byte_selector(function_signature(entry))


def encode_call(abi: Sequence[dict[str, Any]], method: str, *args: Any) -> bytes:
    """
    Encode a call to ``method`` with ``args``.

    Returns:
        Calldata bytes: selector followed by the encoded arguments

    Raises:
        AbiError: If the method is unknown or the arguments do not match
    """
    entry = find_function(abi, method, len(args))
    try:
        encoded = encode(_types(entry.get("inputs", [])), list(args))
    except (EncodingError, TypeError, ValueError) as exc:
        raise AbiError(f"cannot encode {function_signature(entry)}: {exc}") from exc
    return function_selector(entry) + encoded


def decode_result(
    abi: Sequence[dict[str, Any]], method: str, data: bytes, arity: int = -1
) -> tuple:
    """Decode the return data of ``method``.

    Pass ``arity`` (the number of call arguments) to pick among overloads.
    """
    entry = find_function(abi, method, arity)
    try:
        return tuple(decode(_types(entry.get("outputs", [])), bytes(data)))
    except (DecodingError, TypeError, ValueError) as exc:
        raise AbiError(f"cannot decode result of {function_signature(entry)}: {exc}") from exc


def decode_single(
    abi: Sequence[dict[str, Any]], method: str, data: bytes, arity: int = -1
) -> Any:
    """Decode the return data of a method that returns exactly one value."""
    values = decode_result(abi, method, data, arity)
    if len(values) != 1:
        raise AbiError(f"{method!r} returns {len(values)} values, expected 1")
    return values[0]
