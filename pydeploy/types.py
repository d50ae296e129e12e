"""Type definitions and coercion helpers for pydeploy."""

from typing import Union

from eth_typing import ChecksumAddress
from eth_utils import to_bytes, to_checksum_address

BytesLike = Union[bytes, str]

PRIVATE_KEY_LENGTH = 32


def as_bytes(value: BytesLike) -> bytes:
    """Convert hex string, bytes, bytearray, or memoryview to bytes."""
    if isinstance(value, str):
        if value == "" or value == "0x":
            return b""
        return to_bytes(hexstr=value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"expected str, bytes or bytearray, got {type(value).__name__}")


def as_address(value: BytesLike) -> ChecksumAddress:
    """Convert hex string or bytes to a validated, checksummed 20-byte address."""
    b = as_bytes(value)
    if len(b) != 20:
        raise ValueError(f"address must be 20 bytes, got {len(b)}")
    return to_checksum_address(b)


def as_private_key(value: BytesLike) -> bytes:
    """Convert hex string (0x prefix optional) or bytes to a 32-byte private key.

    The key itself is never included in error messages.
    """
    if isinstance(value, str) and not value.startswith(("0x", "0X")):
        value = "0x" + value
    try:
        b = as_bytes(value)
    except ValueError:
        raise ValueError("private key is not valid hex") from None
    if len(b) != PRIVATE_KEY_LENGTH:
        raise ValueError(f"private key must be {PRIVATE_KEY_LENGTH} bytes, got {len(b)}")
    return b
