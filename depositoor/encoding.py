"""Hex and byte coercion helpers."""

from typing import Union

from .exceptions import InvalidEncoding

BytesLike = Union[str, bytes, bytearray, memoryview]


def ensure_bytes(value: BytesLike) -> bytes:
    """Coerce a hex string or byte buffer to ``bytes``.

    Strings are treated as hex whether or not they carry a ``0x`` prefix.
    Byte buffers pass through unchanged.
    """
    if isinstance(value, str):
        hex_str = value[2:] if value[:2] in ("0x", "0X") else value
        try:
            return bytes.fromhex(hex_str)
        except ValueError as e:
            raise InvalidEncoding(f"Invalid hex string {value!r}: {e}") from e
    if isinstance(value, bytes):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    raise InvalidEncoding(f"Expected hex string or bytes, got {type(value).__name__}")


def ensure_length(value: BytesLike, length: int, what: str = "value") -> bytes:
    """Coerce ``value`` to bytes and check it is exactly ``length`` bytes."""
    data = ensure_bytes(value)
    if len(data) != length:
        raise InvalidEncoding(f"{what} must be {length} bytes, got {len(data)}")
    return data


def to_hex(data: bytes, prefix: bool = False) -> str:
    """Hex-encode bytes, optionally with a ``0x`` prefix."""
    encoded = bytes(data).hex()
    return f"0x{encoded}" if prefix else encoded


__all__ = ["BytesLike", "ensure_bytes", "ensure_length", "to_hex"]
