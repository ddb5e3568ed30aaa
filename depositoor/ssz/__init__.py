"""SSZ serialization and merkleization for fixed-size containers.

Only the subset needed for signing messages is implemented: containers whose
fields are unsigned integers or fixed-length byte vectors.
Reference: https://github.com/ethereum/consensus-specs/blob/master/ssz/simple-serialize.md
"""

import hashlib
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Sequence

from ..exceptions import InvalidEncoding

BYTES_PER_CHUNK = 32
ZERO_CHUNK = b"\x00" * BYTES_PER_CHUNK

UINT_WIDTHS = (8, 16, 32, 64, 128, 256)


class FieldKind(Enum):
    """How a field value is serialized."""

    UINT = "uint"
    BYTES = "bytes"


@dataclass(frozen=True)
class Field:
    """A container field.

    ``width`` is the bit width for ``UINT`` fields and the byte length for
    ``BYTES`` fields.
    """

    name: str
    kind: FieldKind
    width: int

    def __post_init__(self) -> None:
        if self.kind is FieldKind.UINT and self.width not in UINT_WIDTHS:
            raise InvalidEncoding(f"Unsupported uint width for {self.name}: {self.width}")
        if self.kind is FieldKind.BYTES and self.width <= 0:
            raise InvalidEncoding(f"Byte vector {self.name} must have a positive length")

    @property
    def byte_length(self) -> int:
        if self.kind is FieldKind.UINT:
            return self.width // 8
        return self.width

    def serialize(self, value: Any) -> bytes:
        """Serialize a value to its fixed-width SSZ form."""
        if self.kind is FieldKind.UINT:
            return check_uint(value, self.width, self.name).to_bytes(self.byte_length, "little")

        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise InvalidEncoding(
                f"{self.name} must be bytes, got {type(value).__name__}"
            )
        data = bytes(value)
        if len(data) != self.width:
            raise InvalidEncoding(f"{self.name} must be {self.width} bytes, got {len(data)}")
        return data

    def hash_tree_root(self, value: Any) -> bytes:
        return merkleize(pack(self.serialize(value)))


def check_uint(
    value: Any,
    bits: int,
    what: str,
    error: type[Exception] = InvalidEncoding,
) -> int:
    """Check ``value`` is an int that fits in ``bits`` unsigned bits.

    Raises ``error`` otherwise. Callers outside this module pass their own
    error type (for example ``InvalidAmount``).
    """
    # bool is an int subclass but never a valid uint here
    if not isinstance(value, int) or isinstance(value, bool):
        raise error(f"{what} must be an int, got {type(value).__name__}")
    if value < 0 or value >= 2**bits:
        raise error(f"{what} out of range for uint{bits}: {value}")
    return value


def uint(name: str, bits: int = 64) -> Field:
    return Field(name, FieldKind.UINT, bits)


def byte_vector(name: str, length: int) -> Field:
    return Field(name, FieldKind.BYTES, length)


def sha256(data: bytes) -> bytes:
    """Compute SHA256 hash."""
    return hashlib.sha256(data).digest()


def pack(data: bytes) -> list[bytes]:
    """Split serialized bytes into 32-byte chunks, zero-padding the last one."""
    if not data:
        return []
    remainder = len(data) % BYTES_PER_CHUNK
    if remainder:
        data = data + b"\x00" * (BYTES_PER_CHUNK - remainder)
    return [data[i:i + BYTES_PER_CHUNK] for i in range(0, len(data), BYTES_PER_CHUNK)]


def next_power_of_two(n: int) -> int:
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def merkleize(chunks: Sequence[bytes]) -> bytes:
    """Merkleize 32-byte chunks into a single root.

    The chunk list is padded with zero chunks up to the next power of two and
    hashed pairwise, left to right, until one chunk remains.
    """
    for chunk in chunks:
        if len(chunk) != BYTES_PER_CHUNK:
            raise InvalidEncoding(f"Chunks must be {BYTES_PER_CHUNK} bytes, got {len(chunk)}")
    if not chunks:
        return ZERO_CHUNK

    layer = list(chunks)
    layer.extend([ZERO_CHUNK] * (next_power_of_two(len(layer)) - len(layer)))
    while len(layer) > 1:
        layer = [sha256(layer[i] + layer[i + 1]) for i in range(0, len(layer), 2)]
    return layer[0]


@dataclass(frozen=True)
class ContainerType:
    """An ordered, fixed-size SSZ container description."""

    name: str
    fields: tuple[Field, ...]

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @property
    def fixed_size(self) -> int:
        return sum(f.byte_length for f in self.fields)

    def _values(self, values: Mapping[str, Any]) -> list[Any]:
        missing = [name for name in self.field_names if name not in values]
        if missing:
            raise InvalidEncoding(f"{self.name} is missing fields: {', '.join(missing)}")
        extra = set(values) - set(self.field_names)
        if extra:
            raise InvalidEncoding(f"{self.name} has unknown fields: {', '.join(sorted(extra))}")
        return [values[name] for name in self.field_names]

    def serialize(self, values: Mapping[str, Any]) -> bytes:
        """Serialize field values in declaration order."""
        return b"".join(f.serialize(v) for f, v in zip(self.fields, self._values(values)))

    def hash_tree_root(self, values: Mapping[str, Any]) -> bytes:
        """Compute the 32-byte hash tree root of the container."""
        leaves = [f.hash_tree_root(v) for f, v in zip(self.fields, self._values(values))]
        return merkleize(leaves)


def container(name: str, *fields: Field) -> ContainerType:
    return ContainerType(name, tuple(fields))


def hash_tree_root(container_type: ContainerType, values: Mapping[str, Any]) -> bytes:
    """Compute the hash tree root of ``values`` laid out as ``container_type``."""
    return container_type.hash_tree_root(values)


def encode(container_type: ContainerType, values: Mapping[str, Any]) -> bytes:
    """Encode container values to SSZ bytes."""
    return container_type.serialize(values)


__all__ = [
    "BYTES_PER_CHUNK",
    "ZERO_CHUNK",
    "FieldKind",
    "Field",
    "check_uint",
    "ContainerType",
    "uint",
    "byte_vector",
    "container",
    "sha256",
    "pack",
    "merkleize",
    "hash_tree_root",
    "encode",
]
