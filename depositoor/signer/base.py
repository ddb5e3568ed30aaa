"""Signer capability and EIP-2334 key path helpers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union

from ..exceptions import InvalidEncoding, MissingParameter

HARDENED_OFFSET = 0x80000000

KeyPath = Union[str, Sequence[int]]


class KeyKind(Enum):
    """Kind of public key to resolve."""

    BLS12_381_G1 = "bls12_381_g1"


class Curve(Enum):
    """Curve the signature is produced on."""

    BLS12_381_G2 = "bls12_381_g2"


class BlsDst(Enum):
    """BLS hash-to-curve domain separation tag."""

    POP = "BLS_SIG_BLS12381G2_XMD:SHA-256_SSWU_RO_POP_"
    NUL = "BLS_SIG_BLS12381G2_XMD:SHA-256_SSWU_RO_NUL_"


@dataclass(frozen=True)
class SignatureResult:
    """A signature together with the public key that produced it."""

    signature: bytes
    pubkey: bytes


def parse_path(path: KeyPath) -> tuple[int, ...]:
    """Parse an EIP-2334 path string or index sequence into indices.

    ``"m/12381/3600/0/0/0"`` and ``[12381, 3600, 0, 0, 0]`` are equivalent.
    A trailing ``'`` marks a hardened index.
    """
    if isinstance(path, str):
        parts = path.strip().split("/")
        if not parts or parts[0] != "m":
            raise InvalidEncoding(f"Key path must start with 'm': {path!r}")
        indices = []
        for part in parts[1:]:
            hardened = part.endswith("'")
            digits = part[:-1] if hardened else part
            if not digits.isdigit():
                raise InvalidEncoding(f"Invalid key path component {part!r} in {path!r}")
            index = int(digits)
            if index >= HARDENED_OFFSET:
                raise InvalidEncoding(f"Key path index out of range: {part!r}")
            indices.append(index + HARDENED_OFFSET if hardened else index)
        return tuple(indices)

    indices = tuple(path)
    for index in indices:
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < 2**32:
            raise InvalidEncoding(f"Key path indices must be u32 values, got {index!r}")
    return indices


def format_path(path: KeyPath) -> str:
    """Render a key path as an EIP-2334 string."""
    parts = ["m"]
    for index in parse_path(path):
        if index >= HARDENED_OFFSET:
            parts.append(f"{index - HARDENED_OFFSET}'")
        else:
            parts.append(str(index))
    return "/".join(parts)


def parent_path(path: KeyPath) -> tuple[int, ...]:
    """Return the path one derivation level up.

    The withdrawal key of ``m/12381/3600/i/0/0`` lives at ``m/12381/3600/i/0``.
    See: https://eips.ethereum.org/EIPS/eip-2334
    """
    indices = parse_path(path)
    if len(indices) < 2:
        raise MissingParameter("withdrawal_key (deposit path has no parent)")
    return indices[:-1]


class Signer(ABC):
    """Holds key material and signs on behalf of the message builders."""

    @abstractmethod
    def resolve_public_key(
        self, path: KeyPath, key_kind: KeyKind = KeyKind.BLS12_381_G1
    ) -> bytes:
        """Return the 48-byte public key at ``path``."""

    @abstractmethod
    def sign(
        self,
        path: KeyPath,
        payload: bytes,
        curve: Curve = Curve.BLS12_381_G2,
        dst: BlsDst = BlsDst.POP,
    ) -> SignatureResult:
        """Sign a 32-byte signing root with the key at ``path``."""

    @abstractmethod
    def export_keystore(self, path: KeyPath, iterations: int) -> str:
        """Return the EIP-2335 keystore for the key at ``path``."""
