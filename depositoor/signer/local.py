"""In-process BLS signer backed by py_ecc."""

import logging
from typing import Mapping

from py_ecc.bls import G2ProofOfPossession as bls

from ..exceptions import SignerError
from .base import BlsDst, Curve, KeyKind, KeyPath, SignatureResult, Signer, format_path, parse_path

logger = logging.getLogger(__name__)

# BLS12-381 subgroup order
CURVE_ORDER = 0x73EDA753299D7D483339D80809A1D80553BDA402FFFE5BFEFFFFFFFF00000001


def pubkey_from_privkey(privkey: int) -> bytes:
    """Derive public key from private key."""
    return bls.SkToPk(privkey)


def verify(pubkey: bytes, message: bytes, signature: bytes) -> bool:
    """Verify a proof-of-possession BLS signature."""
    try:
        return bls.Verify(pubkey, message, signature)
    except (ValueError, TypeError, AssertionError) as e:
        logger.debug(f"Signature verification failed: {e}")
        return False


class LocalSigner(Signer):
    """Signs with private keys held in memory, indexed by key path."""

    def __init__(self, keys: Mapping[KeyPath, int]):
        self._keys: dict[tuple[int, ...], int] = {}
        for path, privkey in keys.items():
            if not 0 < privkey < CURVE_ORDER:
                raise SignerError(f"Private key for {format_path(path)} is out of range")
            self._keys[parse_path(path)] = privkey

    def _privkey(self, path: KeyPath) -> tuple[tuple[int, ...], int]:
        indices = parse_path(path)
        try:
            return indices, self._keys[indices]
        except KeyError:
            raise SignerError(f"No key held for path {format_path(indices)}") from None

    def resolve_public_key(
        self, path: KeyPath, key_kind: KeyKind = KeyKind.BLS12_381_G1
    ) -> bytes:
        if key_kind is not KeyKind.BLS12_381_G1:
            raise SignerError(f"Unsupported key kind: {key_kind}")
        _, privkey = self._privkey(path)
        return pubkey_from_privkey(privkey)

    def sign(
        self,
        path: KeyPath,
        payload: bytes,
        curve: Curve = Curve.BLS12_381_G2,
        dst: BlsDst = BlsDst.POP,
    ) -> SignatureResult:
        if curve is not Curve.BLS12_381_G2 or dst is not BlsDst.POP:
            raise SignerError(f"Unsupported signing scheme: {curve.value}/{dst.name}")
        if len(payload) != 32:
            raise SignerError(f"Payload must be a 32-byte signing root, got {len(payload)} bytes")

        _, privkey = self._privkey(path)
        signature = bls.Sign(privkey, bytes(payload))
        pubkey = pubkey_from_privkey(privkey)
        logger.debug(f"Signed {payload.hex()[:16]}... with {pubkey.hex()[:16]}...")
        return SignatureResult(signature=signature, pubkey=pubkey)

    def export_keystore(self, path: KeyPath, iterations: int) -> str:
        raise SignerError(
            f"LocalSigner holds no encrypted keystore for {format_path(path)}"
        )
