"""Signer round trips shared by the message builders."""

import logging

from ..encoding import ensure_bytes
from ..exceptions import SignerError, SignerMismatch
from ..signer import BlsDst, Curve, KeyKind, KeyPath, Signer, format_path
from ..spec.types import BLSPubkey, BLSSignature

logger = logging.getLogger(__name__)


def resolve_bls_pubkey(signer: Signer, path: KeyPath) -> bytes:
    """Fetch the BLS G1 public key at ``path`` from the signer."""
    pubkey = ensure_bytes(signer.resolve_public_key(path, KeyKind.BLS12_381_G1))
    if len(pubkey) != BLSPubkey:
        raise SignerError(
            f"Signer returned a {len(pubkey)} byte pubkey for {format_path(path)}"
        )
    logger.info(f"Resolved {format_path(path)} -> {pubkey.hex()[:16]}...")
    return pubkey


def request_signature(
    signer: Signer,
    path: KeyPath,
    signing_root: bytes,
    expected_pubkey: bytes,
) -> bytes:
    """Have the signer sign ``signing_root`` and check who signed it."""
    result = signer.sign(path, signing_root, curve=Curve.BLS12_381_G2, dst=BlsDst.POP)
    signer_pubkey = ensure_bytes(result.pubkey)
    if signer_pubkey != expected_pubkey:
        raise SignerMismatch(expected_pubkey, signer_pubkey)

    signature = ensure_bytes(result.signature)
    if len(signature) != BLSSignature:
        raise SignerError(f"Signer returned a {len(signature)} byte signature")
    return signature
