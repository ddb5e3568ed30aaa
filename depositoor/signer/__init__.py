"""Signers that hold key material for the message builders."""

from .base import (
    HARDENED_OFFSET,
    BlsDst,
    Curve,
    KeyKind,
    KeyPath,
    SignatureResult,
    Signer,
    format_path,
    parent_path,
    parse_path,
)
from .keystore import KeystoreSigner, decrypt_keystore, load_keystore
from .local import LocalSigner, pubkey_from_privkey, verify

__all__ = [
    "HARDENED_OFFSET",
    "BlsDst",
    "Curve",
    "KeyKind",
    "KeyPath",
    "SignatureResult",
    "Signer",
    "format_path",
    "parent_path",
    "parse_path",
    "KeystoreSigner",
    "LocalSigner",
    "decrypt_keystore",
    "load_keystore",
    "pubkey_from_privkey",
    "verify",
]
