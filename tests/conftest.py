"""Shared fixtures: fixed keys, a deterministic stand-in signer and keystores."""

import hashlib
import json
import os
import uuid
from pathlib import Path

import pytest
from Crypto.Cipher import AES
from Crypto.Hash import SHA256
from Crypto.Protocol.KDF import PBKDF2

from depositoor.signer import (
    BlsDst,
    Curve,
    KeyKind,
    SignatureResult,
    Signer,
    format_path,
    parse_path,
    pubkey_from_privkey,
)
from depositoor.exceptions import SignerError
from tests.vectors import (
    DEPOSIT_PATH,
    DEPOSIT_PRIVKEY,
    KEYSTORE_PASSWORD,
    MEDALLA_PUBKEY,
    WITHDRAWAL_PATH,
    WITHDRAWAL_PRIVKEY,
)


class StaticSigner(Signer):
    """Stand-in signer returning fixed keys and a hash-derived signature.

    The signature is the payload repeated three times, so tests can tell
    which signing root was requested.
    """

    def __init__(self, pubkeys, signing_pubkey=None, signature=None):
        self.pubkeys = {parse_path(path): key for path, key in pubkeys.items()}
        self.signing_pubkey = signing_pubkey
        self.signature = signature
        self.resolved = []
        self.signed = []

    def resolve_public_key(self, path, key_kind=KeyKind.BLS12_381_G1):
        indices = parse_path(path)
        self.resolved.append(format_path(indices))
        try:
            return self.pubkeys[indices]
        except KeyError:
            raise SignerError(f"No key held for path {format_path(indices)}") from None

    def sign(self, path, payload, curve=Curve.BLS12_381_G2, dst=BlsDst.POP):
        self.signed.append((format_path(path), payload))
        signature = self.signature if self.signature is not None else payload * 3
        pubkey = self.signing_pubkey or self.pubkeys[parse_path(path)]
        return SignatureResult(signature=signature, pubkey=pubkey)

    def export_keystore(self, path, iterations):
        return json.dumps({"path": format_path(path), "iterations": iterations})


@pytest.fixture
def signer_factory():
    """Build a StaticSigner from a path -> pubkey mapping."""
    return StaticSigner


@pytest.fixture
def static_signer():
    """Signer holding the Medalla pubkey at the deposit path."""
    return StaticSigner({
        DEPOSIT_PATH: MEDALLA_PUBKEY,
        WITHDRAWAL_PATH: hashlib.sha384(b"withdrawal").digest(),
    })


def make_keystore(privkey: int, password: str, path: str, iterations: int = 2) -> dict:
    """Encrypt a private key into a pbkdf2 EIP-2335 keystore."""
    salt = os.urandom(32)
    decryption_key = PBKDF2(
        password.encode("utf-8"), salt, dkLen=32, count=iterations, hmac_hash_module=SHA256
    )
    iv = os.urandom(16)
    aes = AES.new(decryption_key[:16], AES.MODE_CTR, nonce=b"", initial_value=iv)
    cipher_message = aes.encrypt(privkey.to_bytes(32, "big"))
    checksum = hashlib.sha256(decryption_key[16:32] + cipher_message).digest()
    return {
        "crypto": {
            "kdf": {
                "function": "pbkdf2",
                "params": {"dklen": 32, "c": iterations, "prf": "hmac-sha256", "salt": salt.hex()},
                "message": "",
            },
            "checksum": {"function": "sha256", "params": {}, "message": checksum.hex()},
            "cipher": {
                "function": "aes-128-ctr",
                "params": {"iv": iv.hex()},
                "message": cipher_message.hex(),
            },
        },
        "description": "",
        "pubkey": pubkey_from_privkey(privkey).hex(),
        "path": path,
        "uuid": str(uuid.uuid4()),
        "version": 4,
    }


@pytest.fixture(scope="session")
def keystore_dir(tmp_path_factory) -> Path:
    """Directory with deposit and withdrawal keystores plus a password file."""
    root = tmp_path_factory.mktemp("keys")
    keys = root / "keystores"
    keys.mkdir()
    for name, privkey, path in [
        ("keystore-m_12381_3600_0_0_0.json", DEPOSIT_PRIVKEY, DEPOSIT_PATH),
        ("keystore-m_12381_3600_0_0.json", WITHDRAWAL_PRIVKEY, WITHDRAWAL_PATH),
    ]:
        (keys / name).write_text(json.dumps(make_keystore(privkey, KEYSTORE_PASSWORD, path)))
    (root / "password.txt").write_text(KEYSTORE_PASSWORD + "\n")
    return root


@pytest.fixture(scope="session")
def keys_spec(keystore_dir) -> str:
    return f"{keystore_dir / 'keystores'}:{keystore_dir / 'password.txt'}"
