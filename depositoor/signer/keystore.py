"""Signer backed by EIP-2335 keystore files."""

import hashlib
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Union

from Crypto.Cipher import AES
from Crypto.Hash import SHA256
from Crypto.Protocol.KDF import PBKDF2, scrypt

from ..exceptions import SignerError
from .base import KeyPath, format_path, parse_path
from .local import LocalSigner, pubkey_from_privkey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedKeystore:
    """A decrypted keystore together with its original JSON."""

    path: tuple[int, ...]
    pubkey: bytes
    privkey: int
    raw: str


def decrypt_keystore(keystore: dict, password: str) -> int:
    """Decrypt an EIP-2335 keystore and return the private key as int."""
    try:
        return _decrypt_keystore(keystore, password)
    except KeyError as e:
        raise SignerError(f"Keystore is missing {e.args[0]!r}") from e
    except (TypeError, ValueError) as e:
        raise SignerError(f"Malformed keystore: {e}") from e


def _decrypt_keystore(keystore: dict, password: str) -> int:
    crypto = keystore["crypto"]
    kdf = crypto["kdf"]
    cipher = crypto["cipher"]
    checksum = crypto["checksum"]

    kdf_params = kdf["params"]
    if kdf["function"] == "scrypt":
        decryption_key = scrypt(
            password.encode("utf-8"),
            bytes.fromhex(kdf_params["salt"]),
            key_len=32,
            N=kdf_params["n"],
            r=kdf_params["r"],
            p=kdf_params["p"],
        )
    elif kdf["function"] == "pbkdf2":
        decryption_key = PBKDF2(
            password.encode("utf-8"),
            bytes.fromhex(kdf_params["salt"]),
            dkLen=32,
            count=kdf_params["c"],
            hmac_hash_module=SHA256,
        )
    else:
        raise SignerError(f"Unsupported KDF: {kdf['function']}")

    cipher_message = bytes.fromhex(cipher["message"])
    computed_checksum = hashlib.sha256(decryption_key[16:32] + cipher_message).digest()
    if computed_checksum != bytes.fromhex(checksum["message"]):
        raise SignerError("Invalid password or corrupted keystore")

    if cipher["function"] != "aes-128-ctr":
        raise SignerError(f"Unsupported cipher: {cipher['function']}")
    iv = bytes.fromhex(cipher["params"]["iv"])
    aes = AES.new(decryption_key[:16], AES.MODE_CTR, nonce=b"", initial_value=iv)
    return int.from_bytes(aes.decrypt(cipher_message), "big")


def _read_text(path: Union[str, Path], what: str) -> str:
    try:
        return Path(path).read_text()
    except OSError as e:
        raise SignerError(f"Cannot read {what} {path}: {e}") from e


def _read_keystore_json(keystore_path: Union[str, Path]) -> tuple[str, dict]:
    raw = _read_text(keystore_path, "keystore")
    try:
        keystore = json.loads(raw)
    except json.JSONDecodeError as e:
        raise SignerError(f"Invalid JSON in {keystore_path}: {e}") from e
    if not isinstance(keystore, dict):
        raise SignerError(f"Keystore {keystore_path} is not a JSON object")
    return raw, keystore


def load_keystore(keystore_path: Union[str, Path], password: str) -> LoadedKeystore:
    """Load and decrypt a single keystore file."""
    raw, keystore = _read_keystore_json(keystore_path)

    path = keystore.get("path")
    if not path or not isinstance(path, str):
        raise SignerError(f"Keystore {keystore_path} has no derivation path")
    pubkey_hex = keystore.get("pubkey")
    if not isinstance(pubkey_hex, str):
        raise SignerError(f"Keystore {keystore_path} has no pubkey")
    try:
        expected_pubkey = bytes.fromhex(pubkey_hex.removeprefix("0x"))
    except ValueError as e:
        raise SignerError(f"Invalid pubkey in {keystore_path}: {e}") from e

    privkey = decrypt_keystore(keystore, password)
    pubkey = pubkey_from_privkey(privkey)
    if pubkey != expected_pubkey:
        raise SignerError(
            f"Public key mismatch: derived {pubkey.hex()}, expected {expected_pubkey.hex()}"
        )

    logger.info(f"Loaded key {pubkey.hex()[:16]}... at {path}")
    return LoadedKeystore(
        path=parse_path(path),
        pubkey=pubkey,
        privkey=privkey,
        raw=raw,
    )


def _find_password(secrets_path: Path, pubkey_hex: str) -> Union[Path, None]:
    pubkey_hex = pubkey_hex.removeprefix("0x")
    for candidate in [
        secrets_path / f"0x{pubkey_hex}",
        secrets_path / pubkey_hex,
        secrets_path / f"0x{pubkey_hex}.txt",
        secrets_path / f"{pubkey_hex}.txt",
    ]:
        if candidate.exists():
            return candidate
    return None


def load_keystores_from_dir(
    keystores_dir: Union[str, Path],
    secrets: Union[str, Path],
) -> list[LoadedKeystore]:
    """Load keystores from a directory.

    ``secrets`` is either a directory of password files named by pubkey or a
    single password file shared by every keystore.
    """
    keystores_path = Path(keystores_dir)
    secrets_path = Path(secrets)
    if not keystores_path.is_dir():
        raise SignerError(f"Keystores directory does not exist: {keystores_path}")
    if not secrets_path.exists():
        raise SignerError(f"Secrets path does not exist: {secrets_path}")

    keystore_files = set()
    for pattern in ["keystore*.json", "*/keystore*.json", "0x*.json"]:
        keystore_files.update(keystores_path.glob(pattern))
    logger.info(f"Found {len(keystore_files)} keystore files in {keystores_path}")

    loaded = []
    for keystore_file in sorted(keystore_files):
        if secrets_path.is_file():
            password_file = secrets_path
        else:
            _, keystore = _read_keystore_json(keystore_file)
            pubkey_hex = keystore.get("pubkey")
            password_file = (
                _find_password(secrets_path, pubkey_hex) if isinstance(pubkey_hex, str) else None
            )
        if password_file is None:
            logger.warning(f"No password found for {keystore_file.name}, skipping")
            continue
        password = _read_text(password_file, "password file").strip()
        loaded.append(load_keystore(keystore_file, password))
    return loaded


class KeystoreSigner(LocalSigner):
    """Signs with keys decrypted from EIP-2335 keystores.

    Keys are indexed by the ``path`` recorded in each keystore.
    """

    def __init__(self, keystores: Iterable[LoadedKeystore]):
        self._keystores = {k.path: k for k in keystores}
        super().__init__({path: k.privkey for path, k in self._keystores.items()})

    @classmethod
    def from_spec(cls, keys_spec: str) -> "KeystoreSigner":
        """Load keystores from a Teku-style ``keystores:secrets`` spec.

        Both parts may be a directory or a single file; multiple specs are
        separated by commas.
        """
        keystores = []
        for spec in keys_spec.split(","):
            spec = spec.strip()
            if not spec:
                continue
            if ":" not in spec:
                raise SignerError(f"Invalid key spec (missing ':'): {spec}")

            keystore_part, secret_part = spec.split(":", 1)
            keystore_path = Path(keystore_part)
            if keystore_path.is_dir():
                keystores.extend(load_keystores_from_dir(keystore_path, secret_part))
            elif keystore_path.is_file():
                password = _read_text(secret_part, "password file").strip()
                keystores.append(load_keystore(keystore_path, password))
            else:
                raise SignerError(f"Keystore path not found: {keystore_path}")

        if not keystores:
            raise SignerError(f"No keystores loaded from {keys_spec!r}")
        return cls(keystores)

    def export_keystore(self, path: KeyPath, iterations: int) -> str:
        indices = parse_path(path)
        keystore = self._keystores.get(indices)
        if keystore is None:
            raise SignerError(f"No keystore held for path {format_path(indices)}")
        # stored keystores are returned as encrypted; the iteration count is theirs
        return keystore.raw
