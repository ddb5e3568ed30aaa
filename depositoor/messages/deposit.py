"""Deposit data generation.

Builds the ``DepositData`` record required to register a validator with the
deposit contract, in the JSON layout produced by staking-deposit-cli.
Reference: https://github.com/ethereum/consensus-specs/blob/master/specs/phase0/beacon-chain.md#depositdata
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from eth_abi import encode as abi_encode

from ..config import DepositOptions
from ..encoding import ensure_bytes, ensure_length, to_hex
from ..exceptions import InvalidAmount, InvalidEncoding
from ..signer import KeyPath, Signer, format_path, parent_path, verify
from ..spec.constants import (
    DEFAULT_KEYSTORE_ITERATIONS,
    DEPOSIT_FUNCTION_ARG_TYPES,
    DEPOSIT_FUNCTION_SELECTOR,
    DOMAIN_DEPOSIT,
)
from ..spec.domain import compute_domain, compute_signing_root, get_domain
from ..spec.network_config import NetworkInfo
from ..spec.types import (
    BLSPubkey,
    BLSSignature,
    DepositData,
    DepositMessage,
    Gwei,
    Root,
    Version,
)
from ..spec.withdrawal import get_withdrawal_credentials, withdrawal_credentials_type
from ..ssz import check_uint
from .common import request_signature, resolve_bls_pubkey

logger = logging.getLogger(__name__)


def validate_amount(amount_gwei: Any) -> int:
    """Check a deposit amount is an int with 0 < amount < 2**64."""
    check_uint(amount_gwei, Gwei, "amount_gwei", InvalidAmount)
    if amount_gwei == 0:
        raise InvalidAmount("amount_gwei must be greater than zero")
    return amount_gwei


def deposit_message_root(pubkey: bytes, withdrawal_credentials: bytes, amount: int) -> bytes:
    """Return the hash tree root of a ``DepositMessage``."""
    return DepositMessage.hash_tree_root({
        "pubkey": pubkey,
        "withdrawal_credentials": withdrawal_credentials,
        "amount": amount,
    })


def deposit_data_root(
    pubkey: bytes,
    withdrawal_credentials: bytes,
    amount: int,
    signature: bytes,
) -> bytes:
    """Return the hash tree root of a ``DepositData``."""
    return DepositData.hash_tree_root({
        "pubkey": pubkey,
        "withdrawal_credentials": withdrawal_credentials,
        "amount": amount,
        "signature": signature,
    })


@dataclass(frozen=True)
class DepositRecord:
    """Signed deposit data plus the metadata launchpad expects."""

    pubkey: bytes
    withdrawal_credentials: bytes
    amount: int
    signature: bytes
    deposit_message_root: bytes
    deposit_data_root: bytes
    fork_version: bytes
    network_name: str
    deposit_cli_version: str

    def to_dict(self) -> dict:
        return {
            "pubkey": to_hex(self.pubkey),
            "withdrawal_credentials": to_hex(self.withdrawal_credentials),
            "amount": self.amount,
            "signature": to_hex(self.signature),
            "deposit_message_root": to_hex(self.deposit_message_root),
            "deposit_data_root": to_hex(self.deposit_data_root),
            "fork_version": to_hex(self.fork_version),
            "network_name": self.network_name,
            "deposit_cli_version": self.deposit_cli_version,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def to_calldata(self) -> bytes:
        """Encode as call data for ``deposit(bytes,bytes,bytes,bytes32)``."""
        args = abi_encode(
            list(DEPOSIT_FUNCTION_ARG_TYPES),
            [self.pubkey, self.withdrawal_credentials, self.signature, self.deposit_data_root],
        )
        return DEPOSIT_FUNCTION_SELECTOR + args

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DepositRecord":
        """Parse a record in the staking-deposit-cli JSON layout."""
        if not isinstance(data, Mapping):
            raise InvalidEncoding(f"Deposit record must be an object, got {type(data).__name__}")
        try:
            return cls(
                pubkey=ensure_length(data["pubkey"], BLSPubkey, "pubkey"),
                withdrawal_credentials=ensure_length(
                    data["withdrawal_credentials"], Root, "withdrawal_credentials"
                ),
                amount=validate_amount(data["amount"]),
                signature=ensure_length(data["signature"], BLSSignature, "signature"),
                deposit_message_root=ensure_length(
                    data["deposit_message_root"], Root, "deposit_message_root"
                ),
                deposit_data_root=ensure_length(data["deposit_data_root"], Root, "deposit_data_root"),
                fork_version=ensure_length(data["fork_version"], Version, "fork_version"),
                network_name=str(data["network_name"]),
                deposit_cli_version=str(data["deposit_cli_version"]),
            )
        except KeyError as e:
            raise InvalidEncoding(f"Deposit record is missing {e.args[0]!r}") from e


def build_deposit(
    signer: Signer,
    path: KeyPath,
    options: Optional[DepositOptions] = None,
) -> DepositRecord:
    """Build signed deposit data for the validator key at ``path``.

    Makes one public key request (two when the withdrawal key has to be
    resolved) and one signing request to ``signer``.

    Args:
        signer: Signer holding the deposit key
        path: EIP-2334 path of the validator (signing) key
        options: Deposit options, see ``DepositOptions``

    Returns:
        The signed deposit record

    Raises:
        InvalidAmount: If the amount is not in (0, 2**64)
        InvalidWithdrawalKey: If the withdrawal key has the wrong length
        SignerMismatch: If the signature came from another key
    """
    if options is None:
        options = DepositOptions()
    amount = validate_amount(options.amount_gwei)
    network = options.network
    if not network.is_genesis:
        logger.warning(
            f"Deposit domain for {network.network_name} uses a non-zero validators root; "
            f"use NetworkInfo.for_deposit() unless this is intended"
        )

    depositor_pubkey = resolve_bls_pubkey(signer, path)

    if options.withdrawal_key is None:
        withdrawal_path = parent_path(path)
        logger.info(f"No withdrawal key given, using BLS key at {format_path(withdrawal_path)}")
        withdrawal_key = resolve_bls_pubkey(signer, withdrawal_path)
    else:
        withdrawal_key = ensure_bytes(options.withdrawal_key)
    withdrawal_credentials = get_withdrawal_credentials(withdrawal_key)

    message_root = deposit_message_root(depositor_pubkey, withdrawal_credentials, amount)
    domain = get_domain(DOMAIN_DEPOSIT, network)
    signing_root = compute_signing_root(message_root, domain)
    logger.debug(f"Deposit message root {message_root.hex()}, signing root {signing_root.hex()}")

    signature = request_signature(signer, path, signing_root, depositor_pubkey)
    data_root = deposit_data_root(depositor_pubkey, withdrawal_credentials, amount, signature)

    logger.info(
        f"Built deposit for {depositor_pubkey.hex()[:16]}... on {network.network_name}: "
        f"amount={amount} credentials_type={withdrawal_credentials_type(withdrawal_credentials):#04x} "
        f"deposit_data_root={data_root.hex()}"
    )
    return DepositRecord(
        pubkey=depositor_pubkey,
        withdrawal_credentials=withdrawal_credentials,
        amount=amount,
        signature=signature,
        deposit_message_root=message_root,
        deposit_data_root=data_root,
        fork_version=network.fork_version,
        network_name=network.network_name,
        deposit_cli_version=options.deposit_cli_version,
    )


def generate_deposit(
    signer: Signer,
    path: KeyPath,
    options: Optional[DepositOptions] = None,
) -> str:
    """Build deposit data and return it as a JSON string."""
    return build_deposit(signer, path, options).to_json()


def export_keystore(
    signer: Signer,
    path: KeyPath,
    iterations: int = DEFAULT_KEYSTORE_ITERATIONS,
) -> str:
    """Return the signer's EIP-2335 keystore for the key at ``path``."""
    if not isinstance(iterations, int) or isinstance(iterations, bool) or iterations <= 0:
        raise InvalidEncoding(f"iterations must be a positive int, got {iterations!r}")
    return signer.export_keystore(path, iterations)


def verify_deposit(record: DepositRecord, network: Optional[NetworkInfo] = None) -> bool:
    """Check the roots and the proof-of-possession signature of a deposit.

    Args:
        record: Deposit record to check
        network: Network the deposit was signed for (defaults to the
            record's fork version with an empty validators root)

    Returns:
        True if the record is internally consistent and correctly signed
    """
    if network is None:
        domain = compute_domain(DOMAIN_DEPOSIT, record.fork_version)
    else:
        if network.fork_version != record.fork_version:
            logger.error(
                f"Fork version {record.fork_version.hex()} does not match "
                f"{network.network_name} ({network.fork_version.hex()})"
            )
            return False
        domain = get_domain(DOMAIN_DEPOSIT, network)

    message_root = deposit_message_root(
        record.pubkey, record.withdrawal_credentials, record.amount
    )
    if message_root != record.deposit_message_root:
        logger.error(f"Deposit message root mismatch: computed {message_root.hex()}")
        return False

    data_root = deposit_data_root(
        record.pubkey, record.withdrawal_credentials, record.amount, record.signature
    )
    if data_root != record.deposit_data_root:
        logger.error(f"Deposit data root mismatch: computed {data_root.hex()}")
        return False

    signing_root = compute_signing_root(message_root, domain)
    if not verify(record.pubkey, signing_root, record.signature):
        logger.error(f"Invalid deposit signature for {record.pubkey.hex()[:16]}...")
        return False
    return True
