"""BLS to execution change generation (Capella+).

Builds the ``SignedBLSToExecutionChange`` that moves a validator's withdrawal
credentials from a BLS key (0x00) to an execution address (0x01).
Reference: https://github.com/ethereum/consensus-specs/blob/master/specs/capella/beacon-chain.md
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping

from ..config import BlsChangeOptions
from ..encoding import ensure_length, to_hex
from ..exceptions import InvalidEncoding, MissingParameter
from ..signer import KeyPath, Signer, verify
from ..spec.constants import DOMAIN_BLS_TO_EXECUTION_CHANGE
from ..spec.domain import compute_signing_root, get_domain
from ..spec.network_config import NetworkInfo
from ..spec.types import (
    BLSPubkey,
    BLSSignature,
    BLSToExecutionChange,
    ExecutionAddress,
    Root,
    ValidatorIndex,
)
from ..ssz import check_uint
from .common import request_signature, resolve_bls_pubkey

logger = logging.getLogger(__name__)


def bls_to_execution_change_root(
    validator_index: int,
    from_bls_pubkey: bytes,
    to_execution_address: bytes,
) -> bytes:
    """Return the hash tree root of a ``BLSToExecutionChange``."""
    return BLSToExecutionChange.hash_tree_root({
        "validator_index": validator_index,
        "from_bls_pubkey": from_bls_pubkey,
        "to_execution_address": to_execution_address,
    })


@dataclass(frozen=True)
class SignedBLSToExecutionChange:
    """Signed change message with the metadata staking-deposit-cli writes."""

    validator_index: int
    from_bls_pubkey: bytes
    to_execution_address: bytes
    signature: bytes
    network_name: str
    genesis_validators_root: bytes
    deposit_cli_version: str

    @property
    def message_root(self) -> bytes:
        return bls_to_execution_change_root(
            self.validator_index, self.from_bls_pubkey, self.to_execution_address
        )

    def to_dict(self) -> dict:
        return {
            "message": {
                "validator_index": str(self.validator_index),
                "from_bls_pubkey": to_hex(self.from_bls_pubkey, prefix=True),
                "to_execution_address": to_hex(self.to_execution_address, prefix=True),
            },
            "signature": to_hex(self.signature, prefix=True),
            "metadata": {
                "network_name": self.network_name,
                "genesis_validators_root": to_hex(self.genesis_validators_root, prefix=True),
                "deposit_cli_version": self.deposit_cli_version,
            },
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SignedBLSToExecutionChange":
        _check_mapping(data, "BLS to execution change")
        try:
            message = _check_mapping(data["message"], "message")
            metadata = _check_mapping(data["metadata"], "metadata")
            return cls(
                validator_index=_parse_validator_index(message["validator_index"]),
                from_bls_pubkey=ensure_length(message["from_bls_pubkey"], BLSPubkey, "from_bls_pubkey"),
                to_execution_address=ensure_length(
                    message["to_execution_address"], ExecutionAddress, "to_execution_address"
                ),
                signature=ensure_length(data["signature"], BLSSignature, "signature"),
                network_name=str(metadata["network_name"]),
                genesis_validators_root=ensure_length(
                    metadata["genesis_validators_root"], Root, "genesis_validators_root"
                ),
                deposit_cli_version=str(metadata["deposit_cli_version"]),
            )
        except KeyError as e:
            raise InvalidEncoding(f"BLS to execution change is missing {e.args[0]!r}") from e


def _check_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise InvalidEncoding(f"{what} must be an object, got {type(value).__name__}")
    return value


def _validator_index(value: Any) -> int:
    return check_uint(value, ValidatorIndex, "validator_index")


def _parse_validator_index(value: Any) -> int:
    # beacon API and staking-deposit-cli write the index as a decimal string
    try:
        index = int(value)
    except (TypeError, ValueError) as e:
        raise InvalidEncoding(f"Invalid validator_index: {value!r}") from e
    return _validator_index(index)


def build_bls_to_execution_change(
    signer: Signer,
    path: KeyPath,
    options: BlsChangeOptions,
) -> SignedBLSToExecutionChange:
    """Sign a change of withdrawal credentials to an execution address.

    Args:
        signer: Signer holding the current BLS withdrawal key
        path: EIP-2334 path of the BLS withdrawal key
        options: Target address, validator index and network

    Returns:
        The signed change

    Raises:
        MissingParameter: If the address or validator index is missing
    """
    if options.execution_address is None:
        raise MissingParameter("execution_address")
    if options.validator_index is None:
        raise MissingParameter("validator_index")
    execution_address = ensure_length(
        options.execution_address, ExecutionAddress, "execution_address"
    )
    validator_index = _validator_index(options.validator_index)
    network = options.network
    if network.is_genesis:
        logger.warning(
            f"Signing BLS to execution change for {network.network_name} with an empty "
            f"genesis validators root; it will only be valid on a chain whose root is zero"
        )

    from_bls_pubkey = resolve_bls_pubkey(signer, path)

    message_root = bls_to_execution_change_root(validator_index, from_bls_pubkey, execution_address)
    domain = get_domain(DOMAIN_BLS_TO_EXECUTION_CHANGE, network)
    signing_root = compute_signing_root(message_root, domain)
    logger.debug(f"BLS change message root {message_root.hex()}, signing root {signing_root.hex()}")

    signature = request_signature(signer, path, signing_root, from_bls_pubkey)

    logger.info(
        f"Built BLS to execution change for validator {validator_index} on "
        f"{network.network_name} -> {to_hex(execution_address, prefix=True)}"
    )
    return SignedBLSToExecutionChange(
        validator_index=validator_index,
        from_bls_pubkey=from_bls_pubkey,
        to_execution_address=execution_address,
        signature=signature,
        network_name=network.network_name,
        genesis_validators_root=network.validators_root,
        deposit_cli_version=options.deposit_cli_version,
    )


def generate_bls_to_execution_change(
    signer: Signer,
    path: KeyPath,
    options: BlsChangeOptions,
) -> str:
    """Build a signed change and return it as a JSON string."""
    return build_bls_to_execution_change(signer, path, options).to_json()


def verify_bls_to_execution_change(
    change: SignedBLSToExecutionChange,
    network: NetworkInfo,
) -> bool:
    """Check the signature of a change against ``network``."""
    if change.genesis_validators_root != network.validators_root:
        logger.error(
            f"Change was made for validators root {change.genesis_validators_root.hex()}, "
            f"not {network.network_name}"
        )
        return False

    domain = get_domain(DOMAIN_BLS_TO_EXECUTION_CHANGE, network)
    signing_root = compute_signing_root(change.message_root, domain)
    if not verify(change.from_bls_pubkey, signing_root, change.signature):
        logger.error(f"Invalid BLS to execution change signature for validator {change.validator_index}")
        return False
    return True
