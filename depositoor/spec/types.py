"""Container descriptions for the messages this package signs."""

from ..ssz import byte_vector, container, uint

# Type widths
Version = 4
DomainType = 4
Root = 32
Domain = 32
BLSPubkey = 48
BLSSignature = 96
ExecutionAddress = 20
Gwei = 64
ValidatorIndex = 64


ForkData = container(
    "ForkData",
    byte_vector("current_version", Version),
    byte_vector("genesis_validators_root", Root),
)

SigningData = container(
    "SigningData",
    byte_vector("object_root", Root),
    byte_vector("domain", Domain),
)

DepositMessage = container(
    "DepositMessage",
    byte_vector("pubkey", BLSPubkey),
    byte_vector("withdrawal_credentials", Root),
    uint("amount", Gwei),
)

DepositData = container(
    "DepositData",
    byte_vector("pubkey", BLSPubkey),
    byte_vector("withdrawal_credentials", Root),
    uint("amount", Gwei),
    byte_vector("signature", BLSSignature),
)

BLSToExecutionChange = container(
    "BLSToExecutionChange",
    uint("validator_index", ValidatorIndex),
    byte_vector("from_bls_pubkey", BLSPubkey),
    byte_vector("to_execution_address", ExecutionAddress),
)


__all__ = [
    "Version", "DomainType", "Root", "Domain",
    "BLSPubkey", "BLSSignature", "ExecutionAddress", "Gwei", "ValidatorIndex",
    "ForkData", "SigningData", "DepositMessage", "DepositData",
    "BLSToExecutionChange",
]
