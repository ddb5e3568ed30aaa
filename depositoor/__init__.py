"""depositoor - deposit data and BLS to execution change builder for external signers."""

from .config import BlsChangeOptions, DepositOptions
from .exceptions import (
    DepositoorError,
    InvalidAmount,
    InvalidEncoding,
    InvalidNetworkInfo,
    InvalidObjectRoot,
    InvalidWithdrawalKey,
    MissingParameter,
    SignerError,
    SignerMismatch,
)
from .messages import (
    DepositRecord,
    SignedBLSToExecutionChange,
    build_bls_to_execution_change,
    build_deposit,
    export_keystore,
    generate_bls_to_execution_change,
    generate_deposit,
    verify_bls_to_execution_change,
    verify_deposit,
)
from .spec import MAINNET_GENESIS, NETWORKS, NetworkInfo

__all__ = [
    "BlsChangeOptions",
    "DepositOptions",
    "DepositoorError",
    "InvalidAmount",
    "InvalidEncoding",
    "InvalidNetworkInfo",
    "InvalidObjectRoot",
    "InvalidWithdrawalKey",
    "MissingParameter",
    "SignerError",
    "SignerMismatch",
    "DepositRecord",
    "SignedBLSToExecutionChange",
    "build_bls_to_execution_change",
    "build_deposit",
    "export_keystore",
    "generate_bls_to_execution_change",
    "generate_deposit",
    "verify_bls_to_execution_change",
    "verify_deposit",
    "MAINNET_GENESIS",
    "NETWORKS",
    "NetworkInfo",
]
