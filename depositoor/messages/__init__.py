"""Builders for signed consensus-layer messages."""

from .bls_change import (
    SignedBLSToExecutionChange,
    bls_to_execution_change_root,
    build_bls_to_execution_change,
    generate_bls_to_execution_change,
    verify_bls_to_execution_change,
)
from .deposit import (
    DepositRecord,
    build_deposit,
    deposit_data_root,
    deposit_message_root,
    export_keystore,
    generate_deposit,
    verify_deposit,
)

__all__ = [
    "SignedBLSToExecutionChange",
    "bls_to_execution_change_root",
    "build_bls_to_execution_change",
    "generate_bls_to_execution_change",
    "verify_bls_to_execution_change",
    "DepositRecord",
    "build_deposit",
    "deposit_data_root",
    "deposit_message_root",
    "export_keystore",
    "generate_deposit",
    "verify_deposit",
]
