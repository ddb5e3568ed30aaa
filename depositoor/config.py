"""Options for the message builders."""

from dataclasses import dataclass
from typing import Optional

from .encoding import BytesLike
from .spec.constants import DEFAULT_DEPOSIT_CLI_VERSION, MAX_EFFECTIVE_BALANCE
from .spec.network_config import MAINNET_GENESIS, NetworkInfo


@dataclass(frozen=True)
class DepositOptions:
    """Deposit data options.

    withdrawal_key: 48-byte BLS pubkey or 20-byte execution address (bytes or
        hex). When unset, the BLS key one level above the deposit path is used.
    amount_gwei: deposit amount, must be > 0 and < 2**64. Defaults to 32 ETH.
    network: network the deposit is bound to. Defaults to mainnet genesis.
    deposit_cli_version: version tag launchpad checks. Defaults to "2.3.0".
    """

    withdrawal_key: Optional[BytesLike] = None
    amount_gwei: int = MAX_EFFECTIVE_BALANCE
    network: NetworkInfo = MAINNET_GENESIS
    deposit_cli_version: str = DEFAULT_DEPOSIT_CLI_VERSION


@dataclass(frozen=True)
class BlsChangeOptions:
    """BLS to execution change options.

    execution_address: new 20-byte withdrawal address (required).
    validator_index: on-chain index of the validator (required).
    network: network the change is bound to. Defaults to mainnet genesis.
    deposit_cli_version: version tag written to the output metadata.
    """

    execution_address: Optional[BytesLike] = None
    validator_index: Optional[int] = None
    network: NetworkInfo = MAINNET_GENESIS
    deposit_cli_version: str = DEFAULT_DEPOSIT_CLI_VERSION
