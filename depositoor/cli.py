"""CLI entry point for depositoor."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .config import BlsChangeOptions, DepositOptions
from .exceptions import DepositoorError
from .messages import (
    DepositRecord,
    SignedBLSToExecutionChange,
    build_bls_to_execution_change,
    build_deposit,
    export_keystore,
    verify_bls_to_execution_change,
    verify_deposit,
)
from .signer import KeystoreSigner
from .spec.constants import DEFAULT_DEPOSIT_CLI_VERSION, DEFAULT_KEYSTORE_ITERATIONS, MAX_EFFECTIVE_BALANCE
from .spec.network_config import NETWORKS, NetworkInfo, load_network

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _network(value: str) -> NetworkInfo:
    try:
        return load_network(value)
    except DepositoorError as e:
        raise click.BadParameter(str(e), param_hint="--network") from e


def _signer(validator_keys: str) -> KeystoreSigner:
    try:
        return KeystoreSigner.from_spec(validator_keys)
    except DepositoorError as e:
        raise click.ClickException(str(e)) from e


def _emit(text: str, output: Optional[str]) -> None:
    if output:
        Path(output).write_text(text)
        logger.info(f"Wrote {output}")
    else:
        click.echo(text)


validator_keys_option = click.option(
    "--validator-keys",
    required=True,
    help="Keystores spec (Teku-style: keystores_dir:secrets_dir or keystore_file:password_file)",
    envvar="DEPOSITOOR_VALIDATOR_KEYS",
)
path_option = click.option(
    "--path",
    "key_path",
    required=True,
    help="EIP-2334 key path, e.g. m/12381/3600/0/0/0",
)
network_option = click.option(
    "--network",
    default="mainnet",
    help=f"Network name ({', '.join(sorted(NETWORKS))}) or path to a config yaml",
    envvar="DEPOSITOOR_NETWORK",
)
output_option = click.option(
    "--output",
    type=click.Path(dir_okay=False, writable=True),
    help="Write the result to this file instead of stdout",
)


@click.group()
@click.version_option(package_name="depositoor")
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level",
    envvar="DEPOSITOOR_LOG_LEVEL",
)
def cli(log_level: str):
    """Depositoor - build deposit data and withdrawal changes for external signers."""
    setup_logging(log_level)


@cli.command()
@validator_keys_option
@path_option
@click.option(
    "--withdrawal-key",
    help="Execution address (20 bytes) or BLS pubkey (48 bytes) for the withdrawal credentials; "
    "defaults to the BLS key at the parent path",
)
@click.option(
    "--amount-gwei",
    default=MAX_EFFECTIVE_BALANCE,
    type=int,
    show_default=True,
    help="Deposit amount in Gwei",
)
@network_option
@click.option(
    "--deposit-cli-version",
    default=DEFAULT_DEPOSIT_CLI_VERSION,
    show_default=True,
    help="staking-deposit-cli version tag written for launchpad",
)
@click.option(
    "--format",
    "output_format",
    default="json",
    type=click.Choice(["json", "calldata"]),
    help="Output launchpad JSON or deposit contract call data",
)
@output_option
def deposit(
    validator_keys: str,
    key_path: str,
    withdrawal_key: Optional[str],
    amount_gwei: int,
    network: str,
    deposit_cli_version: str,
    output_format: str,
    output: Optional[str],
):
    """Build signed deposit data for a validator key."""
    signer = _signer(validator_keys)
    options = DepositOptions(
        withdrawal_key=withdrawal_key,
        amount_gwei=amount_gwei,
        network=_network(network).for_deposit(),
        deposit_cli_version=deposit_cli_version,
    )
    try:
        record = build_deposit(signer, key_path, options)
    except DepositoorError as e:
        raise click.ClickException(str(e)) from e

    if output_format == "calldata":
        _emit("0x" + record.to_calldata().hex(), output)
    else:
        # launchpad expects a list of deposits
        _emit(json.dumps([record.to_dict()]), output)


@cli.command("bls-change")
@validator_keys_option
@path_option
@click.option("--execution-address", required=True, help="New withdrawal execution address")
@click.option("--validator-index", required=True, type=int, help="On-chain validator index")
@network_option
@click.option(
    "--deposit-cli-version",
    default=DEFAULT_DEPOSIT_CLI_VERSION,
    show_default=True,
    help="staking-deposit-cli version tag written to the metadata",
)
@output_option
def bls_change(
    validator_keys: str,
    key_path: str,
    execution_address: str,
    validator_index: int,
    network: str,
    deposit_cli_version: str,
    output: Optional[str],
):
    """Sign a BLS to execution address withdrawal credentials change."""
    signer = _signer(validator_keys)
    options = BlsChangeOptions(
        execution_address=execution_address,
        validator_index=validator_index,
        network=_network(network),
        deposit_cli_version=deposit_cli_version,
    )
    try:
        change = build_bls_to_execution_change(signer, key_path, options)
    except DepositoorError as e:
        raise click.ClickException(str(e)) from e
    _emit(json.dumps([change.to_dict()]), output)


@cli.command("export-keystore")
@validator_keys_option
@path_option
@click.option(
    "--iterations",
    default=DEFAULT_KEYSTORE_ITERATIONS,
    type=int,
    show_default=True,
    help="KDF iteration count requested from the signer",
)
@output_option
def export_keystore_cmd(validator_keys: str, key_path: str, iterations: int, output: Optional[str]):
    """Export the EIP-2335 keystore for a key path."""
    signer = _signer(validator_keys)
    try:
        _emit(export_keystore(signer, key_path, iterations), output)
    except DepositoorError as e:
        raise click.ClickException(str(e)) from e


def _load_records(path: str) -> list:
    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise click.ClickException(f"Invalid JSON in {path}: {e}") from e
    return data if isinstance(data, list) else [data]


@cli.command("verify-deposit")
@click.argument("deposit_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--network", help="Network name or config yaml (defaults to the record's fork version)")
def verify_deposit_cmd(deposit_file: str, network: Optional[str]):
    """Verify roots and signatures of a deposit data file."""
    network_info = _network(network).for_deposit() if network else None
    failed = 0
    for i, item in enumerate(_load_records(deposit_file)):
        try:
            record = DepositRecord.from_dict(item)
        except DepositoorError as e:
            raise click.ClickException(f"Deposit #{i}: {e}") from e
        ok = verify_deposit(record, network_info)
        click.echo(f"{record.pubkey.hex()}: {'OK' if ok else 'INVALID'}")
        failed += not ok
    if failed:
        raise click.ClickException(f"{failed} invalid deposit(s)")


@cli.command("verify-bls-change")
@click.argument("change_file", type=click.Path(exists=True, dir_okay=False))
@network_option
def verify_bls_change_cmd(change_file: str, network: str):
    """Verify signatures of a BLS to execution change file."""
    network_info = _network(network)
    failed = 0
    for i, item in enumerate(_load_records(change_file)):
        try:
            change = SignedBLSToExecutionChange.from_dict(item)
        except DepositoorError as e:
            raise click.ClickException(f"Change #{i}: {e}") from e
        ok = verify_bls_to_execution_change(change, network_info)
        click.echo(f"validator {change.validator_index}: {'OK' if ok else 'INVALID'}")
        failed += not ok
    if failed:
        raise click.ClickException(f"{failed} invalid change(s)")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
