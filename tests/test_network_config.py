"""Tests for network info and config loading."""

import pytest

from depositoor.exceptions import InvalidNetworkInfo
from depositoor.spec.constants import GENESIS_FORK_VERSION, ZERO_ROOT
from depositoor.spec.network_config import (
    MAINNET_GENESIS,
    NETWORKS,
    NetworkInfo,
    get_network,
    load_network,
)


class TestNetworkInfo:
    def test_defaults(self):
        info = NetworkInfo("devnet")
        assert info.fork_version == GENESIS_FORK_VERSION
        assert info.validators_root == ZERO_ROOT
        assert info.is_genesis

    def test_hex_is_normalized(self):
        info = NetworkInfo("sepolia", "0x90000069", "11" * 32)
        assert info.fork_version == bytes.fromhex("90000069")
        assert info.validators_root == b"\x11" * 32

    def test_mainnet_genesis(self):
        assert MAINNET_GENESIS.network_name == "mainnet"
        assert MAINNET_GENESIS.fork_version == b"\x00" * 4
        assert MAINNET_GENESIS.validators_root == b"\x00" * 32

    def test_for_deposit_clears_validators_root(self):
        mainnet = NETWORKS["mainnet"]
        assert not mainnet.is_genesis
        deposit_network = mainnet.for_deposit()
        assert deposit_network.is_genesis
        assert deposit_network.fork_version == mainnet.fork_version
        assert deposit_network.network_name == "mainnet"
        assert deposit_network == MAINNET_GENESIS

    def test_for_deposit_keeps_genesis_instance(self):
        assert MAINNET_GENESIS.for_deposit() is MAINNET_GENESIS

    def test_frozen(self):
        with pytest.raises(AttributeError):
            MAINNET_GENESIS.network_name = "other"

    @pytest.mark.parametrize(
        "fork_version,validators_root",
        [
            (b"\x00" * 3, ZERO_ROOT),
            (b"\x00" * 5, ZERO_ROOT),
            (GENESIS_FORK_VERSION, b"\x00" * 31),
            (GENESIS_FORK_VERSION, "0xzz"),
        ],
    )
    def test_invalid(self, fork_version, validators_root):
        with pytest.raises(InvalidNetworkInfo):
            NetworkInfo("devnet", fork_version, validators_root)

    def test_empty_name(self):
        with pytest.raises(InvalidNetworkInfo):
            NetworkInfo("")


class TestBuiltinNetworks:
    @pytest.mark.parametrize(
        "name,fork_version",
        [
            ("mainnet", "00000000"),
            ("sepolia", "90000069"),
            ("holesky", "01017000"),
            ("hoodi", "10000910"),
        ],
    )
    def test_fork_versions(self, name, fork_version):
        network = get_network(name)
        assert network.network_name == name
        assert network.fork_version.hex() == fork_version
        assert not network.is_genesis

    def test_lookup_is_case_insensitive(self):
        assert get_network("Mainnet") is NETWORKS["mainnet"]

    def test_unknown(self):
        with pytest.raises(InvalidNetworkInfo, match="Unknown network"):
            get_network("ropsten")


class TestFromYaml:
    def test_unquoted_hex_values(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text(
            "CONFIG_NAME: hoodi\n"
            "GENESIS_FORK_VERSION: 0x10000910\n"
            "GENESIS_VALIDATORS_ROOT: "
            "0x212f13fc4df078b6cb7db228f1c8307566dcecf900867401a92023d7ba99cb5f\n"
        )
        assert NetworkInfo.from_yaml(config) == NETWORKS["hoodi"]

    def test_quoted_hex_values(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("CONFIG_NAME: devnet\nGENESIS_FORK_VERSION: '0x10000038'\n")
        info = NetworkInfo.from_yaml(config)
        assert info.network_name == "devnet"
        assert info.fork_version == bytes.fromhex("10000038")
        assert info.is_genesis

    def test_leading_zero_fork_version(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("CONFIG_NAME: mainnet\nGENESIS_FORK_VERSION: 0x00000000\n")
        assert NetworkInfo.from_yaml(config) == MAINNET_GENESIS

    def test_missing_config_name(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("GENESIS_FORK_VERSION: 0x10000910\n")
        with pytest.raises(InvalidNetworkInfo, match="CONFIG_NAME"):
            NetworkInfo.from_yaml(config)

    def test_oversized_value(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("CONFIG_NAME: devnet\nGENESIS_FORK_VERSION: 0x1000091000\n")
        with pytest.raises(InvalidNetworkInfo):
            NetworkInfo.from_yaml(config)


class TestLoadNetwork:
    def test_by_name(self):
        assert load_network("sepolia") is NETWORKS["sepolia"]

    def test_by_path(self, tmp_path):
        config = tmp_path / "devnet.yaml"
        config.write_text("CONFIG_NAME: devnet\nGENESIS_FORK_VERSION: 0x10000038\n")
        assert load_network(str(config)).network_name == "devnet"

    def test_unknown(self, tmp_path):
        with pytest.raises(InvalidNetworkInfo):
            load_network(str(tmp_path / "missing.yaml"))
