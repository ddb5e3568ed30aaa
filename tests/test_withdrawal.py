"""Tests for withdrawal credential encoding."""

import hashlib

import pytest

from depositoor.exceptions import InvalidEncoding, InvalidWithdrawalKey
from depositoor.spec.withdrawal import get_withdrawal_credentials, withdrawal_credentials_type
from tests.vectors import EXECUTION_ADDRESS, MEDALLA_PUBKEY


def test_bls_credentials_known_answer():
    creds = get_withdrawal_credentials(MEDALLA_PUBKEY)
    assert creds.hex() == "006b23d32adb17d2c7175df352ecd46b9f9394684605a24cd39e2d6d8121c246"


def test_bls_credentials_drop_first_hash_byte():
    creds = get_withdrawal_credentials(MEDALLA_PUBKEY)
    assert len(creds) == 32
    assert creds[0] == 0x00
    assert creds[1:] == hashlib.sha256(MEDALLA_PUBKEY).digest()[1:]


def test_bls_credentials_are_pure():
    assert get_withdrawal_credentials(MEDALLA_PUBKEY) == get_withdrawal_credentials(MEDALLA_PUBKEY)
    assert get_withdrawal_credentials(MEDALLA_PUBKEY.hex()) == get_withdrawal_credentials(
        MEDALLA_PUBKEY
    )


def test_execution_address_credentials():
    creds = get_withdrawal_credentials(EXECUTION_ADDRESS)
    assert creds == b"\x01" + b"\x00" * 11 + EXECUTION_ADDRESS
    assert get_withdrawal_credentials("0x" + EXECUTION_ADDRESS.hex()) == creds


@pytest.mark.parametrize("key,prefix", [(b"\xab" * 48, 0x00), (b"\xab" * 20, 0x01)])
def test_variant_selection(key, prefix):
    assert get_withdrawal_credentials(key)[0] == prefix
    assert withdrawal_credentials_type(get_withdrawal_credentials(key)) == prefix


@pytest.mark.parametrize("length", [0, 19, 21, 32, 47, 49])
def test_invalid_key_length(length):
    with pytest.raises(InvalidWithdrawalKey) as exc_info:
        get_withdrawal_credentials(b"\x01" * length)
    assert exc_info.value.length == length


def test_invalid_key_encoding():
    with pytest.raises(InvalidEncoding):
        get_withdrawal_credentials("0xnothex")


def test_credentials_type_rejects_wrong_length():
    with pytest.raises(InvalidEncoding):
        withdrawal_credentials_type(b"\x01" * 31)
