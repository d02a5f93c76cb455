from __future__ import annotations

import hashlib
import hmac

import pytest

import otpkit
from otpkit import HOTP, HashMode, InMemoryKey, derive_key_from_master, random_base32, random_key


@pytest.mark.parametrize("mode, length", [(HashMode.SHA1, 20), (HashMode.SHA256, 32), (HashMode.SHA512, 64)])
def test_random_key_length_follows_mode(mode: HashMode, length: int) -> None:
    assert len(random_key(mode)) == length


def test_random_key_defaults() -> None:
    assert len(random_key()) == 20
    assert len(random_key(16)) == 16
    assert random_key() != random_key()


@pytest.mark.parametrize("length", [0, -1])
def test_random_key_rejects_bad_length(length: int) -> None:
    with pytest.raises(ValueError):
        random_key(length)


def test_random_base32() -> None:
    secret = random_base32()
    assert len(secret) == 32
    assert set(secret) <= set(otpkit.base32.ALPHABET)
    assert len(otpkit.base32.decode(secret)) == 20


def test_random_base32_requires_160_bits() -> None:
    with pytest.raises(ValueError):
        random_base32(16)


def test_random_key_is_usable() -> None:
    key = random_key(HashMode.SHA256)
    assert len(HOTP(key, mode=HashMode.SHA256).at(0)) == 6


def test_derive_key_from_master_bytes() -> None:
    master = InMemoryKey(b"master key")

    derived = derive_key_from_master(master, b"device-0001")

    assert derived == hmac.new(b"master key", b"device-0001", hashlib.sha1).digest()


def test_derive_key_from_master_serial_number() -> None:
    master = InMemoryKey(b"master key")

    derived = derive_key_from_master(master, 42, HashMode.SHA512)

    assert derived == hmac.new(b"master key", b"\x00\x00\x00\x2a", hashlib.sha512).digest()
    assert len(derived) == 64


def test_derive_key_requires_master() -> None:
    with pytest.raises(otpkit.InvalidConfiguration):
        derive_key_from_master(None, b"device")  # type: ignore[arg-type]
