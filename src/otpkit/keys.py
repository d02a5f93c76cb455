import hashlib
import hmac
from enum import Enum
from typing import Any, Protocol, Union, runtime_checkable

from .exceptions import InvalidConfiguration, UnsupportedHashMode


class HashMode(Enum):
    """
    HMAC hash algorithm used to compute a one-time password.
    """

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @property
    def digest(self) -> Any:
        """The hashlib constructor handed to ``hmac.new``."""
        return _DIGESTS[self]

    @property
    def key_length(self) -> int:
        """Recommended key length in bytes (the digest size of the hash)."""
        return _KEY_LENGTHS[self]

    @classmethod
    def coerce(cls, value: Any) -> "HashMode":
        """
        Turns a hash mode, an algorithm name ("sha256", "SHA-256") or a hashlib
        constructor into a HashMode.

        There is no fallback to SHA1: anything else raises UnsupportedHashMode.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.replace("-", "").replace("_", "").strip().upper()
            try:
                return cls(name)
            except ValueError:
                raise UnsupportedHashMode("Unsupported hash algorithm: {!r}".format(value)) from None
        for mode, constructor in _DIGESTS.items():
            if value is constructor:
                return mode
        raise UnsupportedHashMode("Unsupported hash mode: {!r}".format(value))


_DIGESTS = {
    HashMode.SHA1: hashlib.sha1,
    HashMode.SHA256: hashlib.sha256,
    HashMode.SHA512: hashlib.sha512,
}

_KEY_LENGTHS = {
    HashMode.SHA1: 20,
    HashMode.SHA256: 32,
    HashMode.SHA512: 64,
}


@runtime_checkable
class KeyProvider(Protocol):
    """
    Anything able to compute an HMAC with a secret key it holds.

    The key never has to leave the provider, so an implementation can be
    backed by an HSM, a smart card or a remote signing service.
    """

    def compute_hmac(self, mode: HashMode, message: bytes) -> bytes:
        """
        :param mode: the hash algorithm to use
        :param message: the data to authenticate (the 8-byte big-endian counter)
        :returns: the raw HMAC digest
        """
        ...


class InMemoryKey(object):
    """
    Key provider holding a private copy of the key bytes in process memory.

    Every HMAC call works on a transient copy of the key which is zeroed once
    the digest has been computed. This only narrows the window in which the
    key sits in memory: hmac and hashlib keep their own internal copies, and
    the interpreter may leave stale buffers around after they are freed, so
    none of this is a guarantee that the key is gone from memory.
    """

    def __init__(self, key: Union[bytes, bytearray, memoryview]) -> None:
        """
        :param key: raw key bytes; copied, the caller's buffer is not retained
        """
        if key is None:
            raise InvalidConfiguration("secret key must not be None")
        if not isinstance(key, (bytes, bytearray, memoryview)):
            raise TypeError("secret key must be bytes, got {}".format(type(key).__name__))
        if len(key) == 0:
            raise InvalidConfiguration("secret key must not be empty")
        self._key = bytes(key)

    def compute_hmac(self, mode: HashMode, message: bytes) -> bytes:
        mode = HashMode.coerce(mode)
        key = bytearray(self._key)
        try:
            return hmac.new(key, message, mode.digest).digest()
        finally:
            key[:] = bytes(len(key))

    def __len__(self) -> int:
        return len(self._key)

    def __repr__(self) -> str:
        return "<InMemoryKey {} bytes>".format(len(self._key))


def as_key_provider(key: Any) -> KeyProvider:
    """
    Wraps raw key bytes in an InMemoryKey; key providers are returned as is.

    For module-internal use.
    """
    if key is None:
        raise InvalidConfiguration("secret key must not be None")
    if isinstance(key, KeyProvider):
        return key
    if isinstance(key, str):
        raise TypeError("secret key must be raw bytes; use from_base32() for Base32 text secrets")
    return InMemoryKey(key)
