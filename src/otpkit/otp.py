from typing import Any, Optional, Tuple

from . import base32, utils
from .exceptions import InvalidConfiguration
from .keys import HashMode, KeyProvider, as_key_provider
from .window import VerificationWindow

DEFAULT_DIGITS = 6
MAX_COUNTER = 2**64 - 1


class OTP(object):
    """
    Base class for OTP handlers.

    Holds the key provider, hash mode and output length shared by HOTP and
    TOTP, and implements the RFC 4226 computation both of them use. Instances
    are immutable once constructed.
    """

    #: inclusive bounds on the number of digits, narrowed by subclasses
    min_digits = 1
    max_digits = 10

    def __init__(
        self,
        key: Any,
        digits: int = DEFAULT_DIGITS,
        mode: Any = HashMode.SHA1,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
    ) -> None:
        """
        :param key: raw key bytes (copied into an InMemoryKey) or a KeyProvider
        :param digits: number of digits in the OTP
        :param mode: hash algorithm, a HashMode or its name
        :param name: account name, used in provisioning URIs
        :param issuer: issuer, used in provisioning URIs
        """
        if not isinstance(digits, int) or isinstance(digits, bool):
            raise InvalidConfiguration("digits must be an integer")
        if not self.min_digits <= digits <= self.max_digits:
            raise InvalidConfiguration(
                "digits must be between {} and {}, got {}".format(self.min_digits, self.max_digits, digits)
            )
        self._mode = HashMode.coerce(mode)
        self._key = as_key_provider(key)
        self._digits = digits
        self._name = name or "Secret"
        self._issuer = issuer

    @classmethod
    def from_base32(cls, secret: str, **kwargs: Any) -> "OTP":
        """
        Builds an instance from a Base32 text secret, as shown to users and
        carried in provisioning URIs.

        :param secret: secret in base32 format
        """
        return cls(base32.decode(secret), **kwargs)

    @property
    def digits(self) -> int:
        return self._digits

    @property
    def mode(self) -> HashMode:
        return self._mode

    @property
    def key(self) -> KeyProvider:
        return self._key

    @property
    def name(self) -> str:
        return self._name

    @property
    def issuer(self) -> Optional[str]:
        return self._issuer

    def generate_otp(self, input: int) -> str:
        """
        :param input: the HMAC counter value to use as the OTP input.
            Usually either the counter, or the computed integer based on the Unix timestamp
        """
        if input < 0:
            raise ValueError("input must be positive integer")
        if input > MAX_COUNTER:
            raise ValueError("input must fit in an unsigned 64 bit integer")
        hmac_hash = bytearray(self._key.compute_hmac(self._mode, self.int_to_bytestring(input)))
        if len(hmac_hash) < 19:
            raise ValueError("digest size is lower than 19 bytes, which is too short for dynamic truncation")
        offset = hmac_hash[-1] & 0xF
        code = (
            (hmac_hash[offset] & 0x7F) << 24
            | (hmac_hash[offset + 1] & 0xFF) << 16
            | (hmac_hash[offset + 2] & 0xFF) << 8
            | (hmac_hash[offset + 3] & 0xFF)
        )
        str_code = str(10_000_000_000 + (code % 10**self._digits))
        return str_code[-self._digits :]

    def _verify_window(self, initial_step: int, otp: str, window: Optional[VerificationWindow]) -> Tuple[bool, int]:
        """
        Tries every candidate step of the window in order.

        :returns: (True, step) for the first step whose OTP matches,
            (False, 0) when none does
        """
        if window is None:
            window = VerificationWindow()
        otp = str(otp)
        for step in window.candidates(initial_step):
            if step > MAX_COUNTER:
                break
            if utils.strings_equal(otp, self.generate_otp(step)):
                return True, step
        return False, 0

    @staticmethod
    def int_to_bytestring(i: int, padding: int = 8) -> bytes:
        """
        Turns an integer to the OATH specified
        bytestring, which is fed to the HMAC
        along with the secret
        """
        return i.to_bytes(padding, "big")
