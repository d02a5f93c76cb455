import logging
import secrets
from typing import Any, Sequence, Union

from . import base32 as base32
from .exceptions import InvalidConfiguration as InvalidConfiguration
from .exceptions import InvalidUri as InvalidUri
from .exceptions import OtpError as OtpError
from .exceptions import UnsupportedHashMode as UnsupportedHashMode
from .hotp import HOTP as HOTP
from .keys import HashMode as HashMode
from .keys import InMemoryKey as InMemoryKey
from .keys import KeyProvider as KeyProvider
from .otp import OTP as OTP
from .timecorrection import UNCORRECTED as UNCORRECTED
from .timecorrection import TimeCorrection as TimeCorrection
from .totp import TOTP as TOTP
from .uri import OtpType as OtpType
from .uri import OtpUri as OtpUri
from .window import RFC_NETWORK_DELAY as RFC_NETWORK_DELAY
from .window import VerificationWindow as VerificationWindow

logging.getLogger(__name__).addHandler(logging.NullHandler())


def random_key(mode_or_length: Union[HashMode, int] = HashMode.SHA1) -> bytes:
    """
    Generates a random key from the system CSPRNG.

    :param mode_or_length: a hash mode, to get the key length RFC 4226
        recommends for it (20, 32 or 64 bytes), or an explicit length
    :returns: raw key bytes
    """
    if isinstance(mode_or_length, int) and not isinstance(mode_or_length, bool):
        length = mode_or_length
    else:
        length = HashMode.coerce(mode_or_length).key_length
    if length <= 0:
        raise ValueError("Key length must be positive")
    return secrets.token_bytes(length)


def random_base32(length: int = 32, chars: Sequence[str] = base32.ALPHABET) -> str:
    # Note: the otpauth scheme DOES NOT use base32 padding for secret lengths not divisible by 8.
    # Some third-party tools have bugs when dealing with such secrets.
    if length < 32:
        raise ValueError("Secrets should be at least 160 bits")

    return "".join(secrets.choice(chars) for _ in range(length))


def derive_key_from_master(
    master_key: KeyProvider, public_identifier: Union[bytes, int], mode: Any = HashMode.SHA1
) -> bytes:
    """
    Derives a device key from a master key, as described in RFC 4226 section 7.5.

    :param master_key: provider holding the master key
    :param public_identifier: identifier unique to the device, as bytes, or
        an integer serial number (encoded as 4 bytes big-endian)
    :param mode: hash mode, which also sets the derived key length
    :returns: the derived key
    """
    if master_key is None:
        raise InvalidConfiguration("master_key must not be None")
    if isinstance(public_identifier, int):
        public_identifier = public_identifier.to_bytes(4, "big", signed=True)
    return master_key.compute_hmac(HashMode.coerce(mode), public_identifier)


def parse_uri(uri: str) -> OTP:
    """
    Parses the provisioning URI for the OTP; works for either TOTP or HOTP.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param uri: the hotp/totp URI to parse
    :returns: OTP object
    """
    return OtpUri.parse(uri).to_otp()
