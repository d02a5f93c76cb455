"""
otpauth:// provisioning URIs, the format authenticator apps scan from QR codes.

The URL looks like this::

    otpauth://totp/ACME%20Co:alice%40example.com?secret=JBSWY3DPEHPK3PXP&issuer=ACME%20Co&algorithm=SHA1&digits=6&period=30

See also:
    https://github.com/google/google-authenticator/wiki/Key-Uri-Format
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional, Tuple, Union
from urllib.parse import unquote, urlparse

from . import base32, utils
from .exceptions import InvalidUri
from .hotp import HOTP
from .keys import HashMode
from .otp import DEFAULT_DIGITS, OTP
from .totp import DEFAULT_INTERVAL, TOTP

logger = logging.getLogger(__name__)

SCHEME = "otpauth"

# "/issuer:account" or "/account", spaces after the colon are ignored
_LABEL = re.compile(r"^/(?:([^:]+):)? *([^:]+)$")
_UNSIGNED = re.compile(r"^[0-9]+$")


class OtpType(Enum):
    TOTP = "totp"
    HOTP = "hotp"


def _reject(reason: str) -> InvalidUri:
    # the URI itself is never logged, it carries the secret
    logger.debug("Rejected otpauth URI: %s", reason)
    return InvalidUri(reason)


def _query_params(query: str) -> Iterator[Tuple[str, str]]:
    # "+" is a literal here, not form-encoded space, same as in the label
    for pair in query.split("&"):
        key, _, value = pair.partition("=")
        if key and value:
            yield unquote(key), unquote(value)


def _parse_unsigned(key: str, value: str) -> int:
    if not _UNSIGNED.match(value):
        raise _reject("URI '{}' parameter '{}' is not a valid integer".format(key, value))
    return int(value)


@dataclass(frozen=True)
class OtpUri(object):
    """
    The fields of a provisioning URI.

    ``period`` only means something for TOTP and ``counter`` only for HOTP;
    the other one keeps its default.
    """

    type: OtpType
    secret: str = field(repr=False)
    account: str
    issuer: Optional[str] = None
    algorithm: HashMode = HashMode.SHA1
    digits: int = DEFAULT_DIGITS
    period: int = DEFAULT_INTERVAL
    counter: int = 0
    image: Optional[str] = None

    def __post_init__(self) -> None:
        if self.secret is None:
            raise InvalidUri("secret must not be None")
        if self.account is None:
            raise InvalidUri("account must not be None")
        if self.digits < 0:
            raise InvalidUri("digits must not be negative")
        object.__setattr__(self, "type", OtpType(self.type))
        object.__setattr__(self, "algorithm", HashMode.coerce(self.algorithm))
        if not isinstance(self.secret, str):
            object.__setattr__(self, "secret", base32.encode(self.secret))

    @classmethod
    def for_otp(cls, otp: OTP, secret: Union[str, bytes], image: Optional[str] = None) -> "OtpUri":
        """
        Captures the configuration of an HOTP or TOTP instance.

        :param otp: the instance to describe
        :param secret: its key, as raw bytes or Base32 text
        """
        fields: Any = dict(
            secret=secret,
            account=otp.name,
            issuer=otp.issuer,
            algorithm=otp.mode,
            digits=otp.digits,
            image=image,
        )
        if isinstance(otp, TOTP):
            return cls(OtpType.TOTP, period=otp.interval, **fields)
        if isinstance(otp, HOTP):
            return cls(OtpType.HOTP, counter=otp.initial_count, **fields)
        raise TypeError("Not a supported OTP type: {}".format(type(otp).__name__))

    @classmethod
    def parse(cls, uri: str) -> "OtpUri":
        """
        Parses the provisioning URI for the OTP; works for either TOTP or HOTP.

        :param uri: the hotp/totp URI to parse
        :returns: OtpUri
        """
        parsed_uri = urlparse(uri)

        if parsed_uri.scheme != SCHEME:
            raise _reject("Not an otpauth URI")

        try:
            otp_type = OtpType(parsed_uri.netloc.lower())
        except ValueError:
            raise _reject("Not a supported OTP type: {!r}".format(parsed_uri.netloc)) from None

        issuer = None
        account = ""
        label = _LABEL.match(unquote(parsed_uri.path))
        if label:
            issuer, account = label.group(1), label.group(2)

        secret = None
        algorithm = None
        digits = None
        period = None
        counter = None
        image = None

        for key, value in _query_params(parsed_uri.query):
            key = key.lower()
            if key == "secret":
                secret = value
            elif key == "issuer":
                if issuer is not None and issuer != value:
                    raise _reject(
                        "URI supplies different issuers in label ({}) and parameter ({})".format(issuer, value)
                    )
                issuer = value
            elif key == "algorithm":
                if algorithm is not None:
                    raise _reject("URI supplies 'algorithm' parameter multiple times")
                try:
                    algorithm = HashMode[value.upper()]
                except KeyError:
                    raise _reject("Invalid value for algorithm, must be SHA1, SHA256 or SHA512") from None
            elif key == "digits":
                if digits is not None:
                    raise _reject("URI supplies 'digits' parameter multiple times")
                digits = _parse_unsigned(key, value)
            elif key == "period":
                if otp_type is not OtpType.TOTP:
                    raise _reject("URI 'period' parameter is not valid for type 'hotp'")
                if period is not None:
                    raise _reject("URI supplies 'period' parameter multiple times")
                period = _parse_unsigned(key, value)
            elif key == "counter":
                if otp_type is not OtpType.HOTP:
                    raise _reject("URI 'counter' parameter is not valid for type 'totp'")
                if counter is not None:
                    raise _reject("URI supplies 'counter' parameter multiple times")
                counter = _parse_unsigned(key, value)
            elif key == "image":
                if not utils.is_https_url(value):
                    raise _reject("URI 'image' parameter is not an https URL")
                image = value
            else:
                raise _reject("Unknown parameter {!r} in query string of URI".format(key))

        if not secret:
            raise _reject("No secret found in URI")
        try:
            base32.decode(secret)
        except ValueError:
            raise _reject("URI secret is not valid Base32") from None

        return cls(
            otp_type,
            secret,
            account,
            issuer=issuer,
            algorithm=algorithm if algorithm is not None else HashMode.SHA1,
            digits=digits if digits is not None else DEFAULT_DIGITS,
            period=period if period is not None else DEFAULT_INTERVAL,
            counter=counter if counter is not None else 0,
            image=image,
        )

    def to_otp(self) -> OTP:
        """
        Builds the HOTP or TOTP instance this URI describes. Out of range
        digits or period fail here, with InvalidConfiguration.
        """
        key = base32.decode(self.secret)
        if self.type is OtpType.TOTP:
            return TOTP(
                key,
                digits=self.digits,
                mode=self.algorithm,
                name=self.account,
                issuer=self.issuer,
                interval=self.period,
            )
        return HOTP(
            key,
            digits=self.digits,
            mode=self.algorithm,
            name=self.account,
            issuer=self.issuer,
            initial_count=self.counter,
        )

    def __str__(self) -> str:
        return utils.build_uri(
            self.type.value,
            self.secret,
            name=self.account,
            algorithm=self.algorithm.value,
            digits=self.digits,
            issuer=self.issuer,
            period=self.period,
            counter=self.counter,
            image=self.image,
        )
