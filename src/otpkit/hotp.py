from typing import Any, Optional, Union

from . import base32, utils
from .exceptions import InvalidConfiguration
from .keys import HashMode
from .otp import DEFAULT_DIGITS, OTP


class HOTP(OTP):
    """
    Handler for HMAC-based OTP counters (RFC 4226).
    """

    min_digits = 6
    max_digits = 8

    def __init__(
        self,
        key: Any,
        digits: int = DEFAULT_DIGITS,
        mode: Any = HashMode.SHA1,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        initial_count: int = 0,
    ) -> None:
        """
        :param key: raw key bytes or a KeyProvider
        :param digits: number of integers in the OTP, 6 to 8
        :param mode: hash algorithm, SHA1 unless the token says otherwise
        :param name: account name
        :param issuer: issuer
        :param initial_count: counter the token was provisioned with; only
            carried into provisioning URIs, ``at`` takes absolute counters
        """
        if initial_count < 0:
            raise InvalidConfiguration("initial_count must not be negative")
        super().__init__(key=key, digits=digits, mode=mode, name=name, issuer=issuer)
        self._initial_count = initial_count

    @property
    def initial_count(self) -> int:
        return self._initial_count

    def at(self, count: int) -> str:
        """
        Generates the OTP for the given count.

        :param count: the OTP HMAC counter
        :returns: OTP
        """
        return self.generate_otp(count)

    def verify(self, otp: str, counter: int) -> bool:
        """
        Verifies the OTP passed in against the OTP for exactly this counter.

        Looking ahead on a mismatch and remembering the last accepted counter
        are left to the caller.

        :param otp: the OTP to check against
        :param counter: the OTP HMAC counter
        """
        return utils.strings_equal(str(otp), self.at(counter))

    def provisioning_uri(
        self,
        secret: Union[str, bytes],
        name: Optional[str] = None,
        initial_count: Optional[int] = None,
        issuer_name: Optional[str] = None,
        image: Optional[str] = None,
    ) -> str:
        """
        Returns the provisioning URI for the OTP.  This can then be
        encoded in a QR Code and used to provision an OTP app like
        Google Authenticator.

        The key provider never hands out the key, so the secret has to be
        supplied by the caller.

        See also:
            https://github.com/google/google-authenticator/wiki/Key-Uri-Format

        :param secret: the key, as raw bytes or Base32 text
        :param name: name of the user account
        :param initial_count: starting HMAC counter value, defaults to
            the instance's initial_count
        :param issuer_name: the name of the OTP issuer; this will be the
            organization title of the OTP entry in Authenticator
        :param image: https URL of a logo for the entry
        :returns: provisioning URI
        """
        if not isinstance(secret, str):
            secret = base32.encode(secret)
        return utils.build_uri(
            "hotp",
            secret,
            name=name if name else self.name,
            algorithm=self.mode.value,
            digits=self.digits,
            issuer=issuer_name if issuer_name else self.issuer,
            counter=initial_count if initial_count is not None else self.initial_count,
            image=image,
        )
