import datetime
import logging
from typing import Any, Optional, Tuple, Union

from . import base32, utils
from .exceptions import InvalidConfiguration
from .keys import HashMode
from .otp import DEFAULT_DIGITS, OTP
from .timecorrection import UNCORRECTED, TimeCorrection
from .utils import Timestamp
from .window import VerificationWindow

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 30


class TOTP(OTP):
    """
    Handler for time-based OTP counters (RFC 6238).

    Timestamps may be datetimes (naive ones are read as UTC) or Unix
    timestamps in seconds. The instance's TimeCorrection is applied to every
    timestamp, including the current time.
    """

    min_digits = 1
    max_digits = 10

    def __init__(
        self,
        key: Any,
        digits: int = DEFAULT_DIGITS,
        mode: Any = HashMode.SHA1,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        interval: int = DEFAULT_INTERVAL,
        time_correction: Optional[TimeCorrection] = None,
    ) -> None:
        """
        :param key: raw key bytes or a KeyProvider
        :param digits: number of integers in the OTP, 1 to 10
        :param mode: hash algorithm to use in the HMAC
        :param name: account name
        :param issuer: issuer
        :param interval: the time interval in seconds for OTP. This defaults to 30.
        :param time_correction: correction for an out of sync local clock
        """
        if not isinstance(interval, int) or isinstance(interval, bool) or interval <= 0:
            raise InvalidConfiguration("interval must be a positive integer, got {!r}".format(interval))
        if time_correction is not None and not isinstance(time_correction, TimeCorrection):
            raise InvalidConfiguration("time_correction must be a TimeCorrection, got {!r}".format(time_correction))
        super().__init__(key=key, digits=digits, mode=mode, name=name, issuer=issuer)
        self._interval = interval
        self._time_correction = time_correction if time_correction is not None else UNCORRECTED

    @property
    def interval(self) -> int:
        return self._interval

    @property
    def time_correction(self) -> TimeCorrection:
        return self._time_correction

    def at(self, for_time: Timestamp) -> str:
        """
        Accepts either a Unix timestamp integer or a datetime object.

        :param for_time: the time to generate an OTP for
        :returns: OTP value
        """
        return self.generate_otp(self.timecode(for_time))

    def now(self) -> str:
        """
        Generate the current time OTP

        :returns: OTP value
        """
        return self.generate_otp(self._step(self._corrected(None)))

    def verify(self, otp: str, for_time: Optional[Timestamp] = None, window: Optional[VerificationWindow] = None) -> bool:
        """
        Verifies the OTP passed in against the current time OTP.

        :param otp: the OTP to check against
        :param for_time: time to check OTP at (defaults to now)
        :param window: steps before and after the current one to accept,
            exact match only by default
        :returns: True if verification succeeded, False otherwise
        """
        return self.verify_step(otp, for_time=for_time, window=window)[0]

    def verify_step(
        self, otp: str, for_time: Optional[Timestamp] = None, window: Optional[VerificationWindow] = None
    ) -> Tuple[bool, int]:
        """
        Like verify, but also reports which time step matched.

        Persist the matched step and refuse it next time to stop the same
        code being replayed within its window.

        :returns: (True, matched step), or (False, 0) when nothing matched
        """
        initial_step = self._step(self._corrected(for_time))
        matched, step = self._verify_window(initial_step, otp, window)
        if matched:
            logger.debug("TOTP matched time step %d (expected %d)", step, initial_step)
        else:
            logger.debug("TOTP did not match around time step %d", initial_step)
        return matched, step

    def timecode(self, for_time: Timestamp) -> int:
        """
        :returns: the time step containing the corrected timestamp
        """
        return self._step(self._corrected(for_time))

    def remaining_seconds(self, for_time: Optional[Timestamp] = None) -> int:
        """
        Seconds left before the step containing for_time (defaults to now)
        rolls over. A timestamp on a step boundary has the whole interval left.
        """
        return self._interval - utils.unix_seconds(self._corrected(for_time)) % self._interval

    def window_start(self, for_time: Optional[Timestamp] = None) -> datetime.datetime:
        """
        :returns: the corrected start of the step containing for_time
            (defaults to now), as a UTC datetime
        """
        corrected = self._corrected(for_time)
        return corrected - (corrected - utils.EPOCH) % datetime.timedelta(seconds=self._interval)

    def provisioning_uri(
        self,
        secret: Union[str, bytes],
        name: Optional[str] = None,
        issuer_name: Optional[str] = None,
        image: Optional[str] = None,
    ) -> str:
        """
        Returns the provisioning URI for the OTP.  This can then be
        encoded in a QR Code and used to provision an OTP app like
        Google Authenticator.

        See also:
            https://github.com/google/google-authenticator/wiki/Key-Uri-Format

        :param secret: the key, as raw bytes or Base32 text
        :param name: name of the user account
        :param issuer_name: the name of the OTP issuer; this will be the
            organization title of the OTP entry in Authenticator
        :param image: https URL of a logo for the entry
        :returns: provisioning URI
        """
        if not isinstance(secret, str):
            secret = base32.encode(secret)
        return utils.build_uri(
            "totp",
            secret,
            name=name if name else self.name,
            algorithm=self.mode.value,
            digits=self.digits,
            issuer=issuer_name if issuer_name else self.issuer,
            period=self.interval,
            image=image,
        )

    def _corrected(self, for_time: Optional[Timestamp]) -> datetime.datetime:
        if for_time is None:
            return self._time_correction.corrected_now()
        return self._time_correction.corrected(for_time)

    def _step(self, corrected: datetime.datetime) -> int:
        return utils.unix_seconds(corrected) // self._interval
