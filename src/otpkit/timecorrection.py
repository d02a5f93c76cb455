import datetime
import logging
from typing import Union

from . import utils
from .utils import Timestamp

logger = logging.getLogger(__name__)


class TimeCorrection(object):
    """
    Correction factor applied to the local clock.

    Fixing the system clock is always preferable. This is for the cases where
    the client, the server or both can't be put on the correct time: build an
    instance from the time a trusted source reports and use it for every TOTP
    computation. The offset is never fetched or refreshed by the library.

    Instances are immutable and can be shared between threads.
    """

    __slots__ = ("_offset",)

    def __init__(self, offset: Union[datetime.timedelta, int, float] = datetime.timedelta(0)) -> None:
        """
        :param offset: how far the local clock is ahead of the correct time,
            as a timedelta or in seconds
        """
        if not isinstance(offset, datetime.timedelta):
            offset = datetime.timedelta(seconds=offset)
        self._offset = offset

    @classmethod
    def from_correct_time(cls, correct_utc: Timestamp) -> "TimeCorrection":
        """
        Builds a correction from the known correct current UTC time, using the
        system clock as the reference.
        """
        offset = utils.utcnow() - utils.to_datetime(correct_utc)
        logger.debug("Local clock offset from correct time: %s", offset)
        return cls(offset)

    @classmethod
    def from_correct_and_reference(cls, correct_time: Timestamp, reference_time: Timestamp) -> "TimeCorrection":
        """
        Builds a correction from the correct time and the reference time
        observed at the same instant (the clock that subsequent calls will
        correct).
        """
        offset = utils.to_datetime(reference_time) - utils.to_datetime(correct_time)
        logger.debug("Reference clock offset from correct time: %s", offset)
        return cls(offset)

    @property
    def offset(self) -> datetime.timedelta:
        return self._offset

    def corrected(self, reference_time: Timestamp) -> datetime.datetime:
        """
        :param reference_time: a time read from the reference clock
        :returns: the reference time with the correction applied, in UTC
        """
        return utils.to_datetime(reference_time) - self._offset

    def corrected_now(self) -> datetime.datetime:
        return self.corrected(utils.utcnow())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeCorrection):
            return NotImplemented
        return self._offset == other._offset

    def __hash__(self) -> int:
        return hash(self._offset)

    def __repr__(self) -> str:
        return "TimeCorrection(offset={!r})".format(self._offset)


UNCORRECTED = TimeCorrection()
