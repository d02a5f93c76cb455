from typing import Iterator

from .exceptions import InvalidConfiguration


class VerificationWindow(object):
    """
    Range of counters (or time steps) around an expected one that are
    accepted during verification, to absorb clock or counter drift.
    """

    __slots__ = ("_previous", "_future")

    def __init__(self, previous: int = 0, future: int = 0) -> None:
        """
        :param previous: number of earlier steps to accept
        :param future: number of later steps to accept
        """
        for label, value in (("previous", previous), ("future", future)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidConfiguration("{} must be an integer, got {!r}".format(label, value))
            if value < 0:
                raise InvalidConfiguration("{} must not be negative".format(label))
        self._previous = previous
        self._future = future

    @property
    def previous(self) -> int:
        return self._previous

    @property
    def future(self) -> int:
        return self._future

    def candidates(self, initial_step: int) -> Iterator[int]:
        """
        Yields the steps to try, in order: the initial step, then the earlier
        steps walking backwards, then the later ones walking forwards.

        Earlier steps stop at zero; negative steps are never yielded.
        """
        yield initial_step
        for i in range(1, self._previous + 1):
            step = initial_step - i
            if step < 0:
                break
            yield step
        for i in range(1, self._future + 1):
            yield initial_step + i

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VerificationWindow):
            return NotImplemented
        return (self._previous, self._future) == (other._previous, other._future)

    def __hash__(self) -> int:
        return hash((self._previous, self._future))

    def __repr__(self) -> str:
        return "VerificationWindow(previous={}, future={})".format(self._previous, self._future)


# One step either way, the network delay allowance recommended by RFC 6238 section 5.2
RFC_NETWORK_DELAY = VerificationWindow(previous=1, future=1)
