from __future__ import annotations

import pytest

from otpkit import RFC_NETWORK_DELAY, InvalidConfiguration, VerificationWindow


@pytest.mark.parametrize(
    "window, initial_step, expected",
    [
        (VerificationWindow(), 5, [5]),
        (VerificationWindow(previous=1), 5, [5, 4]),
        (VerificationWindow(previous=1), 0, [0]),
        (VerificationWindow(future=2), 0, [0, 1, 2]),
        (VerificationWindow(previous=3, future=1), 1, [1, 0, 2]),
        (VerificationWindow(previous=2, future=2), 10, [10, 9, 8, 11, 12]),
        (RFC_NETWORK_DELAY, 7, [7, 6, 8]),
    ],
)
def test_candidates(window: VerificationWindow, initial_step: int, expected: list) -> None:
    assert list(window.candidates(initial_step)) == expected


def test_defaults_accept_exact_match_only() -> None:
    window = VerificationWindow()
    assert (window.previous, window.future) == (0, 0)


def test_rfc_network_delay() -> None:
    assert RFC_NETWORK_DELAY == VerificationWindow(previous=1, future=1)


@pytest.mark.parametrize("previous, future", [(-1, 0), (0, -1), (1.5, 0), (0, 2.0), (True, 0), ("1", 0), (None, 0)])
def test_invalid_bounds_fail(previous: object, future: object) -> None:
    with pytest.raises(InvalidConfiguration):
        VerificationWindow(previous=previous, future=future)  # type: ignore[arg-type]


def test_window_is_immutable() -> None:
    window = VerificationWindow(1, 1)
    with pytest.raises(AttributeError):
        window.previous = 2  # type: ignore[misc]
    with pytest.raises(AttributeError):
        window.extra = 1  # type: ignore[attr-defined]
