from __future__ import annotations

import datetime
import logging

import pytest

from otpkit import UNCORRECTED, TimeCorrection

UTC = datetime.timezone.utc


def test_uncorrected_leaves_time_alone() -> None:
    moment = datetime.datetime(2024, 1, 1, tzinfo=UTC)
    assert UNCORRECTED.offset == datetime.timedelta(0)
    assert UNCORRECTED.corrected(moment) == moment


def test_from_correct_and_reference() -> None:
    correct = datetime.datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
    reference = datetime.datetime(2024, 1, 1, 12, 5, tzinfo=UTC)

    correction = TimeCorrection.from_correct_and_reference(correct, reference)

    assert correction.offset == datetime.timedelta(minutes=5)
    assert correction.corrected(reference) == correct
    assert correction.corrected(reference + datetime.timedelta(hours=1)) == correct + datetime.timedelta(hours=1)


def test_from_correct_time_uses_the_system_clock(frozen_now: datetime.datetime) -> None:
    correction = TimeCorrection.from_correct_time(frozen_now + datetime.timedelta(seconds=90))

    assert correction.offset == datetime.timedelta(seconds=-90)
    assert correction.corrected_now() == frozen_now + datetime.timedelta(seconds=90)


def test_unix_timestamps_are_accepted() -> None:
    correction = TimeCorrection.from_correct_and_reference(100, 160)
    assert correction.offset == datetime.timedelta(seconds=60)
    assert correction.corrected(160) == datetime.datetime(1970, 1, 1, 0, 1, 40, tzinfo=UTC)


def test_offset_in_seconds() -> None:
    assert TimeCorrection(30) == TimeCorrection(datetime.timedelta(seconds=30))
    assert TimeCorrection(-2.5).offset == datetime.timedelta(seconds=-2.5)


def test_is_immutable() -> None:
    correction = TimeCorrection(30)
    with pytest.raises(AttributeError):
        correction.offset = datetime.timedelta(0)  # type: ignore[misc]


def test_offset_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="otpkit"):
        TimeCorrection.from_correct_and_reference(100, 160)
    assert "0:01:00" in caplog.text
