from __future__ import annotations

import datetime

import pytest

from otpkit import utils

FIXED_NOW = datetime.datetime(2024, 5, 1, 12, 0, 0, tzinfo=datetime.timezone.utc)


@pytest.fixture
def sha1_secret() -> bytes:
    # RFC 4226 appendix D
    return b"12345678901234567890"


@pytest.fixture
def frozen_now(monkeypatch: pytest.MonkeyPatch) -> datetime.datetime:
    monkeypatch.setattr(utils, "utcnow", lambda: FIXED_NOW)
    return FIXED_NOW
