"""Shared fixtures for region_settings tests."""

from __future__ import annotations

import logging

import pytest

from region_settings.formats import FormatPatternSource
from region_settings.log import ROOT_LOGGER


class FakePatternSource(FormatPatternSource):
    """Deterministic pattern source that echoes its inputs."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, object]] = []

    def date_pattern(self, locale_id: str, tier: str) -> str:
        self.calls.append(("date", locale_id, tier))
        return f"date:{locale_id}:{tier}"

    def time_pattern(self, locale_id: str, tier: str) -> str:
        self.calls.append(("time", locale_id, tier))
        return f"time:{locale_id}:{tier}"

    def number_sample(self, locale_id: str, fraction_digits: int) -> str:
        self.calls.append(("number", locale_id, fraction_digits))
        return "1,111,111" if fraction_digits == 0 else "1,111,111.11"


@pytest.fixture
def fake_patterns() -> FakePatternSource:
    return FakePatternSource()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo configure_logging() so handlers never outlive a test."""
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
