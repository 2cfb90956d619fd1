"""Shared fixtures: default engine config and the sample lobby/result texts."""

import pytest

from bgmi_stats.config import EngineConfig


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def lobby_text() -> str:
    return "05\nAlpha /0 Eliminations\nBravo /0 Eliminations"


@pytest.fixture
def result_text() -> str:
    return "1\nAlpha 3 finishes\nBravo 2 finishes"
