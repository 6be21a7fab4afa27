"""Shared fixtures: the sample transaction sets in input/."""

import json
import logging
from pathlib import Path

import pytest

from edi_engine.logger import LOGGER_NAME

PROJECT_ROOT = Path(__file__).parent.parent
INPUT_DIR = PROJECT_ROOT / "input"


def read_sample(name: str) -> str:
    return (INPUT_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def sample_850_text() -> str:
    return read_sample("sample_850.txt")


@pytest.fixture
def sample_855_text() -> str:
    return read_sample("sample_855.txt")


@pytest.fixture
def sample_810_text() -> str:
    return read_sample("sample_810.txt")


@pytest.fixture
def sample_850_json() -> dict:
    with open(INPUT_DIR / "sample_850.json", "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture(autouse=True)
def reset_logger():
    """Detach handlers added by setup_logger so tests do not share log files."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
