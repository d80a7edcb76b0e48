"""Shared fixtures for the test suite."""

from __future__ import annotations

from collections.abc import Callable
from xml.etree import ElementTree as ET

import pytest


@pytest.fixture
def parse() -> Callable[[str], ET.Element]:
    """Parse an indented XML sample, ignoring layout whitespace."""

    def _parse(text: str) -> ET.Element:
        return ET.fromstring("".join(line.strip() for line in text.splitlines()))

    return _parse
