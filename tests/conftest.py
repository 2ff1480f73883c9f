"""Shared test fixtures for yamlshape."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from yamlshape.parser.cursor import EventCursor
from yamlshape.settings import Settings, get_settings
from yamlshape.shapes.describe import ShapeRegistry


@pytest.fixture(autouse=True)
def _fresh_state() -> None:
    """Each test starts with empty caches."""
    ShapeRegistry.reset()
    get_settings.cache_clear()


@pytest.fixture
def tight_settings() -> Settings:
    """Small limits so the safety checks trigger on short inputs."""
    return Settings(max_document_size=64, max_depth=3)


@pytest.fixture
def open_cursor() -> Callable[[str], EventCursor]:
    """Factory: a cursor positioned just inside the first document."""

    def _open(text: str) -> EventCursor:
        cursor = EventCursor.from_string(text)
        cursor.expect_stream_start("test")
        cursor.expect_document_start("test")
        return cursor

    return _open


ADDRESSES_YAML = """\
- street: Kerkstraat
  state: Noord Holland
- street: Main Street
  state: New York
"""

PERSON_YAML = """\
name: Ann
home:
  street: Kerkstraat
  state: Noord Holland
age: 30
nickname: null
"""

VALUE_A_YAML = """\
ValueA:
  id: foo
  method: bar
"""

INVENTORY_YAML = """\
name: warehouse
enabled: yes
ratio: 0.25
addresses:
  - street: Kerkstraat
    state: Noord Holland
  - street: Main Street
    state: New York
primary:
messages:
  - ValueA:
      id: foo
      method: bar
  - ValueB
  - Count: 5
  - Point:
      - 1
      - -2
labels:
  env: prod
  tier: gold
shape:
  radius: 1.5
  type: Circle
counts:
  - 3
  - -4
initial: x
servers:
  - host: db
    port: 5432
    displayName: Primary
"""
