"""End-to-end: decode, encode and decode again through files and strings."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from tests.conftest import ADDRESSES_YAML, INVENTORY_YAML, PERSON_YAML, VALUE_A_YAML
from tests.samples import (
    Address,
    Circle,
    Color,
    Count,
    Empty,
    Figure,
    Inventory,
    Message,
    Person,
    Point,
    Server,
    Square,
    ValueA,
    ValueB,
)
from yamlshape import decode, decode_file, encode, encode_file, f32, i8, u64


class TestInventoryDocument:
    def test_decode(self) -> None:
        inventory = decode(INVENTORY_YAML, Inventory)
        assert inventory.name == "warehouse"
        assert inventory.enabled is True
        assert inventory.ratio == 0.25
        assert inventory.primary is None
        assert inventory.addresses[1] == Address(street="Main Street", state="New York")
        assert inventory.messages == [
            ValueA(id="foo", method="bar"),
            ValueB(),
            Count(5),
            Point(1, -2),
        ]
        assert inventory.labels == {"env": "prod", "tier": "gold"}
        assert inventory.shape == Circle(radius=1.5)
        assert inventory.counts == (3, -4)
        assert inventory.initial == "x"
        assert inventory.servers == [Server(host="db", port=5432, displayName="Primary")]

    def test_round_trip(self) -> None:
        inventory = decode(INVENTORY_YAML, Inventory)
        text = encode(inventory)
        assert decode(text, Inventory) == inventory

    def test_encoding_is_stable(self) -> None:
        first = encode(decode(INVENTORY_YAML, Inventory))
        second = encode(decode(first, Inventory))
        assert first == second

    def test_canonical_layout(self) -> None:
        text = encode(decode(INVENTORY_YAML, Inventory))
        assert "enabled: true\n" in text
        assert "primary: null\n" in text
        assert "shape:\n  type: Circle\n  radius: 1.5\n" in text
        assert "  - Point:\n      - 1\n      - -2\n" in text


class TestFixtureDocuments:
    @pytest.mark.parametrize(
        "text,target",
        [
            (ADDRESSES_YAML, list[Address]),
            (PERSON_YAML, Person),
            (VALUE_A_YAML, Message),
        ],
    )
    def test_byte_identical(self, text: str, target: Any) -> None:
        assert encode(decode(text, target), target) == text


class TestValueRoundTrip:
    @pytest.mark.parametrize(
        "value,target",
        [
            (True, bool),
            (None, None),
            (-128, i8),
            (2**64 - 1, u64),
            (0.1, float),
            (1e-7, float),
            (3.5, f32),
            ("plain text", str),
            (Color.RED, Color),
            ([1, 2, 3], list[int]),
            ([[], [1]], list[list[int]]),
            ({"a": {"b": "c"}}, dict[str, dict[str, str]]),
            ({}, dict[str, int]),
            ((1, "x", False), tuple[int, str, bool]),
            ([None, 4], list[int | None]),
            (Point(-1, 2), Point),
            (ValueB(), Message),
            (Count(0), Message),
            ([Square(2.0, True), Empty(), Circle(0.5)], list[Figure]),
            ({"k": Count(1)}, dict[str, Message]),
        ],
    )
    def test_round_trip(self, value: Any, target: Any) -> None:
        assert decode(encode(value, target), target) == value


class TestFiles:
    def test_file_round_trip(self, tmp_path: Path) -> None:
        inventory = decode(INVENTORY_YAML, Inventory)
        path = tmp_path / "inventory.yaml"
        encode_file(path, inventory)
        assert decode_file(path, Inventory) == inventory
