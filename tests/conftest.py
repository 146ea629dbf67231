"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from pedigreechart.records import PersonRecord


def make_person(id, sex="U", generation=1, parents=(), **fields) -> PersonRecord:
    """Create a PersonRecord with sensible defaults for tests."""
    return PersonRecord(
        id=id,
        xref=f"I{id}",
        sex=sex,
        generation=generation,
        parents=tuple(parents),
        **fields,
    )


def monospace(text, font_family, font_size, font_weight=400) -> float:
    """Measure function giving every character a width of 10px."""
    return len(text) * 10.0


@pytest.fixture
def measure():
    """Return a deterministic text measure function."""
    return monospace


@pytest.fixture
def three_generations() -> PersonRecord:
    """Root with both parents and all four grandparents."""
    return make_person(1, "M", 1, [
        make_person(2, "M", 2, [make_person(4, "M", 3), make_person(5, "F", 3)]),
        make_person(3, "F", 2, [make_person(6, "M", 3), make_person(7, "F", 3)]),
    ])


@pytest.fixture
def sparse_tree() -> PersonRecord:
    """Root with a father only; the father's father reaches generation 4."""
    return make_person(1, "F", 1, [
        make_person(2, "M", 2, [
            make_person(3, "M", 3, [make_person(4, "M", 4)]),
        ]),
    ])


@pytest.fixture
def ancestors_json() -> dict:
    """Ancestor JSON as delivered by the data source."""
    return {
        "data": {
            "id": 1,
            "xref": "I1",
            "sex": "M",
            "generation": 1,
            "name": "Johannes Wilhelm Müller",
            "firstNames": ["Johannes", "Wilhelm"],
            "lastNames": ["Müller"],
            "preferredName": "Johannes",
            "birth": "12 MAR 1875",
            "death": "3 JAN 1950",
            "timespan": "1875–1950",
        },
        "parents": [
            {
                "data": {
                    "id": 2,
                    "xref": "I2",
                    "sex": "M",
                    "name": "Karl Müller",
                    "firstNames": ["Karl"],
                    "lastNames": ["Müller"],
                    "thumbnail": "https://example.org/thumbs/I2.jpg",
                },
                "parents": [
                    {"data": {"id": 4, "xref": "I4", "sex": "M", "name": "Friedrich Müller"}},
                ],
            },
            {
                "data": {
                    "id": 3,
                    "xref": "I3",
                    "sex": "F",
                    "name": "Anna Schmidt",
                    "firstNames": ["Anna"],
                    "lastNames": ["Schmidt"],
                },
            },
        ],
    }
