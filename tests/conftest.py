from pathlib import Path

import pytest

from table_rows.core.io.load_table import build_rows
from table_rows.core.model import Column


EXAMPLES = Path(__file__).resolve().parent.parent / "examples"


def people_records() -> list[dict]:
    return [
        {
            "name": "carol",
            "age": 40,
            "visits": 5,
            "subRows": [
                {
                    "name": "dan",
                    "age": 12,
                    "subRows": [{"name": "eve", "age": 3}, {"name": "fay", "age": 1}],
                },
                {"name": "gus", "age": 30},
                {"name": "hal", "age": 7},
            ],
        },
        {"name": "alice", "age": 25, "visits": 10, "subRows": [{"name": "zed", "age": 2}]},
        {"name": "bob", "age": 31, "visits": 10},
    ]


@pytest.fixture
def people():
    return build_rows(people_records())


@pytest.fixture
def people_columns():
    return [
        Column(id="name"),
        Column(id="age", sort_type="number"),
        Column(id="visits", sort_type="number", sort_desc_first=True),
    ]


@pytest.fixture
def examples_dir() -> Path:
    return EXAMPLES


@pytest.fixture
def records() -> list[dict]:
    return people_records()
