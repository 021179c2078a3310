"""Pytest configuration and fixtures."""

import logging
import time

import pytest

CONFIG_ENV_VARS = [
    "API_TRANSFORM_CHANGE_NESTING",
    "API_TRANSFORM_CHANGE_KEYS",
    "API_TRANSFORM_CAST_NUMBERS",
    "API_TRANSFORM_CHANGE_TIME",
]


@pytest.fixture(autouse=True)
def clean_config_env(monkeypatch):
    """Keep pipeline settings from the outer environment out of tests."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def utc_timezone(monkeypatch):
    """Read naive dates as UTC."""
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def est_timezone(monkeypatch):
    """Read naive dates as UTC-5 without daylight saving."""
    monkeypatch.setenv("TZ", "EST5")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def post_record():
    """Single ORM-shaped result record."""
    return {
        "Post": {
            "id": "1",
            "created": "2021-01-01",
            "title": "Hi",
        },
        "Comment": [
            {"id": "2", "body": "x"},
        ],
    }


@pytest.fixture
def post_records():
    """List of result records with nested associations."""
    return [
        {
            "Post": {"id": "1", "title": "First", "rating": "4.5"},
            "Author": {"id": "10", "name": "Ada", "Profile": {"bio": "hello"}},
            "Comment": [
                {"id": "100", "body": "nice", "User": {"id": "7", "name": "Bob"}},
                {"id": "101", "body": "meh", "User": {"id": "8", "name": "Eve"}},
            ],
            "Tag": [],
        },
        {
            "Post": {"id": "2", "title": "Second", "rating": "3"},
            "Author": {"id": "11", "name": "Grace", "Profile": {"bio": "hi"}},
            "Comment": [],
            "Tag": [{"id": "5", "name": "python"}],
        },
    ]


class RecordingInflector:
    """Deterministic inflector for tests that do not depend on English rules."""

    def __init__(self):
        self.calls = []

    def tableize(self, name):
        self.calls.append(("tableize", name))
        return f"{name.lower()}_table"

    def singularize(self, name):
        self.calls.append(("singularize", name))
        return f"{name}_one"


@pytest.fixture
def stub_inflector():
    """Inflector recording its calls."""
    return RecordingInflector()


@pytest.fixture
def restore_root_logging():
    """Undo setup_logging() changes made by CLI runs."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
