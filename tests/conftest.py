"""Shared test fixtures."""


import pytest

from rowscout.config import Settings


@pytest.fixture
def graphql_payload():
    """Return a GraphQL-style data payload with a table and a meta block."""
    return {
        "data": {
            "users": [
                {"id": 1, "name": "Ana", "address": {"city": "Lisbon", "zip": "1000"}},
                {"id": 2, "name": "Ben", "address": {"city": "Porto", "zip": "4000"}},
            ],
            "meta": {"total": 2, "pages": [{"n": 1}, {"n": 2}, {"n": 3}]},
        }
    }


@pytest.fixture
def connection_payload():
    """Return a relay-style connection with edges nested under a viewer."""
    return {
        "viewer": {
            "login": "octo",
            "repositories": {
                "totalCount": 3,
                "edges": [
                    {"node": {"name": "alpha", "stars": 10}},
                    {"node": {"name": "beta", "stars": 3}},
                    {"node": {"name": "gamma", "stars": 7}},
                ],
            },
        }
    }


@pytest.fixture
def sample_rows():
    """Return flat and nested rows with awkward values."""
    return [
        {"name": "John, Doe", "bio": 'He said "Hello"'},
        {"name": "Jane\nDoe", "bio": "Line 1\nLine 2"},
    ]


@pytest.fixture
def settings(tmp_path):
    """Return default Settings writing into a temp directory."""
    return Settings(output={"directory": str(tmp_path)})


@pytest.fixture
def tmp_output(tmp_path):
    """Return a temp directory for output files."""
    out = tmp_path / "output"
    out.mkdir()
    return out
