"""Shared pytest fixtures for the comparison engine tests."""
import pytest

from diffcore import ComparisonOptions, ComparisonSession


@pytest.fixture
def session():
    """A fresh session with empty caches."""
    return ComparisonSession()


@pytest.fixture
def move_options():
    """Key-based array handling on the ``id`` field."""
    return ComparisonOptions(detect_array_moves=True, array_key_field="id")


@pytest.fixture
def service_config():
    return "\n".join([
        "server:",
        "  host: localhost",
        "  port: 8080",
        "  timeout: 30",
        "  retries: 3",
        "logging:",
        "  level: info",
    ])
