"""
Pytest configuration for rate card integrity tests.

RATECARD_* variables are cleared at import time so that configuration
defaults apply during collection and in every test.
"""

import os

for _name in [name for name in os.environ if name.startswith("RATECARD_")]:
    del os.environ[_name]

import pytest

from ratecard.app.config import get_config
from ratecard.app.services.key_manager import export_pem, generate_key_pair


@pytest.fixture(autouse=True)
def reset_config():
    """Reload configuration for each test so monkeypatched env vars take effect."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def sample_document():
    """Minimal rate card document."""
    return {
        "name": "Test",
        "schema_version": "1.0.0",
        "version": "1.0",
        "date": "2026-01-12",
        "cards": {
            "default": {
                "name": "Default",
                "type": "termination",
                "currency": "USD",
                "endpoint": "default",
            }
        },
    }


@pytest.fixture(scope="session")
def key_pairs():
    """
    Key pairs per algorithm, generated once per session.

    RSA generation is slow, so tests share keys where the test does not
    depend on fresh ones.
    """
    cache = {}

    def get(algorithm):
        if algorithm not in cache:
            cache[algorithm] = generate_key_pair(algorithm)
        return cache[algorithm]

    return get


@pytest.fixture(scope="session")
def pem_key_pairs(key_pairs):
    """PEM exports of the session key pairs."""
    cache = {}

    def get(algorithm):
        if algorithm not in cache:
            cache[algorithm] = export_pem(key_pairs(algorithm))
        return cache[algorithm]

    return get
