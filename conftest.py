"""Expose shared fixtures from tests/conftest.py to the root-level test modules."""

from tests.conftest import sample_players, ten_players  # noqa: F401
