"""Shared pytest fixtures and configuration for the mirari test suite.

Guidelines
----------
* No real builder is ever loaded; builders are ``MagicMock`` objects.
* Builder discovery is mocked at the entry-point boundary.
* Core tests must be pure — no side effects.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest


@pytest.fixture
def builder() -> MagicMock:
    """A builder whose every operation succeeds with a recognisable value."""
    mock = MagicMock(name="builder")
    mock.load.return_value = "project"
    mock.entry_point.return_value = "main.ml"
    mock.configure.return_value = "configured"
    mock.run.return_value = "ran"
    mock.clean.return_value = "cleaned"
    return mock
