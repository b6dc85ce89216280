"""Shared pytest fixtures for shuntexpr tests."""

from __future__ import annotations

from typing import Any

import pytest


def _factorial(n: float) -> float:
    return n if n <= 1 else n * _factorial(n - 1)


@pytest.fixture
def custom_functions() -> dict[str, dict[str, Any]]:
    """Caller-supplied functions in plain mapping form."""
    return {
        "fact": {"arity": 1, "call": _factorial},
        "add5": {"arity": 1, "call": lambda a: a + 5},
        "multiply3": {"arity": 3, "call": lambda a, b, c: a * b * c},
    }
