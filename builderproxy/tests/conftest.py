"""
Shared fixtures for builderproxy tests.

Contracts and products live in ``builderproxy.tests.pizzas``.
"""
from __future__ import annotations

import pytest

from builderproxy.tests.pizzas import CallRecorder


@pytest.fixture
def recorder() -> CallRecorder:
    return CallRecorder()


@pytest.fixture
def failing_recorder() -> CallRecorder:
    return CallRecorder(error=RuntimeError("oven is cold"))
