"""
Pytest configuration and fixtures for priority class policy tests.

This module provides shared fixtures used across unit and integration tests.
"""

import json
import logging
import tempfile
from pathlib import Path
from typing import Any, Callable, Generator

import pytest

from priority_class_policy.logs import POLICY_NAME, PolicyLoggerAdapter


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def logger() -> PolicyLoggerAdapter:
    """A logger handle without handlers; records reach caplog by propagation."""
    return PolicyLoggerAdapter(
        logging.getLogger("priority_class_policy.tests"),
        {"policy": POLICY_NAME},
    )


@pytest.fixture
def allowed_settings_yaml() -> str:
    """Return settings YAML with an allow list."""
    return """
allowed_priority_classes:
  - high-priority
  - low-priority
"""


@pytest.fixture
def denied_settings_yaml() -> str:
    """Return settings YAML with a deny list."""
    return """
denied_priority_classes:
  - high-priority
  - low-priority
"""


@pytest.fixture
def make_pod() -> Callable[..., dict[str, Any]]:
    """Build a Pod object, optionally with a priority class."""

    def _make_pod(priority_class_name: str | None = None) -> dict[str, Any]:
        spec: dict[str, Any] = {
            "containers": [{"name": "nginx", "image": "nginx:latest"}],
        }
        if priority_class_name is not None:
            spec["priorityClassName"] = priority_class_name
        return {
            "apiVersion": "v1",
            "kind": "Pod",
            "metadata": {"name": "nginx", "namespace": "default"},
            "spec": spec,
        }

    return _make_pod


@pytest.fixture
def make_payload() -> Callable[..., str]:
    """Build a validate payload around an object and settings."""

    def _make_payload(obj: Any, settings: dict[str, Any] | None = None) -> str:
        return json.dumps({
            "request": {
                "uid": "705ab4f5-6393-11e8-b7cc-42010a800002",
                "operation": "CREATE",
                "object": obj,
            },
            "settings": settings or {},
        })

    return _make_payload
