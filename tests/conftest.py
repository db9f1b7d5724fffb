"""Shared fixtures: environment isolation, registry reset and a logger spy."""

import logging
from typing import Any

import pytest
import structlog

from crashless.exporters import exporter_registry


class LogSpy:
    """Stands in for a structlog logger and records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def __getattr__(self, level: str):
        def record(event: str, **fields: Any) -> None:
            self.calls.append((level, event, fields))

        return record

    def events(self, name: str) -> list[dict[str, Any]]:
        return [fields for _, event, fields in self.calls if event == name]


@pytest.fixture(autouse=True)
def _isolate(monkeypatch):
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    exporter_registry.clear()
    yield
    exporter_registry.clear()


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def log_spy(monkeypatch) -> LogSpy:
    spy = LogSpy()
    monkeypatch.setattr("crashless.middleware.normalizer.logger", spy)
    monkeypatch.setattr("crashless.exporters.registry.logger", spy)
    return spy
