"""Shared fixtures: a fresh store/broadcaster/app per test and a fake connection."""

from __future__ import annotations

from typing import Any, List, Tuple

import pytest
from fastapi.testclient import TestClient

from livepoll.core.broadcaster import Broadcaster
from livepoll.core.config import Settings
from livepoll.core.connection import Connection
from livepoll.main import create_app
from livepoll.services.poll_gateway import PollGateway
from livepoll.services.poll_store import PollStore


class FakeConnection(Connection):
    """Records every queued event instead of writing to a socket."""

    def __init__(self) -> None:
        super().__init__()
        self.sent: List[Tuple[str, Any]] = []

    def send(self, event: str, data: Any) -> None:
        self.sent.append((event, data))

    def events(self) -> List[str]:
        return [event for event, _ in self.sent]


@pytest.fixture
def store() -> PollStore:
    return PollStore()


@pytest.fixture
def broadcaster(store) -> Broadcaster:
    return Broadcaster(store)


@pytest.fixture
def gateway(store, broadcaster) -> PollGateway:
    return PollGateway(store, broadcaster)


@pytest.fixture
def make_connection():
    return FakeConnection


@pytest.fixture
def pizza_poll(store):
    return store.create_poll("Pizza?", ["Yes", "No"])


@pytest.fixture
def app():
    return create_app(Settings(PORT=3001, ENV="test"))


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
