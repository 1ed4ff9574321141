"""Shared fixtures for switchyard tests."""

from collections.abc import Iterator

import pytest

from switchyard.config import HubConfig
from switchyard.events.bus import EventBus
from switchyard.hub import Hub
from switchyard.service.dispatcher import Service


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def config() -> HubConfig:
    return HubConfig(schemes=("myapp",))


@pytest.fixture
def service(config: HubConfig) -> Iterator[Service]:
    with Service(config) as svc:
        yield svc


@pytest.fixture
def bus() -> Iterator[EventBus]:
    with EventBus() as b:
        yield b


@pytest.fixture
def hub(config: HubConfig) -> Iterator[Hub]:
    with Hub(config) as h:
        yield h
