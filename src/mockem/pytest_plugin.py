"""
Pytest plugin which runs each test in its own mock scope, so that mocks added
by one test never leak into another one, even when the test fails.
"""

from __future__ import annotations

import logging
from typing import Iterator

import pytest

from mockem.config import Config, find_config_file, load_config
from mockem.registry import MockRegistry
from mockem.scope import current_registry, mock_scope
from mockem.utils import ConfigError


_config_key = pytest.StashKey[Config]()


def pytest_configure(config: pytest.Config) -> None:
    try:
        mockem_config = load_config(find_config_file(config.rootpath))
    except ConfigError as e:
        raise pytest.UsageError(str(e))

    config.stash[_config_key] = mockem_config


def _get_config(request: pytest.FixtureRequest) -> Config:
    return request.config.stash.get(_config_key, Config())


@pytest.fixture(autouse=True)
def _mockem_scope(request: pytest.FixtureRequest) -> Iterator[None]:
    config = _get_config(request)

    if not config.isolate_tests:
        yield
        return

    with mock_scope() as registry:
        yield

        if config.warn_unconsumed:
            for identity, count in registry.unused().items():
                logging.warning(
                    f'{request.node.nodeid}: {count} unused mock(s) left '
                    f'for {identity}')


@pytest.fixture
def mock_registry() -> MockRegistry:
    """
    The mock registry of the running test.
    """
    return current_registry()
