from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, ContextManager, Iterator

import pytest
from pytest import MonkeyPatch

from mockem.config import enabled_environment_variable
from mockem.registry import FunctionIdentity


pytest_plugins = ['pytester']


def make_identity(name: str) -> FunctionIdentity:
    return FunctionIdentity('tests', name)


@pytest.fixture
def identity() -> FunctionIdentity:
    return make_identity('foo')


@pytest.fixture
def config_file(tmp_path: Path) -> Callable[[str], Path]:
    def config_file_fixture(content: str, name: str = 'mockem.toml') -> Path:
        path = tmp_path / name
        path.write_text(content)

        return path

    return config_file_fixture


@pytest.fixture
def set_enabled(monkeypatch: MonkeyPatch) -> Callable[[str | None], None]:
    def set_enabled_fixture(value: str | None) -> None:
        if value is None:
            monkeypatch.delenv(enabled_environment_variable, raising=False)
        else:
            monkeypatch.setenv(enabled_environment_variable, value)

    return set_enabled_fixture


@pytest.fixture
def expect_log_message(
        caplog: pytest.LogCaptureFixture) \
        -> Callable[[str], ContextManager[None]]:
    @contextmanager
    def expect_log_message_context(message_pattern: str) -> Iterator[None]:
        with caplog.at_level(logging.DEBUG):
            yield

        output = caplog.text

        assert re.search(message_pattern, output), \
               f'Log did not contain the expected pattern "{message_pattern}":\n' \
               f'\n' \
               f'{output}'

    return expect_log_message_context
