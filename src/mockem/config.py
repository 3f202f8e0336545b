from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import dacite
import toml

from mockem.utils import ConfigError


enabled_environment_variable = 'MOCKEM_ENABLED'

_true_values = {'1', 'true', 'yes', 'on'}
_false_values = {'0', 'false', 'no', 'off'}


@dataclass
class Config:
    isolate_tests: bool = True
    warn_unconsumed: bool = False


def parse_enabled(value: str) -> bool:
    normalized = value.strip().lower()

    if normalized in _true_values:
        return True

    if normalized in _false_values:
        return False

    raise ConfigError(
        f'Invalid value `{value}\' for {enabled_environment_variable}, '
        f'expected one of {", ".join(sorted(_true_values | _false_values))}.')


def mocking_enabled() -> bool:
    """
    Whether `@mock` should make functions mockable. Unless overridden through
    the environment, this is only the case while running under pytest.
    """
    value = os.environ.get(enabled_environment_variable)

    if value is None:
        return 'pytest' in sys.modules

    return parse_enabled(value)


def find_config_file(root: Path) -> Path | None:
    for name in ['mockem.toml', 'pyproject.toml']:
        path = root / name

        if path.is_file():
            return path

    return None


def _validate_config(config: Config, config_path: Path) -> None:
    def check(condition: object, message: str) -> None:
        if not condition:
            raise ConfigError(f'Error in config file `{config_path}\': {message}')

    check(config.isolate_tests or not config.warn_unconsumed,
          'Key `warn_unconsumed\' requires that `isolate_tests\' is set to '
          'true.')


_dacite_config = dacite.Config(strict=True)


def _get_table(data: dict[str, Any], path: Path) -> dict[str, Any]:
    if path.name != 'pyproject.toml':
        return data

    table = data.get('tool', {}).get('mockem', {})

    if not isinstance(table, dict):
        raise ConfigError(
            f'Error in config file `{path}\': `tool.mockem\' must be a table.')

    return table


def load_config(path: Path | None) -> Config:
    if path is None:
        return Config()

    try:
        config = dacite.from_dict(
            Config, _get_table(toml.load(path), path), _dacite_config)
    except (FileNotFoundError, toml.TomlDecodeError, dacite.DaciteError) as e:
        raise ConfigError(f'Error loading config file `{path}\': {e}')

    _validate_config(config, path)

    return config
