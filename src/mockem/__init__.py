from mockem.controls import clear_mocks, identity_of, mock_continue, \
    mock_once, mock_repeat, mock_ret
from mockem.mock import is_mockable, mock
from mockem.registry import FunctionIdentity, MockEntry, MockRegistry, Once, \
    Repeat, Substituted, Unlimited, Uses
from mockem.scope import clear_all_mocks, current_registry, mock_scope
from mockem.utils import ConfigError, MockemError, NotMockableError


__all__ = [
    'ConfigError',
    'FunctionIdentity',
    'MockEntry',
    'MockRegistry',
    'MockemError',
    'NotMockableError',
    'Once',
    'Repeat',
    'Substituted',
    'Unlimited',
    'Uses',
    'clear_all_mocks',
    'clear_mocks',
    'current_registry',
    'identity_of',
    'is_mockable',
    'mock',
    'mock_continue',
    'mock_once',
    'mock_repeat',
    'mock_ret',
    'mock_scope']
