import asyncio
import inspect

import pytest

from mockem import mock


events = []


@mock
async def foo() -> str:
    events.append('foo started')
    await asyncio.sleep(0)

    return 'foo'


@mock
async def echo(value: str) -> str:
    await asyncio.sleep(0)

    return value


@mock
class Foo:
    async def foo(self) -> str:
        return 'foo'

    def sync(self) -> str:
        return 'sync'


class Baz:
    async def baz(self) -> str:
        return 'baz'


@mock
class Impl(Baz):
    async def baz(self) -> str:
        return 'impl baz'


async def bar() -> str:
    return f'Hello, {await foo()}!'


@pytest.fixture(autouse=True)
def reset_events():
    events.clear()


def test_wrapper_is_a_coroutine_function():
    assert inspect.iscoroutinefunction(foo)
    assert inspect.iscoroutinefunction(Foo.foo)
    assert not inspect.iscoroutinefunction(Foo.sync)


@pytest.mark.asyncio
async def test_mock_ret():
    foo.mock_ret('mockem')

    assert await bar() == 'Hello, mockem!'
    assert await bar() == 'Hello, foo!'
    assert events == ['foo started']


@pytest.mark.asyncio
async def test_mock_repeat_with_arguments():
    echo.mock_repeat(None, lambda value: f'mocked {value}')

    assert await echo('bar') == 'mocked bar'
    assert await echo('foo') == 'mocked foo'

    echo.clear_mocks()

    assert await echo('baz') == 'baz'


@pytest.mark.asyncio
async def test_mocked_call_does_not_suspend():
    foo.mock_ret('mockem')

    coroutine = foo()

    with pytest.raises(StopIteration) as exc_info:
        coroutine.send(None)

    assert exc_info.value.value == 'mockem'


@pytest.mark.asyncio
async def test_mock_is_consumed_at_call_time():
    foo.mock_ret('first')
    foo.mock_ret('second')

    first = foo()
    second = foo()

    # Awaited in the opposite order from the calls.
    assert await second == 'second'
    assert await first == 'first'


@pytest.mark.asyncio
async def test_real_body_runs_when_not_mocked():
    foo.mock_continue()

    assert await foo() == 'foo'
    assert events == ['foo started']


@pytest.mark.asyncio
async def test_behavior_error_raised_when_awaited():
    def fail():
        raise TimeoutError('simulated')

    foo.mock_once(fail)

    coroutine = foo()

    with pytest.raises(TimeoutError, match='simulated'):
        await coroutine

    assert await foo() == 'foo'


@pytest.mark.asyncio
async def test_async_method():
    Foo.foo.mock_once(lambda self: 'mockem')

    assert await Foo().foo() == 'mockem'
    assert await Foo().foo() == 'foo'


@pytest.mark.asyncio
async def test_async_override():
    Impl.baz.mock_once(lambda self: 'mockem')

    assert await Baz().baz() == 'baz'
    assert await Impl().baz() == 'mockem'
    assert await Impl().baz() == 'impl baz'


@pytest.mark.asyncio
async def test_mocks_visible_in_child_tasks():
    echo.mock_repeat(2, lambda value: value.upper())

    results = await asyncio.gather(echo('a'), echo('b'), echo('c'))

    assert results == ['A', 'B', 'c']
