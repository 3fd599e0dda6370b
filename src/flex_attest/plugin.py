"""
pytest plugin for flex-attest.

Provides the ``tb`` fixture and fails a test whose body returned normally but
recorded recoverable (``fail_continue``) failures along the way. Registered
through the ``pytest11`` entry point, so installing the package is enough.
"""

from collections.abc import Generator

import pytest

from .runner import PytestTB

_TB_KEY = pytest.StashKey[PytestTB]()


@pytest.fixture
def tb(request: pytest.FixtureRequest) -> PytestTB:
    """A test runner handle to pass to flex-attest assertions."""
    runner = PytestTB()
    request.node.stash[_TB_KEY] = runner
    return runner


@pytest.hookimpl(wrapper=True)
def pytest_runtest_call(item: pytest.Item) -> Generator[None, None, None]:
    """Turn recorded recoverable failures into a test failure."""
    try:
        result = yield
    except BaseException:
        runner = item.stash.get(_TB_KEY, None)
        if runner is not None and runner.failures:
            item.add_report_section('call', 'flex-attest', runner.report())
        raise

    runner = item.stash.get(_TB_KEY, None)
    if runner is not None and runner.failures:
        pytest.fail(runner.report(), pytrace=False)
    return result
