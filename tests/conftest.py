"""Test configuration for package."""
import pytest

pytest_plugins = ["pytester"]


class MockTB:
    """
    Recording test runner.

    Unlike a real runner, ``fatal`` returns after recording so that tests can
    inspect what was reported.
    """

    def __init__(self):
        self.fatal_called = False
        self.out = ""
        self.calls = 0
        self.helpers = 0

    def helper(self) -> None:
        self.helpers += 1

    def error(self, text: str) -> None:
        self.calls += 1
        self.fatal_called = False
        self.out = text

    def fatal(self, text: str) -> None:
        self.calls += 1
        self.fatal_called = True
        self.out = text

    def assert_error(self) -> None:
        assert self.out, "expected failure"
        assert not self.fatal_called, "expected error, got fatal"
        self.clear()

    def assert_fatal(self) -> None:
        assert self.out, "expected failure"
        assert self.fatal_called, "expected fatal, got error"
        self.clear()

    def clear(self) -> None:
        self.fatal_called = False
        self.out = ""
        self.calls = 0


@pytest.fixture
def mock_tb() -> MockTB:
    """A recording runner that never aborts."""
    return MockTB()
