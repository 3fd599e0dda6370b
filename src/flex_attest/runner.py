"""
Test runner interface and its pytest implementation.

Assertions only need three things from a runner: a way to mark helper frames,
a way to record a failure and carry on, and a way to record a failure and stop
the test.
"""

import os
import sys
from types import CodeType, FrameType
from typing import NoReturn, Protocol, runtime_checkable

import pytest


@runtime_checkable
class TB(Protocol):
    """The subset of a test runner that assertions depend on."""

    def helper(self) -> None:
        """Mark the calling function as a helper, hidden from failure locations."""
        ...

    def error(self, text: str) -> None:
        """Record a failure and let the test continue."""
        ...

    def fatal(self, text: str) -> NoReturn:
        """Record a failure and stop the current test. Must not return."""
        ...


class PytestTB:
    """
    ``TB`` implementation for pytest.

    Fatal failures raise ``pytest.fail``. pytest's ``Failed`` derives from
    ``BaseException``, so ``except Exception`` blocks in test code don't catch
    it. Recoverable failures are collected and turned into a single test
    failure by the flex-attest pytest plugin once the test body returns.

    Use the ``tb`` fixture rather than constructing this directly; the fixture
    wires the instance into the plugin.
    """

    def __init__(self):
        self.failures: list[str] = []
        self._helpers: set[CodeType] = set()

    def helper(self) -> None:  # noqa: D102
        self._helpers.add(sys._getframe(1).f_code)

    def error(self, text: str) -> None:  # noqa: D102
        self.failures.append(self._located(text, sys._getframe(1)))

    def fatal(self, text: str) -> NoReturn:  # noqa: D102
        __tracebackhide__ = True
        failures = [*self.failures, self._located(text, sys._getframe(1))]
        self.failures.clear()
        pytest.fail(_join(failures), pytrace=False)

    def report(self) -> str:
        """Return all recorded recoverable failures as one message."""
        return _join(self.failures)

    def _located(self, text: str, frame: FrameType | None) -> str:
        while frame is not None and frame.f_code in self._helpers:
            frame = frame.f_back
        if frame is None:
            return text
        filename = os.path.basename(frame.f_code.co_filename)
        return f'{filename}:{frame.f_lineno}: {text}'


def _join(failures: list[str]) -> str:
    return '\n\n'.join(failures)
