"""
Per-assertion session.

Every assertion builds one ``Session``, applies its options, compares values,
writes diagnostic lines with ``printf`` and finally calls ``conclude``. The
session reports through the test runner at most once, and only on failure.
"""

import logging
from typing import Any

from .comparator import Refusal, deep_diff, deep_equal
from .constants import PRIVATE_FIELD_PREFIX, FailureMode
from .exceptions import ConfigurationError
from .options import Option
from .policy import ComparisonPolicy
from .runner import TB

logger = logging.getLogger(__name__)


class Session:
    """
    State for a single assertion call.

    Never share a session between assertions; create it at the start of the
    call and let it go once ``conclude`` returns.
    """

    def __init__(self, tb: TB, *opts: Option):
        tb.helper()
        self.tb = tb
        self.failure_mode = FailureMode.FATAL
        self.message = ''
        self.policy = ComparisonPolicy()
        self._buffer = ''
        for opt in opts:
            if not isinstance(opt, Option):
                raise ConfigurationError(f"expected an Option, got: {type(opt).__name__}")
            opt.apply(self)

    def compare(self, got: Any, want: Any) -> tuple[bool, bool]:  # noqa: ANN401
        """
        Return ``(equal, recovered)``.

        ``recovered`` is False when the comparator gave up. The reason has
        already been written to the buffer, so the caller should conclude
        without further checks.
        """
        result = deep_equal(got, want, self.policy)
        if isinstance(result, Refusal):
            self._report_refusal(result)
            return False, False
        return result, True

    def diff(self, got: Any, want: Any) -> tuple[str, bool]:  # noqa: ANN401
        """
        Return ``(diff, recovered)``; an empty diff means the values are equal.

        Same recovery contract as ``compare``.
        """
        result = deep_diff(want, got, self.policy)
        if isinstance(result, Refusal):
            self._report_refusal(result)
            return '', False
        return result, True

    def printf(self, template: str, *args: Any) -> None:  # noqa: ANN401
        """
        Write one diagnostic line.

        The user message is appended to the first line only.
        """
        line = template % args if args else template
        if self._buffer:
            self._buffer += '\n'
        elif self.message:
            line += ': ' + self.message
        self._buffer += line

    def conclude(self) -> bool:
        """
        Report the buffered diagnostics, if any, and return whether the assertion passed.

        In FATAL mode a failure goes through ``tb.fatal``, which does not
        return; in CONTINUE mode it goes through ``tb.error``.
        """
        self.tb.helper()
        if not self._buffer:
            return True
        logger.debug("assertion failed (%s): %s", self.failure_mode, self._buffer.split('\n', 1)[0])
        if self.failure_mode is FailureMode.FATAL:
            self.tb.fatal(self._buffer)
        else:
            self.tb.error(self._buffer)
        return False

    def _report_refusal(self, refusal: Refusal) -> None:
        # the structural cause matters more than the caller's annotation
        self.message = ''
        path, sep, _ = refusal.message.removeprefix(PRIVATE_FIELD_PREFIX).rpartition(': ')
        if not refusal.message.startswith(PRIVATE_FIELD_PREFIX) or not sep:
            self.printf('comparator failed: %s', refusal.message)
            return
        self.printf('found private field %s', path)
        self.printf('If you control the type, define __eq__ on it. Otherwise,')
        self.printf('  - use flex_attest.allow_private or flex_attest.comparer,')
        self.printf('  - use flex_attest.extend_policy with ExcludePaths, or')
        self.printf('  - use another comparator customization or transform for the type.')
