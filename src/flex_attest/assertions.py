"""
Assertion functions.

Every assertion takes a test runner handle, its operands and any number of
options, and returns whether it passed. Failures stop the test by default;
pass ``fail_continue()`` to keep going and branch on the return value instead.

    def test_point(tb):
        equal(tb, make_point(), Point(1, 2), comparer(points_equal, for_type=Point))
"""

import math
from collections.abc import Callable, Iterable
from typing import Any

from .options import Option
from .runner import TB
from .session import Session


def equal(tb: TB, got: Any, want: Any, *opts: Option) -> bool:  # noqa: ANN401
    """Assert that two values are equal."""
    tb.helper()
    session = Session(tb, *opts)
    diff, recovered = session.diff(got, want)
    if not recovered:
        return session.conclude()
    if diff == '':
        return True
    session.printf('got != want')
    session.printf('diff (want -> got):')
    session.printf(diff)
    return session.conclude()


def not_equal(tb: TB, got: Any, want: Any, *opts: Option) -> bool:  # noqa: ANN401
    """Assert that two values are not equal."""
    tb.helper()
    session = Session(tb, *opts)
    same, recovered = session.compare(got, want)
    if not recovered:
        return session.conclude()
    if not same:
        return True
    session.printf('got == want')
    session.printf('got: %r', got)
    return session.conclude()


def ok(tb: TB, err: BaseException | None, *opts: Option) -> bool:
    """Assert that there is no error."""
    tb.helper()
    if err is None:
        return True
    session = Session(tb, *opts)
    session.printf('unexpected error')
    session.printf('error: %s', err)
    session.printf('type: %s', type(err).__qualname__)
    return session.conclude()


def error(tb: TB, err: BaseException | None, *opts: Option) -> bool:
    """Assert that there is an error."""
    tb.helper()
    if err is not None:
        return True
    session = Session(tb, *opts)
    session.printf('unexpected success')
    return session.conclude()


def error_is(
        tb: TB,
        got: BaseException | None,
        want: BaseException | type[BaseException],
        *opts: Option,
    ) -> bool:
    """
    Assert that ``got`` is, or was caused by, ``want``.

    ``want`` may be an exception instance (matched by identity or equality) or
    an exception class (matched with ``isinstance``). The chain followed is
    ``__cause__``, falling back to ``__context__``.
    """
    tb.helper()
    if _wraps(got, want):
        return True
    session = Session(tb, *opts)
    session.printf("got doesn't wrap want")
    session.printf('got: %r', got)
    session.printf('want: %r', want)
    return session.conclude()


def zero(tb: TB, got: Any, *opts: Option) -> bool:  # noqa: ANN401
    """
    Assert that the value is its type's zero value.

    The zero value is ``type(got)()``, or None for types that can't be built
    without arguments.
    """
    tb.helper()
    session = Session(tb, *opts)
    diff, recovered = session.diff(got, _zero_of(got))
    if not recovered:
        return session.conclude()
    if diff == '':
        return True
    session.printf('got non-zero %s', type(got).__qualname__)
    session.printf('diff (zero -> got):')
    session.printf(diff)
    return session.conclude()


def not_zero(tb: TB, got: Any, *opts: Option) -> bool:  # noqa: ANN401
    """Assert that the value is not its type's zero value."""
    tb.helper()
    session = Session(tb, *opts)
    same, recovered = session.compare(got, _zero_of(got))
    if not recovered:
        return session.conclude()
    if not same:
        return True
    session.printf('got zero %s', type(got).__qualname__)
    return session.conclude()


def true(tb: TB, got: bool, *opts: Option) -> bool:
    """Assert that a boolean is true."""
    tb.helper()
    if got:
        return True
    session = Session(tb, *opts)
    session.printf('got false, want true')
    return session.conclude()


def false(tb: TB, got: bool, *opts: Option) -> bool:
    """Assert that a boolean is false."""
    tb.helper()
    if not got:
        return True
    session = Session(tb, *opts)
    session.printf('got true, want false')
    return session.conclude()


def raises(
        tb: TB,
        fn: Callable[[], Any],
        *opts: Option,
        expected: type[BaseException] | tuple[type[BaseException], ...] = Exception,
    ) -> bool:
    """
    Assert that calling ``fn`` raises.

    Only exceptions matching ``expected`` count; anything else propagates.
    """
    tb.helper()
    try:
        fn()
    except expected:
        return True
    session = Session(tb, *opts)
    session.printf('no exception raised')
    return session.conclude()


def approximately(tb: TB, got: Any, want: Any, delta: Any, *opts: Option) -> bool:  # noqa: ANN401
    """
    Assert that ``got`` is within ``delta`` of ``want``, exclusive.

        approximately(tb, 22 / 7, 3.14, 0.01)

    asserts that the estimate of pi is strictly between 3.13 and 3.15. Works
    with any ordered numeric type, including ``datetime.timedelta``. A
    negative delta is treated like its absolute value.
    """
    tb.helper()
    lower = want - delta
    upper = want + delta
    if lower > upper:
        lower, upper = upper, lower
    if lower < got < upper:
        return True
    session = Session(tb, *opts)
    session.printf('%s not within %s of %s', got, delta, want)
    return session.conclude()


def contains(tb: TB, got: Iterable[Any], want: Any, *opts: Option) -> bool:  # noqa: ANN401
    """Assert that ``got`` has an element equal to ``want``."""
    tb.helper()
    session = Session(tb, *opts)
    for item in got:
        same, recovered = session.compare(item, want)
        if not recovered:
            return session.conclude()
        if same:
            return True
    session.printf('got does not contain want')
    session.printf('got: %r', got)
    session.printf('want: %r', want)
    return session.conclude()


def subsequence(tb: TB, got: str | bytes, want: str | bytes, *opts: Option) -> bool:
    """
    Assert that ``got`` contains ``want`` as a contiguous run.

        subsequence(tb, "hello world", "hello")
        subsequence(tb, b"deadbeef", b"ee")
    """
    tb.helper()
    if want in got:
        return True
    session = Session(tb, *opts)
    session.printf('got does not contain want')
    session.printf('got: %r', got)
    session.printf('want: %r', want)
    return session.conclude()


def _zero_of(value: Any) -> Any:  # noqa: ANN401
    if value is None:
        return None
    try:
        return type(value)()
    except TypeError:
        return None


def _wraps(got: BaseException | None, want: BaseException | type[BaseException]) -> bool:
    seen: set[int] = set()
    while got is not None and id(got) not in seen:
        seen.add(id(got))
        if isinstance(want, type):
            if isinstance(got, want):
                return True
        elif got is want or got == want:
            return True
        got = got.__cause__ or got.__context__
    return False
