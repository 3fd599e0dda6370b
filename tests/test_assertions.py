"""
Tests for the assertion functions.

Each assertion is exercised against a recording runner for both the passing
path (no runner call) and the failing path (exactly one runner call with the
expected headline).
"""

import math
from datetime import timedelta

import pytest

from flex_attest import (
    allow_private,
    approximately,
    comparer,
    contains,
    equal,
    error,
    error_is,
    fail_continue,
    fail_fatal,
    false,
    message,
    messagef,
    not_equal,
    not_zero,
    ok,
    options,
    raises,
    subsequence,
    true,
    zero,
)
from tests.types_for_tests import Mod3, Point, PublicPoint, points_equal


def wrapped_error() -> RuntimeError:
    try:
        try:
            raise KeyError('missing')
        except KeyError as e:
            raise RuntimeError('lookup failed') from e
    except RuntimeError as e:
        return e


class TestEqual:
    """equal and not_equal."""

    def test_equal_passes(self, mock_tb):
        """Equal values pass without reporting."""
        assert equal(mock_tb, 1, 1) is True
        assert equal(mock_tb, 3, 3.0) is True
        assert equal(mock_tb, {'a': [1, 2]}, {'a': [1, 2]}) is True
        assert mock_tb.calls == 0

    def test_equal_fails_fatally(self, mock_tb):
        """Different values fail with a headline and a diff."""
        assert equal(mock_tb, 1, 2) is False
        lines = mock_tb.out.split('\n')
        assert lines[0] == 'got != want'
        assert lines[1] == 'diff (want -> got):'
        assert 'root' in lines[2]
        mock_tb.assert_fatal()

    def test_equal_sets(self, mock_tb):
        """Distinct sets are compared by membership and mismatches produce a diff."""
        assert equal(mock_tb, {1, 2}, {2, 1}) is True
        assert mock_tb.calls == 0
        assert equal(mock_tb, {1, 2}, {1, 3}, fail_continue()) is False
        lines = mock_tb.out.split('\n')
        assert lines[0] == 'got != want'
        assert lines[1] == 'diff (want -> got):'
        mock_tb.assert_error()

    def test_equal_records(self, mock_tb):
        """Records without private fields are compared structurally."""
        assert equal(mock_tb, PublicPoint(1, 2), PublicPoint(1, 2)) is True
        assert equal(mock_tb, PublicPoint(1, 2), PublicPoint(1, 3)) is False
        assert 'root.y' in mock_tb.out
        mock_tb.assert_fatal()

    def test_private_fields_fail_recoverably(self, mock_tb):
        """Private fields without an allowance produce guidance, not a crash."""
        assert equal(mock_tb, Point(1, 1), Point(1, 2), fail_continue()) is False
        assert mock_tb.out.startswith('found private field root._y')
        mock_tb.assert_error()

    def test_allow_private(self, mock_tb):
        """allow_private makes records with private fields comparable."""
        assert equal(mock_tb, Point(1.0, 1.0), Point(1.0, 1.0), allow_private(Point())) is True
        assert mock_tb.calls == 0

    def test_comparer(self, mock_tb):
        """A comparer replaces structural comparison for its type."""
        assert equal(mock_tb, Point(1.0, 1.0), Point(1.0, 1.0), comparer(points_equal)) is True
        assert equal(
            mock_tb, Mod3(3), Mod3(6),
            comparer(lambda x, y: x % 3 == y % 3, for_type=Mod3),
        ) is True
        assert mock_tb.calls == 0

    def test_not_equal(self, mock_tb):
        """not_equal passes for different values and fails for equal ones."""
        assert not_equal(mock_tb, 1, 2) is True
        assert not_equal(mock_tb, 'a', 'a') is False
        assert mock_tb.out == "got == want\ngot: 'a'"
        mock_tb.assert_fatal()

    def test_not_equal_refusal(self, mock_tb):
        """not_equal reports comparator refusals too."""
        assert not_equal(mock_tb, Point(), Point(), fail_continue()) is False
        assert mock_tb.out.startswith('found private field root._x')
        mock_tb.assert_error()


class TestErrors:
    """ok, error and error_is."""

    def test_ok(self, mock_tb):
        """ok passes for None and reports the error otherwise."""
        assert ok(mock_tb, None) is True
        assert ok(mock_tb, ValueError('foo')) is False
        assert mock_tb.out == 'unexpected error\nerror: foo\ntype: ValueError'
        mock_tb.assert_fatal()

    def test_error(self, mock_tb):
        """error passes for an exception and fails for None."""
        assert error(mock_tb, ValueError('foo')) is True
        assert error(mock_tb, None) is False
        assert mock_tb.out == 'unexpected success'
        mock_tb.assert_fatal()

    def test_error_is_follows_cause(self, mock_tb):
        """error_is matches anywhere in the cause chain."""
        err = wrapped_error()
        assert error_is(mock_tb, err, RuntimeError) is True
        assert error_is(mock_tb, err, KeyError) is True
        assert error_is(mock_tb, err, LookupError) is True
        assert mock_tb.calls == 0

    def test_error_is_instance(self, mock_tb):
        """An exception instance matches by identity."""
        sentinel = ValueError('sentinel')
        assert error_is(mock_tb, sentinel, sentinel) is True
        assert error_is(mock_tb, ValueError('other'), sentinel) is False
        mock_tb.assert_fatal()

    def test_error_is_fails(self, mock_tb):
        """A chain without want fails with both values."""
        assert error_is(mock_tb, wrapped_error(), ValueError) is False
        lines = mock_tb.out.split('\n')
        assert lines[0] == "got doesn't wrap want"
        assert lines[1].startswith('got: RuntimeError(')
        assert lines[2] == "want: <class 'ValueError'>"
        mock_tb.assert_fatal()

    def test_error_is_none(self, mock_tb):
        """No error never wraps anything."""
        assert error_is(mock_tb, None, ValueError) is False
        mock_tb.assert_fatal()


class TestZero:
    """zero and not_zero."""

    @pytest.mark.parametrize('value', [None, 0, 0.0, '', b'', [], {}, (), set(), False])
    def test_zero_values(self, mock_tb, value):
        """Empty and zero values pass."""
        assert zero(mock_tb, value) is True
        assert mock_tb.calls == 0

    def test_non_zero(self, mock_tb):
        """A non-zero value fails with its type and a diff."""
        assert zero(mock_tb, 3) is False
        lines = mock_tb.out.split('\n')
        assert lines[0] == 'got non-zero int'
        assert lines[1] == 'diff (zero -> got):'
        mock_tb.assert_fatal()

    def test_zero_record(self, mock_tb):
        """A default-constructed record is its own zero value."""
        assert zero(mock_tb, PublicPoint()) is True
        assert zero(mock_tb, Point(), allow_private(Point())) is True
        assert zero(mock_tb, PublicPoint(1, 0)) is False
        mock_tb.assert_fatal()

    def test_not_zero(self, mock_tb):
        """not_zero fails for zero values."""
        assert not_zero(mock_tb, 3) is True
        assert not_zero(mock_tb, 0) is False
        assert mock_tb.out == 'got zero int'
        mock_tb.assert_fatal()


class TestBooleans:
    """true and false."""

    def test_true(self, mock_tb):
        """true fails on False."""
        assert true(mock_tb, True) is True
        assert true(mock_tb, False) is False
        assert mock_tb.out == 'got false, want true'
        mock_tb.assert_fatal()

    def test_false(self, mock_tb):
        """false fails on True."""
        assert false(mock_tb, False) is True
        assert false(mock_tb, True) is False
        assert mock_tb.out == 'got true, want false'
        mock_tb.assert_fatal()


class TestRaises:
    """raises."""

    def test_raises(self, mock_tb):
        """A function that raises passes."""
        assert raises(mock_tb, lambda: 1 / 0) is True
        assert raises(mock_tb, lambda: {}['k'], expected=KeyError) is True
        assert mock_tb.calls == 0

    def test_no_exception(self, mock_tb):
        """A function that returns normally fails."""
        assert raises(mock_tb, lambda: None) is False
        assert mock_tb.out == 'no exception raised'
        mock_tb.assert_fatal()

    def test_unexpected_exception_propagates(self, mock_tb):
        """Exceptions not matching expected are not swallowed."""
        with pytest.raises(ZeroDivisionError):
            raises(mock_tb, lambda: 1 / 0, expected=KeyError)
        assert mock_tb.calls == 0


class TestApproximately:
    """approximately."""

    def test_within_delta(self, mock_tb):
        """Values strictly inside the interval pass."""
        assert approximately(mock_tb, 3.0, 3.05, 0.1) is True
        assert approximately(mock_tb, 3.1, 3.05, 0.1) is True
        assert approximately(mock_tb, 22 / 7, 3.14, 0.01) is True
        assert mock_tb.calls == 0

    def test_negative_delta(self, mock_tb):
        """A negative delta is normalized."""
        assert approximately(mock_tb, 11, 10, -3) is True
        assert mock_tb.calls == 0

    def test_bounds_are_exclusive(self, mock_tb):
        """Values exactly on the bounds fail."""
        assert approximately(mock_tb, 2.5, 3.0, 0.5) is False
        mock_tb.assert_fatal()
        assert approximately(mock_tb, 3.5, 3.0, 0.5) is False
        mock_tb.assert_fatal()

    def test_outside_delta(self, mock_tb):
        """Values outside the interval fail with all three numbers."""
        assert approximately(mock_tb, 3.0, 3.05, 0.01) is False
        assert mock_tb.out == '3.0 not within 0.01 of 3.05'
        mock_tb.assert_fatal()

    def test_nan_delta(self, mock_tb):
        """A NaN delta never passes."""
        assert approximately(mock_tb, 3.0, 3.0, math.nan) is False
        mock_tb.assert_fatal()

    def test_timedelta(self, mock_tb):
        """Any ordered numeric-like type works."""
        assert approximately(
            mock_tb, timedelta(seconds=59), timedelta(minutes=1), timedelta(seconds=2),
        ) is True
        assert mock_tb.calls == 0


class TestContains:
    """contains and subsequence."""

    def test_contains(self, mock_tb):
        """An element equal to want passes."""
        assert contains(mock_tb, [0, 1, 2], 1) is True
        assert contains(mock_tb, [{'a': 1}, {'a': 2}], {'a': 2}) is True
        assert mock_tb.calls == 0

    def test_does_not_contain(self, mock_tb):
        """A missing element fails with both values."""
        assert contains(mock_tb, [0, 1], 2) is False
        assert mock_tb.out == 'got does not contain want\ngot: [0, 1]\nwant: 2'
        mock_tb.assert_fatal()

    def test_contains_uses_options(self, mock_tb):
        """Elements are compared under the assertion's policy."""
        assert contains(mock_tb, [Point(0, 0), Point(1, 1)], Point(1, 1), comparer(points_equal)) is True
        assert contains(mock_tb, [Point(0, 0)], Point(1, 1), fail_continue()) is False
        assert mock_tb.out.startswith('found private field')
        mock_tb.assert_error()

    def test_subsequence(self, mock_tb):
        """Strings and bytes are searched for contiguous runs."""
        assert subsequence(mock_tb, 'hello world', 'hello') is True
        assert subsequence(mock_tb, b'deadbeef', b'ee') is True
        assert mock_tb.calls == 0

    def test_missing_subsequence(self, mock_tb):
        """A missing run fails with both values."""
        assert subsequence(mock_tb, 'hello world', 'goodbye') is False
        assert mock_tb.out == "got does not contain want\ngot: 'hello world'\nwant: 'goodbye'"
        mock_tb.assert_fatal()


class TestOptionsThroughAssertions:
    """Options observed through the assertion API."""

    def test_message(self, mock_tb):
        """message is appended to the headline."""
        true(mock_tb, False, message('a', 'message'))
        assert mock_tb.out.endswith(': a message')
        mock_tb.assert_fatal()

    def test_messagef(self, mock_tb):
        """messagef is appended to the headline."""
        false(mock_tb, True, messagef('%s, time marches on', 'alas'))
        assert mock_tb.out == 'got true, want false: alas, time marches on'
        mock_tb.assert_fatal()

    def test_message_on_multi_line_failure(self, mock_tb):
        """Only the first line of a multi-line failure carries the message."""
        equal(mock_tb, 1, 2, message('ctx'))
        lines = mock_tb.out.split('\n')
        assert lines[0] == 'got != want: ctx'
        assert all('ctx' not in line for line in lines[1:])
        mock_tb.assert_fatal()

    def test_continue(self, mock_tb):
        """fail_continue reports through the error channel."""
        assert true(mock_tb, False, fail_continue()) is False
        mock_tb.assert_error()

    def test_fatal_overrides_continue(self, mock_tb):
        """fail_fatal after fail_continue restores fatal reporting."""
        true(mock_tb, False, fail_continue(), fail_fatal())
        mock_tb.assert_fatal()
        true(mock_tb, False, options(fail_continue(), fail_fatal()))
        mock_tb.assert_fatal()

    def test_reusable_defaults(self, mock_tb):
        """A named bundle can be shared and then overridden per assertion."""
        defaults = options(fail_continue(), comparer(points_equal))
        assert zero(mock_tb, Point(), defaults, fail_fatal()) is True
        assert equal(mock_tb, Point(1, 1), Point(1, 2), defaults) is False
        mock_tb.assert_error()
        assert equal(mock_tb, Point(1, 1), Point(1, 2), defaults, fail_fatal()) is False
        mock_tb.assert_fatal()

    def test_one_report_per_assertion(self, mock_tb):
        """A failing assertion calls the runner exactly once."""
        equal(mock_tb, [1, 2, 3], [3, 2, 1], fail_continue())
        assert mock_tb.calls == 1
