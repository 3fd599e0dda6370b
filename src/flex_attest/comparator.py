"""
Boundary to the external deep-equality comparator.

Equality and diffing are delegated to ``deepdiff``. This module translates a
``ComparisonPolicy`` into ``DeepDiff`` arguments and custom operators, and
turns any failure raised while comparing into a ``Refusal`` value so callers
can branch on it instead of unwinding.
"""

import logging
from dataclasses import dataclass
from typing import Any

from deepdiff import DeepDiff
from deepdiff.operator import BaseOperator

from .constants import PRIVATE_FIELD_PREFIX
from .exceptions import IntrospectionRefusedError
from .introspection import has_custom_eq, is_record, private_fields
from .policy import (
    ComparisonPolicy,
    ExcludePaths,
    IgnoreOrder,
    SignificantDigits,
    TypeComparer,
)

logger = logging.getLogger(__name__)

_MISSING = object()

_REFUSAL_HINT = 'define __eq__, allow private fields, or register a comparer for this type'


@dataclass(frozen=True)
class Refusal:
    """The comparator gave up; ``message`` is its unstructured description."""

    message: str


class TypeComparerOperator(BaseOperator):
    """Compare values of one type with a user-supplied equality function."""

    def __init__(self, comparer: TypeComparer):
        super().__init__(types=[comparer.for_type])
        self.comparer = comparer

    def give_up_diffing(self, level, diff_instance) -> bool:  # noqa: ANN001
        if not self.comparer.equal(level.t1, level.t2):
            diff_instance.custom_report_result('values_changed', level)
        return True

    def normalize_value_for_hashing(self, parent, obj):  # noqa: ANN001, ANN201
        # values are hashed as-is for sets and ignore_order
        return obj


class PrivateFieldGuard(BaseOperator):
    """
    Refuse to diff records with private fields unless the policy allows it.

    Types that define their own ``__eq__`` are compared with it instead of
    being refused.
    """

    def __init__(self, allowed: frozenset[type], excluded: frozenset[str]):
        super().__init__()
        self.allowed = allowed
        self.excluded = excluded

    def match(self, level) -> bool:  # noqa: ANN001
        t1, t2 = level.t1, level.t2
        if type(t1) is not type(t2) or type(t1) in self.allowed:
            return False
        return is_record(t1) and bool(private_fields(t1))

    def give_up_diffing(self, level, diff_instance) -> bool:  # noqa: ANN001
        t1, t2 = level.t1, level.t2
        if has_custom_eq(type(t1)):
            if t1 != t2:
                diff_instance.custom_report_result('values_changed', level)
            return True

        base = level.path()
        fields = [name for name in private_fields(t1) if f'{base}.{name}' not in self.excluded]
        if not fields:
            return False

        # cite the first private field that actually differs, if any
        offending = next(
            (
                name for name in fields
                if getattr(t1, name, _MISSING) != getattr(t2, name, _MISSING)
            ),
            fields[0],
        )
        path = f'{base}.{offending}'
        raise IntrospectionRefusedError(
            f'{PRIVATE_FIELD_PREFIX}{path}: {_REFUSAL_HINT}',
            path=path,
        )

    def normalize_value_for_hashing(self, parent, obj):  # noqa: ANN001, ANN201
        return obj


def deep_equal(a: Any, b: Any, policy: ComparisonPolicy) -> bool | Refusal:  # noqa: ANN401
    """Return whether ``a`` and ``b`` are equal under ``policy``, or a Refusal."""
    result = _run(a, b, policy)
    if isinstance(result, Refusal):
        return result
    return not result


def deep_diff(want: Any, got: Any, policy: ComparisonPolicy) -> str | Refusal:  # noqa: ANN401
    """
    Return a human-readable diff from ``want`` to ``got``, or a Refusal.

    An empty string means the values are equal.
    """
    result = _run(want, got, policy)
    if isinstance(result, Refusal):
        return result
    if not result:
        return ''
    return result.pretty()


def build_operators(policy: ComparisonPolicy) -> list[BaseOperator]:
    """
    Translate the policy into deepdiff custom operators.

    deepdiff uses the first operator that matches, so comparers are listed
    newest first and the private-field guard comes last.
    """
    operators: list[BaseOperator] = [
        TypeComparerOperator(comparer)
        for comparer in reversed(policy.of_type(TypeComparer))
    ]
    operators.append(PrivateFieldGuard(policy.allowed_types, policy.excluded_paths))
    return operators


def build_arguments(policy: ComparisonPolicy) -> dict[str, Any]:
    """Build the keyword arguments passed to ``DeepDiff``."""
    arguments: dict[str, Any] = {
        'ignore_numeric_type_changes': True,
        'custom_operators': build_operators(policy),
    }

    ignore_order = policy.latest(IgnoreOrder)
    if ignore_order is not None:
        arguments['ignore_order'] = ignore_order.enabled

    significant_digits = policy.latest(SignificantDigits)
    if significant_digits is not None:
        arguments['significant_digits'] = significant_digits.digits

    if policy.of_type(ExcludePaths):
        arguments['exclude_paths'] = sorted(policy.excluded_paths)

    return arguments


def _run(t1: Any, t2: Any, policy: ComparisonPolicy) -> DeepDiff | Refusal:  # noqa: ANN401
    try:
        return DeepDiff(t1, t2, **build_arguments(policy))
    except IntrospectionRefusedError as e:
        logger.debug("comparator refused private field %s", e.path)
        return Refusal(str(e))
    except Exception as e:
        # user comparers and exotic values can fail anywhere inside deepdiff
        logger.debug("comparator raised %s", type(e).__name__, exc_info=True)
        return Refusal(str(e) or type(e).__name__)
