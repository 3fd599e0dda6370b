"""
Options configure a single assertion call.

Options are immutable values. Each one knows how to apply itself to a
``Session``; bundles apply their children in order. Because options are plain
values, suites can build named bundles once and pass them to every assertion:

    DEFAULTS = options(fail_continue(), comparer(points_equal, for_type=Point))

    equal(tb, got, want, DEFAULTS, fail_fatal())
"""

import inspect
import typing
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from .constants import FailureMode
from .exceptions import ConfigurationError
from .introspection import is_record
from .policy import Customization, PrivateAllowance, TypeComparer

if TYPE_CHECKING:
    from .session import Session


class Option(ABC):
    """A configuration command applied to a Session."""

    @abstractmethod
    def apply(self, session: 'Session') -> None:
        """Apply this option to ``session``."""

    def flatten(self) -> Iterator['Option']:
        """Yield the leaf options in application order."""
        yield self


@dataclass(frozen=True)
class Bundle(Option):
    """An ordered group of options that behaves like its flattened leaves."""

    options: tuple[Option, ...]

    def apply(self, session: 'Session') -> None:  # noqa: D102
        for option in self.flatten():
            option.apply(session)

    def flatten(self) -> Iterator[Option]:  # noqa: D102
        for option in self.options:
            yield from option.flatten()


@dataclass(frozen=True)
class Message(Option):
    """Attach an explanation to the first line of the failure message."""

    text: str

    def apply(self, session: 'Session') -> None:  # noqa: D102
        session.message = self.text


@dataclass(frozen=True)
class SetFailureMode(Option):
    """Choose whether a failure stops the test or lets it continue."""

    mode: FailureMode

    def apply(self, session: 'Session') -> None:  # noqa: D102
        session.failure_mode = self.mode


@dataclass(frozen=True)
class ExtendPolicy(Option):
    """Append customizations to the session's comparison policy."""

    customizations: tuple[Customization, ...]

    def apply(self, session: 'Session') -> None:  # noqa: D102
        session.policy.extend(self.customizations)


def options(*opts: Option) -> Option:
    """
    Compose several options into one.

    Useful for helper packages that bundle options together, or when most
    assertions in a suite share a common set of options. Nested bundles are
    flattened, and their leaves are applied left to right.
    """
    for opt in opts:
        if not isinstance(opt, Option):
            raise ConfigurationError(f"options() expects Option values, got: {type(opt).__name__}")
    return Bundle(tuple(opts))


def message(*parts: Any) -> Option:  # noqa: ANN401
    """
    Add an explanation to the default failure message.

    Parts are converted with ``str`` and joined with spaces. Formatting
    happens immediately, so later changes to the parts are not reflected.
    """
    return Message(' '.join(str(part) for part in parts))


def messagef(template: str, *args: Any) -> Option:  # noqa: ANN401
    """
    Add an explanation to the default failure message.

    ``template`` is %-formatted with ``args`` immediately.
    """
    return Message(template % args if args else template)


def fail_fatal() -> Option:
    """
    Stop the test immediately when the assertion fails.

    This is the default, but it is still useful for overriding a
    ``fail_continue()`` that came from a shared bundle.
    """
    return SetFailureMode(FailureMode.FATAL)


def fail_continue() -> Option:
    """Let the test keep running when the assertion fails."""
    return SetFailureMode(FailureMode.CONTINUE)


def extend_policy(*customizations: Customization) -> Option:
    """
    Configure the underlying comparator.

    Customizations accumulate across every ``extend_policy`` applied to one
    assertion; nothing is replaced. See ``flex_attest.policy`` for the
    available customizations.
    """
    for customization in customizations:
        if not isinstance(customization, Customization):
            raise ConfigurationError(
                f"extend_policy() expects Customization values, "
                f"got: {type(customization).__name__}",
            )
    return ExtendPolicy(tuple(customizations))


def allow_private(*samples: Any) -> Option:  # noqa: ANN401
    """
    Let the comparator look inside the private fields of the samples' types.

    By default, comparing records that have private fields fails. Pass one
    instance of each record type to allow. Anything that is not a record
    instance (a class, a container, None, a scalar) raises
    ``ConfigurationError``.

    This is a quick fix that ties your tests to another type's internals. If
    you control the type, define ``__eq__`` on it; otherwise ``comparer`` is
    usually safer.
    """
    for sample in samples:
        if not is_record(sample):
            raise ConfigurationError(
                f"allow_private() requires record instances, got: {type(sample).__name__}",
            )
    try:
        allowance = PrivateAllowance(types=tuple(type(sample) for sample in samples))
    except PydanticValidationError as e:
        raise ConfigurationError(f"allow_private(): {e}") from e
    return extend_policy(allowance)


def comparer(equal: Callable[[Any, Any], bool], for_type: type | None = None) -> Option:
    """
    Compare values of one type with ``equal``.

    Especially useful for third-party types with private fields. When
    ``for_type`` is omitted it is taken from the annotation on ``equal``'s
    first parameter.

    The equality function must be symmetric (argument order doesn't matter),
    deterministic (always returns the same result), and pure (must not mutate
    its arguments).
    """
    if for_type is None:
        for_type = _annotated_type(equal)
    try:
        customization = TypeComparer(for_type=for_type, equal=equal)
    except PydanticValidationError as e:
        raise ConfigurationError(f"comparer(): {e}") from e
    return extend_policy(customization)


def _annotated_type(equal: Callable[[Any, Any], bool]) -> type:
    try:
        parameters = list(inspect.signature(equal).parameters)
        hints = typing.get_type_hints(equal)
    except (TypeError, ValueError, NameError) as e:
        raise ConfigurationError(f"comparer(): cannot inspect {equal!r}: {e}") from e

    hint = hints.get(parameters[0]) if parameters else None
    if not isinstance(hint, type):
        raise ConfigurationError(
            "comparer(): cannot infer the compared type; annotate the first parameter "
            "or pass for_type",
        )
    return hint
