"""
Comparison policy: the customizations handed to the comparator.

Each customization is a small frozen pydantic model so that malformed values
are rejected when the option is built, not halfway through a comparison. A
``ComparisonPolicy`` is the ordered accumulation of these models for a single
assertion call.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, Field, field_validator


CustomizationT = TypeVar('CustomizationT', bound='Customization')


class Customization(BaseModel):
    """Base class for all comparator customizations."""

    model_config: ClassVar[dict[str, Any]] = {
        'extra': 'forbid',
        'frozen': True,
        'arbitrary_types_allowed': True,
    }


class TypeComparer(Customization):
    """
    Compare values of ``for_type`` with ``equal`` instead of structurally.

    The equality function must be total, symmetric (``equal(a, b) ==
    equal(b, a)``), deterministic, and must not mutate its arguments. None of
    this is checked at runtime.
    """

    for_type: type
    equal: Callable[[Any, Any], bool]


class PrivateAllowance(Customization):
    """Allow the comparator to look inside the private fields of ``types``."""

    types: tuple[type, ...] = Field(min_length=1)


class IgnoreOrder(Customization):
    """Treat sequences as unordered collections."""

    enabled: bool = True


class SignificantDigits(Customization):
    """Compare floats and decimals only up to ``digits`` digits after the point."""

    digits: int = Field(ge=0)


class ExcludePaths(Customization):
    """
    Skip the given comparator paths entirely.

    Paths use the comparator's notation, e.g. ``root._cache`` or
    ``root['items'][0]``. Excluded private fields are not refused.
    """

    paths: tuple[str, ...] = Field(min_length=1)

    @field_validator('paths')
    @classmethod
    def validate_paths(cls, paths: tuple[str, ...]) -> tuple[str, ...]:
        """Ensure every path uses the comparator's root notation."""
        for path in paths:
            if not path.startswith('root'):
                raise ValueError(f"path must start with 'root', got: '{path}'")
        return paths


@dataclass
class ComparisonPolicy:
    """
    Ordered customizations for one assertion call.

    Customizations are only ever appended. Where two customizations conflict
    (two comparers for one type, two ``IgnoreOrder`` values) the one appended
    last wins.
    """

    customizations: list[Customization] = field(default_factory=list)

    def extend(self, customizations: Iterable[Customization]) -> None:
        """Append customizations, keeping their order."""
        self.customizations.extend(customizations)

    def of_type(self, kind: type[CustomizationT]) -> list[CustomizationT]:
        """Return the customizations of one kind, oldest first."""
        return [c for c in self.customizations if isinstance(c, kind)]

    def latest(self, kind: type[CustomizationT]) -> CustomizationT | None:
        """Return the most recently appended customization of one kind."""
        found = self.of_type(kind)
        return found[-1] if found else None

    @property
    def allowed_types(self) -> frozenset[type]:
        """Types whose private fields may be introspected."""
        return frozenset(t for allowance in self.of_type(PrivateAllowance) for t in allowance.types)

    @property
    def excluded_paths(self) -> frozenset[str]:
        """Comparator paths that are skipped."""
        return frozenset(p for excluded in self.of_type(ExcludePaths) for p in excluded.paths)
