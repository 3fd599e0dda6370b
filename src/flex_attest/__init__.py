"""
flex-attest: small assertion helpers for pytest.

Equality and diffing are delegated to deepdiff. Every assertion accepts
options that change how values are compared and whether a failure stops the
test or lets it continue.
"""

from .assertions import (
    approximately,
    contains,
    equal,
    error,
    error_is,
    false,
    not_equal,
    not_zero,
    ok,
    raises,
    subsequence,
    true,
    zero,
)
from .constants import FailureMode
from .exceptions import ConfigurationError, FlexAttestError, IntrospectionRefusedError
from .options import (
    Option,
    allow_private,
    comparer,
    extend_policy,
    fail_continue,
    fail_fatal,
    message,
    messagef,
    options,
)
from .policy import (
    ComparisonPolicy,
    Customization,
    ExcludePaths,
    IgnoreOrder,
    PrivateAllowance,
    SignificantDigits,
    TypeComparer,
)
from .runner import TB, PytestTB
from .session import Session

__version__ = "0.1.0"
__all__ = [
    # Runner interface
    "TB",
    "ComparisonPolicy",
    "ConfigurationError",
    "Customization",
    "ExcludePaths",
    # Constants and enums
    "FailureMode",
    "FlexAttestError",
    "IgnoreOrder",
    "IntrospectionRefusedError",
    # Options
    "Option",
    "PrivateAllowance",
    "PytestTB",
    "Session",
    "SignificantDigits",
    "TypeComparer",
    "allow_private",
    # Assertions
    "approximately",
    "comparer",
    "contains",
    "equal",
    "error",
    "error_is",
    "extend_policy",
    "fail_continue",
    "fail_fatal",
    "false",
    "message",
    "messagef",
    "not_equal",
    "not_zero",
    "ok",
    "options",
    "raises",
    "subsequence",
    "true",
    "zero",
]
