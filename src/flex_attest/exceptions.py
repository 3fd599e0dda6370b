"""
Custom exception hierarchy for flex-attest.

Assertion failures are never raised as exceptions from this package; they are
reported through the test runner. The exceptions below cover the two cases
that are not ordinary test failures.
"""


class FlexAttestError(Exception):
    """Base exception for flex-attest package."""

    pass


class ConfigurationError(FlexAttestError):
    """
    An assertion option was configured incorrectly.

    Raised when the option is constructed, before any comparison runs, so a
    malformed test is distinguishable from a failing one.
    """

    pass


class IntrospectionRefusedError(FlexAttestError):
    """
    The comparator refused to look inside a value's private fields.

    Raised from inside the comparator and converted into a ``Refusal`` at the
    comparator boundary; it never reaches callers of the assertion API.
    """

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path
