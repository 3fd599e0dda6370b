"""
Constants and enums for flex-attest.

All enums inherit from str so they print and compare cleanly against their
string values.
"""

from enum import Enum


# Prefix the comparator uses when it refuses to look inside a private field.
# Everything after it, up to the first ": ", is the offending field path.
PRIVATE_FIELD_PREFIX = 'cannot handle private field at '


class FailureMode(str, Enum):
    """How a failing assertion is reported to the test runner."""

    FATAL = 'fatal'
    CONTINUE = 'continue'

    def __str__(self) -> str:
        """Return the enum value as string."""
        return str(self.value)
