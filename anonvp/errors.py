"""Error taxonomy for anonvp.

Mapping failures propagate to the immediate caller as typed exceptions.
Structural violations are *not* exceptions: the assertion engine collects them
as plain strings so that one run reports every defect.
"""

from __future__ import annotations

from typing import List, Optional


class AnonVPError(Exception):
    """Base class for all anonvp errors."""
    pass


class MappingError(AnonVPError):
    """Proof -> presentation mapping failed."""
    pass


class PreconditionViolation(MappingError, ValueError):
    """Caller supplied a proof that breaks the mapper's precondition
    (an empty `identifiers` sequence)."""
    pass


class SerializationFailure(MappingError):
    """The constructed presentation could not be encoded to JSON text."""
    pass


class MalformedExpectationSpec(AnonVPError, ValueError):
    """An expectation string (or rules file) does not follow the grammar.

    This is a programming error in the checks, not a validation failure of the
    document under test.
    """
    pass


class ProofFormatError(AnonVPError, ValueError):
    """Proof JSON does not have the shape the mapper reads."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors: List[str] = list(errors or [])

    def __str__(self) -> str:
        base = super().__str__()
        if not self.errors:
            return base
        return f"{base}: " + "; ".join(self.errors)


class ConfigError(AnonVPError):
    """Configuration error."""
    pass


class ConfigValidationError(ConfigError):
    """Configuration validation error."""
    pass
