"""
Exception hierarchy for the priority class policy.

All policy exceptions inherit from PolicyError, allowing callers to catch
every policy-specific exception with a single except clause.

Exception Categories:
    - SettingsValidationError: The policy configuration is unusable
    - ExtractionError: No workload could be derived from the admission object
    - RequestParseError: The host payload could not be parsed

Policy violations (a priority class that is not allowed) are not exceptions.
They are ordinary reject decisions returned by the decision engine.
"""

from dataclasses import dataclass, field
from typing import Any


# =============================================================================
# Error Codes
# =============================================================================

# Settings errors: 1xxx
ERROR_SETTINGS_INVALID = 1001
ERROR_SETTINGS_PARSE = 1002

# Extraction errors: 2xxx
ERROR_EXTRACTION_FAILED = 2001

# Host errors: 3xxx
ERROR_REQUEST_PARSE = 3001


# =============================================================================
# Base Exception
# =============================================================================


@dataclass
class PolicyError(Exception):
    """
    Base exception for all priority class policy errors.

    Attributes:
        message: Human-readable error description
        code: Numeric error code for programmatic handling
        suggestion: Optional hint for how to resolve the error
        context: Optional dict with additional debugging info
    """

    message: str = ""
    code: int = 0
    suggestion: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Format error for display."""
        parts = [f"[E{self.code}] {self.message}"]
        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")
        return "".join(parts)

    def __repr__(self) -> str:
        """Format error for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "suggestion": self.suggestion,
            "context": self.context,
        }


# =============================================================================
# Settings Errors
# =============================================================================


@dataclass
class SettingsValidationError(PolicyError):
    """
    Raised when a policy configuration fails validation.

    Attributes:
        reason: The validator's message
        source: Where the settings came from (file path), if known
    """

    reason: str = ""
    source: str | None = None

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Invalid settings: {self.reason}"
        if self.code == 0:
            self.code = ERROR_SETTINGS_INVALID
        if not self.suggestion:
            self.suggestion = (
                "Set exactly one of allowed_priority_classes or "
                "denied_priority_classes to a non-empty list"
            )
        self.context.update({
            "reason": self.reason,
            "source": self.source,
        })


@dataclass
class SettingsParseError(SettingsValidationError):
    """Raised when settings cannot be deserialized at all."""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Cannot parse settings: {self.reason}"
        if self.code == 0:
            self.code = ERROR_SETTINGS_PARSE
        if not self.suggestion:
            self.suggestion = "Check the settings file is valid YAML or JSON"
        super().__post_init__()


# =============================================================================
# Extraction Errors
# =============================================================================


@dataclass
class ExtractionError(PolicyError):
    """
    Raised when a workload descriptor cannot be derived from an object.

    This is distinct from "the object has no workload": that case is not
    an error and extractors return None for it.

    Attributes:
        kind: The Kubernetes kind of the object, if it could be read
        cause: Description of what was malformed
    """

    kind: str | None = None
    cause: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = self.cause
        if self.code == 0:
            self.code = ERROR_EXTRACTION_FAILED
        self.context.update({
            "kind": self.kind,
            "cause": self.cause,
        })


# =============================================================================
# Host Errors
# =============================================================================


@dataclass
class RequestParseError(PolicyError):
    """Raised when a validation request payload cannot be parsed."""

    underlying_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Cannot parse validation request: {self.underlying_error}"
        if self.code == 0:
            self.code = ERROR_REQUEST_PARSE
        self.context["underlying_error"] = self.underlying_error
