"""
Schema definitions for the priority class policy.

This module defines the Pydantic models used throughout the policy:
- Settings: The allow/deny configuration supplied at deployment time
- WorkloadDescriptor: The slice of a workload the decision depends on
- PolicyDecision: The verdict of one evaluation
- ValidationRequest/ValidationResponse: The host's request and response
- SettingsValidationResponse: The host's answer to a settings check

Design Decisions:
    - Priority class sets are frozensets: unordered, deduplicated, and
      matched exactly (case-sensitive, no trimming)
    - Models are immutable (frozen=True)
    - Settings do not enforce the allow/deny invariant themselves, so an
      invalid configuration can still be built and reported by the validator
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from priority_class_policy.errors import SettingsParseError


# =============================================================================
# Settings
# =============================================================================


class Settings(BaseModel):
    """
    Policy configuration.

    Exactly one of the two fields is expected to hold a non-empty set.
    The rules live in priority_class_policy.policy.validator.

    Attributes:
        allowed_priority_classes: Only these priority classes are accepted
        denied_priority_classes: These priority classes are rejected
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    allowed_priority_classes: frozenset[str] | None = Field(
        default=None,
        description="Priority classes a workload may use",
    )
    denied_priority_classes: frozenset[str] | None = Field(
        default=None,
        description="Priority classes a workload may not use",
    )


# =============================================================================
# Workload and Verdict
# =============================================================================


class WorkloadDescriptor(BaseModel):
    """
    The part of a workload the decision engine looks at.

    Built by a WorkloadExtractor from the admission object.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    priority_class_name: str | None = Field(
        default=None,
        description="The priority class requested by the workload",
    )


class PolicyDecision(BaseModel):
    """
    Result of evaluating a workload against the settings.

    Attributes:
        allowed: Whether the workload is accepted
        reason: Why it was rejected (None when accepted)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    allowed: bool = Field(..., description="Whether the workload is accepted")
    reason: str | None = Field(
        default=None,
        description="Human-readable reason for a rejection",
    )

    @classmethod
    def allow(cls) -> "PolicyDecision":
        """Create an ACCEPT decision."""
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "PolicyDecision":
        """Create a REJECT decision."""
        return cls(allowed=False, reason=reason)


# =============================================================================
# Host Request/Response Models
# =============================================================================


class AdmissionRequest(BaseModel):
    """
    The admission request forwarded by the host.

    Only `object` is consumed; the remaining Kubernetes fields are kept
    so they show up in logs and debugging output.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    uid: str | None = Field(default=None, description="Admission request UID")
    operation: str | None = Field(default=None, description="CREATE, UPDATE, ...")
    object: Any = Field(default=None, description="The object being admitted")
    kind: Any = Field(default=None, description="Group/version/kind of the admitted object")

    @property
    def object_kind(self) -> str | None:
        """The kind named by the request, if any."""
        if isinstance(self.kind, dict) and isinstance(self.kind.get("kind"), str):
            return self.kind["kind"]
        return None


class ValidationRequest(BaseModel):
    """
    Payload of a `validate` call.

    Attributes:
        request: The admission request
        settings: The policy settings to evaluate against
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    request: AdmissionRequest = Field(..., description="The admission request")
    settings: Settings = Field(
        default_factory=Settings,
        description="Policy settings",
    )


class ValidationResponse(BaseModel):
    """
    Response to a `validate` call.

    Attributes:
        accepted: Whether the request is admitted
        message: Rejection reason (None when accepted)
        code: Optional HTTP-like status code; never set by this policy
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    accepted: bool = Field(..., description="Whether the request is admitted")
    message: str | None = Field(default=None, description="Rejection reason")
    code: int | None = Field(default=None, description="Optional status code")

    @classmethod
    def from_decision(cls, decision: PolicyDecision) -> "ValidationResponse":
        """Translate a decision into the host's response shape."""
        if decision.allowed:
            return cls(accepted=True)
        return cls(accepted=False, message=decision.reason)


class SettingsValidationResponse(BaseModel):
    """Response to a `validate_settings` call."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    valid: bool = Field(..., description="Whether the settings are usable")
    message: str | None = Field(default=None, description="Why they are not")


# =============================================================================
# YAML Loading Helpers
# =============================================================================


def parse_settings(data: Any, source: str | None = None) -> Settings:
    """Build Settings from already-decoded data (None means all defaults)."""
    if data is None:
        data = {}
    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise SettingsParseError(reason=str(e), source=source) from e


def load_settings(path: Path | str) -> Settings:
    """
    Load settings from a YAML (or JSON) file.

    An empty file yields default settings (both fields unset). The allow/deny
    rules are not checked here; see policy.validator.ensure_valid_settings.

    Args:
        path: Path to the settings file

    Returns:
        Parsed Settings object

    Raises:
        FileNotFoundError: If the file doesn't exist
        SettingsParseError: If the file doesn't match the schema
    """
    path = Path(path)
    with path.open() as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SettingsParseError(reason=str(e), source=str(path)) from e

    return parse_settings(data, str(path))


def load_settings_from_string(content: str) -> Settings:
    """Load settings from a YAML string."""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsParseError(reason=str(e)) from e
    return parse_settings(data, None)
