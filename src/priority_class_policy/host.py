"""
Host adapter for the priority class policy.

The policy host calls three functions, each taking and returning raw
bytes:

    validate            ValidationRequest JSON  -> ValidationResponse JSON
    validate_settings   Settings JSON           -> SettingsValidationResponse JSON
    protocol_version    (nothing)               -> "v1"

This module does the (de)serialization and delegates the decisions to the
policy package. The logger is supplied by whoever builds the PolicyHost.
"""

import json
from collections.abc import Callable

from pydantic import ValidationError

from priority_class_policy.errors import RequestParseError, SettingsParseError
from priority_class_policy.extract import WorkloadExtractor
from priority_class_policy.logs import PolicyLogger
from priority_class_policy.policy import PriorityClassPolicy, validate_settings
from priority_class_policy.schema import (
    SettingsValidationResponse,
    ValidationRequest,
    ValidationResponse,
    parse_settings,
)


PROTOCOL_VERSION = "v1"


class PolicyHost:
    """
    Entry points exposed to the policy host.

    Attributes:
        logger: Logger handle owned by the process entry point
        policy: The per-request evaluator
    """

    def __init__(
        self,
        logger: PolicyLogger,
        extractor: WorkloadExtractor | None = None,
    ) -> None:
        self.logger = logger
        self.policy = PriorityClassPolicy(logger, extractor=extractor)

    @property
    def functions(self) -> dict[str, Callable[..., bytes]]:
        """The functions registered with the host, by name."""
        return {
            "validate": self.validate,
            "validate_settings": self.validate_settings,
            "protocol_version": self.protocol_version,
        }

    def parse_request(self, payload: bytes | str) -> ValidationRequest:
        """
        Parse a validate payload.

        Raises:
            RequestParseError: If the payload is not a valid ValidationRequest
        """
        try:
            return ValidationRequest.model_validate_json(payload)
        except ValidationError as e:
            raise RequestParseError(underlying_error=str(e)) from e

    def evaluate(self, payload: bytes | str) -> ValidationResponse:
        """Run the policy on a validate payload and build the response model."""
        request = self.parse_request(payload)
        decision = self.policy.validate(request)
        return ValidationResponse.from_decision(decision)

    def validate(self, payload: bytes | str) -> bytes:
        """
        Validate an admission request.

        Raises:
            RequestParseError: If the payload cannot be parsed; the host
                reports this as a failed call rather than a rejection
        """
        return self.evaluate(payload).model_dump_json(exclude_none=True).encode()

    def check_settings(self, payload: bytes | str) -> SettingsValidationResponse:
        """Check a settings payload and build the response model."""
        try:
            data = json.loads(payload) if payload else None
            settings = parse_settings(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            self.logger.debug("settings payload is not JSON", extra={"err": str(e)})
            return SettingsValidationResponse(
                valid=False,
                message=f"Cannot parse settings: {e}",
            )
        except SettingsParseError as e:
            self.logger.debug("settings payload does not match schema", extra={"err": e.reason})
            return SettingsValidationResponse(valid=False, message=e.message)

        message = validate_settings(settings)
        if message is not None:
            return SettingsValidationResponse(valid=False, message=message)
        return SettingsValidationResponse(valid=True)

    def validate_settings(self, payload: bytes | str) -> bytes:
        """Validate policy settings."""
        return self.check_settings(payload).model_dump_json(exclude_none=True).encode()

    def protocol_version(self, payload: bytes | str = b"") -> bytes:
        """Report the protocol version this policy speaks."""
        return json.dumps(PROTOCOL_VERSION).encode()
