"""
Decision engine for the priority class policy.

Design Principles:
    - Unset is unrestricted: a workload without a priority class is accepted
      whatever the settings say
    - Fail-closed: settings that slipped past validation (neither or both
      lists set) reject every workload that names a priority class
    - Predictable: same inputs always produce the same decision and reason
    - Exact matching: names are compared as-is, case-sensitive

How it works:
    1. The host extracts a WorkloadDescriptor from the admission object
    2. decide() compares its priority class against the allow or deny list
    3. Returns PolicyDecision (accept, or reject with reason)
"""

from priority_class_policy.errors import ExtractionError
from priority_class_policy.extract import PodSpecExtractor, WorkloadExtractor
from priority_class_policy.logs import PolicyLogger
from priority_class_policy.schema import PolicyDecision, ValidationRequest, WorkloadDescriptor


MISCONFIGURED_REASON = (
    "Policy misconfigured: must set exactly one of "
    "allowed_priority_classes or denied_priority_classes"
)
EXTRACTION_FAILED_REASON = "Priority class policy failed to extract PodSpec from the request"


def decide(
    workload: WorkloadDescriptor,
    allowed: frozenset[str] | None,
    denied: frozenset[str] | None,
) -> PolicyDecision:
    """
    Evaluate a workload's priority class against the allow/deny lists.

    Args:
        workload: The extracted workload descriptor
        allowed: Allowed priority classes, or None if unset
        denied: Denied priority classes, or None if unset

    Returns:
        PolicyDecision indicating accept/reject with reason
    """
    name = workload.priority_class_name
    if name is None:
        return PolicyDecision.allow()

    if allowed is not None and denied is None:
        if name not in allowed:
            return PolicyDecision.deny(f'Priority class "{name}" is not in allowed list.')
        return PolicyDecision.allow()

    if allowed is None and denied is not None:
        if name in denied:
            return PolicyDecision.deny(f'Priority class "{name}" is in denied list.')
        return PolicyDecision.allow()

    return PolicyDecision.deny(MISCONFIGURED_REASON)


class PriorityClassPolicy:
    """
    Evaluates one admission request end to end.

    Usage:
        policy = PriorityClassPolicy(logger)
        decision = policy.validate(validation_request)
        if decision.allowed:
            # admit
        else:
            # reject with decision.reason

    Attributes:
        logger: Logger handle owned by the process entry point
        extractor: Turns admission objects into workload descriptors
    """

    def __init__(
        self,
        logger: PolicyLogger,
        extractor: WorkloadExtractor | None = None,
    ) -> None:
        self.logger = logger
        self.extractor = extractor or PodSpecExtractor()

    def validate(self, request: ValidationRequest) -> PolicyDecision:
        """
        Evaluate a validation request.

        Extraction failures reject the request with the underlying cause.
        Objects that carry no workload spec are accepted with a warning.
        """
        settings = request.settings

        try:
            workload = self.extractor.extract(
                request.request.object,
                kind=request.request.object_kind,
            )
        except ExtractionError as e:
            self.logger.error(
                "%s: %s",
                EXTRACTION_FAILED_REASON,
                e.message,
                extra={"err": e.message, "uid": request.request.uid},
            )
            return PolicyDecision.deny(f"{EXTRACTION_FAILED_REASON}: {e.message}")

        if workload is None:
            self.logger.warning("no PodSpec found", extra={"uid": request.request.uid})
            return PolicyDecision.allow()

        decision = decide(
            workload,
            settings.allowed_priority_classes,
            settings.denied_priority_classes,
        )
        if not decision.allowed:
            self.logger.info(
                "rejected: %s",
                decision.reason,
                extra={
                    "uid": request.request.uid,
                    "priority_class_name": workload.priority_class_name,
                },
            )
        return decision
