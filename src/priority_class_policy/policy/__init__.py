"""
Policy module for the priority class policy.

Key concepts:
    - validate_settings: Pre-flight check that the settings are self-consistent
    - decide: Pure decision for one workload against the allow/deny lists
    - PriorityClassPolicy: Per-request flow (extraction, decision, logging)

The decision path must be:
    - Fail-closed: Unusable settings reject rather than admit
    - Predictable: Same inputs always produce the same decision
    - Stateless: Nothing carries over from one request to the next
"""

from priority_class_policy.policy.engine import PriorityClassPolicy, decide
from priority_class_policy.policy.validator import ensure_valid_settings, validate_settings

__all__ = [
    "PriorityClassPolicy",
    "decide",
    "ensure_valid_settings",
    "validate_settings",
]
