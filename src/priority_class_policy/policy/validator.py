"""
Settings validation.

Checked once by the host before the settings are trusted. The decision
engine never calls this and does not assume it was called.

Rules (first match wins):
    1. Both allowed and denied are non-empty: invalid
    2. allowed is present but empty: invalid
    3. denied is present but empty: invalid
    4. Anything else: valid

Note that rule 4 includes settings where neither field is set. Those pass
validation, and the decision engine then rejects every workload that
requests a priority class.
"""

from priority_class_policy.errors import SettingsValidationError
from priority_class_policy.schema import Settings


BOTH_SET_MESSAGE = "Both allowed and denied priority classes are set. Please use only one."
EMPTY_ALLOWED_MESSAGE = "Allowed priority classes cannot be empty."
EMPTY_DENIED_MESSAGE = "Denied priority classes cannot be empty."


def validate_settings(settings: Settings) -> str | None:
    """
    Check the settings against the allow/deny rules.

    Args:
        settings: The settings to check

    Returns:
        None if the settings are usable, otherwise the error message
    """
    allowed = settings.allowed_priority_classes
    denied = settings.denied_priority_classes

    if allowed and denied:
        return BOTH_SET_MESSAGE
    if allowed is not None and not allowed:
        return EMPTY_ALLOWED_MESSAGE
    if denied is not None and not denied:
        return EMPTY_DENIED_MESSAGE
    return None


def ensure_valid_settings(settings: Settings, source: str | None = None) -> Settings:
    """
    Like validate_settings, but raise instead of returning a message.

    Raises:
        SettingsValidationError: If the settings are not usable
    """
    message = validate_settings(settings)
    if message is not None:
        raise SettingsValidationError(reason=message, source=source)
    return settings
