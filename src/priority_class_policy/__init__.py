"""
priority-class-policy - Admission policy restricting workload priority classes.

Given the settings (an allow list or a deny list of priority class names)
and an admission request, the policy decides whether the workload's
priority class is acceptable.

Example usage:
    $ priority-class-policy validate-settings settings.yaml
    $ priority-class-policy validate request.json
    $ priority-class-policy protocol-version
"""

__version__ = "0.1.0"
__author__ = "priority-class-policy Contributors"

__all__ = [
    "__version__",
    "__author__",
]
