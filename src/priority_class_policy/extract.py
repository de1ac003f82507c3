"""
Workload extraction.

Deriving a workload descriptor from an admission object is a host-side
capability: the decision engine only depends on the WorkloadExtractor
protocol and never looks at raw objects itself.

PodSpecExtractor is the default implementation. It knows where the pod
spec lives for each built-in Kubernetes workload kind:

    Pod                                   spec
    Deployment, ReplicaSet, StatefulSet,
    DaemonSet, ReplicationController, Job spec.template.spec
    CronJob                               spec.jobTemplate.spec.template.spec

Objects of any other kind carry no pod spec and yield None, as do workload
objects whose spec is absent at some level of the path.
"""

from collections.abc import Mapping
from typing import Any, Protocol

from priority_class_policy.errors import ExtractionError
from priority_class_policy.schema import WorkloadDescriptor


POD_SPEC_PATHS: dict[str, tuple[str, ...]] = {
    "Pod": ("spec",),
    "Deployment": ("spec", "template", "spec"),
    "ReplicaSet": ("spec", "template", "spec"),
    "StatefulSet": ("spec", "template", "spec"),
    "DaemonSet": ("spec", "template", "spec"),
    "ReplicationController": ("spec", "template", "spec"),
    "Job": ("spec", "template", "spec"),
    "CronJob": ("spec", "jobTemplate", "spec", "template", "spec"),
}


class WorkloadExtractor(Protocol):
    """Anything that can turn an admission object into a workload descriptor."""

    def extract(self, obj: Any, kind: str | None = None) -> WorkloadDescriptor | None:
        """
        Extract the workload descriptor from an admission object.

        Args:
            obj: The admitted object
            kind: Kind named by the admission request, used when the object
                does not carry its own

        Returns:
            The descriptor, or None if the object carries no workload spec

        Raises:
            ExtractionError: If the object is malformed
        """
        ...


class PodSpecExtractor:
    """Extracts the pod spec's priority class from Kubernetes workloads."""

    def __init__(self, paths: Mapping[str, tuple[str, ...]] | None = None) -> None:
        self.paths = dict(POD_SPEC_PATHS if paths is None else paths)

    def extract(self, obj: Any, kind: str | None = None) -> WorkloadDescriptor | None:
        if not isinstance(obj, Mapping):
            raise ExtractionError(
                cause=f"expected an object, got {type(obj).__name__}",
            )

        object_kind = obj.get("kind")
        if object_kind is None:
            object_kind = kind
        if not isinstance(object_kind, str):
            raise ExtractionError(cause="object has no kind")

        path = self.paths.get(object_kind)
        if path is None:
            return None

        pod_spec = self._walk(obj, path, object_kind)
        if pod_spec is None:
            return None

        priority_class_name = pod_spec.get("priorityClassName")
        if priority_class_name is not None and not isinstance(priority_class_name, str):
            raise ExtractionError(
                kind=object_kind,
                cause=(
                    "priorityClassName must be a string, got "
                    f"{type(priority_class_name).__name__}"
                ),
            )

        return WorkloadDescriptor(priority_class_name=priority_class_name)

    def _walk(
        self,
        obj: Mapping[str, Any],
        path: tuple[str, ...],
        kind: str,
    ) -> Mapping[str, Any] | None:
        """
        Follow `path` into `obj`.

        An absent level means there is no pod spec and gives None. A level
        that is present but not a mapping raises.
        """
        current: Any = obj
        walked: list[str] = []
        for key in path:
            walked.append(key)
            current = current.get(key)
            if current is None:
                return None
            if not isinstance(current, Mapping):
                raise ExtractionError(
                    kind=kind,
                    cause=f"{kind} has no valid {'.'.join(walked)}",
                )
        return current
