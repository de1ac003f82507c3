"""
Unit tests for workload extraction.

Tests cover:
- Pod spec location for each supported kind
- Kinds without a pod spec
- Malformed objects
"""

from typing import Any

import pytest

from priority_class_policy.errors import ERROR_EXTRACTION_FAILED, ExtractionError
from priority_class_policy.extract import POD_SPEC_PATHS, PodSpecExtractor, WorkloadExtractor


def pod_spec(priority_class_name: str | None = "high-priority") -> dict[str, Any]:
    spec: dict[str, Any] = {"containers": [{"name": "app", "image": "app:1"}]}
    if priority_class_name is not None:
        spec["priorityClassName"] = priority_class_name
    return spec


def template(spec: dict[str, Any]) -> dict[str, Any]:
    return {"metadata": {"labels": {"app": "app"}}, "spec": spec}


@pytest.fixture
def extractor() -> PodSpecExtractor:
    return PodSpecExtractor()


class TestSupportedKinds:
    """Where each kind keeps its pod spec."""

    def test_pod(self, extractor: PodSpecExtractor) -> None:
        """Pods carry the spec directly."""
        obj = {"kind": "Pod", "spec": pod_spec("low-priority")}
        assert extractor.extract(obj).priority_class_name == "low-priority"

    @pytest.mark.parametrize(
        "kind",
        ["Deployment", "ReplicaSet", "StatefulSet", "DaemonSet", "ReplicationController", "Job"],
    )
    def test_templated_kinds(self, extractor: PodSpecExtractor, kind: str) -> None:
        """Controllers carry the spec under spec.template.spec."""
        obj = {"kind": kind, "spec": {"replicas": 2, "template": template(pod_spec())}}
        assert extractor.extract(obj).priority_class_name == "high-priority"

    def test_cronjob(self, extractor: PodSpecExtractor) -> None:
        """CronJobs nest the pod template inside the job template."""
        obj = {
            "kind": "CronJob",
            "spec": {
                "schedule": "*/5 * * * *",
                "jobTemplate": {"spec": {"template": template(pod_spec("batch"))}},
            },
        }
        assert extractor.extract(obj).priority_class_name == "batch"

    def test_unset_priority_class(self, extractor: PodSpecExtractor) -> None:
        """A pod spec without priorityClassName gives an unset descriptor."""
        descriptor = extractor.extract({"kind": "Pod", "spec": pod_spec(None)})
        assert descriptor is not None
        assert descriptor.priority_class_name is None

    def test_explicit_null_priority_class(self, extractor: PodSpecExtractor) -> None:
        """priorityClassName: null is the same as unset."""
        descriptor = extractor.extract({"kind": "Pod", "spec": {"priorityClassName": None}})
        assert descriptor.priority_class_name is None

    def test_all_paths_registered(self) -> None:
        """Every default path starts at the object's spec."""
        assert all(path[0] == "spec" for path in POD_SPEC_PATHS.values())


class TestOtherKinds:
    """Objects without a pod spec."""

    @pytest.mark.parametrize("kind", ["ConfigMap", "Service", "Namespace", "PriorityClass"])
    def test_returns_none(self, extractor: PodSpecExtractor, kind: str) -> None:
        """Kinds without a workload yield None rather than an error."""
        assert extractor.extract({"kind": kind, "metadata": {"name": "x"}}) is None

    def test_custom_paths(self) -> None:
        """Extra kinds can be registered through the constructor."""
        extractor = PodSpecExtractor({"Rollout": ("spec", "template", "spec")})
        obj = {"kind": "Rollout", "spec": {"template": template(pod_spec("canary"))}}
        assert extractor.extract(obj).priority_class_name == "canary"
        assert extractor.extract({"kind": "Pod", "spec": pod_spec()}) is None


class TestMalformedObjects:
    """Objects that cannot be read."""

    @pytest.mark.parametrize("obj", [None, "pod", 42, ["kind", "Pod"]])
    def test_not_a_mapping(self, extractor: PodSpecExtractor, obj: Any) -> None:
        """Non-object payloads raise."""
        with pytest.raises(ExtractionError) as exc_info:
            extractor.extract(obj)
        assert exc_info.value.code == ERROR_EXTRACTION_FAILED

    def test_missing_kind(self, extractor: PodSpecExtractor) -> None:
        """Objects must say what they are."""
        with pytest.raises(ExtractionError, match="no kind"):
            extractor.extract({"spec": pod_spec()})

    def test_spec_not_a_mapping(self, extractor: PodSpecExtractor) -> None:
        """A spec level that is present but scalar is malformed."""
        with pytest.raises(ExtractionError) as exc_info:
            extractor.extract({"kind": "Pod", "spec": "oops"})
        assert exc_info.value.kind == "Pod"
        assert exc_info.value.message == "Pod has no valid spec"

    def test_template_not_a_mapping(self, extractor: PodSpecExtractor) -> None:
        """The error names the path that could not be followed."""
        with pytest.raises(ExtractionError) as exc_info:
            extractor.extract({"kind": "Job", "spec": {"template": "oops"}})
        assert exc_info.value.message == "Job has no valid spec.template"

    def test_priority_class_not_a_string(self, extractor: PodSpecExtractor) -> None:
        """priorityClassName must be a string when present."""
        with pytest.raises(ExtractionError, match="must be a string"):
            extractor.extract({"kind": "Pod", "spec": {"priorityClassName": 100}})


class TestAbsentSpec:
    """Workload kinds whose pod spec is missing."""

    def test_pod_without_spec(self, extractor: PodSpecExtractor) -> None:
        """A Pod with no spec carries no workload spec."""
        assert extractor.extract({"kind": "Pod", "metadata": {"name": "web"}}) is None

    def test_deployment_without_spec(self, extractor: PodSpecExtractor) -> None:
        """A Deployment with no spec carries no workload spec."""
        assert extractor.extract({"kind": "Deployment", "metadata": {"name": "web"}}) is None

    def test_deployment_without_template(self, extractor: PodSpecExtractor) -> None:
        """Absence at any level of the path yields None."""
        assert extractor.extract({"kind": "Deployment", "spec": {"replicas": 1}}) is None

    def test_cronjob_without_job_spec(self, extractor: PodSpecExtractor) -> None:
        """Deep paths stop at the first absent level."""
        obj = {"kind": "CronJob", "spec": {"jobTemplate": {"metadata": {}}}}
        assert extractor.extract(obj) is None

    def test_null_spec(self, extractor: PodSpecExtractor) -> None:
        """spec: null is the same as no spec."""
        assert extractor.extract({"kind": "Pod", "spec": None}) is None


class TestRequestKind:
    """Kind supplied by the admission request."""

    def test_used_when_object_has_no_kind(self, extractor: PodSpecExtractor) -> None:
        """Objects without a kind use the request's kind."""
        descriptor = extractor.extract({"spec": pod_spec("low-priority")}, kind="Pod")
        assert descriptor.priority_class_name == "low-priority"

    def test_object_kind_wins(self, extractor: PodSpecExtractor) -> None:
        """The object's own kind takes precedence."""
        obj = {"kind": "ConfigMap", "spec": pod_spec()}
        assert extractor.extract(obj, kind="Pod") is None

    def test_templated_kind_from_request(self, extractor: PodSpecExtractor) -> None:
        """The request kind selects the pod spec path."""
        obj = {"spec": {"template": template(pod_spec("batch"))}}
        assert extractor.extract(obj, kind="Job").priority_class_name == "batch"


def test_pod_spec_extractor_satisfies_protocol() -> None:
    """PodSpecExtractor can be used wherever a WorkloadExtractor is expected."""
    extractor: WorkloadExtractor = PodSpecExtractor()
    assert extractor.extract({"kind": "Pod", "spec": {}}) is not None
