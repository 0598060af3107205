"""Type definitions for kex."""

import copy
from dataclasses import dataclass, field
from typing import Any

# A container entry exactly as kubectl returns it in ``spec.containers``.
ContainerDescriptor = dict[str, Any]


@dataclass
class PodInfo:
    name: str
    namespace: str
    status: str
    labels: dict[str, str]


@dataclass(frozen=True)
class PodTemplate:
    """Read-only view of an existing pod, used as the source for a debug pod."""

    name: str
    namespace: str
    generate_name: str
    labels: dict[str, str]
    containers: list[ContainerDescriptor]
    volumes: list[dict[str, Any]] | None = None

    @classmethod
    def from_json(cls, item: dict[str, Any]) -> "PodTemplate":
        metadata = item.get("metadata", {})
        spec = item.get("spec", {})
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            generate_name=metadata.get("generateName", ""),
            labels=dict(metadata.get("labels", {})),
            containers=list(spec.get("containers", [])),
            volumes=spec.get("volumes"),
        )


@dataclass(frozen=True)
class ResourceLimits:
    cpu_request: str = "100m"
    memory_request: str = "256Mi"
    cpu_limit: str = "1"
    memory_limit: str = "1Gi"

    def to_json(self) -> dict[str, dict[str, str]]:
        return {
            "requests": {"cpu": self.cpu_request, "memory": self.memory_request},
            "limits": {"cpu": self.cpu_limit, "memory": self.memory_limit},
        }


@dataclass
class DebugPodSpec:
    generate_name: str
    namespace: str
    labels: dict[str, str]
    containers: list[ContainerDescriptor]
    volumes: list[dict[str, Any]] | None = None
    restart_policy: str = field(default="Never", init=False)

    def to_manifest(self) -> dict[str, Any]:
        """Render the spec as a v1 Pod manifest suitable for ``kubectl create -f -``."""
        metadata: dict[str, Any] = {
            "generateName": self.generate_name,
            "labels": dict(self.labels),
        }
        if self.namespace:
            metadata["namespace"] = self.namespace

        spec: dict[str, Any] = {
            "containers": copy.deepcopy(self.containers),
            "restartPolicy": self.restart_policy,
        }
        if self.volumes is not None:
            spec["volumes"] = copy.deepcopy(self.volumes)

        return {
            "apiVersion": "v1",
            "kind": "Pod",
            "metadata": metadata,
            "spec": spec,
        }
