"""Derive an isolated debug pod from a running pod's spec."""

import copy

from kex.config import KexConfig
from kex.errors import ContainerNotFoundError
from kex.types import ContainerDescriptor, DebugPodSpec, PodTemplate

# Fields carried over from the target container. Everything else (probes,
# command, args, resources, lifecycle hooks, ...) is dropped.
_CONTAINER_FIELDS = (
    "name",
    "image",
    "imagePullPolicy",
    "env",
    "envFrom",
    "volumeMounts",
)


def find_container(
    containers: list[ContainerDescriptor], name: str
) -> ContainerDescriptor:
    for container in containers:
        if container.get("name") == name:
            return container

    available = ", ".join(c.get("name", "?") for c in containers) or "none"
    raise ContainerNotFoundError(
        f"Container '{name}' not found in pod (available: {available})."
    )


def debug_container(
    container: ContainerDescriptor, config: KexConfig
) -> ContainerDescriptor:
    """Build an idle, interactive copy of a container."""
    patched = {
        key: copy.deepcopy(container[key])
        for key in _CONTAINER_FIELDS
        if key in container
    }
    patched["command"] = list(config.shell)
    patched["args"] = [f"sleep {config.sleep_timeout}"]
    # Keep the shell alive while nobody is attached
    patched["stdin"] = True
    patched["tty"] = True
    patched["resources"] = config.resources.to_json()
    return patched


def transform(
    original: PodTemplate,
    target_container: str,
    runner: str,
    config: KexConfig = KexConfig(),
) -> DebugPodSpec:
    """Derive a debug pod spec from ``original``.

    The target container comes first, patched by ``debug_container``. The
    remaining containers follow unchanged and in their original order so the
    target's sidecars keep running. Volumes are passed through as-is.

    Raises:
        ContainerNotFoundError: If ``target_container`` is not in the pod.
    """
    target = find_container(original.containers, target_container)
    runner = runner.lower()

    containers = [debug_container(target, config)]
    containers.extend(
        copy.deepcopy(c) for c in original.containers if c is not target
    )

    prefix = original.generate_name or f"{original.name}-"
    app_label = original.labels.get("app", target_container)

    labels = dict(original.labels)
    labels["app"] = f"{app_label}-{config.heritage}"
    labels["heritage"] = config.heritage
    labels["runner"] = runner

    return DebugPodSpec(
        generate_name=f"{prefix}{config.heritage}-{runner}-",
        namespace=original.namespace,
        labels=labels,
        containers=containers,
        volumes=copy.deepcopy(original.volumes),
    )
