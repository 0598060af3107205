"""Kubernetes operations for kex, driven through the kubectl binary."""

import json
import subprocess
from typing import Any

from kex.errors import CreateFailedError
from kex.types import PodInfo


class Kubectl:
    """Runs kubectl with a fixed list of connection options.

    The options (namespace, context, kubeconfig, credentials, ...) are placed
    right after the binary name on every call and are never interpreted here.
    Every command is an argument list, nothing goes through a shell.
    """

    def __init__(self, options: list[str] | None = None, binary: str = "kubectl"):
        self.options = list(options or [])
        self.binary = binary

    def _cmd(self, *args: str) -> list[str]:
        return [self.binary, *self.options, *args]

    def get_pods(
        self, label_selector: str, field_selector: str | None = None
    ) -> list[dict[str, Any]]:
        cmd = self._cmd("get", "pods", "-l", label_selector, "-o", "json")
        if field_selector:
            cmd.extend(["--field-selector", field_selector])

        result = subprocess.run(cmd, capture_output=True, text=True, check=True)
        pods_json = json.loads(result.stdout)
        return pods_json.get("items", [])

    def get_pod_phase(self, name: str) -> str:
        cmd = self._cmd("get", "pod", name, "-o", "jsonpath={.status.phase}")
        result = subprocess.run(cmd, capture_output=True, text=True, check=True)
        return result.stdout.strip()

    def create_pod(self, manifest: dict[str, Any]) -> str:
        """Create a pod from a manifest and return the name the server generated."""
        cmd = self._cmd("create", "-f", "-", "-o", "json")
        result = subprocess.run(
            cmd,
            input=json.dumps(manifest),
            capture_output=True,
            text=True,
            check=False,
        )

        if result.returncode != 0:
            raise CreateFailedError(
                f"kubectl create failed (exit code {result.returncode}): "
                f"{result.stderr.strip()}"
            )

        try:
            return json.loads(result.stdout)["metadata"]["name"]
        except (ValueError, KeyError, TypeError) as e:
            raise CreateFailedError(
                f"Could not read the created pod name from kubectl output: {e}"
            ) from e

    def delete_pods(self, names: list[str]) -> None:
        # --ignore-not-found makes deleting an already deleted pod a no-op
        if not names:
            return
        cmd = self._cmd(
            "delete", "pod", *names, "--ignore-not-found", "--wait=false"
        )
        subprocess.run(cmd, capture_output=True, text=True, check=True)

    def exec_interactive(
        self, pod_name: str, container: str, command: list[str]
    ) -> int:
        """Attach an interactive session and block until it ends.

        stdin/stdout/stderr are inherited so kubectl owns the terminal.
        """
        cmd = self._cmd("exec", "-it", pod_name, "-c", container, "--", *command)
        return subprocess.run(cmd).returncode


def to_pod_info(item: dict[str, Any]) -> PodInfo:
    return PodInfo(
        name=item["metadata"]["name"],
        namespace=item["metadata"].get("namespace", ""),
        status=item.get("status", {}).get("phase", "Unknown"),
        labels=item["metadata"].get("labels", {}),
    )
