"""Debug pod lifecycle: create, wait, attach, delete, sweep."""

import signal
import subprocess
import time
from collections.abc import Iterator
from contextlib import contextmanager

from kex.config import KexConfig
from kex.errors import ReadinessTimeoutError, SessionInterruptedError
from kex.kubectl import Kubectl, to_pod_info
from kex.types import DebugPodSpec, PodInfo
from kex.ui import (
    print_info,
    print_session_banner,
    print_step,
    print_success,
    print_warning,
    render_pods_table,
)

_TERMINAL_PHASES = ("Succeeded", "Failed")

# Signals that end a session. SIGINT arrives as KeyboardInterrupt.
_SESSION_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)


# ===== Signal handling =====


@contextmanager
def _interrupts_raise() -> Iterator[None]:
    """Turn SIGINT/SIGTERM/SIGHUP into SessionInterruptedError."""

    def _raise(signum, frame):
        raise SessionInterruptedError(signum)

    previous = {sig: signal.signal(sig, _raise) for sig in _SESSION_SIGNALS}
    try:
        yield
    except KeyboardInterrupt:
        raise SessionInterruptedError(signal.SIGINT) from None
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


@contextmanager
def _interrupts_ignored() -> Iterator[None]:
    # SIG_IGN is inherited by kubectl, so it cannot be cut short either
    signals = (signal.SIGINT, *_SESSION_SIGNALS)
    previous = {sig: signal.signal(sig, signal.SIG_IGN) for sig in signals}
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


# ===== Pod lifecycle =====


def delete_pod(kubectl: Kubectl, pod_name: str) -> None:
    # Interrupts stay ignored until the delete has been issued
    with _interrupts_ignored():
        try:
            kubectl.delete_pods([pod_name])
        except subprocess.CalledProcessError as e:
            print_warning(
                f"Failed to delete pod '{pod_name}': {(e.stderr or '').strip()}"
            )
            return
        print_success(f"Deleted pod [blue]{pod_name}[/blue]", prefix="🧹")


@contextmanager
def debug_pod(kubectl: Kubectl, spec: DebugPodSpec) -> Iterator[str]:
    """Create the debug pod and delete it when the block exits, however it exits.

    Raises:
        CreateFailedError: If the pod could not be created. Nothing is deleted.
    """
    print_step("Creating debug pod...")
    pod_name = kubectl.create_pod(spec.to_manifest())
    print_success(f"Created pod [blue]{pod_name}[/blue]")
    try:
        yield pod_name
    finally:
        delete_pod(kubectl, pod_name)


def wait_for_running(kubectl: Kubectl, pod_name: str, config: KexConfig) -> None:
    """Poll the pod phase until it is Running.

    A failed status query is reported separately from a pod that is not ready
    yet, but both count against ``config.readiness_retries``.

    Raises:
        ReadinessTimeoutError: If the pod is not Running after all attempts, or
            reached a terminal phase.
    """
    retries = config.readiness_retries
    phase = "Unknown"

    print_step(f"Waiting for pod [blue]{pod_name}[/blue] to start...", prefix="⏳")
    for attempt in range(1, retries + 1):
        try:
            phase = kubectl.get_pod_phase(pod_name)
        except subprocess.CalledProcessError as e:
            print_warning(
                f"Status query failed (attempt {attempt}/{retries}): "
                f"{(e.stderr or '').strip()}"
            )
        else:
            if phase == "Running":
                print_success(f"Pod [blue]{pod_name}[/blue] is running")
                return
            if phase in _TERMINAL_PHASES:
                raise ReadinessTimeoutError(
                    f"Pod '{pod_name}' stopped with phase '{phase}' "
                    "before it was ready."
                )

        if attempt < retries:
            time.sleep(config.poll_interval)

    raise ReadinessTimeoutError(
        f"Pod '{pod_name}' not Running after {retries} attempts (last phase: {phase})."
    )


def sweep_orphans(kubectl: Kubectl, config: KexConfig) -> list[PodInfo]:
    """Delete every debug pod that is no longer running, whoever created it.

    Returns the pods that were removed. Query failures count as no orphans.
    """
    selector = f"heritage={config.heritage}"
    try:
        items = kubectl.get_pods(selector, field_selector="status.phase!=Running")
    except subprocess.CalledProcessError as e:
        print_info(f"Skipping orphan sweep: {(e.stderr or '').strip()}")
        return []
    except ValueError:
        print_info("Skipping orphan sweep: could not parse kubectl output")
        return []

    orphans = [to_pod_info(item) for item in items]
    if not orphans:
        return []

    print_step(f"Removing {len(orphans)} orphaned debug pod(s)...", prefix="🧹")
    render_pods_table(orphans)
    with _interrupts_ignored():
        try:
            kubectl.delete_pods([pod.name for pod in orphans])
        except subprocess.CalledProcessError as e:
            print_warning(f"Failed to delete orphaned pods: {(e.stderr or '').strip()}")
            return []
    return orphans


def run_session(
    kubectl: Kubectl,
    spec: DebugPodSpec,
    container: str,
    command: list[str],
    config: KexConfig,
) -> int:
    """Run one debug session and return the exit code of ``command``.

    The pod is deleted on every path out of the session, and the orphan sweep
    runs afterwards even if the pod could not be created.
    """
    exit_code = 1
    try:
        with debug_pod(kubectl, spec) as pod_name:
            try:
                with _interrupts_raise():
                    try:
                        wait_for_running(kubectl, pod_name, config)
                    except ReadinessTimeoutError as e:
                        print_warning(f"{e} Attempting the session anyway.")

                    print_session_banner(pod_name, container, command)
                    exit_code = kubectl.exec_interactive(pod_name, container, command)
            except SessionInterruptedError as e:
                print_warning(str(e))
                exit_code = 128 + e.signum
    finally:
        sweep_orphans(kubectl, config)
    return exit_code
