"""Runtime configuration for kex.

Settings are read once at startup from ``KEX_*`` environment variables and
passed around as an immutable ``KexConfig``.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from kex.errors import ConfigError
from kex.types import ResourceLimits

UNKNOWN_RUNNER = "unknown"


@dataclass(frozen=True)
class KexConfig:
    heritage: str = "kex"
    sleep_timeout: int = 3600
    shell: tuple[str, ...] = ("/bin/sh", "-c")
    default_command: tuple[str, ...] = ("/bin/sh",)
    poll_interval: float = 2.0
    readiness_retries: int = 10
    resources: ResourceLimits = field(default_factory=ResourceLimits)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "KexConfig":
        env = os.environ if environ is None else environ
        defaults = cls()
        resources = ResourceLimits(
            cpu_request=env.get("KEX_CPU_REQUEST", defaults.resources.cpu_request),
            memory_request=env.get(
                "KEX_MEMORY_REQUEST", defaults.resources.memory_request
            ),
            cpu_limit=env.get("KEX_CPU_LIMIT", defaults.resources.cpu_limit),
            memory_limit=env.get("KEX_MEMORY_LIMIT", defaults.resources.memory_limit),
        )
        return cls(
            heritage=env.get("KEX_HERITAGE", defaults.heritage),
            sleep_timeout=_positive(
                env, "KEX_SLEEP_TIMEOUT", int, defaults.sleep_timeout
            ),
            poll_interval=_positive(
                env, "KEX_POLL_INTERVAL", float, defaults.poll_interval
            ),
            readiness_retries=_positive(
                env, "KEX_READINESS_RETRIES", int, defaults.readiness_retries
            ),
            resources=resources,
        )


def _positive(env: Mapping[str, str], name: str, kind: type, default):
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = kind(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got '{raw}'.")
    if value <= 0:
        raise ConfigError(f"{name} must be greater than zero, got '{raw}'.")
    return value


def resolve_runner(environ: Mapping[str, str] | None = None) -> str:
    """Identify who is running kex: SUDO_USER, then USER, then a sentinel."""
    env = os.environ if environ is None else environ
    runner = env.get("SUDO_USER") or env.get("USER") or UNKNOWN_RUNNER
    return runner.lower()
