"""Errors raised by kex."""

import signal


class KexError(Exception):
    """Base class for all kex errors."""


class ConfigError(KexError):
    """A KEX_* setting has an invalid value."""


class NotFoundError(KexError):
    """No pod matched the application label selector."""


class ContainerNotFoundError(KexError):
    """The target container is not part of the fetched pod."""


class CreateFailedError(KexError):
    """kubectl rejected the debug pod or returned output we could not parse."""


class ReadinessTimeoutError(KexError):
    """The debug pod did not reach the Running phase in time."""


class SessionInterruptedError(KexError):
    """The interactive session was ended by a signal."""

    def __init__(self, signum: int):
        self.signum = signum
        try:
            name = signal.Signals(signum).name
        except ValueError:
            name = f"signal {signum}"
        super().__init__(f"Session interrupted by {name}")
