"""Error taxonomy for the bench-mode tool.

Every failure aborts the run at the step where it happened; the exceptions
carry that step so the entry script can report it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .models import RunStep


class BenchModeError(Exception):
    """Base exception for a bench-mode run that has to stop."""

    def __init__(self, message: str, step: RunStep | None = None) -> None:
        """Initialise BenchModeError with message and failing step.

        Args:
            message: The user-facing description of the failed operation.
            step: The run step that was executing when the failure occurred.
        """
        super().__init__(message)
        self.step = step


class ResolutionFailure(BenchModeError):
    """An alias or identifier could not be mapped to a canonical scheme GUID."""


class StartupInvariantViolation(ResolutionFailure):
    """No active power scheme could be resolved, so there is nothing to restore to."""


class CommandFailure(BenchModeError):
    """A powercfg write, activation, duplication or rename returned non-zero."""

    def __init__(
        self, message: str, step: RunStep | None = None, command: Sequence[str] = ()
    ) -> None:
        """Initialise CommandFailure with the offending powercfg arguments.

        Args:
            message: The user-facing description of the failed operation.
            step: The run step that was executing when the failure occurred.
            command: Arguments of the failing powercfg invocation.
        """
        super().__init__(message, step)
        self.command = tuple(command)


class PowercfgUnavailableError(BenchModeError):
    """powercfg could not be launched or did not finish in time."""
