"""Wrapper around the Windows powercfg command.

The rest of the tool talks to the OS power service only through an object with
a ``run(*args)`` method returning a ``PowercfgResult``, so tests can substitute
a recorder with scripted results.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Protocol

from .exceptions import PowercfgUnavailableError
from .logger import logger


@dataclass(frozen=True)
class PowercfgResult:
    """Exit status and captured output of one powercfg invocation."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """True when powercfg reported success."""
        return self.returncode == 0


class PowercfgService(Protocol):
    """Anything that can execute powercfg with the given arguments."""

    def run(self, *args: str) -> PowercfgResult: ...


class Powercfg:
    """Executes powercfg as a blocking subprocess."""

    def __init__(self, executable: str = "powercfg", timeout: float = 30.0) -> None:
        """Initialise the wrapper.

        Args:
            executable: Name or path of the powercfg binary.
            timeout: Seconds to wait for a single invocation to finish.
        """
        self.executable = executable
        self.timeout = timeout

    def run(self, *args: str) -> PowercfgResult:
        """Run powercfg once and wait for it to exit.

        Returns:
            The exit status and decoded output. Undecodable bytes are replaced.

        Raises:
            PowercfgUnavailableError: If powercfg cannot be started or times out.
        """
        command = [self.executable, *args]
        logger.debug("[powercfg] %s", " ".join(args))
        try:
            completed = subprocess.run(
                command,
                check=False,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            msg = f"powercfg {' '.join(args)} timed out after {self.timeout:g}s"
            raise PowercfgUnavailableError(msg) from e
        except OSError as e:
            msg = f"Failed to execute {self.executable} with args {list(args)}: {e}"
            raise PowercfgUnavailableError(msg) from e

        logger.debug("[powercfg] exit status %d", completed.returncode)
        if completed.returncode != 0 and completed.stderr:
            logger.debug("[powercfg] stderr: %s", completed.stderr.strip())
        return PowercfgResult(completed.returncode, completed.stdout or "", completed.stderr or "")
