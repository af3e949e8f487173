"""Data models and configuration classes for the bench-mode tool.

This module contains the power scheme enumerations, the fixed table of
performance settings applied to the benchmark scheme, and the runtime
configuration, providing a single source of truth for these values.
"""

from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass
from enum import Enum

from dotenv import dotenv_values

# Strict canonical identifier shape, used to validate configured GUIDs
STRICT_GUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


class KnownSchemeAlias(Enum):
    """Pseudo-identifiers recognised by powercfg in place of a scheme GUID."""

    ACTIVE = "scheme_current"
    BALANCED = "scheme_balanced"
    MIN = "scheme_min"  # minimal energy saving, i.e. maximum performance
    MAX = "scheme_max"  # maximal energy saving, i.e. minimum performance

    @property
    def alias(self) -> str:
        """The alias string understood by powercfg."""
        return self.value


class PowerSource(Enum):
    """Selects which of a scheme's two parameter tables a value write targets."""

    AC = "-setacvalueindex"
    DC = "-setdcvalueindex"

    @property
    def command(self) -> str:
        """The powercfg switch that writes into this table."""
        return self.value


class RunStep(Enum):
    """Steps of the benchmark switch sequence, in execution order."""

    CAPTURE_ACTIVE = "capture active scheme"
    ENSURE_BENCHMARK_SCHEME = "ensure benchmark scheme"
    APPLY_SETTINGS = "apply settings"
    SWITCH = "activate benchmark scheme"
    RESTORE = "restore prior scheme"


@dataclass(frozen=True)
class PerformanceSetting:
    """One processor setting written to both the AC and DC tables."""

    label: str
    subgroup: str
    setting: str
    value: int


BENCHMARK_SETTINGS: tuple[PerformanceSetting, ...] = (
    PerformanceSetting("perf boost mode", "sub_processor", "PERFBOOSTMODE", 0),
    PerformanceSetting("proc throttle min", "sub_processor", "PROCTHROTTLEMIN", 99),
    PerformanceSetting("proc throttle max", "sub_processor", "PROCTHROTTLEMAX", 99),
)

# Global configuration defaults from environment variables
BENCH_SCHEME_GUID = os.getenv("BENCH_SCHEME_GUID", "0ec54905-d1ac-43db-a6df-65cbe1a1dccf")
BENCH_SCHEME_NAME = os.getenv("BENCH_SCHEME_NAME", "Benchmarks")
BENCH_SCHEME_DESCRIPTION = os.getenv(
    "BENCH_SCHEME_DESCRIPTION",
    "Power scheme added by the bench-mode tool. Disables performance boost.",
)
BENCH_HOLD_SECONDS = float(os.getenv("BENCH_HOLD_SECONDS", "10"))
POWERCFG_PATH = os.getenv("POWERCFG_PATH", "powercfg")
POWERCFG_TIMEOUT = float(os.getenv("POWERCFG_TIMEOUT", "30"))


@dataclass
class BenchModeConfig:
    """Configuration settings for a bench-mode run.

    Every value has a default taken from the process environment; a .env file
    may override any of them via ``from_dotenv``.
    """

    scheme_guid: str = BENCH_SCHEME_GUID
    scheme_name: str = BENCH_SCHEME_NAME
    scheme_description: str = BENCH_SCHEME_DESCRIPTION
    hold_seconds: float = BENCH_HOLD_SECONDS
    powercfg_path: str = POWERCFG_PATH
    powercfg_timeout: float = POWERCFG_TIMEOUT

    def __post_init__(self) -> None:
        """Validate values after object creation.

        Raises:
            ValueError: If the scheme GUID is malformed or a duration is out of range.
        """
        if not STRICT_GUID_PATTERN.match(self.scheme_guid):
            msg = f"Invalid scheme GUID for BENCH_SCHEME_GUID: {self.scheme_guid}"
            raise ValueError(msg)
        if not math.isfinite(self.hold_seconds):
            msg = f"BENCH_HOLD_SECONDS must be a finite number: {self.hold_seconds}"
            raise ValueError(msg)
        if self.hold_seconds < 0:
            msg = f"BENCH_HOLD_SECONDS must not be negative: {self.hold_seconds}"
            raise ValueError(msg)
        if not math.isfinite(self.powercfg_timeout):
            msg = f"POWERCFG_TIMEOUT must be a finite number: {self.powercfg_timeout}"
            raise ValueError(msg)
        if self.powercfg_timeout <= 0:
            msg = f"POWERCFG_TIMEOUT must be positive: {self.powercfg_timeout}"
            raise ValueError(msg)

    @classmethod
    def from_dotenv(cls, env_file: str = ".env") -> BenchModeConfig:
        """Create configuration from a .env file, falling back to the defaults.

        A missing file is not an error; every key is optional.

        Returns:
            BenchModeConfig: An instance populated with values from the .env file.
        """
        config = dotenv_values(env_file)

        def get_optional(key: str, default: str) -> str:
            value = config.get(key)
            return default if value is None else value

        def get_optional_float(key: str, default: float) -> float:
            value = config.get(key)
            if value is None:
                return default
            try:
                return float(value)
            except ValueError as e:
                msg = f"Invalid numeric value for environment variable {key}: {value}"
                raise ValueError(msg) from e

        return cls(
            scheme_guid=get_optional("BENCH_SCHEME_GUID", BENCH_SCHEME_GUID),
            scheme_name=get_optional("BENCH_SCHEME_NAME", BENCH_SCHEME_NAME),
            scheme_description=get_optional("BENCH_SCHEME_DESCRIPTION", BENCH_SCHEME_DESCRIPTION),
            hold_seconds=get_optional_float("BENCH_HOLD_SECONDS", BENCH_HOLD_SECONDS),
            powercfg_path=get_optional("POWERCFG_PATH", POWERCFG_PATH),
            powercfg_timeout=get_optional_float("POWERCFG_TIMEOUT", POWERCFG_TIMEOUT),
        )


@dataclass(frozen=True)
class RunReport:
    """Outcome of a completed run."""

    original_guid: str
    benchmark_guid: str
    scheme_created: bool
    hold_seconds: float
