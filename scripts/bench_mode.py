#!/usr/bin/env python3
"""Temporary benchmark power scheme switcher.

Switches the machine to a dedicated benchmark power scheme for a fixed hold
period, then restores whichever scheme was active before. The benchmark scheme
is created on first use by duplicating the maximum-performance scheme under a
well-known GUID; later runs reuse it. On every run, processor performance boost
is disabled and the processor throttle is pinned to 99% on both AC and DC power,
so clock speeds stay stable for measurement.

Any failure stops the run at the failing step. Nothing is rolled back: settings
already written stay written, and a failed restore leaves the benchmark scheme
active until the operator switches back manually.
"""

from __future__ import annotations

import argparse
import sys
import time
from typing import TYPE_CHECKING

from bench_helpers.exceptions import (
    BenchModeError,
    CommandFailure,
    ResolutionFailure,
    StartupInvariantViolation,
)
from bench_helpers.logger import logger
from bench_helpers.models import (
    BENCH_HOLD_SECONDS,
    BENCH_SCHEME_GUID,
    BENCHMARK_SETTINGS,
    BenchModeConfig,
    KnownSchemeAlias,
    PowerSource,
    RunReport,
    RunStep,
)
from bench_helpers.power_scheme import PowerScheme
from bench_helpers.powercfg import Powercfg

if TYPE_CHECKING:
    from collections.abc import Callable

    from bench_helpers.powercfg import PowercfgService

EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


class BenchmarkOrchestrator:
    """Runs the capture, prepare, switch, hold and restore sequence.

    Each step either succeeds or raises a ``BenchModeError`` naming the step;
    no later step runs after a failure.
    """

    def __init__(
        self,
        powercfg: PowercfgService,
        config: BenchModeConfig,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialise the orchestrator.

        Args:
            powercfg: Service used for every powercfg invocation.
            config: Benchmark scheme identity and hold duration.
            sleep: Blocking sleep used for the hold period.
        """
        self.powercfg = powercfg
        self.config = config
        self.sleep = sleep

    def capture_active(self) -> PowerScheme:
        """Resolve the currently active scheme so it can be restored later.

        Raises:
            StartupInvariantViolation: If no active scheme can be resolved.
        """
        active = PowerScheme.get(self.powercfg, KnownSchemeAlias.ACTIVE.alias)
        if active is None:
            msg = "No active power scheme"
            raise StartupInvariantViolation(msg, RunStep.CAPTURE_ACTIVE)
        logger.info("📌 Active power scheme: %s", active.guid)
        return active

    def ensure_benchmark_scheme(self) -> tuple[PowerScheme, bool]:
        """Find the benchmark scheme, creating it from the highest performance scheme if absent.

        Returns:
            The benchmark scheme and whether it was created by this call.

        Raises:
            ResolutionFailure: If the highest performance scheme cannot be resolved.
            CommandFailure: If duplicating or renaming the new scheme fails.
        """
        step = RunStep.ENSURE_BENCHMARK_SCHEME
        existing = PowerScheme.get(self.powercfg, self.config.scheme_guid)
        if existing is not None:
            logger.info("♻️ Reusing benchmark power scheme %s", existing.guid)
            return existing, False

        logger.info("🆕 Benchmark power scheme not found, creating %s", self.config.scheme_guid)
        highest = PowerScheme.get(self.powercfg, KnownSchemeAlias.MIN.alias)
        if highest is None:
            msg = "No highest power scheme"
            raise ResolutionFailure(msg, step)

        benchmark = highest.duplicate(self.config.scheme_guid)
        if benchmark is None:
            msg = "Failed to clone highest power scheme"
            raise CommandFailure(
                msg, step, ("-duplicatescheme", highest.guid, self.config.scheme_guid)
            )

        if not benchmark.change_name(self.config.scheme_name, self.config.scheme_description):
            msg = "Failed to set description of duplicated power scheme"
            raise CommandFailure(msg, step, ("-changename", benchmark.guid))

        logger.info("✅ Created benchmark power scheme from %s", highest.guid)
        return benchmark, True

    def apply_settings(self, benchmark: PowerScheme) -> None:
        """Write every benchmark setting to the AC table and then the DC table.

        Raises:
            CommandFailure: On the first rejected write; earlier writes are kept.
        """
        for setting in BENCHMARK_SETTINGS:
            for source in (PowerSource.AC, PowerSource.DC):
                if not benchmark.set_value_index(
                    source, setting.subgroup, setting.setting, setting.value
                ):
                    msg = f"Couldn't set {source.name} {setting.label}"
                    raise CommandFailure(
                        msg,
                        RunStep.APPLY_SETTINGS,
                        (source.command, benchmark.guid, setting.subgroup, setting.setting),
                    )
                logger.debug("  %s %s = %d", source.name, setting.setting, setting.value)
        logger.info("⚙️ Applied %d benchmark settings", len(BENCHMARK_SETTINGS))

    def switch_to(self, scheme: PowerScheme, step: RunStep, description: str) -> None:
        """Activate a scheme.

        Raises:
            CommandFailure: If activation fails.
        """
        if not scheme.activate():
            msg = f"Couldn't activate {description}"
            raise CommandFailure(msg, step, ("-setactive", scheme.guid))
        logger.info("🔀 Activated %s %s", description, scheme.guid)

    def run(self) -> RunReport:
        """Execute the full sequence once.

        Returns:
            RunReport describing the completed run.

        Raises:
            BenchModeError: At the first failing step.
        """
        step = RunStep.CAPTURE_ACTIVE
        try:
            active = self.capture_active()
            step = RunStep.ENSURE_BENCHMARK_SCHEME
            benchmark, created = self.ensure_benchmark_scheme()
            step = RunStep.APPLY_SETTINGS
            self.apply_settings(benchmark)
            step = RunStep.SWITCH
            self.switch_to(benchmark, step, "benchmark power scheme")

            logger.info("⏳ Holding benchmark power scheme for %gs", self.config.hold_seconds)
            self.sleep(self.config.hold_seconds)

            step = RunStep.RESTORE
            self.switch_to(active, step, "prior active power scheme")
        except BenchModeError as e:
            # Errors raised by the powercfg wrapper do not know which step they interrupted
            if e.step is None:
                e.step = step
            raise

        return RunReport(
            original_guid=active.guid,
            benchmark_guid=benchmark.guid,
            scheme_created=created,
            hold_seconds=self.config.hold_seconds,
        )


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments for help message support.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        description="Temporarily switch to a benchmark power scheme, then restore the prior one",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Configuration (environment variables or .env file):
  BENCH_SCHEME_GUID   Benchmark scheme GUID (default: {BENCH_SCHEME_GUID})
  BENCH_HOLD_SECONDS  Hold duration (default: {BENCH_HOLD_SECONDS:g})
  POWERCFG_PATH       powercfg executable
  LOG_LEVEL           Console log level
        """,
    )

    return parser.parse_args(argv)


def main(argv: list[str] | None = None, env_file: str = ".env") -> int:
    """Main entry point for a bench-mode run.

    Returns:
        Process exit status: 0 on completion, non-zero if the run was aborted.
    """
    parse_arguments(argv)

    try:
        config = BenchModeConfig.from_dotenv(env_file)
    except ValueError:
        logger.exception("💥 Invalid configuration")
        return EXIT_FAILURE

    powercfg = Powercfg(config.powercfg_path, config.powercfg_timeout)
    orchestrator = BenchmarkOrchestrator(powercfg, config)

    try:
        report = orchestrator.run()
    except KeyboardInterrupt:
        logger.warning("⏹️ Interrupted, the benchmark power scheme may still be active")
        return EXIT_INTERRUPTED
    except BenchModeError as e:
        step = e.step.value if e.step else "unknown step"
        logger.error("💥 Aborted at %s: %s", step, e)
        if e.step is RunStep.RESTORE:
            logger.warning("⚠️ The benchmark power scheme remains active")
        return EXIT_FAILURE
    except Exception:
        logger.exception("💥 Bench mode failed, the benchmark power scheme may still be active")
        return EXIT_FAILURE

    logger.info(
        "🎉 Restored power scheme %s after %gs on %s",
        report.original_guid,
        report.hold_seconds,
        report.benchmark_guid,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
