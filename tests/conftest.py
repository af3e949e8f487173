"""Shared fixtures for bench-mode tests."""

from __future__ import annotations

import pytest

from bench_helpers.models import BenchModeConfig
from tests.fakes import ACTIVE_GUID, BENCH_GUID, HIGHEST_GUID, FakePowercfg


@pytest.fixture
def cold_powercfg():
    """A machine on which the benchmark scheme does not exist yet."""
    return FakePowercfg({
        "scheme_current": ACTIVE_GUID,
        ACTIVE_GUID: ACTIVE_GUID,
        "scheme_min": HIGHEST_GUID,
        HIGHEST_GUID: HIGHEST_GUID,
    })


@pytest.fixture
def warm_powercfg(cold_powercfg):
    """A machine on which the benchmark scheme already exists."""
    cold_powercfg.schemes[BENCH_GUID] = BENCH_GUID
    return cold_powercfg


@pytest.fixture
def config():
    return BenchModeConfig(scheme_guid=BENCH_GUID, hold_seconds=10)


@pytest.fixture
def sleeps():
    """Hold durations requested by the orchestrator, recorded instead of slept."""
    return []
