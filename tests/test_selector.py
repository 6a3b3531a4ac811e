import asyncio
import sys

import pytest

from backend_doubles import UnavailableBackend
from seed_predictor.backends import (AcceleratedBackend, BackendMode, BackendSelector, SelectorState,
                                     SimulatedBackend)
from seed_predictor.errors import BackendNotReadyError


def test_selector_not_ready_before_initialize(config):
    selector = BackendSelector(UnavailableBackend(config), SimulatedBackend(config))
    assert selector.state is SelectorState.UNINITIALIZED
    with pytest.raises(BackendNotReadyError):
        selector.current_mode()
    with pytest.raises(BackendNotReadyError):
        selector.active_backend()


def test_failed_initialize_degrades_permanently(config):
    accelerated = UnavailableBackend(config)
    simulated = SimulatedBackend(config)
    selector = BackendSelector(accelerated, simulated)

    assert asyncio.run(selector.initialize()) is BackendMode.SIMULATED
    for _ in range(100):
        assert selector.current_mode() is BackendMode.SIMULATED
    assert selector.active_backend() is simulated
    assert selector.degraded
    assert "native runtime missing" in selector.degraded_reason


def test_initialize_runs_only_once(config):
    accelerated = UnavailableBackend(config)
    selector = BackendSelector(accelerated, SimulatedBackend(config))
    asyncio.run(selector.initialize())
    asyncio.run(selector.initialize())
    assert accelerated.attempts == 1
    assert selector.current_mode() is BackendMode.SIMULATED


def test_unexpected_error_also_degrades(config):
    accelerated = UnavailableBackend(config, error=MemoryError("out of device memory"))
    selector = BackendSelector(accelerated, SimulatedBackend(config))
    assert asyncio.run(selector.initialize()) is BackendMode.SIMULATED
    assert "MemoryError" in selector.degraded_reason


def test_missing_accelerated_backend_goes_straight_to_simulation(config):
    selector = BackendSelector(None, SimulatedBackend(config))
    assert asyncio.run(selector.initialize()) is BackendMode.SIMULATED
    assert selector.describe()["backend"] == "simulated"


def test_missing_torch_degrades_real_backend(config, monkeypatch):
    monkeypatch.setitem(sys.modules, "torch", None)
    selector = BackendSelector(AcceleratedBackend(config), SimulatedBackend(config))
    assert asyncio.run(selector.initialize()) is BackendMode.SIMULATED
    info = selector.describe()
    assert info["state"] == "simulated"
    assert "PyTorch could not be imported" in info["degraded_reason"]


def test_successful_initialize_selects_accelerated(config):
    pytest.importorskip("torch")
    accelerated = AcceleratedBackend(config)
    selector = BackendSelector(accelerated, SimulatedBackend(config))
    assert asyncio.run(selector.initialize()) is BackendMode.ACCELERATED
    assert selector.active_backend() is accelerated
    assert selector.degraded_reason is None
    assert selector.describe()["device"] == "cpu"
