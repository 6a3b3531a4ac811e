import pytest

from seed_predictor.config import EngineConfig


@pytest.fixture
def config():
    return EngineConfig(device="cpu", kernel_warmup_iterations=1, coinflip_pacing_seconds=0.0)
