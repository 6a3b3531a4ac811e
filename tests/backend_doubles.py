"""Backend doubles shared by the test modules."""

import numpy as np

from seed_predictor.backends import InferenceBackend, SimulatedBackend
from seed_predictor.errors import BackendUnavailable, PredictionError


class UnavailableBackend(InferenceBackend):
    """Accelerated stand-in whose runtime never loads."""

    name = "accelerated"

    def __init__(self, config=None, error=None):
        super().__init__(config)
        self.error = error or BackendUnavailable("native runtime missing")
        self.attempts = 0

    async def initialize(self):
        self.attempts += 1
        raise self.error

    async def predict(self, model, features):  # pragma: no cover - never selected
        raise AssertionError("unavailable backend must not be used")


class FailingSimulatedBackend(SimulatedBackend):
    """Simulated backend that records its models and fails every prediction."""

    def __init__(self, config=None):
        super().__init__(config, rng=np.random.default_rng(0))
        self.models = []

    def build_model(self, kind):
        model = super().build_model(kind)
        self.models.append(model)
        return model

    async def predict(self, model, features):
        self._check_inputs(model, features)
        raise PredictionError("scoring kernel crashed")

