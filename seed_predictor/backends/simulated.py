"""
Pure-software fallback backend
"""

from typing import Optional

import numpy as np

from ..config import EngineConfig
from ..commons.logger import Logger
from .base import InferenceBackend, ModelHandle

logger = Logger("backends.simulated")


class SimulatedBackend(InferenceBackend):
    """Always-available backend that emits uniform noise of the right shape.

    Model weights are never consulted; ``predict`` still enforces the same
    input and output shape checks as the accelerated backend.
    """

    name = "simulated"

    def __init__(self, config: Optional[EngineConfig] = None, rng: Optional[np.random.Generator] = None):
        super().__init__(config)
        self.rng = rng if rng is not None else np.random.default_rng()

    async def initialize(self) -> None:
        self.device = "cpu"
        self.ready = True
        logger.debug("Simulated backend ready")

    async def predict(self, model: ModelHandle, features: np.ndarray) -> np.ndarray:
        self._check_inputs(model, features)
        scores = self.rng.random(model.output_units).astype(np.float32)
        return self._check_output(model, scores)
