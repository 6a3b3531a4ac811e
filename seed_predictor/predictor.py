"""
Seed Predictor - Main Interface
"""

from typing import Any, Dict, Optional, Union

import numpy as np

from .backends import AcceleratedBackend, BackendMode, BackendSelector, GameKind, InferenceBackend, SimulatedBackend
from .commons.logger import Logger
from .commons.seed_utils import SeedTriple
from .config import EngineConfig
from .pipeline import DelayStrategy, PredictionResult, asyncio_delay, build_pipeline

logger = Logger("predictor")

_DEFAULT = object()


class SeedPredictor:
    """
    Main Seed Predictor class

    Owns the backend selector and hands it to a pipeline per request.
    """

    def __init__(self,
                 config: Optional[EngineConfig] = None,
                 accelerated: Union[InferenceBackend, None, object] = _DEFAULT,
                 rng: Optional[np.random.Generator] = None,
                 delay: DelayStrategy = asyncio_delay):
        """
        Initialize Seed Predictor

        Args:
            config: Engine configuration (defaults from the environment)
            accelerated: Backend to try first; None skips straight to simulation
            rng: Random generator shared by the simulated backend and pipelines
            delay: Async delay strategy for coinflip pacing
        """
        self.config = config or EngineConfig.from_env()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.delay = delay
        if accelerated is _DEFAULT:
            accelerated = AcceleratedBackend(self.config)
        self.selector = BackendSelector(accelerated, SimulatedBackend(self.config, rng=self.rng))

    async def start(self) -> BackendMode:
        mode = await self.selector.initialize()
        logger.info(f"Engine is operational ({mode.value} backend)")
        return mode

    async def predict(self, game: Union[GameKind, str], seeds: SeedTriple) -> PredictionResult:
        """
        Run one prediction

        Args:
            game: GameKind or a selector answer ('1', '2', 'mines', 'coinflip')
            seeds: Seed triple for the round

        Returns:
            MinesGrid or CoinflipSequence
        """
        kind = game if isinstance(game, GameKind) else GameKind.parse(game)
        pipeline = build_pipeline(kind, self.selector, config=self.config, rng=self.rng, delay=self.delay)
        return await pipeline.run(seeds)

    def status(self) -> Dict[str, Any]:
        return {"config": self.config.to_dict(), "backend": self.selector.describe()}
