"""
Prediction pipelines for Seed Predictor

Each pipeline hashes the seeds, expands the digest into a feature vector,
scores it on the selector's active backend and turns the raw scores into a
game-specific result.
"""

import asyncio
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import numpy as np

from .backends.base import GameKind
from .backends.selector import BackendMode, BackendSelector
from .commons.logger import Logger
from .commons.seed_utils import FeatureVectorBuilder, SeedHasher, SeedTriple
from .config import EngineConfig

logger = Logger("pipeline")

MINES_GRID_SIZE = 5

DelayStrategy = Callable[[float], Awaitable[None]]


async def no_delay(seconds: float) -> None:
    return None


async def asyncio_delay(seconds: float) -> None:
    await asyncio.sleep(seconds)


class CoinSide(Enum):
    HEADS = "Heads"
    TAILS = "Tails"


@dataclass(frozen=True)
class PredictionResult:
    game: GameKind
    mode: BackendMode
    raw_scores: Tuple[float, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "game": self.game.value,
            "mode": self.mode.value,
            "raw_scores": list(self.raw_scores),
        }


@dataclass(frozen=True)
class MinesGrid(PredictionResult):
    cells: Tuple[Tuple[bool, ...], ...] = ()

    def flat(self) -> Tuple[bool, ...]:
        return tuple(cell for row in self.cells for cell in row)

    @property
    def safe_count(self) -> int:
        return sum(self.flat())

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["cells"] = [list(row) for row in self.cells]
        data["safe_count"] = self.safe_count
        return data


@dataclass(frozen=True)
class CoinflipCall:
    nonce_offset: int
    nonce: int
    outcome: CoinSide
    confidence_percent: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nonce_offset": self.nonce_offset,
            "nonce": self.nonce,
            "outcome": self.outcome.value,
            "confidence_percent": self.confidence_percent,
        }


@dataclass(frozen=True)
class CoinflipSequence(PredictionResult):
    entries: Tuple[CoinflipCall, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["entries"] = [entry.to_dict() for entry in self.entries]
        return data


class PredictionPipeline(ABC):
    """
    Template for a single-game prediction

    Args:
        selector: Initialized backend selector shared by all pipelines
        config: Engine configuration
        rng: Random generator for the post-processing draws
        delay: Async delay strategy used for presentation pacing
    """

    game_kind: GameKind

    def __init__(self,
                 selector: BackendSelector,
                 config: Optional[EngineConfig] = None,
                 rng: Optional[np.random.Generator] = None,
                 delay: DelayStrategy = asyncio_delay):
        self.selector = selector
        self.config = config or EngineConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.delay = delay
        self.hasher = SeedHasher(self.config.hash_algorithm)
        self.builder = FeatureVectorBuilder(self.config.seed_vector_size)

    async def run(self, seeds: SeedTriple) -> PredictionResult:
        logger.info(f"Executing {self.game_kind.value} prediction pipeline...")
        features = self.builder.from_seeds(seeds, self.hasher)

        backend = self.selector.active_backend()
        mode = self.selector.current_mode()
        model = backend.build_model(self.game_kind)
        try:
            raw = await backend.predict(model, features)
            raw_scores = tuple(float(x) for x in raw)
        finally:
            backend.dispose(model)
            del features

        logger.debug(f"{backend.name} returned {len(raw_scores)} raw scores")
        return await self._postprocess(seeds, mode, raw_scores)

    @abstractmethod
    async def _postprocess(self,
                           seeds: SeedTriple,
                           mode: BackendMode,
                           raw_scores: Tuple[float, ...]) -> PredictionResult:
        pass


class MinesPipeline(PredictionPipeline):
    game_kind = GameKind.MINES

    async def _postprocess(self, seeds, mode, raw_scores):
        # Cells are independent draws; raw_scores carry no trained signal yet.
        p_safe = self.config.mines_grid_safety_probability
        draws = self.rng.random((MINES_GRID_SIZE, MINES_GRID_SIZE))
        cells = tuple(tuple(bool(d < p_safe) for d in row) for row in draws)
        return MinesGrid(game=self.game_kind, mode=mode, raw_scores=raw_scores, cells=cells)


class CoinflipPipeline(PredictionPipeline):
    game_kind = GameKind.COINFLIP

    async def _postprocess(self, seeds, mode, raw_scores):
        entries = []
        for offset in range(self.config.coinflip_sequence_length):
            draw = float(self.rng.random())
            outcome = CoinSide.HEADS if draw > 0.5 else CoinSide.TAILS
            chosen = draw if outcome is CoinSide.HEADS else 1.0 - draw
            entries.append(CoinflipCall(
                nonce_offset=offset,
                nonce=seeds.nonce + offset,
                outcome=outcome,
                confidence_percent=min(100, max(0, math.floor(chosen * 100))),
            ))
            await self.delay(self.config.coinflip_pacing_seconds)
        return CoinflipSequence(game=self.game_kind, mode=mode, raw_scores=raw_scores, entries=tuple(entries))


PIPELINES = {
    GameKind.MINES: MinesPipeline,
    GameKind.COINFLIP: CoinflipPipeline,
}


def build_pipeline(kind: GameKind, selector: BackendSelector, **kwargs) -> PredictionPipeline:
    return PIPELINES[kind](selector, **kwargs)
