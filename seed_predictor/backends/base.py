"""
Inference backend interface for Seed Predictor
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np

from ..config import EngineConfig
from ..commons.logger import Logger
from ..errors import InvalidInputError, PredictionError, ShapeMismatchError

logger = Logger("backends")


class GameKind(Enum):
    MINES = "mines"
    COINFLIP = "coinflip"

    @property
    def output_units(self) -> int:
        return 25 if self is GameKind.MINES else 1

    @classmethod
    def parse(cls, text: str) -> "GameKind":
        """Accept the prompt answers '1' / '2' or a game name."""
        value = str(text).strip().lower()
        if value == "1":
            return cls.MINES
        if value == "2":
            return cls.COINFLIP
        for kind in cls:
            if kind.value == value:
                return kind
        raise InvalidInputError(f"Unknown game selection: {text!r} (expected 1, 2, mines or coinflip)")


@dataclass(frozen=True)
class LayerSpec:
    kind: str  # 'dense' | 'dropout'
    units: int = 0
    activation: Optional[str] = None
    rate: float = 0.0


def layer_plan(config: EngineConfig, kind: GameKind) -> Tuple[LayerSpec, ...]:
    """Dense/relu hidden stack with dropout after the first layer and a sigmoid head."""
    layers = []
    for i, units in enumerate(config.hidden_units):
        layers.append(LayerSpec("dense", units=units, activation="relu"))
        if i == 0 and config.dropout_rate > 0:
            layers.append(LayerSpec("dropout", rate=config.dropout_rate))
    layers.append(LayerSpec("dense", units=kind.output_units, activation="sigmoid"))
    return tuple(layers)


@dataclass(eq=False)
class ModelHandle:
    """A model built by a backend; ``module`` holds backend-specific state."""

    kind: GameKind
    input_size: int
    layers: Tuple[LayerSpec, ...]
    backend: str
    module: Any = field(default=None, repr=False)
    disposed: bool = False

    @property
    def output_units(self) -> int:
        return self.layers[-1].units


class InferenceBackend(ABC):
    """Abstract base class for scoring backends

    Implementations share signatures and output shapes; only the way scores
    are produced differs.
    """

    name = "abstract"

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self.device = "cpu"
        self.ready = False

    @abstractmethod
    async def initialize(self) -> None:
        """Acquire the runtime; raise BackendUnavailable on failure"""
        pass

    def build_model(self, kind: GameKind) -> ModelHandle:
        handle = ModelHandle(
            kind=kind,
            input_size=self.config.seed_vector_size,
            layers=layer_plan(self.config, kind),
            backend=self.name,
        )
        handle.module = self._materialize(handle)
        return handle

    def _materialize(self, handle: ModelHandle) -> Any:
        """Create backend-specific model state; none by default"""
        return None

    @abstractmethod
    async def predict(self, model: ModelHandle, features: np.ndarray) -> np.ndarray:
        """Return ``model.output_units`` scores in [0, 1]"""
        pass

    def dispose(self, *handles: Any) -> None:
        for handle in handles:
            if isinstance(handle, ModelHandle) and not handle.disposed:
                try:
                    self._release(handle)
                except Exception as e:  # pragma: no cover - release must not raise
                    logger.warn(f"Releasing {handle.kind.value} model on {self.name} failed: {e}")
                handle.module = None
                handle.disposed = True

    def _release(self, handle: ModelHandle) -> None:
        pass

    def get_backend_info(self) -> Dict[str, Any]:
        return {"backend": self.name, "device": self.device, "ready": self.ready}

    def _check_inputs(self, model: ModelHandle, features: Sequence[float]) -> np.ndarray:
        if model.disposed:
            raise PredictionError(f"Model for {model.kind.value} has already been disposed")
        if model.backend != self.name:
            raise PredictionError(f"Model was built by backend '{model.backend}', not '{self.name}'")
        vector = np.asarray(features, dtype=np.float32)
        if vector.ndim != 1 or vector.shape[0] != model.input_size:
            raise ShapeMismatchError(
                f"Feature vector shape {vector.shape} does not match model input ({model.input_size},)"
            )
        return vector

    def _check_output(self, model: ModelHandle, scores: np.ndarray) -> np.ndarray:
        scores = np.asarray(scores, dtype=np.float32).reshape(-1)
        if scores.shape[0] != model.output_units:
            raise ShapeMismatchError(
                f"Backend '{self.name}' returned {scores.shape[0]} scores, expected {model.output_units}"
            )
        return scores
