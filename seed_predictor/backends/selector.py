"""
Backend selection with one-way fallback to the simulated backend
"""

from enum import Enum
from typing import Any, Dict, Optional

from ..commons.logger import Logger
from ..errors import BackendNotReadyError, BackendUnavailable
from .base import InferenceBackend

logger = Logger("backends.selector")


class BackendMode(Enum):
    ACCELERATED = "accelerated"
    SIMULATED = "simulated"


class SelectorState(Enum):
    UNINITIALIZED = "uninitialized"
    ACCELERATED = "accelerated"
    SIMULATED = "simulated"


class BackendSelector:
    """Decides once which backend serves predictions.

    The accelerated backend is tried first. Any failure switches the selector
    to the simulated backend for the rest of its lifetime; there is no path
    back to ``ACCELERATED``.

    Args:
        accelerated: Backend tried first, or None to go straight to simulation.
        simulated: Always-available fallback backend.
    """

    def __init__(self, accelerated: Optional[InferenceBackend], simulated: InferenceBackend):
        self.accelerated = accelerated
        self.simulated = simulated
        self.state = SelectorState.UNINITIALIZED
        self.degraded_reason: Optional[str] = None
        self._active: Optional[InferenceBackend] = None

    async def initialize(self) -> BackendMode:
        if self.state is not SelectorState.UNINITIALIZED:
            return self.current_mode()

        if self.accelerated is None:
            await self._degrade("accelerated backend disabled")
            return self.current_mode()

        try:
            await self.accelerated.initialize()
        except BackendUnavailable as e:
            await self._degrade(str(e))
        except Exception as e:
            await self._degrade(f"{type(e).__name__}: {e}")
        else:
            self._active = self.accelerated
            self.state = SelectorState.ACCELERATED
            logger.info(f"Using accelerated backend on {self.accelerated.device}")
        return self.current_mode()

    async def _degrade(self, reason: str):
        await self.simulated.initialize()
        self._active = self.simulated
        self.degraded_reason = reason
        self.state = SelectorState.SIMULATED
        logger.warn(f"Accelerated backend unavailable ({reason}); falling back to simulated backend")

    def current_mode(self) -> BackendMode:
        if self.state is SelectorState.UNINITIALIZED:
            raise BackendNotReadyError("BackendSelector.initialize() has not been awaited")
        return BackendMode(self.state.value)

    def active_backend(self) -> InferenceBackend:
        if self._active is None:
            raise BackendNotReadyError("BackendSelector.initialize() has not been awaited")
        return self._active

    @property
    def degraded(self) -> bool:
        return self.state is SelectorState.SIMULATED

    def describe(self) -> Dict[str, Any]:
        info: Dict[str, Any] = {"state": self.state.value, "degraded_reason": self.degraded_reason}
        if self._active is not None:
            info.update(self._active.get_backend_info())
        return info
