"""
PyTorch-backed inference backend
"""

from typing import Any, Optional

import numpy as np

from ..config import EngineConfig
from ..commons.logger import Logger
from ..errors import BackendNotReadyError, BackendUnavailable, PredictionError
from .base import InferenceBackend, ModelHandle

logger = Logger("backends.accelerated")

WARMUP_SHAPE = (128, 128)


class AcceleratedBackend(InferenceBackend):
    """Runs the layered model on real PyTorch kernels.

    Args:
        config: Engine configuration; ``config.device`` picks the device
            ('auto' prefers CUDA when present, 'cuda' requires it).
    """

    name = "accelerated"

    def __init__(self, config: Optional[EngineConfig] = None):
        super().__init__(config)
        self.torch = None

    async def initialize(self) -> None:
        """Import torch, resolve the device and warm up the matmul kernels."""
        try:
            import torch  # type: ignore
        except Exception as e:
            raise BackendUnavailable(f"PyTorch could not be imported: {e}") from e

        try:
            device = self._setup_device(torch, self.config.device)
            warmup = torch.randn(*WARMUP_SHAPE, device=device)
            for _ in range(self.config.kernel_warmup_iterations):
                torch.matmul(warmup, warmup)
            del warmup
            if device.startswith("cuda"):
                torch.cuda.synchronize()
        except BackendUnavailable:
            raise
        except Exception as e:
            raise BackendUnavailable(f"PyTorch runtime failed to start on '{self.config.device}': {e}") from e

        self.torch = torch
        self.device = device
        self.ready = True
        logger.info(
            f"Accelerated backend ready on {device} "
            f"(torch {torch.__version__}, {self.config.kernel_warmup_iterations} warmup iterations)"
        )

    def _setup_device(self, torch: Any, device: str) -> str:
        """Setup compute device"""
        device = device.lower()
        if device == "auto":
            return "cuda" if torch.cuda.is_available() else "cpu"
        if device.startswith("cuda") and not torch.cuda.is_available():
            raise BackendUnavailable(f"Device '{device}' requested but CUDA is not available")
        if device != "cpu" and not device.startswith("cuda"):
            raise BackendUnavailable(f"Unsupported device '{device}'")
        return device

    def _materialize(self, handle: ModelHandle) -> Any:
        if self.torch is None:
            raise BackendNotReadyError("Accelerated backend used before initialize()")
        nn = self.torch.nn
        modules = []
        width = handle.input_size
        for layer in handle.layers:
            if layer.kind == "dropout":
                modules.append(nn.Dropout(p=layer.rate))
                continue
            modules.append(nn.Linear(width, layer.units))
            modules.append(nn.Sigmoid() if layer.activation == "sigmoid" else nn.ReLU())
            width = layer.units
        model = nn.Sequential(*modules).to(self.device)
        model.eval()
        return model

    async def predict(self, model: ModelHandle, features: np.ndarray) -> np.ndarray:
        vector = self._check_inputs(model, features)
        torch = self.torch
        # Runs inline and blocks the event loop; predictions are issued one at a time.
        try:
            with torch.no_grad():
                inputs = torch.from_numpy(vector).to(self.device).unsqueeze(0)
                outputs = model.module(inputs)
                scores = outputs.squeeze(0).detach().cpu().numpy()
            del inputs, outputs
        except Exception as e:
            raise PredictionError(f"Accelerated inference failed for {model.kind.value}: {e}") from e
        return self._check_output(model, scores)

    def _release(self, handle: ModelHandle) -> None:
        handle.module = None
        if self.torch is not None and self.device.startswith("cuda"):
            self.torch.cuda.empty_cache()
