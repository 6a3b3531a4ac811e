"""
Inference backends for Seed Predictor
"""

from .base import GameKind, InferenceBackend, LayerSpec, ModelHandle
from .accelerated import AcceleratedBackend
from .simulated import SimulatedBackend
from .selector import BackendMode, BackendSelector, SelectorState

__all__ = [
    'GameKind',
    'InferenceBackend',
    'LayerSpec',
    'ModelHandle',
    'AcceleratedBackend',
    'SimulatedBackend',
    'BackendMode',
    'BackendSelector',
    'SelectorState',
]
