"""
Seed Predictor - seed-derived feature vectors scored on a pluggable inference backend
"""

__version__ = "0.5.0"

from .predictor import SeedPredictor
from .commons.seed_utils import SeedTriple
from .backends import GameKind, BackendMode

__all__ = ["SeedPredictor", "SeedTriple", "GameKind", "BackendMode"]
