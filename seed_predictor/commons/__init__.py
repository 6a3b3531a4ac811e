"""
Shared helpers for Seed Predictor
"""

from .logger import Logger
from .seed_utils import FeatureVectorBuilder, SeedHasher, SeedTriple

__all__ = ["Logger", "SeedTriple", "SeedHasher", "FeatureVectorBuilder"]
