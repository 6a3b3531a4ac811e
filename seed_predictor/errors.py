"""
Exception hierarchy for Seed Predictor
"""


class SeedPredictorError(Exception):
    """Base class for every error raised by the package."""


class InvalidInputError(SeedPredictorError, ValueError):
    """Seed fields are missing, malformed or not representable as text."""


class ConfigError(SeedPredictorError, ValueError):
    """A configuration value is out of range or of the wrong type."""


class BackendUnavailable(SeedPredictorError):
    """The accelerated backend could not acquire its runtime."""


class BackendNotReadyError(SeedPredictorError):
    """The backend selector was used before ``initialize()`` completed."""


class EmptyDigestError(SeedPredictorError):
    """A zero-length digest was handed to the feature builder."""


class ShapeMismatchError(SeedPredictorError):
    """A vector or model does not have the size its caller expects."""


class PredictionError(SeedPredictorError):
    """The active backend failed while scoring a feature vector."""
