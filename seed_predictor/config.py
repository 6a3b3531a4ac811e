"""
Engine configuration for Seed Predictor
"""

import hmac
import math
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import ConfigError

ENV_PREFIX = "SEED_PREDICTOR_"


@dataclass(frozen=True)
class EngineConfig:
    """
    Tunables shared by the hasher, backends and pipelines.

    Args:
        seed_vector_size: Length of the feature vector fed to every model.
        hash_algorithm: hashlib name used for the HMAC digest.
        coinflip_sequence_length: Number of calls in a coinflip sequence.
        mines_grid_safety_probability: Chance that a mines cell is marked safe.
        device: 'auto' | 'cpu' | 'cuda' | 'cuda:0' etc. for the accelerated backend.
        kernel_warmup_iterations: Matmuls run after the accelerated backend loads.
        hidden_units: Widths of the two hidden dense layers.
        dropout_rate: Dropout applied after the first hidden layer.
        coinflip_pacing_seconds: Delay awaited between coinflip calls.
    """

    seed_vector_size: int = 128
    hash_algorithm: str = "sha512"
    coinflip_sequence_length: int = 10
    mines_grid_safety_probability: float = 0.85
    device: str = "auto"
    kernel_warmup_iterations: int = 5
    hidden_units: Tuple[int, ...] = (256, 128)
    dropout_rate: float = 0.5
    coinflip_pacing_seconds: float = 0.05

    def __post_init__(self):
        if not _is_int(self.seed_vector_size) or self.seed_vector_size <= 0:
            raise ConfigError(f"seed_vector_size must be a positive integer, got {self.seed_vector_size!r}")
        if not _is_int(self.coinflip_sequence_length) or self.coinflip_sequence_length <= 0:
            raise ConfigError(
                f"coinflip_sequence_length must be a positive integer, got {self.coinflip_sequence_length!r}"
            )
        if not _is_int(self.kernel_warmup_iterations) or self.kernel_warmup_iterations < 0:
            raise ConfigError(
                f"kernel_warmup_iterations must be a non-negative integer, got {self.kernel_warmup_iterations!r}"
            )
        _check_unit_interval("mines_grid_safety_probability", self.mines_grid_safety_probability)
        _check_unit_interval("dropout_rate", self.dropout_rate)
        if self.dropout_rate >= 1.0:
            raise ConfigError("dropout_rate must be below 1.0")
        if not isinstance(self.coinflip_pacing_seconds, (int, float)) or not (
            math.isfinite(self.coinflip_pacing_seconds) and self.coinflip_pacing_seconds >= 0
        ):
            raise ConfigError(
                f"coinflip_pacing_seconds must be a non-negative number, got {self.coinflip_pacing_seconds!r}"
            )
        if not self.hidden_units or not all(_is_int(u) and u > 0 for u in self.hidden_units):
            raise ConfigError(f"hidden_units must be positive integers, got {self.hidden_units!r}")
        try:
            hmac.new(b"", b"", self.hash_algorithm).digest()
        except (ValueError, TypeError) as e:
            raise ConfigError(f"Hash algorithm {self.hash_algorithm!r} cannot be used for HMAC: {e}") from e
        if not isinstance(self.device, str) or not self.device.strip():
            raise ConfigError("device must be a non-empty string")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> "EngineConfig":
        """Build a config from ``SEED_PREDICTOR_<FIELD>`` variables, then apply overrides."""
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        defaults = cls()
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None or not raw.strip():
                continue
            values[f.name] = _coerce(f.name, raw.strip(), getattr(defaults, f.name))
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def with_overrides(self, **overrides: Any) -> "EngineConfig":
        """Return a copy with the non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_unit_interval(name: str, value: Any):
    if not isinstance(value, (int, float)) or isinstance(value, bool) or not (0.0 <= value <= 1.0):
        raise ConfigError(f"{name} must be a number in [0, 1], got {value!r}")


def _coerce(name: str, raw: str, default: Any) -> Any:
    try:
        if isinstance(default, tuple):
            return tuple(int(part) for part in raw.split(",") if part.strip())
        if isinstance(default, int):
            return int(raw)
        if isinstance(default, float):
            return float(raw)
    except ValueError as e:
        raise ConfigError(f"Invalid value for {ENV_PREFIX}{name.upper()}: {raw!r}") from e
    return raw
