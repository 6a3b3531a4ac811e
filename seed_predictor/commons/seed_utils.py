"""
Seed utilities for Seed Predictor: seed triples, keyed hashing and
feature-vector expansion.
"""

import hmac
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..errors import ConfigError, EmptyDigestError, InvalidInputError, ShapeMismatchError

DEFAULT_HASH_ALGORITHM = "sha512"
DEFAULT_VECTOR_SIZE = 128
MAX_BYTE_VALUE = 255.0


@dataclass(frozen=True)
class SeedTriple:
    """Provably-fair seed material for one round."""

    client_seed: str
    server_seed_hash: str
    nonce: int

    def __post_init__(self):
        if not isinstance(self.client_seed, str):
            raise InvalidInputError(f"client_seed must be text, got {type(self.client_seed).__name__}")
        if not isinstance(self.server_seed_hash, str):
            raise InvalidInputError(
                f"server_seed_hash must be text, got {type(self.server_seed_hash).__name__}"
            )
        if not isinstance(self.nonce, int) or isinstance(self.nonce, bool):
            raise InvalidInputError(f"nonce must be an integer, got {type(self.nonce).__name__}")
        if self.nonce < 0:
            raise InvalidInputError(f"nonce must be >= 0, got {self.nonce}")

    @classmethod
    def from_text(cls, client_seed: str, server_seed_hash: str, nonce_text: str) -> "SeedTriple":
        """
        Build a triple from raw prompt answers

        Args:
            client_seed: Client seed exactly as typed
            server_seed_hash: Server seed hash exactly as typed
            nonce_text: ASCII decimal digits; surrounding whitespace is ignored

        Returns:
            Validated SeedTriple
        """
        if nonce_text is None:
            raise InvalidInputError("nonce is missing")
        text = str(nonce_text).strip()
        if not (text.isascii() and text.isdigit()):
            raise InvalidInputError(f"Could not parse nonce: {nonce_text!r}")
        nonce = int(text, 10)
        return cls(client_seed=client_seed, server_seed_hash=server_seed_hash, nonce=nonce)

    def message(self) -> str:
        return f"{self.client_seed}:{self.nonce}"


class SeedHasher:
    """HMAC digest of ``client_seed:nonce`` keyed by the server seed hash."""

    def __init__(self, algorithm: str = DEFAULT_HASH_ALGORITHM):
        try:
            self.digest_size = len(hmac.new(b"", b"", algorithm).digest())
        except (ValueError, TypeError) as e:
            raise ConfigError(f"Hash algorithm {algorithm!r} cannot be used for HMAC: {e}") from e
        self.algorithm = algorithm

    def hash(self, seeds: SeedTriple) -> bytes:
        if not isinstance(seeds, SeedTriple):
            raise InvalidInputError(f"Expected SeedTriple, got {type(seeds).__name__}")
        try:
            key = seeds.server_seed_hash.encode("utf-8")
            message = seeds.message().encode("utf-8")
        except UnicodeEncodeError as e:
            raise InvalidInputError(f"Seed values are not representable as text: {e}") from e
        return hmac.new(key, message, self.algorithm).digest()


class FeatureVectorBuilder:
    """Stretches a digest into a fixed-length float32 vector in [0, 1]."""

    def __init__(self, size: int = DEFAULT_VECTOR_SIZE):
        self.size = _check_size(size)

    def build(self, digest: bytes, size: Optional[int] = None) -> np.ndarray:
        """
        Expand a digest

        Element ``i`` is the mean of ``digest[i % n]`` and ``digest[3i % n]``
        divided by 255.

        Args:
            digest: Non-empty byte string
            size: Output length (defaults to the builder's size)

        Returns:
            1-D float32 array of length ``size``
        """
        size = self.size if size is None else _check_size(size)
        raw = np.frombuffer(bytes(digest), dtype=np.uint8)
        n = raw.shape[0]
        if n == 0:
            raise EmptyDigestError("Cannot build a feature vector from an empty digest")

        idx = np.arange(size, dtype=np.int64)
        first = raw[idx % n].astype(np.float64)
        second = raw[(idx * 3) % n].astype(np.float64)
        vector = ((first + second) / 2.0 / MAX_BYTE_VALUE).astype(np.float32)
        return vector

    def from_seeds(self, seeds: SeedTriple, hasher: SeedHasher) -> np.ndarray:
        return self.build(hasher.hash(seeds))


def _check_size(size: int) -> int:
    if not isinstance(size, (int, np.integer)) or isinstance(size, bool) or size <= 0:
        raise ShapeMismatchError(f"Feature vector size must be a positive integer, got {size!r}")
    return int(size)
