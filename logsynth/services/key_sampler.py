# file: logsynth/services/key_sampler.py
import logging
import math
from typing import Optional, Sequence

import numpy as np

from logsynth.core.errors import InvalidParameterError

log = logging.getLogger("logsynth.services.key_sampler")

MIN_SKEW = 0.0
MAX_SKEW = 1.0

class RankDistribution:
    """Unnormalized power-law weight by rank: w(rank) = (rank + 1) ** -alpha."""

    def __init__(self, alpha: float) -> None:
        self.alpha = float(alpha)

    def weight(self, rank: int) -> float:
        return (rank + 1.0) ** -self.alpha

    def weights(self, n: int) -> np.ndarray:
        return np.power(np.arange(1, n + 1, dtype=np.float64), -self.alpha)


class CumulativeSampler:
    """
    Draws indices in [0, len(weights)) with probability proportional to weight.

    The prefix-sum table is built once here and never modified, so each draw
    is a single uniform number plus a binary search.
    """

    def __init__(self, weights: Sequence[float], rng: Optional[np.random.Generator] = None) -> None:
        w = np.asarray(weights, dtype=np.float64)
        if w.ndim != 1 or w.size == 0:
            raise InvalidParameterError("Weights must be a non-empty one-dimensional sequence.")
        if not np.all(np.isfinite(w)) or np.any(w < 0):
            raise InvalidParameterError("Weights must be finite and non-negative.")

        self._cumulative = np.cumsum(w)
        self._cumulative.setflags(write=False)
        self._total = float(self._cumulative[-1])
        if not self._total > 0:
            raise InvalidParameterError("Weights must have a positive total.")

        self.rng = rng if rng is not None else np.random.default_rng()

    @property
    def size(self) -> int:
        return int(self._cumulative.size)

    @property
    def total_weight(self) -> float:
        return self._total

    def probabilities(self) -> np.ndarray:
        return np.diff(self._cumulative, prepend=0.0) / self._total

    def sample_key(self) -> int:
        u = self.rng.random() * self._total
        i = int(np.searchsorted(self._cumulative, u, side="right"))
        # u < total, but rounding in the product can land exactly on it
        return min(i, self.size - 1)

    def sample_keys(self, size: int) -> np.ndarray:
        u = self.rng.random(size) * self._total
        keys = np.searchsorted(self._cumulative, u, side="right")
        return np.minimum(keys, self.size - 1)

    def sample(self) -> str:
        return str(self.sample_key())


class WeightedKeySampler(CumulativeSampler):
    """
    Samples from a "foreign key" which is really just an integer in [0, n).

    Key i is drawn with probability proportional to (i + 1) ** -alpha, so low
    keys are the popular ones. alpha = 0 gives the uniform distribution.
    """

    def __init__(self, n: int, alpha: float, rng: Optional[np.random.Generator] = None) -> None:
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 1:
            raise InvalidParameterError(f"Universe size must be a positive integer, got {n!r}.")
        try:
            alpha = float(alpha)
        except (TypeError, ValueError) as e:
            raise InvalidParameterError(f"Skew must be a real number, got {alpha!r}.") from e
        if math.isnan(alpha) or not (MIN_SKEW <= alpha <= MAX_SKEW):
            raise InvalidParameterError(f"Skew must lie in [{MIN_SKEW}, {MAX_SKEW}], got {alpha}.")

        self.n = int(n)
        self.alpha = alpha
        self.distribution = RankDistribution(alpha)
        super().__init__(self.distribution.weights(self.n), rng=rng)
        log.debug(f"Built key sampler over {self.n} keys with skew {self.alpha}.")


ForeignKeySampler = WeightedKeySampler
