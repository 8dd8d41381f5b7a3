# file: logsynth/services/stats.py
from typing import Sequence

import numpy as np
from pydantic import BaseModel


class DeviationStats(BaseModel):
    samples: int
    chi_squared: float         # Pearson statistic, ~ (bins - 1) when the fit is right
    normalized_chi_squared: float  # chi_squared / samples, tends to 0
    relative_entropy: float    # KL(empirical || theoretical) in nats, tends to 0


def deviation_statistics(counts: Sequence[int], weights: Sequence[float]) -> DeviationStats:
    """
    Compares observed counts per rank against unnormalized theoretical weights.
    """
    c = np.asarray(counts, dtype=np.float64)
    w = np.asarray(weights, dtype=np.float64)
    if c.shape != w.shape:
        raise ValueError(f"counts and weights differ in shape: {c.shape} vs {w.shape}")
    total = c.sum()
    if total <= 0:
        raise ValueError("counts must contain at least one observation")

    p = w / w.sum()
    expected = p * total
    observed = expected > 0
    chi2 = float(np.sum((c[observed] - expected[observed]) ** 2 / expected[observed]))

    q = c / total
    seen = q > 0
    kl = float(np.sum(q[seen] * np.log(q[seen] / p[seen])))

    return DeviationStats(
        samples=int(total),
        chi_squared=chi2,
        normalized_chi_squared=chi2 / total,
        relative_entropy=kl,
    )


def chi_squared_bound(bins: int, sigmas: float = 6.0) -> float:
    """Upper tolerance for the chi-squared statistic: mean + sigmas * sd with bins - 1 degrees of freedom."""
    dof = max(bins - 1, 1)
    return float(dof + sigmas * np.sqrt(2.0 * dof))
