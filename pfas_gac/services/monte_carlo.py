"""
Monte Carlo uncertainty propagation for GAC lifespan estimates.

Each iteration scales the point estimate by a random multiplier; the
sorted draws give the mean and indexed percentiles:

    p_x = sorted[floor(n · x)]

Two sampling distributions are supported:
- uniform: multiplier in [1 - u, 1 + u]
- normal: N(estimate, estimate · u / 2), i.e. u treated as ~2σ
"""

import logging
import math
from typing import Dict, Optional

import numpy as np

from pfas_gac.models.schemas import MonteCarloDistribution, MonteCarloResult
from pfas_gac.utils.constants import MONTE_CARLO_UNCERTAINTY, MONTE_CARLO_ITERATIONS

logger = logging.getLogger(__name__)


def _percentile_index(n: int, p: float) -> int:
    return min(n - 1, int(math.floor(n * p)))


def run_monte_carlo(
    point_estimate: float,
    uncertainty: float = MONTE_CARLO_UNCERTAINTY,
    iterations: int = MONTE_CARLO_ITERATIONS,
    distribution: MonteCarloDistribution | str = MonteCarloDistribution.uniform,
    rng: Optional[np.random.Generator] = None,
) -> MonteCarloResult:
    """
    Propagate relative uncertainty around a point estimate.

    Args:
        point_estimate: Deterministic estimate (e.g. lifespan in months)
        uncertainty: Relative uncertainty (0.18 = ±18%)
        iterations: Number of draws
        distribution: "uniform" or "normal"
        rng: Random generator; an unseeded one is created if None

    Returns:
        MonteCarloResult with mean, p5/p10/p90/p95 and population std-dev
    """
    distribution = MonteCarloDistribution(distribution)
    if rng is None:
        rng = np.random.default_rng()

    iterations = max(1, int(iterations))

    if distribution == MonteCarloDistribution.normal:
        samples = rng.normal(point_estimate, point_estimate * uncertainty / 2, iterations)
    else:
        multipliers = rng.uniform(1 - uncertainty, 1 + uncertainty, iterations)
        samples = point_estimate * multipliers

    # Lifespan cannot be negative
    samples = np.sort(np.maximum(samples, 0.0))

    result = MonteCarloResult(
        mean=float(np.mean(samples)),
        p5=float(samples[_percentile_index(iterations, 0.05)]),
        p10=float(samples[_percentile_index(iterations, 0.10)]),
        p90=float(samples[_percentile_index(iterations, 0.90)]),
        p95=float(samples[_percentile_index(iterations, 0.95)]),
        std_dev=float(np.std(samples)),
        iterations=iterations,
        distribution=distribution,
    )

    logger.debug(
        "Monte Carlo (%s, n=%d): mean=%.3f p5=%.3f p95=%.3f",
        distribution.value, iterations, result.mean, result.p5, result.p95,
    )
    return result


def quick_uncertainty_bounds(
    point_estimate: float,
    uncertainty: float = MONTE_CARLO_UNCERTAINTY,
) -> Dict[str, float]:
    """
    Analytic bounds without sampling, for fast previews.

    Returns:
        Dictionary with mean, p5, p10, p90, p95 and std_dev
    """
    return {
        "mean": point_estimate,
        "p5": point_estimate * (1 - uncertainty),
        "p10": point_estimate * (1 - uncertainty * 0.75),
        "p90": point_estimate * (1 + uncertainty * 0.75),
        "p95": point_estimate * (1 + uncertainty),
        "std_dev": point_estimate * uncertainty / 2,
    }
