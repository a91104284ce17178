"""
Validation of predicted breakthrough curves against observed field data.

Metrics (e = predicted - observed, concentrations in ng/L, n = number of
pairs including skipped non-finite ones):
- RMSE = sqrt(Σe² / n)
- MAE = Σ|e| / n
- MAPE = mean(|e| / observed × 100) over observed > 0 only
- R² = 1 - Σe² / Σ(observed - mean)², floored at 0
- Max error = max|e|
- Average percent difference = Σ|e| / Σobserved × 100

Degenerate numerics (non-finite points, zero variance, zero mean) are
logged as NumericDegeneracyWarning and replaced with 0 so the reporting
pipeline always produces a result.
"""

import logging
import math
import warnings
from typing import List, Optional, Sequence

import numpy as np

from pfas_gac.exceptions import InvalidInputError, NumericDegeneracyWarning
from pfas_gac.models.schemas import BreakthroughPoint, ValidationMetrics

logger = logging.getLogger(__name__)


def _degenerate(message: str) -> None:
    logger.warning(message)
    warnings.warn(message, NumericDegeneracyWarning, stacklevel=3)


def _finite_or_zero(name: str, value: float) -> float:
    if math.isfinite(value):
        return float(value)
    _degenerate(f"Non-finite {name} ({value}) replaced with 0")
    return 0.0


def compare_breakthrough_curves(
    predicted: Optional[Sequence[BreakthroughPoint]],
    observed: Optional[Sequence[BreakthroughPoint]],
) -> ValidationMetrics:
    """
    Goodness-of-fit metrics between aligned predicted and observed series.

    Observed points must already be aligned to the predicted ones, e.g.
    with align_to_observed().

    Args:
        predicted: Model points
        observed: Field points, same length as predicted

    Returns:
        ValidationMetrics

    Raises:
        InvalidInputError: If either series is missing, empty, or the
            lengths differ
    """
    if predicted is None or observed is None:
        raise InvalidInputError("Predicted and observed series are required")

    if len(predicted) == 0 or len(observed) == 0:
        raise InvalidInputError("Predicted and observed series cannot be empty")

    if len(predicted) != len(observed):
        raise InvalidInputError(
            "Series length mismatch",
            details={"predicted": len(predicted), "observed": len(observed)},
            hint="Align observed points to predicted time steps first",
        )

    pred = np.array([p.concentration_ng_l for p in predicted], dtype=float)
    obs = np.array([p.concentration_ng_l for p in observed], dtype=float)

    # Skipped pairs still count toward n for RMSE, MAE and the observed mean
    n = pred.size
    valid = np.isfinite(pred) & np.isfinite(obs)
    for i in np.nonzero(~valid)[0]:
        _degenerate(f"Invalid data at index {i}: predicted={pred[i]}, observed={obs[i]}")
    pred, obs = pred[valid], obs[valid]

    if pred.size == 0:
        _degenerate("No finite point pairs to compare; metrics set to 0")
        return ValidationMetrics(rmse=0, r2=0, mae=0, mape=0, max_error=0, avg_percent_diff=0)

    errors = pred - obs
    abs_errors = np.abs(errors)
    sse = float(np.sum(errors ** 2))

    mean_observed = float(np.sum(obs)) / n
    if mean_observed == 0:
        _degenerate("Mean observed concentration is zero; R² may be unreliable")

    positive = obs > 0
    mape = float(np.mean(abs_errors[positive] / obs[positive] * 100)) if np.any(positive) else 0.0

    sst = float(np.sum((obs - mean_observed) ** 2))
    if sst > 0:
        r2 = max(0.0, 1 - sse / sst)
    else:
        _degenerate("Zero variance in observed data; R² set to 0")
        r2 = 0.0

    total_observed = float(np.sum(obs))
    avg_percent_diff = float(np.sum(abs_errors)) / total_observed * 100 if total_observed > 0 else 0.0

    return ValidationMetrics(
        rmse=_finite_or_zero("rmse", math.sqrt(sse / n)),
        r2=min(1.0, _finite_or_zero("r2", r2)),
        mae=_finite_or_zero("mae", float(np.sum(abs_errors)) / n),
        mape=_finite_or_zero("mape", mape),
        max_error=_finite_or_zero("max_error", float(np.max(abs_errors))),
        avg_percent_diff=_finite_or_zero("avg_percent_diff", avg_percent_diff),
    )


def align_to_observed(
    predicted: Sequence[BreakthroughPoint],
    observed: Sequence[BreakthroughPoint],
) -> List[BreakthroughPoint]:
    """Predicted point nearest in time to each observed point."""
    if len(predicted) == 0:
        raise InvalidInputError("Predicted series cannot be empty")

    times = np.array([p.time_days for p in predicted], dtype=float)
    return [predicted[int(np.argmin(np.abs(times - o.time_days)))] for o in observed]
