"""
Freundlich isotherm capacity estimation for PFAS on GAC.

q = K · C^(1/n)

Where:
- q: adsorption capacity (mg/g)
- C: equilibrium concentration
- K: Freundlich constant, (mg/g)/(µg/L)^(1/n)
- n: Freundlich exponent (dimensionless)

Typical PFAS GAC parameters: K = 0.05-0.30, n = 0.5-0.9 (EPA, 2021).
"""

import logging
from typing import List

import numpy as np
from scipy.optimize import curve_fit

from pfas_gac.models.schemas import IsothermFitResult, SystemType
from pfas_gac.services.corrections import (
    toc_competition_factor,
    sulfate_competition_factor,
    system_type_factor,
)
from pfas_gac.utils.constants import FREUNDLICH_K, FREUNDLICH_N, MIN_CAPACITY_MG_G

logger = logging.getLogger(__name__)


def freundlich(C: np.ndarray, K: float, n: float) -> np.ndarray:
    """Freundlich isotherm: q = K · C^(1/n)"""
    return K * np.power(C, 1.0 / n)


def estimate_capacity(
    pfas_concentration: float,
    toc: float,
    sulfate: float,
    system_type: SystemType | str,
    k: float = FREUNDLICH_K,
    n: float = FREUNDLICH_N,
) -> float:
    """
    Estimate GAC adsorption capacity adjusted for competing water quality.

    Args:
        pfas_concentration: Total PFAS concentration, fed to the isotherm as-is
        toc: Total organic carbon (mg/L)
        sulfate: Sulfate (mg/L)
        system_type: Contactor configuration
        k: Freundlich constant
        n: Freundlich exponent

    Returns:
        Capacity in mg/g, never below 0.1
    """
    base_capacity = k * max(pfas_concentration, 0.0) ** (1.0 / n)

    adjusted = (
        base_capacity
        * toc_competition_factor(toc)
        * sulfate_competition_factor(sulfate)
        * system_type_factor(system_type)
    )

    return max(MIN_CAPACITY_MG_G, adjusted)


def fit_freundlich(
    concentrations: List[float],
    loadings: List[float],
) -> IsothermFitResult:
    """
    Calibrate Freundlich K and n against site isotherm data.

    Args:
        concentrations: Equilibrium concentrations (µg/L)
        loadings: Measured loadings (mg/g)

    Returns:
        IsothermFitResult with fitted parameters
    """
    c = np.asarray(concentrations, dtype=float)
    q = np.asarray(loadings, dtype=float)

    try:
        popt, _ = curve_fit(
            freundlich,
            c,
            q,
            p0=[FREUNDLICH_K, FREUNDLICH_N],
            bounds=([1e-6, 0.1], [np.inf, 10]),
            maxfev=5000,
        )
    except (RuntimeError, ValueError) as e:
        logger.warning("Freundlich fit failed: %s", e)
        return IsothermFitResult(
            k=FREUNDLICH_K, n=FREUNDLICH_N, r2=0.0, rmse=0.0, success=False
        )

    q_pred = freundlich(c, *popt)
    ss_res = np.sum((q - q_pred) ** 2)
    ss_tot = np.sum((q - np.mean(q)) ** 2)
    r2 = 1 - (ss_res / ss_tot) if ss_tot > 0 else 0.0
    rmse = np.sqrt(np.mean((q - q_pred) ** 2))

    return IsothermFitResult(
        k=float(popt[0]),
        n=float(popt[1]),
        r2=float(np.clip(r2, 0.0, 1.0)),
        rmse=float(rmse),
    )
