"""Lifespan analysis pipeline: capacity, efficiency, lifespan, uncertainty, cost."""
import logging
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from pydantic import ValidationError

from pfas_gac.exceptions import InputValidationError
from pfas_gac.models.schemas import (
    AnalysisResult,
    BreakthroughPoint,
    ModelParameters,
    ResearchAnalysisResult,
    SystemConfiguration,
    ValidationReport,
)
from pfas_gac.services.economics import calculate_annual_cost, calculate_capital_avoidance
from pfas_gac.services.filter_sizing import (
    calculate_ebct,
    calculate_hydraulic_loading,
    calculate_removal_efficiency,
)
from pfas_gac.services.isotherm_service import estimate_capacity
from pfas_gac.services.kinetics import (
    estimate_bdst_service_time,
    fit_thomas,
    simulate_breakthrough,
)
from pfas_gac.services.monte_carlo import run_monte_carlo
from pfas_gac.services.validation import align_to_observed, compare_breakthrough_curves
from pfas_gac.utils.constants import (
    HOURS_PER_MONTH,
    CAPACITY_UTILIZATION,
    MAX_LIFESPAN_MONTHS,
)
from pfas_gac.utils.units import kg_to_g, m3_h_to_l_h, ng_l_to_mg_l

logger = logging.getLogger(__name__)


# metric -> [(threshold, comparison, message)], first match wins.
# A None threshold is the fallback. Messages are formatted with the value.
FINDING_RULES = {
    "projected_lifespan_months": [
        (24, ">", "Excellent projected lifespan of {:.1f} months"),
        (12, ">", "Good projected lifespan of {:.1f} months"),
        (None, None, "Short projected lifespan of {:.1f} months - consider optimization"),
    ],
    "removal_efficiency": [
        (95, ">", "High removal efficiency of {:.1f}%"),
        (90, ">", "Good removal efficiency of {:.1f}%"),
        (None, None, "Moderate removal efficiency of {:.1f}% - consider system optimization"),
    ],
    "cost_per_million_gallons": [
        (100, "<", "Low treatment cost of ${:.2f} per million gallons"),
        (200, "<", "Moderate treatment cost of ${:.2f} per million gallons"),
        (None, None, "High treatment cost of ${:.2f} per million gallons - consider optimization"),
    ],
    "ebct_calculated_min": [
        (15, ">", "Adequate contact time of {:.1f} minutes"),
        (None, None, "Short contact time of {:.1f} minutes - consider increasing bed volume"),
    ],
    "p95_safe_life_months": [
        (18, ">", "High confidence in system performance with 95% safety margin"),
        (None, None, "Consider additional safety measures for reliable operation"),
    ],
}


def _rule_matches(value: float, threshold: Optional[float], op: Optional[str]) -> bool:
    if threshold is None:
        return True
    return value > threshold if op == ">" else value < threshold


def generate_key_findings(metrics: Dict[str, float]) -> List[str]:
    """
    Plain-language findings from the headline metrics.

    Args:
        metrics: Values keyed like the FINDING_RULES metrics

    Returns:
        One finding per metric present, in rule-table order
    """
    findings = []
    for metric, rules in FINDING_RULES.items():
        if metric not in metrics:
            continue
        value = metrics[metric]
        for threshold, op, message in rules:
            if _rule_matches(value, threshold, op):
                findings.append(message.format(value))
                break
    return findings


def parse_configuration(data: Any) -> SystemConfiguration:
    """
    Validate raw input into a SystemConfiguration.

    Raises:
        InputValidationError: If any field is missing or out of range
    """
    if isinstance(data, SystemConfiguration):
        return data
    try:
        return SystemConfiguration.model_validate(data)
    except ValidationError as e:
        raise InputValidationError(
            e.errors(include_url=False),
            hint="Check units: concentrations in ng/L, flow in m³/h, dimensions in m",
        ) from e


def estimate_baseline_lifespan(
    capacity_mg_g: float,
    bed_volume_m3: float,
    gac_density_kg_m3: float,
    C0_ng_l: float,
    flow_rate_m3_h: float,
    safety_factor: float,
    capacity_utilization: float = CAPACITY_UTILIZATION,
    max_lifespan_months: float = MAX_LIFESPAN_MONTHS,
) -> float:
    """
    Deterministic bed life from an equilibrium mass balance.

    life = q · M · utilization / (C0 · Q · 720 h) / safety_factor

    Args:
        capacity_mg_g: Adsorption capacity (mg/g)
        bed_volume_m3: Bed volume (m³)
        gac_density_kg_m3: GAC bulk density (kg/m³)
        C0_ng_l: Influent total PFAS (ng/L)
        flow_rate_m3_h: Flow rate (m³/h)
        safety_factor: Design safety factor (≥ 1)
        capacity_utilization: Fraction of equilibrium loading used before
            change-out (mass transfer zone, competition from NOM)
        max_lifespan_months: Upper bound

    Returns:
        Lifespan in months, capped at max_lifespan_months
    """
    adsorbed_mg = capacity_mg_g * kg_to_g(bed_volume_m3 * gac_density_kg_m3) * capacity_utilization
    load_mg_per_month = ng_l_to_mg_l(C0_ng_l) * m3_h_to_l_h(flow_rate_m3_h) * HOURS_PER_MONTH

    if load_mg_per_month <= 0:
        return max_lifespan_months

    months = adsorbed_mg / load_mg_per_month / max(safety_factor, 1.0)
    return min(max_lifespan_months, months)


def _run_pipeline(
    config: SystemConfiguration,
    params: ModelParameters,
    rng: Optional[np.random.Generator],
) -> Dict[str, Any]:
    ebct = calculate_ebct(config.bed_volume_m3, config.flow_rate_m3_h)

    capacity = estimate_capacity(
        config.total_pfas_ng_l,
        config.toc_mg_l,
        config.sulfate_mg_l,
        config.system_type,
        k=params.freundlich_k,
        n=params.freundlich_n,
    )

    efficiency = calculate_removal_efficiency(
        ebct,
        config.gac_iodine_number_mg_g,
        config.ph,
        config.temperature_c,
    )

    baseline = estimate_baseline_lifespan(
        capacity,
        config.bed_volume_m3,
        config.gac_density_kg_m3,
        config.total_pfas_ng_l,
        config.flow_rate_m3_h,
        config.safety_factor,
        capacity_utilization=params.capacity_utilization,
        max_lifespan_months=params.max_lifespan_months,
    )

    mc = run_monte_carlo(
        baseline,
        uncertainty=params.monte_carlo_uncertainty,
        iterations=params.monte_carlo_iterations,
        distribution=params.monte_carlo_distribution,
        rng=rng,
    )

    cost = calculate_annual_cost(config, mc.mean)
    capital_avoidance = calculate_capital_avoidance(
        config.replacement_cost_usd, config.labor_cost_usd, mc.mean
    )

    metrics = {
        "projected_lifespan_months": mc.mean,
        "p95_safe_life_months": mc.p5,
        "capital_avoidance_usd": capital_avoidance,
        "capacity_estimate_mg_g": capacity,
        "ebct_calculated_min": ebct,
        "removal_efficiency": efficiency,
        "cost_per_million_gallons": cost,
    }
    metrics["key_findings"] = generate_key_findings(metrics)

    logger.info(
        "Analysis: capacity=%.4f mg/g, EBCT=%.2f min, baseline=%.2f months, mean=%.2f months",
        capacity, ebct, baseline, mc.mean,
    )

    return {"metrics": metrics, "monte_carlo": mc, "baseline": baseline}


def analyze(
    config: SystemConfiguration,
    parameters: Optional[ModelParameters] = None,
    rng: Optional[np.random.Generator] = None,
) -> AnalysisResult:
    """
    Projected GAC lifespan, uncertainty, cost and findings for one system.

    Args:
        config: System configuration
        parameters: Calibration constants (defaults if None)
        rng: Random generator for the Monte Carlo step

    Returns:
        AnalysisResult
    """
    params = parameters or ModelParameters()
    pipeline = _run_pipeline(config, params, rng)
    return AnalysisResult(**pipeline["metrics"])


def analyze_research(
    config: SystemConfiguration,
    parameters: Optional[ModelParameters] = None,
    rng: Optional[np.random.Generator] = None,
) -> ResearchAnalysisResult:
    """analyze() plus the full Monte Carlo statistics and design checks."""
    params = parameters or ModelParameters()
    pipeline = _run_pipeline(config, params, rng)

    velocity = calculate_hydraulic_loading(config.flow_rate_m3_h, config.vessel_diameter_m)
    bdst_days = estimate_bdst_service_time(
        config.total_pfas_ng_l,
        config.bed_height_m,
        velocity,
        pipeline["metrics"]["capacity_estimate_mg_g"],
        config.gac_density_kg_m3,
    )

    return ResearchAnalysisResult(
        **pipeline["metrics"],
        monte_carlo=pipeline["monte_carlo"],
        baseline_lifespan_months=pipeline["baseline"],
        bdst_service_time_days=bdst_days,
        hydraulic_loading_m_h=velocity,
    )


def validate_against_observed(
    config: SystemConfiguration,
    observed: Sequence[BreakthroughPoint],
    parameters: Optional[ModelParameters] = None,
    rng: Optional[np.random.Generator] = None,
    fit: bool = True,
) -> ValidationReport:
    """
    Compare the modeled breakthrough curve with field observations.

    The curve is simulated for total PFAS over the configured horizon,
    extended to cover the last observation. Observed points are matched to
    the nearest predicted time step. With fit=True and at least three
    observations, Thomas parameters are also fitted to the field data.

    Args:
        config: System configuration
        observed: Field breakthrough points (effluent in ng/L)
        parameters: Calibration constants (defaults if None)
        rng: Random generator for the Monte Carlo step
        fit: Fit Thomas parameters to the observations

    Returns:
        ValidationReport (metrics None when there are no observations)
    """
    params = parameters or ModelParameters()
    analysis = analyze(config, params, rng)

    duration = params.breakthrough_duration_days
    if observed:
        duration = max(duration, max(p.time_days for p in observed))

    curve = simulate_breakthrough(
        influent_ng_l=config.total_pfas_ng_l,
        flow_rate_m3_h=config.flow_rate_m3_h,
        bed_volume_m3=config.bed_volume_m3,
        gac_density_kg_m3=config.gac_density_kg_m3,
        capacity_mg_g=analysis.capacity_estimate_mg_g,
        ebct_min=analysis.ebct_calculated_min,
        duration_days=duration,
        n_points=params.breakthrough_points,
        rate_base=params.thomas_rate_base,
        reference_ebct=params.thomas_reference_ebct_min,
        interpolate=params.interpolate_thresholds,
    )

    metrics = None
    fitted = None
    if observed:
        aligned = align_to_observed(curve.points, observed)
        metrics = compare_breakthrough_curves(aligned, observed)

        if fit and len(observed) >= 3:
            fitted = fit_thomas(
                observed,
                influent_ng_l=config.total_pfas_ng_l,
                flow_rate_m3_h=config.flow_rate_m3_h,
                bed_volume_m3=config.bed_volume_m3,
                gac_density_kg_m3=config.gac_density_kg_m3,
                k_th_initial=curve.thomas_parameters.k_th,
                q0_initial=curve.thomas_parameters.q0_mg_g,
            )

    return ValidationReport(
        analysis=analysis,
        breakthrough_curve=curve,
        validation_metrics=metrics,
        fitted_thomas=fitted,
    )
