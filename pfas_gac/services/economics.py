"""
Economic Analysis for GAC Change-outs

Each change-out costs the fresh carbon plus a fixed replacement, labor and
disposal charge. Annualized over the projected bed life and divided by the
annual throughput, this gives the treatment cost:

    cost/MG = (M·c + R + L + D) / (life_months / 12) / annual_flow_MG

Capital avoidance is the simplified annuity approximation

    avoidance = (R + L) · life_months / 12

(no discounting).
"""

from dataclasses import dataclass

from pfas_gac.models.schemas import SystemConfiguration
from pfas_gac.utils.constants import MIN_LIFESPAN_MONTHS
from pfas_gac.utils.units import m3_to_million_gallons


@dataclass
class CostBreakdown:
    """Container for change-out cost results."""
    gac_cost_usd: float
    service_cost_usd: float
    change_outs_per_year: float
    annual_cost_usd: float
    annual_flow_mg: float
    cost_per_million_gallons: float


def calculate_annual_flow_mg(
    flow_rate_m3_h: float,
    operating_hours_per_day: float,
    operating_days_per_year: float,
) -> float:
    """Annual throughput in million gallons."""
    return m3_to_million_gallons(flow_rate_m3_h * operating_hours_per_day * operating_days_per_year)


def calculate_cost_breakdown(config: SystemConfiguration, lifespan_months: float) -> CostBreakdown:
    """
    Annualized change-out costs for a configuration.

    Args:
        config: System configuration
        lifespan_months: Projected bed life (months), floored at 0.1

    Returns:
        CostBreakdown
    """
    lifespan_months = max(MIN_LIFESPAN_MONTHS, lifespan_months)
    change_outs_per_year = 12 / lifespan_months

    gac_cost = config.gac_mass_kg * config.gac_cost_per_kg_usd
    service_cost = config.replacement_cost_usd + config.labor_cost_usd + config.disposal_cost_usd
    annual_cost = (gac_cost + service_cost) * change_outs_per_year

    annual_flow_mg = calculate_annual_flow_mg(
        config.flow_rate_m3_h,
        config.operating_hours_per_day,
        config.operating_days_per_year,
    )
    cost_per_mg = annual_cost / annual_flow_mg if annual_flow_mg > 0 else 0.0

    return CostBreakdown(
        gac_cost_usd=gac_cost,
        service_cost_usd=service_cost,
        change_outs_per_year=change_outs_per_year,
        annual_cost_usd=annual_cost,
        annual_flow_mg=annual_flow_mg,
        cost_per_million_gallons=cost_per_mg,
    )


def calculate_annual_cost(config: SystemConfiguration, lifespan_months: float) -> float:
    """Treatment cost in USD per million gallons."""
    return calculate_cost_breakdown(config, lifespan_months).cost_per_million_gallons


def calculate_capital_avoidance(
    replacement_cost_usd: float,
    labor_cost_usd: float,
    mean_lifespan_months: float,
) -> float:
    """
    Capital avoided by extending bed life.

    Args:
        replacement_cost_usd: Replacement cost per change-out
        labor_cost_usd: Labor cost per change-out
        mean_lifespan_months: Monte Carlo mean lifespan (months)

    Returns:
        Avoided cost in USD
    """
    return (replacement_cost_usd + labor_cost_usd) * (mean_lifespan_months / 12)
