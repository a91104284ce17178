import math

from pfas_gac.services.corrections import (
    ebct_factor,
    gac_quality_factor,
    ph_factor,
    temperature_factor,
)
from pfas_gac.utils.constants import MIN_REMOVAL_EFFICIENCY, MAX_REMOVAL_EFFICIENCY


def calculate_ebct(bed_volume: float, flow_rate: float) -> float:
    """
    Empty Bed Contact Time.

    Args:
        bed_volume: Bed volume (m³)
        flow_rate: Flow rate (m³/h)

    Returns:
        EBCT in minutes
    """
    if flow_rate <= 0:
        return 0.0
    return (bed_volume / flow_rate) * 60


def calculate_hydraulic_loading(flow_rate: float, diameter: float) -> float:
    """Superficial velocity in m/h."""
    cross_section = math.pi * (diameter / 2) ** 2
    if cross_section <= 0:
        return 0.0
    return flow_rate / cross_section


def calculate_removal_efficiency(
    ebct: float,
    gac_iodine_number: float,
    ph: float,
    temperature: float,
) -> float:
    """
    Steady-state PFAS removal efficiency.

    Product of four saturating factors, clamped to 50-99%.

    Args:
        ebct: Empty Bed Contact Time (min)
        gac_iodine_number: Iodine number (mg/g)
        ph: Influent pH
        temperature: Water temperature (°C)

    Returns:
        Removal efficiency in %
    """
    efficiency = (
        ebct_factor(ebct)
        * gac_quality_factor(gac_iodine_number)
        * ph_factor(ph)
        * temperature_factor(temperature)
    )
    efficiency = min(MAX_REMOVAL_EFFICIENCY, max(MIN_REMOVAL_EFFICIENCY, efficiency))
    return efficiency * 100
