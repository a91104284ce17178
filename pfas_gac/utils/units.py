"""
Unit conversions used across the modeling pipeline.

Concentrations arrive in ng/L at the API boundary and are converted to µg/L
for the Thomas model. Flows arrive in m³/h. Keep every conversion here so the
unit boundaries stay visible at call sites.
"""

M3_TO_LITERS = 1000.0
KG_TO_GRAMS = 1000.0
NG_PER_MG = 1e6
M3_TO_MILLION_GALLONS = 0.000264172
HOURS_PER_DAY = 24.0


def ng_l_to_ug_l(concentration_ng_l: float) -> float:
    """ng/L to µg/L"""
    return concentration_ng_l / 1000.0


def ng_l_to_mg_l(concentration_ng_l: float) -> float:
    """ng/L to mg/L"""
    return concentration_ng_l / NG_PER_MG


def m3_h_to_l_day(flow_rate_m3_h: float) -> float:
    """m³/h to L/day"""
    return flow_rate_m3_h * HOURS_PER_DAY * M3_TO_LITERS


def m3_h_to_l_h(flow_rate_m3_h: float) -> float:
    """m³/h to L/h"""
    return flow_rate_m3_h * M3_TO_LITERS


def kg_to_g(mass_kg: float) -> float:
    return mass_kg * KG_TO_GRAMS


def m3_to_million_gallons(volume_m3: float) -> float:
    return volume_m3 * M3_TO_MILLION_GALLONS
