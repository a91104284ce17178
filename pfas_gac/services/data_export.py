"""
Data interchange: Hazen JSON dataset template and CSV exports.

The Hazen template groups a site dataset into sections (system
configuration, water quality, PFAS concentrations, GAC properties,
economics, operational targets) plus an observed breakthrough series.
Units are carried in the key names: ng/L, m³/h, meters, USD.
"""

import csv
import io
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from pfas_gac.exceptions import InputValidationError
from pfas_gac.models.schemas import (
    BreakthroughCurveResult,
    BreakthroughPoint,
    HazenDataset,
    MonteCarloResult,
    PFAS_COMPOUND_FIELDS,
    SystemConfiguration,
    ValidationMetrics,
)
from pfas_gac.services.analysis_service import parse_configuration
from pfas_gac.services.filter_sizing import calculate_ebct
from pfas_gac.utils.constants import (
    DEFAULT_OPERATING_DAYS,
    DEFAULT_OPERATING_HOURS,
    DEFAULT_TARGET_REMOVAL,
    DEFAULT_SAFETY_FACTOR,
)

TEMPLATE_VERSION = "1.0"

# (section, key in section) -> SystemConfiguration field
HAZEN_FIELD_MAP = {
    ("system_configuration", "system_type"): "system_type",
    ("system_configuration", "vessel_diameter_m"): "vessel_diameter_m",
    ("system_configuration", "vessel_height_m"): "vessel_height_m",
    ("system_configuration", "flow_rate_m3h"): "flow_rate_m3_h",
    ("system_configuration", "bed_height_m"): "bed_height_m",
    ("water_quality", "toc_mgL"): "toc_mg_l",
    ("water_quality", "sulfate_mgL"): "sulfate_mg_l",
    ("water_quality", "chloride_mgL"): "chloride_mg_l",
    ("water_quality", "alkalinity_mgL_CaCO3"): "alkalinity_mg_l",
    ("water_quality", "hardness_mgL_CaCO3"): "hardness_mg_l",
    ("water_quality", "ph"): "ph",
    ("water_quality", "temperature_C"): "temperature_c",
    ("pfas_concentrations_ngL", "total_PFAS"): "total_pfas_ng_l",
    ("gac_properties", "gac_type"): "gac_type",
    ("gac_properties", "gac_density_kgm3"): "gac_density_kg_m3",
    ("gac_properties", "gac_particle_size_mm"): "gac_particle_size_mm",
    ("gac_properties", "gac_iodine_number_mgg"): "gac_iodine_number_mg_g",
    ("gac_properties", "gac_surface_area_m2g"): "gac_surface_area_m2_g",
    ("economic_parameters", "gac_cost_per_kg_USD"): "gac_cost_per_kg_usd",
    ("economic_parameters", "replacement_cost_USD"): "replacement_cost_usd",
    ("economic_parameters", "labor_cost_USD"): "labor_cost_usd",
    ("economic_parameters", "disposal_cost_USD"): "disposal_cost_usd",
    ("economic_parameters", "operating_days_per_year"): "operating_days_per_year",
    ("economic_parameters", "operating_hours_per_day"): "operating_hours_per_day",
    ("operational_parameters", "target_removal_efficiency_percent"): "target_removal_efficiency",
    ("operational_parameters", "safety_factor"): "safety_factor",
}

# Falsy values in these fields fall back to the default
HAZEN_DEFAULTS = {
    "system_type": "Fixed Bed",
    "operating_days_per_year": DEFAULT_OPERATING_DAYS,
    "operating_hours_per_day": DEFAULT_OPERATING_HOURS,
    "target_removal_efficiency": DEFAULT_TARGET_REMOVAL,
    "safety_factor": DEFAULT_SAFETY_FACTOR,
}


def hazen_import_template() -> Dict[str, Any]:
    """Empty Hazen dataset with every section and key present."""
    template: Dict[str, Any] = {
        "metadata": {
            "template_version": TEMPLATE_VERSION,
            "description": "Hazen Dataset Import Template for PFAS GAC lifespan analysis",
            "instructions": (
                "Fill in all fields with actual data. Concentrations in ng/L, "
                "flows in m³/h, dimensions in meters."
            ),
        },
        "site_information": {
            "project_name": "",
            "site_location": "",
            "latitude": None,
            "longitude": None,
            "facility_type": "",
            "start_date": "",
            "end_date": "",
        },
    }

    for (section, key) in HAZEN_FIELD_MAP:
        template.setdefault(section, {})[key] = None
    template["system_configuration"]["ebct_minutes"] = None
    template["pfas_concentrations_ngL"] = {
        **{compound: None for compound in PFAS_COMPOUND_FIELDS},
        "total_PFAS": None,
    }

    template["system_configuration"]["system_type"] = HAZEN_DEFAULTS["system_type"]
    template["gac_properties"]["gac_type"] = ""
    template["economic_parameters"]["operating_days_per_year"] = DEFAULT_OPERATING_DAYS
    template["economic_parameters"]["operating_hours_per_day"] = DEFAULT_OPERATING_HOURS
    template["operational_parameters"]["target_removal_efficiency_percent"] = DEFAULT_TARGET_REMOVAL
    template["operational_parameters"]["safety_factor"] = DEFAULT_SAFETY_FACTOR

    template["observed_breakthrough_data"] = [
        {
            "time_days": 0,
            "bed_volumes": 0,
            "effluent_concentration_ngL": 0,
            "notes": "Add actual observed data points here",
        }
    ]
    return template


def export_hazen_dataset(
    config: SystemConfiguration,
    curve: Optional[BreakthroughCurveResult] = None,
    observed: Optional[Sequence[BreakthroughPoint]] = None,
    site_information: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Fill the Hazen template from a configuration.

    Args:
        config: System configuration
        curve: Breakthrough curve written as the observed series when no
            observed points are given
        observed: Observed breakthrough points
        site_information: Free-form site metadata

    Returns:
        Hazen dataset dictionary (JSON-serializable)
    """
    dataset = hazen_import_template()
    values = config.model_dump(mode="json")

    for (section, key), field in HAZEN_FIELD_MAP.items():
        dataset[section][key] = values[field]

    for compound, field in PFAS_COMPOUND_FIELDS.items():
        dataset["pfas_concentrations_ngL"][compound] = values[field]

    dataset["system_configuration"]["ebct_minutes"] = calculate_ebct(
        config.bed_volume_m3, config.flow_rate_m3_h
    )

    if site_information:
        dataset["site_information"].update(site_information)

    if observed is not None:
        points = list(observed)
    elif curve is not None:
        points = list(curve.points)
    else:
        points = []

    dataset["observed_breakthrough_data"] = [
        {
            "time_days": p.time_days,
            "bed_volumes": p.bed_volumes,
            "effluent_concentration_ngL": p.concentration_ng_l,
            "notes": "",
        }
        for p in points
    ]
    return dataset


def parse_hazen_dataset(data: Dict[str, Any]) -> HazenDataset:
    """
    Convert a Hazen dataset into a validated configuration and series.

    Missing PFAS congeners default to 0. Observed percent breakthrough is
    effluent / total PFAS × 100.

    Raises:
        InputValidationError: If required configuration fields are missing
            or out of range
    """
    raw: Dict[str, Any] = {}
    for (section, key), field in HAZEN_FIELD_MAP.items():
        value = (data.get(section) or {}).get(key)
        if field in HAZEN_DEFAULTS and not value:
            value = HAZEN_DEFAULTS[field]
        if value is not None:
            raw[field] = value

    concentrations = data.get("pfas_concentrations_ngL") or {}
    for compound, field in PFAS_COMPOUND_FIELDS.items():
        raw[field] = concentrations.get(compound) or 0

    if not raw.get("gac_type"):
        raw.pop("gac_type", None)

    config = parse_configuration(raw)

    total = config.total_pfas_ng_l
    observed = []
    for i, point in enumerate(data.get("observed_breakthrough_data") or []):
        try:
            effluent = float(point.get("effluent_concentration_ngL") or 0)
            observed.append(
                BreakthroughPoint(
                    time_days=point.get("time_days") or 0,
                    bed_volumes=point.get("bed_volumes") or 0,
                    concentration_ng_l=effluent,
                    percent_breakthrough=effluent / total * 100 if effluent and total else 0,
                )
            )
        except ValidationError as e:
            raise InputValidationError.from_pydantic(
                e.errors(include_url=False),
                prefix=("observed_breakthrough_data", i),
                source="Hazen dataset",
                hint="Observed rows need time_days ≥ 0 and effluent in ng/L",
            ) from e
        except (AttributeError, TypeError, ValueError) as e:
            raise InputValidationError(
                [{"loc": ("observed_breakthrough_data", i), "msg": str(e)}],
                source="Hazen dataset",
            ) from e

    return HazenDataset(
        configuration=config,
        observed_breakthrough=observed,
        site_information=data.get("site_information") or {},
    )


def _write_rows(rows: List[Dict[str, Any]], buffer: Optional[io.StringIO] = None) -> str:
    buffer = buffer or io.StringIO()
    if rows:
        writer = csv.DictWriter(buffer, fieldnames=list(rows[0].keys()), lineterminator="\n")
        writer.writeheader()
        writer.writerows(rows)
    return buffer.getvalue()


def breakthrough_curve_csv(curve: BreakthroughCurveResult) -> str:
    """Curve points as CSV text."""
    rows = [
        {
            "Time_days": f"{p.time_days:.2f}",
            "Bed_Volumes": f"{p.bed_volumes:.2f}",
            "Concentration_ngL": f"{p.concentration_ng_l:.4f}",
            "Percent_Breakthrough": f"{p.percent_breakthrough:.2f}",
        }
        for p in curve.points
    ]
    return _write_rows(rows)


def validation_comparison_csv(
    predicted: Sequence[BreakthroughPoint],
    observed: Sequence[BreakthroughPoint],
    metrics: ValidationMetrics,
    compound_name: str = "Total_PFAS",
) -> str:
    """
    Metrics header block followed by a point-by-point comparison.

    Predicted and observed are expected to be aligned; rows without an
    observed counterpart leave the observed columns empty.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow([f"Validation Metrics for {compound_name}"])
    writer.writerow(["R-squared", f"{metrics.r2:.4f}"])
    writer.writerow(["RMSE (ng/L)", f"{metrics.rmse:.4f}"])
    writer.writerow(["MAE (ng/L)", f"{metrics.mae:.4f}"])
    writer.writerow(["MAPE (%)", f"{metrics.mape:.2f}"])
    writer.writerow(["Max Error (ng/L)", f"{metrics.max_error:.4f}"])
    writer.writerow(["Avg Percent Diff (%)", f"{metrics.avg_percent_diff:.2f}"])
    writer.writerow([])

    rows = []
    for i, p in enumerate(predicted):
        o = observed[i] if i < len(observed) else None
        error = abs(p.concentration_ng_l - o.concentration_ng_l) if o is not None else None
        rows.append({
            "Time_days": f"{p.time_days:.2f}",
            "Bed_Volumes": f"{p.bed_volumes:.2f}",
            "Predicted_ngL": f"{p.concentration_ng_l:.4f}",
            "Observed_ngL": f"{o.concentration_ng_l:.4f}" if o is not None else "",
            "Absolute_Error": f"{error:.4f}" if error is not None else "",
            "Percent_Error": (
                f"{error / o.concentration_ng_l * 100:.2f}"
                if o is not None and o.concentration_ng_l > 0 else ""
            ),
        })
    return _write_rows(rows, buffer)


def monte_carlo_csv(result: MonteCarloResult, unit: str = "months") -> str:
    """Monte Carlo summary statistics as CSV text."""
    rows = [
        {"Metric": "Mean", "Value": f"{result.mean:.2f}", "Unit": unit},
        {"Metric": "P5 (5th percentile)", "Value": f"{result.p5:.2f}", "Unit": unit},
        {"Metric": "P10 (10th percentile)", "Value": f"{result.p10:.2f}", "Unit": unit},
        {"Metric": "P90 (90th percentile)", "Value": f"{result.p90:.2f}", "Unit": unit},
        {"Metric": "P95 (95th percentile)", "Value": f"{result.p95:.2f}", "Unit": unit},
        {"Metric": "Standard Deviation", "Value": f"{result.std_dev:.2f}", "Unit": unit},
    ]
    return _write_rows(rows)


def export_filename(kind: str, name: str, extension: str, day: Optional[date] = None) -> str:
    """e.g. breakthrough_curve_Total_PFAS_2024-05-01.csv"""
    day = day or date.today()
    safe_name = "_".join(name.split())
    return f"{kind}_{safe_name}_{day.isoformat()}.{extension}"
