import math
from enum import Enum
from typing import Optional, List, Dict

from pydantic import BaseModel, ConfigDict, Field

from pfas_gac.utils import constants


# =============================================================================
# System Configuration
# =============================================================================

class SystemType(str, Enum):
    """GAC contactor configurations."""
    fixed_bed = "Fixed Bed"
    fluidized_bed = "Fluidized Bed"
    moving_bed = "Moving Bed"


class MonteCarloDistribution(str, Enum):
    """Sampling distribution for the uncertainty multiplier."""
    uniform = "uniform"
    normal = "normal"


# Compound name -> SystemConfiguration field (ng/L)
PFAS_COMPOUND_FIELDS = {
    "PFOA": "pfoa_ng_l",
    "PFOS": "pfos_ng_l",
    "PFNA": "pfna_ng_l",
    "PFHxA": "pfhxa_ng_l",
    "PFHxS": "pfhxs_ng_l",
    "PFDA": "pfda_ng_l",
    "PFBS": "pfbs_ng_l",
    "PFHpA": "pfhpa_ng_l",
    "PFUnDA": "pfunda_ng_l",
    "PFDoA": "pfdoa_ng_l",
}


class SystemConfiguration(BaseModel):
    """Vessel, GAC, water quality and economic inputs for one analysis."""
    model_config = ConfigDict(frozen=True)

    # Vessel geometry
    system_type: SystemType = SystemType.fixed_bed
    vessel_diameter_m: float = Field(..., gt=0, le=10, description="Vessel diameter in m")
    vessel_height_m: float = Field(..., gt=0, le=20, description="Vessel height in m")
    bed_height_m: float = Field(..., gt=0, le=10, description="GAC bed height in m")
    flow_rate_m3_h: float = Field(..., gt=0, le=10000, description="Flow rate in m³/h")

    # Water quality
    toc_mg_l: float = Field(0.0, ge=0, le=100, description="Total organic carbon in mg/L")
    sulfate_mg_l: float = Field(0.0, ge=0, le=1000, description="Sulfate in mg/L")
    chloride_mg_l: float = Field(0.0, ge=0, le=1000, description="Chloride in mg/L")
    alkalinity_mg_l: float = Field(0.0, ge=0, le=500, description="Alkalinity in mg/L as CaCO3")
    hardness_mg_l: float = Field(0.0, ge=0, le=1000, description="Hardness in mg/L as CaCO3")
    ph: float = Field(7.0, ge=4, le=12, description="pH")
    temperature_c: float = Field(15.0, ge=0, le=50, description="Water temperature in °C")

    # PFAS influent concentrations (ng/L)
    pfoa_ng_l: float = Field(0.0, ge=0, le=10000)
    pfos_ng_l: float = Field(0.0, ge=0, le=10000)
    pfna_ng_l: float = Field(0.0, ge=0, le=10000)
    pfhxa_ng_l: float = Field(0.0, ge=0, le=10000)
    pfhxs_ng_l: float = Field(0.0, ge=0, le=10000)
    pfda_ng_l: float = Field(0.0, ge=0, le=10000)
    pfbs_ng_l: float = Field(0.0, ge=0, le=10000)
    pfhpa_ng_l: float = Field(0.0, ge=0, le=10000)
    pfunda_ng_l: float = Field(0.0, ge=0, le=10000)
    pfdoa_ng_l: float = Field(0.0, ge=0, le=10000)
    total_pfas_ng_l: float = Field(..., ge=0, le=100000, description="Total PFAS in ng/L")

    # GAC properties
    gac_type: str = Field("Bituminous Coal", min_length=1)
    gac_density_kg_m3: float = Field(480.0, ge=200, le=1000, description="Bulk density in kg/m³")
    gac_particle_size_mm: float = Field(1.5, ge=0.1, le=5)
    gac_iodine_number_mg_g: float = Field(1000.0, ge=200, le=2000)
    gac_surface_area_m2_g: float = Field(1000.0, ge=100, le=2000)
    gac_cost_per_kg_usd: float = Field(2.5, ge=0, le=100)

    # Economics
    replacement_cost_usd: float = Field(0.0, ge=0, le=1_000_000)
    labor_cost_usd: float = Field(0.0, ge=0, le=100_000)
    disposal_cost_usd: float = Field(0.0, ge=0, le=100_000)
    operating_days_per_year: float = Field(constants.DEFAULT_OPERATING_DAYS, ge=1, le=365)
    operating_hours_per_day: float = Field(constants.DEFAULT_OPERATING_HOURS, ge=1, le=24)

    # Design targets
    target_removal_efficiency: float = Field(constants.DEFAULT_TARGET_REMOVAL, ge=50, le=99.9)
    safety_factor: float = Field(constants.DEFAULT_SAFETY_FACTOR, ge=1.0, le=5.0)

    @property
    def cross_section_m2(self) -> float:
        return math.pi * (self.vessel_diameter_m / 2) ** 2

    @property
    def vessel_volume_m3(self) -> float:
        return self.cross_section_m2 * self.vessel_height_m

    @property
    def bed_volume_m3(self) -> float:
        return self.cross_section_m2 * self.bed_height_m

    @property
    def gac_mass_kg(self) -> float:
        return self.bed_volume_m3 * self.gac_density_kg_m3

    def pfas_concentrations(self) -> Dict[str, float]:
        """Individual compound concentrations in ng/L, keyed by compound name."""
        return {name: getattr(self, field) for name, field in PFAS_COMPOUND_FIELDS.items()}


class ModelParameters(BaseModel):
    """Empirical calibration constants for the modeling pipeline."""
    model_config = ConfigDict(frozen=True)

    freundlich_k: float = Field(constants.FREUNDLICH_K, gt=0)
    freundlich_n: float = Field(constants.FREUNDLICH_N, gt=0)
    thomas_rate_base: float = Field(constants.THOMAS_RATE_BASE, gt=0)
    thomas_reference_ebct_min: float = Field(constants.THOMAS_REFERENCE_EBCT_MIN, gt=0)
    capacity_utilization: float = Field(constants.CAPACITY_UTILIZATION, gt=0, le=1)
    max_lifespan_months: float = Field(constants.MAX_LIFESPAN_MONTHS, gt=0)
    monte_carlo_uncertainty: float = Field(constants.MONTE_CARLO_UNCERTAINTY, ge=0, le=1)
    monte_carlo_iterations: int = Field(constants.MONTE_CARLO_ITERATIONS, ge=1, le=1_000_000)
    monte_carlo_distribution: MonteCarloDistribution = MonteCarloDistribution.uniform
    breakthrough_points: int = Field(constants.DEFAULT_CURVE_POINTS, ge=10, le=5000)
    breakthrough_duration_days: float = Field(constants.DEFAULT_DURATION_DAYS, gt=0)
    interpolate_thresholds: bool = False


# =============================================================================
# Breakthrough
# =============================================================================

class BreakthroughPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    time_days: float = Field(..., ge=0, description="Time in days")
    concentration_ng_l: float = Field(..., description="Effluent concentration in ng/L")
    bed_volumes: float = Field(0.0, ge=0, description="Cumulative bed volumes treated")
    percent_breakthrough: float = Field(0.0, description="C/C0 × 100")


class ThomasParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    k_th: float = Field(..., description="Thomas rate constant in L/(mg·day)")
    q0_mg_g: float = Field(..., description="Maximum adsorption capacity in mg/g")
    r2: float = Field(..., ge=0, le=1, description="Goodness of fit")


class BreakthroughCurveResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    points: List[BreakthroughPoint]
    breakthrough_time_days: float = Field(..., description="First time at ≥10% breakthrough, or the horizon")
    fifty_percent_time_days: float = Field(..., description="First time at ≥50% breakthrough, or the horizon")
    exhaustion_time_days: float = Field(..., description="First time at ≥95%, or the horizon")
    breakthrough_reached: bool = Field(True, description="10% reached within the horizon")
    fifty_percent_reached: bool = Field(True, description="50% reached within the horizon")
    exhaustion_reached: bool = Field(True, description="95% reached within the horizon")
    total_bed_volumes: float
    thomas_parameters: ThomasParameters


class BreakthroughRequest(BaseModel):
    """Request for a single-compound Thomas simulation."""
    influent_ng_l: float = Field(..., ge=0, description="Influent concentration in ng/L")
    flow_rate_m3_h: float = Field(..., gt=0)
    bed_volume_m3: float = Field(..., gt=0)
    gac_density_kg_m3: float = Field(480.0, gt=0)
    capacity_mg_g: float = Field(..., ge=0)
    ebct_min: float = Field(..., ge=0)
    duration_days: float = Field(constants.DEFAULT_DURATION_DAYS, gt=0)
    n_points: int = Field(constants.DEFAULT_CURVE_POINTS, ge=10, le=5000)
    k_th: Optional[float] = Field(None, gt=0, description="Thomas rate constant override")
    interpolate: bool = False


class MultiCompoundRequest(BaseModel):
    """Request for competitive multi-compound breakthrough."""
    concentrations_ng_l: Dict[str, float] = Field(..., min_length=1)
    flow_rate_m3_h: float = Field(..., gt=0)
    bed_volume_m3: float = Field(..., gt=0)
    gac_density_kg_m3: float = Field(480.0, gt=0)
    base_capacity_mg_g: float = Field(..., ge=0)
    ebct_min: float = Field(..., ge=0)
    duration_days: float = Field(constants.DEFAULT_DURATION_DAYS, gt=0)
    n_points: int = Field(constants.DEFAULT_CURVE_POINTS, ge=10, le=5000)
    k_th: Optional[float] = Field(None, gt=0)


class MultiCompoundResult(BaseModel):
    curves: Dict[str, BreakthroughCurveResult]
    limiting_compound: Optional[str] = Field(None, description="Compound with earliest 10% breakthrough")


class CompareRequest(BaseModel):
    predicted: List[BreakthroughPoint]
    observed: List[BreakthroughPoint]


class BDSTRequest(BaseModel):
    """Request for a bed depth service time design line."""
    influent_ng_l: float = Field(..., gt=0, description="Influent concentration in ng/L")
    velocity_m_h: float = Field(..., gt=0, description="Superficial velocity in m/h")
    capacity_mg_g: float = Field(..., gt=0)
    gac_density_kg_m3: float = Field(480.0, gt=0)
    k_ba: Optional[float] = Field(None, gt=0, description="Bohart-Adams rate constant in L/(µg·h)")
    breakthrough_ratio: float = Field(0.1, gt=0, lt=1, description="C/C0 defining breakthrough")
    bed_heights_m: Optional[List[float]] = Field(None, description="Bed depths to tabulate in m")


class BDSTPoint(BaseModel):
    bed_height_m: float
    service_time_days: float


class BDSTResult(BaseModel):
    slope_days_per_m: float
    z_critical_m: float
    breakthrough_ratio: float
    data: List[BDSTPoint]


# =============================================================================
# Uncertainty and validation
# =============================================================================

class MonteCarloRequest(BaseModel):
    point_estimate: float = Field(..., ge=0)
    uncertainty: float = Field(constants.MONTE_CARLO_UNCERTAINTY, ge=0, le=1)
    iterations: int = Field(constants.MONTE_CARLO_ITERATIONS, ge=1, le=1_000_000)
    distribution: MonteCarloDistribution = MonteCarloDistribution.uniform
    seed: Optional[int] = None


class MonteCarloResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    mean: float
    p5: float
    p10: float
    p90: float
    p95: float
    std_dev: float
    iterations: int
    distribution: MonteCarloDistribution


class ValidationMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    rmse: float = Field(..., ge=0, description="Root mean square error in ng/L")
    r2: float = Field(..., ge=0, le=1, description="Coefficient of determination, floored at 0")
    mae: float = Field(..., ge=0, description="Mean absolute error in ng/L")
    mape: float = Field(..., ge=0, description="Mean absolute percentage error")
    max_error: float = Field(..., ge=0)
    avg_percent_diff: float = Field(..., ge=0)


# =============================================================================
# Analysis
# =============================================================================

class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    projected_lifespan_months: float = Field(..., description="Monte Carlo mean lifespan")
    # 5th percentile of the Monte Carlo distribution (conservative bound)
    p95_safe_life_months: float
    capital_avoidance_usd: float
    capacity_estimate_mg_g: float
    ebct_calculated_min: float
    removal_efficiency: float = Field(..., ge=0, le=100)
    cost_per_million_gallons: float
    key_findings: List[str] = []


class ResearchAnalysisResult(AnalysisResult):
    monte_carlo: MonteCarloResult
    baseline_lifespan_months: float
    bdst_service_time_days: float = Field(..., description="Stoichiometric BDST service time")
    hydraulic_loading_m_h: float


class ValidationRequest(BaseModel):
    configuration: SystemConfiguration
    observed: List[BreakthroughPoint] = []


class ValidationReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    analysis: AnalysisResult
    breakthrough_curve: BreakthroughCurveResult
    validation_metrics: Optional[ValidationMetrics] = None
    fitted_thomas: Optional[ThomasParameters] = None


# =============================================================================
# Data interchange
# =============================================================================

class HazenDataset(BaseModel):
    configuration: SystemConfiguration
    observed_breakthrough: List[BreakthroughPoint] = []
    site_information: dict = {}


class HazenExportRequest(BaseModel):
    configuration: SystemConfiguration
    observed: List[BreakthroughPoint] = []
    site_information: dict = {}


class IsothermDataPoint(BaseModel):
    """A single equilibrium point for Freundlich calibration."""
    concentration_ug_l: float = Field(..., gt=0)
    loading_mg_g: float = Field(..., gt=0)


class IsothermFitRequest(BaseModel):
    data_points: List[IsothermDataPoint] = Field(..., min_length=3)


class IsothermFitResult(BaseModel):
    k: float
    n: float
    r2: float = Field(..., ge=0, le=1)
    rmse: float = Field(..., ge=0)
    success: bool = True
