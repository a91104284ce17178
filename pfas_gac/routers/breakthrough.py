"""
Breakthrough Router - Thomas model breakthrough curves

Provides endpoints for:
- Single-compound Thomas simulation
- Competitive multi-compound simulation
- Comparison of predicted and observed curves
- Bed depth service time design line
"""

from fastapi import APIRouter, HTTPException

from pfas_gac.config import get_settings
from pfas_gac.exceptions import InvalidInputError
from pfas_gac.models.schemas import (
    BreakthroughRequest,
    BreakthroughCurveResult,
    MultiCompoundRequest,
    MultiCompoundResult,
    CompareRequest,
    ValidationMetrics,
    BDSTRequest,
    BDSTResult,
)
from pfas_gac.services.kinetics import (
    simulate_breakthrough,
    simulate_multi_compound_breakthrough,
    find_limiting_compound,
    calculate_bed_depth_service_time,
)
from pfas_gac.services.validation import compare_breakthrough_curves

router = APIRouter(prefix="/api/breakthrough", tags=["breakthrough"])


@router.post("/simulate", response_model=BreakthroughCurveResult)
async def simulate(request: BreakthroughRequest) -> BreakthroughCurveResult:
    """
    Thomas model breakthrough curve for a single compound or total PFAS.

    If k_th is not provided it is scaled from the EBCT using the configured
    base rate constant.
    """
    try:
        params = get_settings().model_parameters()
        return simulate_breakthrough(
            influent_ng_l=request.influent_ng_l,
            flow_rate_m3_h=request.flow_rate_m3_h,
            bed_volume_m3=request.bed_volume_m3,
            gac_density_kg_m3=request.gac_density_kg_m3,
            capacity_mg_g=request.capacity_mg_g,
            ebct_min=request.ebct_min,
            duration_days=request.duration_days,
            n_points=request.n_points,
            k_th=request.k_th,
            rate_base=params.thomas_rate_base,
            reference_ebct=params.thomas_reference_ebct_min,
            interpolate=request.interpolate,
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Thomas calculation error: {str(e)}")


@router.post("/multi-compound", response_model=MultiCompoundResult)
async def multi_compound(request: MultiCompoundRequest) -> MultiCompoundResult:
    """Per-compound curves with competitive capacity sharing."""
    try:
        params = get_settings().model_parameters()
        curves = simulate_multi_compound_breakthrough(
            concentrations_ng_l=request.concentrations_ng_l,
            flow_rate_m3_h=request.flow_rate_m3_h,
            bed_volume_m3=request.bed_volume_m3,
            gac_density_kg_m3=request.gac_density_kg_m3,
            base_capacity_mg_g=request.base_capacity_mg_g,
            ebct_min=request.ebct_min,
            duration_days=request.duration_days,
            n_points=request.n_points,
            k_th=request.k_th,
            rate_base=params.thomas_rate_base,
            reference_ebct=params.thomas_reference_ebct_min,
        )
        return MultiCompoundResult(
            curves=curves,
            limiting_compound=find_limiting_compound(curves),
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Multi-compound calculation error: {str(e)}")


@router.post("/compare", response_model=ValidationMetrics)
async def compare(request: CompareRequest) -> ValidationMetrics:
    """Goodness-of-fit metrics for aligned predicted and observed series."""
    try:
        return compare_breakthrough_curves(request.predicted, request.observed)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Comparison error: {str(e)}")


@router.post("/bdst", response_model=BDSTResult)
async def bdst(request: BDSTRequest) -> BDSTResult:
    """Service time against bed depth, with slope and critical depth."""
    try:
        return calculate_bed_depth_service_time(
            C0_ng_l=request.influent_ng_l,
            velocity_m_h=request.velocity_m_h,
            capacity_mg_g=request.capacity_mg_g,
            density_kg_m3=request.gac_density_kg_m3,
            k_BA=request.k_ba,
            breakthrough_ratio=request.breakthrough_ratio,
            bed_heights=request.bed_heights_m,
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"BDST calculation error: {str(e)}")
