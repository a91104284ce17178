"""Isotherm fitting API endpoints"""
from fastapi import APIRouter, HTTPException

from pfas_gac.config import get_settings
from pfas_gac.models.schemas import IsothermFitRequest, IsothermFitResult, SystemType
from pfas_gac.services.isotherm_service import fit_freundlich, estimate_capacity

router = APIRouter(prefix="/api/isotherm", tags=["isotherm"])


@router.post("/fit", response_model=IsothermFitResult)
async def fit(request: IsothermFitRequest) -> IsothermFitResult:
    """
    Fit Freundlich K and n to site equilibrium data.

    Args:
        request: IsothermFitRequest with at least 3 data points

    Returns:
        IsothermFitResult with fitted parameters and goodness of fit
    """
    try:
        concentrations = [p.concentration_ug_l for p in request.data_points]
        loadings = [p.loading_mg_g for p in request.data_points]
        return fit_freundlich(concentrations, loadings)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Fitting error: {str(e)}")


@router.get("/capacity")
async def capacity(
    total_pfas_ng_l: float,
    toc_mg_l: float = 0.0,
    sulfate_mg_l: float = 0.0,
    system_type: SystemType = SystemType.fixed_bed,
):
    """Adjusted GAC capacity with the configured Freundlich constants."""
    params = get_settings().model_parameters()
    return {
        "capacity_mg_g": estimate_capacity(
            total_pfas_ng_l,
            toc_mg_l,
            sulfate_mg_l,
            system_type,
            k=params.freundlich_k,
            n=params.freundlich_n,
        ),
    }
