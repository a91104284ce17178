from fastapi import APIRouter, HTTPException

from pfas_gac.config import get_rng
from pfas_gac.models.schemas import MonteCarloRequest, MonteCarloResult
from pfas_gac.services.monte_carlo import run_monte_carlo, quick_uncertainty_bounds

router = APIRouter(prefix="/api/uncertainty", tags=["uncertainty"])


@router.post("/monte-carlo", response_model=MonteCarloResult)
async def monte_carlo(request: MonteCarloRequest) -> MonteCarloResult:
    """Sampled uncertainty around a point estimate. Pass a seed for reproducible draws."""
    try:
        return run_monte_carlo(
            request.point_estimate,
            uncertainty=request.uncertainty,
            iterations=request.iterations,
            distribution=request.distribution,
            rng=get_rng(request.seed),
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Monte Carlo error: {str(e)}")


@router.get("/quick")
async def quick_bounds(point_estimate: float, uncertainty: float = 0.18):
    """Analytic bounds without sampling."""
    return quick_uncertainty_bounds(point_estimate, uncertainty)
