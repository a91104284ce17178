from fastapi import APIRouter

from pfas_gac.config import get_settings
from pfas_gac.models.schemas import SystemType, MonteCarloDistribution
from pfas_gac.utils.constants import CHAIN_LENGTH_FACTORS

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


@router.get("/api/status")
async def api_status():
    """Extended status with the active model calibration."""
    settings = get_settings()
    return {
        "status": "healthy",
        "env": settings.env,
        "calibration": settings.model_parameters().model_dump(mode="json"),
        "features": {
            "system_types": [t.value for t in SystemType],
            "monte_carlo_distributions": [d.value for d in MonteCarloDistribution],
            "compounds": list(CHAIN_LENGTH_FACTORS.keys()),
        },
    }
