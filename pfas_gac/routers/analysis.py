"""Lifespan analysis API endpoints"""
from fastapi import APIRouter, HTTPException

from pfas_gac.config import get_settings, get_rng
from pfas_gac.exceptions import InvalidInputError
from pfas_gac.models.schemas import (
    SystemConfiguration,
    AnalysisResult,
    ResearchAnalysisResult,
    ValidationRequest,
    ValidationReport,
)
from pfas_gac.services.analysis_service import (
    analyze,
    analyze_research,
    validate_against_observed,
)

router = APIRouter(prefix="/api/analysis", tags=["analysis"])


@router.post("", response_model=AnalysisResult)
async def run_analysis(config: SystemConfiguration) -> AnalysisResult:
    """
    Projected GAC lifespan for one system.

    Runs capacity, efficiency, baseline lifespan, Monte Carlo uncertainty
    and cost, and returns the headline metrics with key findings.
    """
    try:
        settings = get_settings()
        return analyze(config, settings.model_parameters(), get_rng())
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Analysis error: {str(e)}")


@router.post("/research", response_model=ResearchAnalysisResult)
async def run_research_analysis(config: SystemConfiguration) -> ResearchAnalysisResult:
    """Analysis with full Monte Carlo statistics and BDST design check."""
    try:
        settings = get_settings()
        return analyze_research(config, settings.model_parameters(), get_rng())
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Analysis error: {str(e)}")


@router.post("/validate", response_model=ValidationReport)
async def validate(request: ValidationRequest) -> ValidationReport:
    """Compare the modeled breakthrough curve with observed field data."""
    try:
        settings = get_settings()
        return validate_against_observed(
            request.configuration,
            request.observed,
            settings.model_parameters(),
            get_rng(),
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Validation error: {str(e)}")
