"""Hazen dataset interchange and CSV export endpoints"""
from typing import Any, Dict

from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import Response

from pfas_gac.config import get_settings, get_rng
from pfas_gac.exceptions import InputValidationError, InvalidInputError
from pfas_gac.models.schemas import (
    BreakthroughRequest,
    HazenDataset,
    HazenExportRequest,
    MonteCarloRequest,
    ValidationRequest,
)
from pfas_gac.services.analysis_service import validate_against_observed
from pfas_gac.services.data_export import (
    hazen_import_template,
    export_hazen_dataset,
    parse_hazen_dataset,
    breakthrough_curve_csv,
    validation_comparison_csv,
    monte_carlo_csv,
    export_filename,
)
from pfas_gac.services.kinetics import simulate_breakthrough
from pfas_gac.services.monte_carlo import run_monte_carlo
from pfas_gac.services.validation import align_to_observed

router = APIRouter(prefix="/api/datasets", tags=["datasets"])


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/template")
async def template():
    """Empty Hazen import template."""
    return hazen_import_template()


@router.post("/parse", response_model=HazenDataset)
async def parse(data: Dict[str, Any] = Body(...)) -> HazenDataset:
    """Validate a Hazen dataset into a configuration and observed series."""
    try:
        return parse_hazen_dataset(data)
    except InputValidationError as e:
        raise HTTPException(status_code=422, detail=e.to_dict())
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Parse error: {str(e)}")


@router.post("/export")
async def export(request: HazenExportRequest):
    """Hazen dataset for a configuration and its observed series."""
    try:
        return export_hazen_dataset(
            request.configuration,
            observed=request.observed,
            site_information=request.site_information,
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Export error: {str(e)}")


@router.post("/breakthrough.csv")
async def breakthrough_csv(request: BreakthroughRequest, compound: str = "Total_PFAS"):
    """Thomas breakthrough curve as a CSV download."""
    try:
        params = get_settings().model_parameters()
        curve = simulate_breakthrough(
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
        return _csv_response(
            breakthrough_curve_csv(curve),
            export_filename("breakthrough_curve", compound, "csv"),
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Export error: {str(e)}")


@router.post("/validation.csv")
async def validation_csv(request: ValidationRequest, compound: str = "Total_PFAS"):
    """Validation metrics and point comparison as a CSV download."""
    if not request.observed:
        raise HTTPException(status_code=400, detail="Observed breakthrough data is required")
    try:
        settings = get_settings()
        report = validate_against_observed(
            request.configuration,
            request.observed,
            settings.model_parameters(),
            get_rng(),
            fit=False,
        )
        aligned = align_to_observed(report.breakthrough_curve.points, request.observed)
        return _csv_response(
            validation_comparison_csv(aligned, request.observed, report.validation_metrics, compound),
            export_filename("validation_comparison", compound, "csv"),
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Export error: {str(e)}")


@router.post("/monte-carlo.csv")
async def monte_carlo_export(request: MonteCarloRequest, project: str = "analysis"):
    """Monte Carlo summary statistics as a CSV download."""
    try:
        result = run_monte_carlo(
            request.point_estimate,
            uncertainty=request.uncertainty,
            iterations=request.iterations,
            distribution=request.distribution,
            rng=get_rng(request.seed),
        )
        return _csv_response(
            monte_carlo_csv(result),
            export_filename("monte_carlo_results", project, "csv"),
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Export error: {str(e)}")
