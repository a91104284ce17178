import numpy as np
import pytest
from fastapi.testclient import TestClient

from pfas_gac.main import app
from pfas_gac.models.schemas import SystemConfiguration


@pytest.fixture
def client():
    """Create a test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def rng():
    """Seeded generator for reproducible Monte Carlo draws."""
    return np.random.default_rng(12345)


@pytest.fixture
def flint_request():
    """Flint, MI demo system: low-level PFAS in a large municipal vessel."""
    return {
        "system_type": "Fixed Bed",
        "vessel_diameter_m": 3.5,
        "vessel_height_m": 12.0,
        "bed_height_m": 2.5,
        "flow_rate_m3_h": 1000.0,
        "toc_mg_l": 2.5,
        "sulfate_mg_l": 45.0,
        "chloride_mg_l": 25.0,
        "alkalinity_mg_l": 120.0,
        "hardness_mg_l": 150.0,
        "ph": 7.2,
        "temperature_c": 15.0,
        "pfoa_ng_l": 0.08,
        "pfos_ng_l": 0.12,
        "pfna_ng_l": 0.04,
        "pfhxa_ng_l": 0.06,
        "pfhxs_ng_l": 0.03,
        "pfda_ng_l": 0.02,
        "pfbs_ng_l": 0.01,
        "total_pfas_ng_l": 0.36,
        "gac_type": "Coconut Shell",
        "gac_density_kg_m3": 480.0,
        "gac_particle_size_mm": 1.5,
        "gac_iodine_number_mg_g": 1050.0,
        "gac_surface_area_m2_g": 1200.0,
        "gac_cost_per_kg_usd": 2.5,
        "replacement_cost_usd": 15000.0,
        "labor_cost_usd": 5000.0,
        "disposal_cost_usd": 3000.0,
        "operating_days_per_year": 365,
        "operating_hours_per_day": 24,
        "target_removal_efficiency": 99.0,
        "safety_factor": 1.5,
    }


@pytest.fixture
def flint_config(flint_request):
    return SystemConfiguration(**flint_request)


@pytest.fixture
def sample_breakthrough_request():
    """Single-compound Thomas request with a well-resolved S-curve."""
    return {
        "influent_ng_l": 1000.0,
        "flow_rate_m3_h": 1.0,
        "bed_volume_m3": 1.0,
        "gac_density_kg_m3": 480.0,
        "capacity_mg_g": 10.0,
        "ebct_min": 60.0,
        "duration_days": 365.0,
        "k_th": 0.1,
    }
