from functools import lru_cache
from typing import Optional

import numpy as np
from pydantic_settings import BaseSettings

from pfas_gac.models.schemas import ModelParameters, MonteCarloDistribution
from pfas_gac.utils import constants


class Settings(BaseSettings):
    port: int = 8000
    env: str = "development"
    cors_origins: str = "http://localhost:3000"
    log_level: str = "INFO"

    # Model calibration
    freundlich_k: float = constants.FREUNDLICH_K
    freundlich_n: float = constants.FREUNDLICH_N
    thomas_rate_base: float = constants.THOMAS_RATE_BASE
    thomas_reference_ebct_min: float = constants.THOMAS_REFERENCE_EBCT_MIN
    capacity_utilization: float = constants.CAPACITY_UTILIZATION
    max_lifespan_months: float = constants.MAX_LIFESPAN_MONTHS
    monte_carlo_uncertainty: float = constants.MONTE_CARLO_UNCERTAINTY
    monte_carlo_iterations: int = constants.MONTE_CARLO_ITERATIONS
    monte_carlo_distribution: MonteCarloDistribution = MonteCarloDistribution.uniform
    monte_carlo_seed: Optional[int] = None
    breakthrough_points: int = constants.DEFAULT_CURVE_POINTS
    breakthrough_duration_days: float = constants.DEFAULT_DURATION_DAYS
    interpolate_thresholds: bool = False

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    def model_parameters(self) -> ModelParameters:
        """Calibration constants as an immutable value object."""
        return ModelParameters(
            freundlich_k=self.freundlich_k,
            freundlich_n=self.freundlich_n,
            thomas_rate_base=self.thomas_rate_base,
            thomas_reference_ebct_min=self.thomas_reference_ebct_min,
            capacity_utilization=self.capacity_utilization,
            max_lifespan_months=self.max_lifespan_months,
            monte_carlo_uncertainty=self.monte_carlo_uncertainty,
            monte_carlo_iterations=self.monte_carlo_iterations,
            monte_carlo_distribution=self.monte_carlo_distribution,
            breakthrough_points=self.breakthrough_points,
            breakthrough_duration_days=self.breakthrough_duration_days,
            interpolate_thresholds=self.interpolate_thresholds,
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def get_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Random generator for Monte Carlo; falls back to the configured seed."""
    if seed is None:
        seed = get_settings().monte_carlo_seed
    return np.random.default_rng(seed)
