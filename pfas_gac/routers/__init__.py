# API Routers
from . import (
    analysis,
    breakthrough,
    datasets,
    health,
    isotherm,
    uncertainty,
)

__all__ = [
    "analysis",
    "breakthrough",
    "datasets",
    "health",
    "isotherm",
    "uncertainty",
]
