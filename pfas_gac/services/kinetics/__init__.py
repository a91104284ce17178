# Kinetic models for breakthrough curve prediction
from .thomas_model import (
    thomas_model,
    estimate_thomas_rate_constant,
    simulate_breakthrough,
    simulate_multi_compound_breakthrough,
    get_chain_length_factor,
    find_limiting_compound,
    fit_thomas,
)
from .bohart_adams import (
    estimate_bdst_service_time,
    calculate_bed_depth_service_time,
)

__all__ = [
    'thomas_model',
    'estimate_thomas_rate_constant',
    'simulate_breakthrough',
    'simulate_multi_compound_breakthrough',
    'get_chain_length_factor',
    'find_limiting_compound',
    'fit_thomas',
    'estimate_bdst_service_time',
    'calculate_bed_depth_service_time',
]
