from .analytical import (
    POWER_LEVELS,
    estimate,
    make_test_configuration,
    min_effect_sizes,
    min_sample_sizes,
    observed_power,
    refine_sample_sizes,
)
from .compute_power import compute_power, simulate_power
from .errors import InvalidInputError, LowConfidenceWarning, ZeroEffectSizeError
from .types import Group, SimulationResult, SizeEffectTable, StatMode

__all__ = [
    "POWER_LEVELS",
    "Group",
    "InvalidInputError",
    "LowConfidenceWarning",
    "SimulationResult",
    "SizeEffectTable",
    "StatMode",
    "ZeroEffectSizeError",
    "compute_power",
    "estimate",
    "make_test_configuration",
    "min_effect_sizes",
    "min_sample_sizes",
    "observed_power",
    "refine_sample_sizes",
    "simulate_power",
]
