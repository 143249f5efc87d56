class PowerAnalysisError(Exception):
    """Base class for the errors raised by `tpower`."""


class InvalidInputError(PowerAnalysisError, ValueError):
    pass


class ZeroEffectSizeError(PowerAnalysisError, ZeroDivisionError):
    """
    The effect size is exactly zero, so no sample size can reach any
    demanded power. `observed_power` keeps the (baseline) power that was
    still computable for the configuration.
    """

    def __init__(self, message: str, observed_power: float | None = None):
        super().__init__(message)
        self.observed_power = observed_power


class LowConfidenceWarning(UserWarning):
    """Small groups or small estimated sample sizes, take results with care."""
