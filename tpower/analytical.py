"""
Closed-form power analysis of one- and two-sample t-tests from summary
statistics (mean, stddev and sample size of each group).
"""

import math
from numbers import Real
from typing import Sequence

import numpy as np
from scipy import stats

from .errors import InvalidInputError, ZeroEffectSizeError
from .types import (
    Group,
    PowerResult,
    SizeEffectTable,
    StatMode,
    TestConfiguration,
)

# Demanded power levels of the size/effect table
POWER_LEVELS = (0.70, 0.80, 0.90, 0.95, 0.99)

# Below these sizes the estimates are flagged as low confidence
SMALL_GROUP_SIZE = 10
SMALL_SAMPLE_SIZE = 30


def make_group(value: Group | Sequence[float], name: str = "group") -> Group:
    """
    Builds a `Group` from a `(mean, stddev, sample_size)` triplet.

    Args:
        value (Group | Sequence[float]): a group or a triplet.
        name (str): name of the group, used in error messages.

    Returns:
        Group: the validated group.
    """
    if isinstance(value, Group):
        mean, stddev, sample_size = value.mean, value.stddev, value.sample_size
    else:
        values = np.asarray(value, dtype=float).ravel()
        if values.size != 3:
            raise InvalidInputError(
                f'"{name}" must be (mean, stddev, sample_size), got {value!r}'
            )
        mean, stddev, sample_size = values

    if not np.isfinite(mean):
        raise InvalidInputError(f'Mean of "{name}" must be finite')
    if not np.isfinite(stddev) or stddev < 0:
        raise InvalidInputError(
            f'Standard deviation of "{name}" must be finite and >= 0'
        )
    if not np.isfinite(sample_size) or int(sample_size) != sample_size:
        raise InvalidInputError(f'Size of "{name}" must be an integer')

    return Group(
        mean=float(mean), stddev=float(stddev), sample_size=int(sample_size)
    )


def make_test_configuration(
    group1: Group | Sequence[float],
    group2: Group | Sequence[float] | float | None = None,
    alpha: float = 0.05,
    tails: int = 2,
) -> TestConfiguration:
    """
    Validates the inputs and derives the kind of test to analyse.

    Group 2 can be:
        - omitted, `None` or empty: group 1 is tested for differing from zero.
        - a scalar (or a 1-element sequence): group 1 is tested for differing
          from this value (one-sample t-test).
        - a `(mean, stddev, sample_size)` triplet or a `Group`: both
          distributions are compared (two-sample Welch t-test).

    Raises:
        InvalidInputError: if any input is out of its domain.
    """
    if not isinstance(alpha, Real) or not 0 < alpha < 1:
        raise InvalidInputError(f"alpha must lie in (0, 1), got {alpha!r}")
    if tails not in (1, 2):
        raise InvalidInputError(f"tails must be 1 or 2, got {tails!r}")

    g1 = make_group(group1, name="group 1")
    if g1.sample_size < 2:
        raise InvalidInputError('Size of "group 1" must be > 1')

    if group2 is None:
        group2 = 0.0

    if isinstance(group2, Group) or np.size(group2) > 1:
        g2 = make_group(group2, name="group 2")
        if g2.sample_size < 2:
            raise InvalidInputError('Size of "group 2" must be > 1')
        mode = StatMode.TWO_SAMPLE
    else:
        value = np.asarray(group2, dtype=float).ravel()
        value = float(value[0]) if value.size else 0.0
        if not np.isfinite(value):
            raise InvalidInputError("The comparison value must be finite")
        g2 = Group(mean=value, stddev=0.0, sample_size=1)
        mode = StatMode.ONE_SAMPLE

    if g1.squared_error + g2.squared_error == 0:
        raise InvalidInputError(
            "The standard error of the difference is zero, "
            "at least one standard deviation must be > 0"
        )

    return TestConfiguration(
        group1=g1, group2=g2, mode=mode, alpha=float(alpha), tails=int(tails)
    )


def effect_size(config: TestConfiguration) -> float:
    """Absolute effect size, mean1 - mean2."""
    return config.group1.mean - config.group2.mean


def standard_error(config: TestConfiguration) -> float:
    """Standard error of the difference between the means."""
    return math.sqrt(config.group1.squared_error + config.group2.squared_error)


def t_statistic(config: TestConfiguration) -> float:
    return effect_size(config) / standard_error(config)


def pooled_std(config: TestConfiguration) -> float:
    g1, g2 = config.group1, config.group2
    n1, n2 = g1.sample_size, g2.sample_size
    return math.sqrt(
        ((n1 - 1) * g1.variance + (n2 - 1) * g2.variance) / (n1 + n2 - 2)
    )


def degrees_of_freedom(config: TestConfiguration) -> int:
    """
    n1 - 1 for the one-sample test, and the Welch-Satterthwaite
    approximation rounded to the nearest integer for the two-sample test.
    """
    g1, g2 = config.group1, config.group2
    if config.mode is StatMode.ONE_SAMPLE:
        return g1.sample_size - 1

    se1, se2 = g1.squared_error, g2.squared_error
    df = (se1 + se2) ** 2 / (
        se1**2 / (g1.sample_size - 1) + se2**2 / (g2.sample_size - 1)
    )
    # round half away from zero
    return int(math.floor(df + 0.5))


def critical_t(config: TestConfiguration, df: float | None = None) -> float:
    if df is None:
        df = degrees_of_freedom(config)
    return stats.t.ppf(1 - config.alpha / config.tails, df).item()


def observed_power(config: TestConfiguration) -> float:
    """
    Power of the test at the observed effect, using the noncentral
    t-distribution centered at |t|.

    At zero effect this is the false-positive rate of the test.
    """
    df = degrees_of_freedom(config)
    t_crit = critical_t(config, df)
    nc = abs(t_statistic(config))

    dist = stats.nct(df, nc)
    # 1 - P(T < t_crit) for one tail, 1 - P(-t_crit < T < t_crit) for two
    power = dist.sf(t_crit)
    if config.tails == 2:
        power += dist.cdf(-t_crit)

    # scipy's nct may return NaN for large noncentralities, where the
    # normal approximation is accurate
    if np.isnan(power):
        power = stats.norm.sf(t_crit - nc)
        if config.tails == 2:
            power += stats.norm.cdf(-t_crit - nc)

    return float(np.clip(power, 0.0, 1.0))


def _check_power_levels(power_levels: Sequence[float]) -> np.ndarray:
    levels = np.asarray(power_levels, dtype=float)
    if levels.ndim != 1 or levels.size == 0:
        raise InvalidInputError("power_levels must be a non-empty sequence")
    if np.any((levels <= 0) | (levels >= 1)):
        raise InvalidInputError("Every power level must lie in (0, 1)")
    return levels


def min_effect_sizes(
    config: TestConfiguration, power_levels: Sequence[float] = POWER_LEVELS
) -> np.ndarray:
    """
    Minimum absolute effect size detectable at each demanded power,
    keeping the standard error and degrees of freedom of the input.
    """
    levels = _check_power_levels(power_levels)
    df = degrees_of_freedom(config)
    t_alpha = critical_t(config, df)
    t_pi = stats.t.ppf(levels, df)
    return standard_error(config) * (t_alpha + t_pi)


def _sample_size_factor(config: TestConfiguration) -> int:
    return 1 if config.mode is StatMode.ONE_SAMPLE else 2


def min_sample_sizes(
    config: TestConfiguration, power_levels: Sequence[float] = POWER_LEVELS
) -> np.ndarray:
    """
    Minimum sample size (per group) needed to reach each demanded power.

    The degrees of freedom depend on the sample size we are looking for,
    so the normal distribution is used instead of the t-distribution.
    This underestimates the sizes when they are small (n < ~30): take the
    result as a first estimate, collect the data, and estimate again (or
    see `refine_sample_sizes`).

    Raises:
        ZeroEffectSizeError: if mean1 == mean2, or if the effect is too
            small for the size to be represented.
    """
    levels = _check_power_levels(power_levels)
    es = effect_size(config)
    if es == 0:
        raise ZeroEffectSizeError(
            "The effect size is 0, no sample size reaches the demanded power"
        )

    z_alpha = stats.norm.ppf(1 - config.alpha / config.tails)
    z_pi = stats.norm.ppf(levels)

    with np.errstate(over="ignore", divide="ignore"):
        n_min = (
            _sample_size_factor(config)
            * pooled_std(config) ** 2
            * (z_alpha + z_pi) ** 2
            / es**2
        )
    if not np.all(np.isfinite(n_min)):
        raise ZeroEffectSizeError(
            "The effect size is too small to estimate a sample size"
        )
    # python ints, sizes beyond int64 are not truncated
    return np.array([math.ceil(n) for n in n_min], dtype=object)


def refine_sample_sizes(
    config: TestConfiguration,
    power_levels: Sequence[float] = POWER_LEVELS,
    max_iter: int = 50,
) -> np.ndarray:
    """
    Refines `min_sample_sizes` with t quantiles instead of normal ones.

    Starting from the normal approximation, the degrees of freedom of a
    study with the current per-group size are computed (keeping the
    stddevs of the input), the size is recomputed with t quantiles, and
    this is repeated until the size stops changing or `max_iter` is hit.

    Raises:
        ZeroEffectSizeError: if mean1 == mean2, or if the effect is too small.
    """
    levels = _check_power_levels(power_levels)
    if max_iter < 1:
        raise InvalidInputError("max_iter must be >= 1")

    es = effect_size(config)
    factor = _sample_size_factor(config)
    s12_sq = pooled_std(config) ** 2
    refined = min_sample_sizes(config, levels)

    for i, level in enumerate(levels):
        n = max(int(refined[i]), 2)
        for _ in range(max_iter):
            if config.mode is StatMode.ONE_SAMPLE:
                df = n - 1
            else:
                v1, v2 = config.group1.variance, config.group2.variance
                df = (v1 / n + v2 / n) ** 2 / (
                    (v1 / n) ** 2 / (n - 1) + (v2 / n) ** 2 / (n - 1)
                )
            t_alpha = stats.t.ppf(1 - config.alpha / config.tails, df)
            t_pi = stats.t.ppf(level, df)
            size = factor * s12_sq * (t_alpha + t_pi) ** 2 / es**2
            if not math.isfinite(size):
                raise ZeroEffectSizeError(
                    "The effect size is too small to estimate a sample size"
                )
            new_n = max(math.ceil(size), 2)
            if new_n == n:
                break
            n = new_n
        refined[i] = n

    return refined


def low_confidence_advisories(
    config: TestConfiguration, n_min: Sequence[int] | None = None
) -> tuple[str, ...]:
    """
    Returns the reasons why the estimates of `config` may be inaccurate:
    small groups, or small estimated sample sizes (which the normal
    approximation underestimates).
    """
    advisories = []
    sizes = [config.group1.sample_size]
    if config.mode is StatMode.TWO_SAMPLE:
        sizes.append(config.group2.sample_size)
    if any(size < SMALL_GROUP_SIZE for size in sizes):
        advisories.append(
            "Small sample sizes may result in poor power estimation"
        )
    if n_min is not None and any(n < SMALL_SAMPLE_SIZE for n in n_min):
        advisories.append(
            f"Small sample sizes (n < {SMALL_SAMPLE_SIZE}) are likely to be underestimated"
        )
    return tuple(advisories)


def estimate(
    config: TestConfiguration, power_levels: Sequence[float] = POWER_LEVELS
) -> tuple[PowerResult, SizeEffectTable]:
    """
    Computes the observed power and the size/effect table of a configuration.

    Raises:
        ZeroEffectSizeError: if mean1 == mean2. The error keeps the
            observed power, which is still defined.
    """
    levels = _check_power_levels(power_levels)
    power = observed_power(config)

    try:
        n_min = min_sample_sizes(config, levels)
    except ZeroEffectSizeError as e:
        raise ZeroEffectSizeError(str(e), observed_power=power) from e

    es_min = min_effect_sizes(config, levels)

    table = SizeEffectTable(
        power_levels=levels.tolist(),
        min_sample_sizes=n_min.tolist(),
        min_effect_sizes=es_min.tolist(),
        test_description=config.mode.description,
        advisories=low_confidence_advisories(config, n_min),
    )
    return PowerResult(observed_power=power), table
