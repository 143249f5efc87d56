import warnings
from typing import Sequence

import numpy as np
from joblib import Parallel, delayed
from numpy.random import Generator
from tqdm.auto import tqdm

from .analytical import POWER_LEVELS, estimate, make_test_configuration
from .dgps import dgps
from .errors import InvalidInputError, LowConfidenceWarning
from .logging import get_logger, log
from .stats_tests import stats_tests
from .types import (
    Group,
    SimulationResult,
    SizeEffectTable,
    StatMode,
    StatsTestParameters,
    TestConfiguration,
)

_logger = get_logger(__name__)

# Default number of outer repetitions and inner trials of the simulation
N_OUTER = 100
N_INNER = 300

STATS_TEST_BY_MODE = {
    StatMode.ONE_SAMPLE: "stats_test::one_sample_t",
    StatMode.TWO_SAMPLE: "stats_test::welch_t",
}


def _simulate_repetition(
    config: TestConfiguration,
    data_generating_fn,
    hypothesis_test_fn,
    n_inner: int,
    rng: Generator,
) -> float:
    simulated_dataset = data_generating_fn(
        config=config, n_trials=n_inner, rng=rng
    )
    out = hypothesis_test_fn(
        test_params=StatsTestParameters(
            simulated_dataset=simulated_dataset,
            alternative=config.alternative,
        )
    )
    # NaN p-values never reject
    rejected = out.p_value <= config.alpha
    return np.count_nonzero(rejected) / n_inner


def simulate_power(
    config: TestConfiguration,
    n_outer: int = N_OUTER,
    n_inner: int = N_INNER,
    rng: Generator | int | None = None,
    n_jobs: int = 1,
    progress: bool = False,
    dgp: str = "dgp::normal_groups",
) -> SimulationResult:
    """
    Estimates the power of a configuration by simulation.

    Each of the `n_outer` repetitions draws `n_inner` datasets from the
    group distributions, runs the t-test matching the configuration on
    each of them and keeps the fraction of rejections. The repetitions
    get their own random streams spawned from `rng`, so that the result
    only depends on the seed, also when running in parallel.

    Args:
        config (TestConfiguration): the configuration to simulate.
        n_outer (int): number of repetitions.
        n_inner (int): number of simulated tests per repetition.
        rng (Generator | int | None): random generator or seed. `None` uses fresh OS entropy.
        n_jobs (int): number of parallel jobs for the repetitions.
        progress (bool): whether to show a progress bar.
        dgp (str): name of the data generating process in `dgps`.

    Returns:
        SimulationResult: mean power across repetitions and its interquartile range.
    """
    if n_outer < 1 or n_inner < 1:
        raise InvalidInputError(
            "Number of repetitions and trials must be greater than 0"
        )

    rng = np.random.default_rng(rng)
    data_generating_fn = dgps.get(dgp)
    hypothesis_test_fn = stats_tests.get(STATS_TEST_BY_MODE[config.mode])

    tasks = (
        delayed(_simulate_repetition)(
            config=config,
            data_generating_fn=data_generating_fn,
            hypothesis_test_fn=hypothesis_test_fn,
            n_inner=n_inner,
            rng=child_rng,
        )
        for child_rng in rng.spawn(n_outer)
    )

    powers = Parallel(n_jobs=n_jobs)(
        tqdm(
            tasks,
            total=n_outer,
            desc=f"Simulating {config.mode.description}",
            disable=not progress,
        )
    )
    powers = np.asarray(powers, dtype=float)

    # midpoint percentiles, as in the classic `prctile`
    iqr_low, iqr_high = np.percentile(powers, [25, 75], method="hazen")

    return SimulationResult(
        mean_power=powers.mean().item(),
        iqr_low=iqr_low.item(),
        iqr_high=iqr_high.item(),
    )


def compute_power(
    group1: Group | Sequence[float],
    group2: Group | Sequence[float] | float | None = None,
    alpha: float = 0.05,
    tails: int = 2,
    simulate: bool = False,
    *,
    n_outer: int = N_OUTER,
    n_inner: int = N_INNER,
    rng: Generator | int | None = None,
    n_jobs: int = 1,
    power_levels: Sequence[float] = POWER_LEVELS,
    verbose: bool = False,
) -> tuple[float, SizeEffectTable]:
    """
    Statistical power of a t-test from the summary statistics of the groups.

    Also estimates, for several levels of demanded power, the minimum
    number of subjects per group and the minimum absolute effect size.

    Args:
        group1 (Group | Sequence[float]): `(mean, stddev, sample_size)` of group 1.
        group2 (Group | Sequence[float] | float | None): `(mean, stddev, sample_size)`
            of group 2 for a two-sample test, a value to compare group 1 with for a
            one-sample test, or None to compare group 1 with zero.
        alpha (float): significance level. Default to 0.05.
        tails (int): 1 or 2. One-tailed tests are directed along mean1 - mean2.
        simulate (bool): also validate the power by simulation. This is slow.
        n_outer (int): repetitions of the simulation.
        n_inner (int): simulated tests per repetition.
        rng (Generator | int | None): random generator or seed of the simulation.
        n_jobs (int): parallel jobs of the simulation.
        power_levels (Sequence[float]): demanded power levels of the table.
        verbose (bool): log the results and emit the advisories as `LowConfidenceWarning`.

    Returns:
        tuple[float, SizeEffectTable]: the observed power and the size/effect table.

    Raises:
        InvalidInputError: if the inputs are out of their domain.
        ZeroEffectSizeError: if mean1 == mean2; the observed power is kept in the error.
    """
    config = make_test_configuration(group1, group2, alpha=alpha, tails=tails)
    power, table = estimate(config, power_levels=power_levels)

    if simulate:
        table.simulation = simulate_power(
            config,
            n_outer=n_outer,
            n_inner=n_inner,
            rng=rng,
            n_jobs=n_jobs,
            progress=verbose,
        )

    if verbose:
        for advisory in table.advisories:
            warnings.warn(advisory, LowConfidenceWarning, stacklevel=2)
            log(_logger.warning, advisory, "yellow")
        if table.simulation is not None:
            sim = table.simulation
            log(
                _logger.info,
                f"SIMULATED  POW = {sim.mean_power:.3g} IQR = [{sim.iqr_low:.3g} {sim.iqr_high:.3g}]",
                "blue",
            )
        log(
            _logger.info,
            f"CALCULATED POW = {power.observed_power:.3g} ({table.test_description})",
            "green",
        )

    return power.observed_power, table
