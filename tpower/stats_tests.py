import catalogue
import numpy as np
from scipy import stats

from .types import StatsTestOutput, StatsTestParameters

stats_tests = catalogue.create("tpower", "stats_tests")


@stats_tests.register("stats_test::one_sample_t")
def one_sample_t(test_params: StatsTestParameters) -> StatsTestOutput:
    """
    One-sample t-test of each trial of group 1 against the comparison
    value (the mean of the degenerate group 2 draws).
    """
    data = test_params.simulated_dataset
    popmean = data.y.mean(axis=-1, keepdims=True)
    statistic, p_value = stats.ttest_1samp(
        data.x,
        popmean=popmean,
        axis=-1,
        alternative=test_params.alternative,
    )
    return StatsTestOutput(
        p_value=np.asarray(p_value), statistic=np.asarray(statistic)
    )


@stats_tests.register("stats_test::welch_t")
def welch_t(test_params: StatsTestParameters) -> StatsTestOutput:
    """
    Two-sample t-test with unequal variances (Welch) for each trial.
    """
    data = test_params.simulated_dataset
    statistic, p_value = stats.ttest_ind(
        data.x,
        data.y,
        axis=-1,
        equal_var=False,
        alternative=test_params.alternative,
    )
    return StatsTestOutput(
        p_value=np.asarray(p_value), statistic=np.asarray(statistic)
    )
