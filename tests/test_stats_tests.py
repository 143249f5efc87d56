"""
The simulated rejection rates of the registered t-tests are compared
against statsmodels' closed form power; basically, a sanity check for
the simulation code.
"""

from functools import partial

import numpy as np
import pytest
from statsmodels.stats.power import TTestPower

from tpower.analytical import make_test_configuration
from tpower.dgps import dgps
from tpower.stats_tests import stats_tests
from tpower.types import StatsTestParameters


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def data_generating_fn():
    return dgps.get("dgp::normal_groups")


def rejection_rate(config, data_generating_fn, test_name, alternative, rng):
    hypothesis_test_fn = stats_tests.get(test_name)
    dataset = data_generating_fn(config=config, n_trials=5000, rng=rng)
    out = hypothesis_test_fn(
        test_params=StatsTestParameters(
            simulated_dataset=dataset, alternative=alternative
        )
    )
    assert out.p_value.shape == (5000,)
    return np.mean(out.p_value <= config.alpha)


def test_normal_groups_shapes(data_generating_fn, rng):
    config = make_test_configuration((1.0, 0.1, 12), (1.2, 0.3, 7))
    dataset = data_generating_fn(config=config, n_trials=9, rng=rng)

    assert dataset.x.shape == (9, 12)
    assert dataset.y.shape == (9, 7)
    assert dataset.n_trials == 9


def test_comparison_value_is_degenerate(data_generating_fn, rng):
    config = make_test_configuration((1.0, 0.1, 12), 0.7)
    dataset = data_generating_fn(config=config, n_trials=5, rng=rng)

    np.testing.assert_array_equal(dataset.y, np.full((5, 1), 0.7))


@pytest.mark.parametrize(
    ["alternative", "statsmodels_alternative"],
    [("two-sided", "two-sided"), ("greater", "larger")],
)
def test_one_sample_t(
    data_generating_fn, rng, alternative, statsmodels_alternative
):
    config = make_test_configuration((1.04, 0.1, 25), 1.0)
    rate = rejection_rate(
        config, data_generating_fn, "stats_test::one_sample_t", alternative, rng
    )

    np.testing.assert_almost_equal(
        rate,
        TTestPower().power(
            effect_size=0.4,
            nobs=25,
            alpha=0.05,
            alternative=statsmodels_alternative,
        ),
        decimal=1,
    )


def test_welch_t_against_wrong_direction(data_generating_fn, rng):
    # group 2 is larger, so testing "greater" almost never rejects
    config = make_test_configuration((1.1, 0.1, 30), (1.2, 0.3, 25))
    rate = rejection_rate(
        config, data_generating_fn, "stats_test::welch_t", "greater", rng
    )
    assert rate < 0.01


def test_welch_t_under_null(data_generating_fn, rng):
    config = make_test_configuration((1.0, 0.1, 30), (1.0, 0.3, 25))
    rate = rejection_rate(
        config, data_generating_fn, "stats_test::welch_t", "two-sided", rng
    )
    np.testing.assert_almost_equal(rate, 0.05, decimal=2)
