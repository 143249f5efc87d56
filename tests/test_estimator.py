import numpy as np
import pandas as pd
import pytest

from tpower.analytical import estimate, make_test_configuration
from tpower.compute_power import simulate_power
from tpower.estimator import PowerEstimator, make_scenarios


@pytest.fixture
def scenarios():
    return make_scenarios(
        mean1=[1.0, 1.1, 1.2], stddev1=0.1, size1=[10, 30], group2=1.0
    )


def test_make_scenarios(scenarios):
    assert len(scenarios) == 6
    assert scenarios[0] == {
        "group1": (1.0, 0.1, 10),
        "group2": 1.0,
        "alpha": 0.05,
        "tails": 2,
    }


def test_fit_drops_scenarios_without_effect(scenarios):
    estimator = PowerEstimator().fit(scenarios)
    landscape = estimator.landscape_

    assert isinstance(landscape, pd.DataFrame)
    assert len(landscape) == 4
    assert (landscape["test"] == "One-sample t-test").all()
    assert landscape["sim_power"].isna().all()
    assert {"n_min@0.8", "es_min@0.99"} <= set(landscape.columns)
    assert landscape["power"].between(0, 1).all()


def test_fit_with_simulation():
    scenarios = make_scenarios(
        mean1=1.1, stddev1=0.1, size1=30, group2=(1.2, 0.3, 25)
    )
    estimator = PowerEstimator(
        simulate=True, n_outer=10, n_inner=200, random_state=5
    ).fit(scenarios)
    row = estimator.landscape_.iloc[0]

    assert row["test"] == "Two-sample t-test"
    assert abs(row["sim_power"] - row["power"]) <= 0.1


def test_predictions(scenarios):
    estimator = PowerEstimator().fit(scenarios)

    assert estimator.predict_n(effect=0.2, power=0.99) == 10
    assert estimator.predict_n(effect=0.15, power=0.99) == 30
    assert estimator.predict_n(effect=0.05, power=0.99) is None
    assert estimator.predict_mde(size=10, power=0.99) == pytest.approx(0.2)
    assert estimator.predict_mde(size=30, power=0.99) == pytest.approx(0.1)


def test_predict_before_fit():
    with pytest.raises(ValueError):
        PowerEstimator().predict_n(effect=0.1)


def test_fit_without_valid_scenarios():
    scenarios = make_scenarios(mean1=1.0, stddev1=0.1, size1=10, group2=1.0)
    with pytest.raises(ValueError):
        PowerEstimator().fit(scenarios)


def test_is_a_sklearn_estimator():
    estimator = PowerEstimator(n_outer=5)
    params = estimator.get_params()
    assert params["n_outer"] == 5
    assert params["simulate"] is False
    assert np.isclose(params["power_levels"][1], 0.8)


def test_landscape_row_matches_a_single_analysis():
    scenarios = make_scenarios(
        mean1=1.1, stddev1=0.1, size1=30, group2=(1.2, 0.3, 25)
    )
    estimator = PowerEstimator(
        simulate=True, n_outer=5, n_inner=100, random_state=9
    ).fit(scenarios)
    row = estimator.landscape_.iloc[0]

    config = make_test_configuration((1.1, 0.1, 30), (1.2, 0.3, 25))
    power, table = estimate(config)
    simulation = simulate_power(config, n_outer=5, n_inner=100, rng=9)

    assert row["power"] == pytest.approx(power.observed_power)
    assert row["n_min@0.9"] == table.min_sample_sizes[2]
    assert row["sim_power"] == pytest.approx(simulation.mean_power)
