from itertools import product

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from sklearn.base import BaseEstimator
from tqdm.auto import tqdm

from .analytical import POWER_LEVELS, estimate, make_test_configuration
from .compute_power import N_INNER, N_OUTER, simulate_power
from .errors import InvalidInputError, ZeroEffectSizeError
from .logging import get_logger, log

_logger = get_logger(__name__)


def make_scenarios(
    mean1: float | list,
    stddev1: float | list,
    size1: int | list,
    group2: tuple | float | None = None,
    alpha: float = 0.05,
    tails: int = 2,
) -> list[dict]:
    """
    Builds one scenario per combination of the values of group 1,
    all of them compared against the same `group2`.
    """
    grid = product(
        np.atleast_1d(mean1), np.atleast_1d(stddev1), np.atleast_1d(size1)
    )
    return [
        {
            "group1": (float(mean), float(stddev), int(size)),
            "group2": group2,
            "alpha": alpha,
            "tails": tails,
        }
        for mean, stddev, size in grid
    ]


class PowerEstimator(BaseEstimator):
    def __init__(
        self,
        simulate: bool = False,
        power_levels: tuple = POWER_LEVELS,
        n_outer: int = N_OUTER,
        n_inner: int = N_INNER,
        random_state: int = 42,
        n_jobs: int = 1,
    ):
        self.simulate = simulate
        self.power_levels = power_levels
        self.n_outer = n_outer
        self.n_inner = n_inner
        self.random_state = random_state
        self.n_jobs = n_jobs

    def fit(self, X, y=None):
        """
        Computes the power landscape of a list of scenarios, as built by
        `make_scenarios`. Scenarios without effect or with invalid
        inputs are dropped.
        """
        tasks = (
            delayed(PowerEstimator._analyse_scenario)(
                scenario=scenario,
                simulate=self.simulate,
                power_levels=self.power_levels,
                n_outer=self.n_outer,
                n_inner=self.n_inner,
                seed=self.random_state + i,
            )
            for i, scenario in enumerate(X)
        )

        rows = Parallel(n_jobs=self.n_jobs)(
            tqdm(tasks, total=len(X), desc="Estimating power landscape")
        )
        rows = [row for row in rows if row is not None]

        if not rows:
            raise ValueError(
                "No valid power estimates were computed. Check your input data."
            )
        if len(rows) < len(X):
            log(
                _logger.warning,
                f"Dropped {len(X) - len(rows)} of {len(X)} scenarios",
                "yellow",
            )

        self.landscape_ = pd.DataFrame(rows)
        return self

    @staticmethod
    def _analyse_scenario(
        scenario: dict,
        simulate: bool,
        power_levels: tuple,
        n_outer: int,
        n_inner: int,
        seed: int,
    ) -> dict | None:
        try:
            config = make_test_configuration(
                scenario["group1"],
                scenario.get("group2"),
                alpha=scenario.get("alpha", 0.05),
                tails=scenario.get("tails", 2),
            )
            power, table = estimate(config, power_levels=power_levels)
        except (InvalidInputError, ZeroEffectSizeError):
            return None

        if simulate:
            table.simulation = simulate_power(
                config, n_outer=n_outer, n_inner=n_inner, rng=seed
            )

        g1, g2 = config.group1, config.group2
        row = {
            "mean1": g1.mean,
            "stddev1": g1.stddev,
            "size1": g1.sample_size,
            "mean2": g2.mean,
            "stddev2": g2.stddev,
            "size2": g2.sample_size,
            "effect": g1.mean - g2.mean,
            "power": power.observed_power,
            "sim_power": (
                table.simulation.mean_power if table.simulation else np.nan
            ),
            "test": table.test_description,
        }
        for level, n, es in zip(
            table.power_levels, table.min_sample_sizes, table.min_effect_sizes
        ):
            row[f"n_min@{level:g}"] = n
            row[f"es_min@{level:g}"] = es
        return row

    def _check_fitted(self):
        if not hasattr(self, "landscape_"):
            raise ValueError(
                "The model must be fitted before making predictions."
            )

    def predict_n(self, effect: float, power: float = 0.8) -> int | None:
        """
        Smallest size of group 1 in the landscape that reaches `power`
        with an absolute effect of at most `effect`.
        """
        self._check_fitted()
        landscape = self.landscape_
        mask = (landscape["effect"].abs() <= effect) & (
            landscape["power"] >= power
        )
        results = landscape[mask]
        if results.empty:
            return None
        return int(results["size1"].min())

    def predict_mde(self, size: int, power: float = 0.8) -> float | None:
        """
        Smallest absolute effect in the landscape that reaches `power`
        with at most `size` subjects in group 1.
        """
        self._check_fitted()
        query = "(size1 <= @size) & (power >= @power)"
        results = self.landscape_.query(expr=query)
        if results.empty:
            return None
        return float(results["effect"].abs().min())
