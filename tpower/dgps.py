import catalogue
from numpy.random import Generator

from .types import SimulatedDataset, TestConfiguration

dgps = catalogue.create("tpower", "dgps")


@dgps.register("dgp::normal_groups")
def normal_groups(
    config: TestConfiguration, n_trials: int, rng: Generator
) -> SimulatedDataset:
    """
    Draws `n_trials` independent samples of each group from
    Normal(mean, stddev). A comparison value (stddev 0, size 1)
    yields constant draws.
    """
    g1, g2 = config.group1, config.group2
    x = rng.normal(loc=g1.mean, scale=g1.stddev, size=(n_trials, g1.sample_size))
    y = rng.normal(loc=g2.mean, scale=g2.stddev, size=(n_trials, g2.sample_size))
    return SimulatedDataset(x=x, y=y)
