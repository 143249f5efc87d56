from dataclasses import dataclass, field
from enum import Enum

import numpy as np


class StatMode(str, Enum):
    ONE_SAMPLE = "one_sample"
    TWO_SAMPLE = "two_sample"

    @property
    def description(self) -> str:
        if self is StatMode.ONE_SAMPLE:
            return "One-sample t-test"
        return "Two-sample t-test"


@dataclass(frozen=True)
class Group:
    """
    Summary statistics of a group.

    A scalar comparison value is represented as a group with
    `stddev=0` and `sample_size=1`.
    """

    mean: float
    stddev: float
    sample_size: int

    @property
    def variance(self) -> float:
        return self.stddev**2

    @property
    def squared_error(self) -> float:
        """Squared standard error of the mean, stddev^2 / n."""
        return self.stddev**2 / self.sample_size


@dataclass(frozen=True)
class TestConfiguration:
    __test__ = False

    group1: Group
    group2: Group
    mode: StatMode
    alpha: float = 0.05
    tails: int = 2

    @property
    def alternative(self) -> str:
        """
        scipy `alternative` for this configuration. One-tailed tests
        are directed along the effect, i.e., the sign of mean1 - mean2.
        """
        if self.tails == 2:
            return "two-sided"
        return "greater" if self.group1.mean > self.group2.mean else "less"


@dataclass
class PowerResult:
    observed_power: float


@dataclass
class SimulationResult:
    mean_power: float
    iqr_low: float
    iqr_high: float


@dataclass
class SizeEffectTable:
    power_levels: list[float]
    min_sample_sizes: list[int]
    min_effect_sizes: list[float]
    test_description: str
    simulation: SimulationResult | None = None
    advisories: tuple[str, ...] = field(default_factory=tuple)


@dataclass
class SimulatedDataset:
    """
    A batch of simulated trials from a data generating process (DGP).
    Attributes:
        x (np.ndarray): draws of group 1, of shape (n_trials, n1).
        y (np.ndarray): draws of group 2, of shape (n_trials, n2).
            In one-sample mode this is degenerate at the comparison value.
    """

    x: np.ndarray
    y: np.ndarray

    @property
    def n_trials(self) -> int:
        return self.x.shape[0]


@dataclass
class StatsTestParameters:
    simulated_dataset: SimulatedDataset
    alternative: str = "two-sided"


@dataclass
class StatsTestOutput:
    p_value: np.ndarray
    statistic: np.ndarray
