import numpy as np

from tpower.estimator import PowerEstimator, make_scenarios
from tpower.plot import plot_landscape

# all combinations of the mean and size of group 1, against a fixed group 2
scenarios = make_scenarios(
    mean1=np.linspace(1.0, 1.3, 16),
    stddev1=0.1,
    size1=[10, 20, 50, 100, 200, 500],
    group2=(1.0, 0.3, 25),
)

power_estimator = PowerEstimator(
    simulate=True, n_outer=20, n_inner=100, random_state=42, n_jobs=-1
)

power_estimator.fit(scenarios)

print(power_estimator.landscape_.head())

print(power_estimator.predict_n(effect=0.1, power=0.8))

print(power_estimator.predict_mde(size=50, power=0.8))

plot_landscape(power_estimator.landscape_).save(
    "landscape.png", dpi=150, verbose=False
)
