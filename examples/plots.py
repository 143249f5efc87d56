from tpower import compute_power
from tpower.plot import plot_size_effect_table

_, result = compute_power((1.1, 0.1, 30), (1.2, 0.3, 25))

plot_size_effect_table(result).save(
    "size_effect_table.png", dpi=150, verbose=False
)
