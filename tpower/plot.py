import pandas as pd
import plotnine as pn

from .types import SizeEffectTable


def plot_size_effect_table(table: SizeEffectTable) -> pn.ggplot:
    """
    Minimum sample size and minimum effect size against demanded power,
    one panel each.
    """
    df = pd.DataFrame(
        {
            "power": table.power_levels * 2,
            "metric": ["Minimum sample size"] * len(table.power_levels)
            + ["Minimum effect size"] * len(table.power_levels),
            "value": list(map(float, table.min_sample_sizes))
            + list(table.min_effect_sizes),
        }
    )
    return (
        pn.ggplot(df, pn.aes(x="power", y="value"))
        + pn.geom_line(size=1, color="#1f77b4")
        + pn.geom_point(size=2, color="#1f77b4")
        + pn.facet_wrap("metric", ncol=2, scales="free_y")
        + pn.labs(x="Demanded power", y="Value", title=table.test_description)
        + pn.theme_minimal()
        + pn.theme(
            plot_title=pn.element_text(size=14, face="bold", ha="center"),
            axis_title=pn.element_text(size=12, face="bold"),
            axis_text=pn.element_text(size=10),
            figure_size=(10, 5),
        )
    )


def plot_landscape(landscape: pd.DataFrame) -> pn.ggplot:
    """
    Calculated power against effect, faceted by size of group 1. The
    simulated power is overlaid as points when present.
    """
    df = landscape.assign(size1=landscape["size1"].astype(str))
    plot = (
        pn.ggplot(df, pn.aes(x="effect", y="power"))
        + pn.geom_line(size=1, alpha=0.9, color="#1f77b4")
        + pn.geom_hline(yintercept=0.8, linetype="dashed", color="grey")
        + pn.facet_wrap("size1", ncol=3)
        + pn.labs(x="Effect size", y="Power")
        + pn.theme_minimal()
    )
    if df["sim_power"].notna().any():
        plot += pn.geom_point(
            pn.aes(y="sim_power"), color="#ff7f0e", size=1.5
        )
    return plot
