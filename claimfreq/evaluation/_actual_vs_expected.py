import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from claimfreq import config


def actual_vs_expected(
    raw,
    predicted,
    variable,
    exposure_col=config.EXPOSURE_COLUMN,
    target_col=config.TARGET_COLUMN,
    bins=config.AVE_NUMERIC_BINS,
):
    """Observed vs fitted frequency for each level of a raw variable.

    Parameters
    ----------
    raw : pd.DataFrame
        Held-out rows before encoding (categorical fields still as labels).
    predicted : array-like
        Predicted frequency per row of ``raw``.
    variable : str
        Column to group by. Numeric columns with more than
        ``config.AVE_NUMERIC_THRESHOLD`` distinct values are cut into
        ``bins`` quantile bins.

    Returns
    -------
    pd.DataFrame
        One row per level with ``exposure``, ``actual`` and ``expected``.
    """
    exposure = raw[exposure_col].to_numpy(dtype=float)
    levels = raw[variable]
    if pd.api.types.is_numeric_dtype(levels) and levels.nunique() > config.AVE_NUMERIC_THRESHOLD:
        levels = pd.qcut(levels, bins, duplicates="drop")

    df = pd.DataFrame(
        {
            variable: levels.to_numpy(),
            "exposure": exposure,
            "claims": raw[target_col].to_numpy(dtype=float),
            "fitted": np.asarray(predicted, dtype=float) * exposure,
        }
    )
    table = df.groupby(variable, observed=True)[["exposure", "claims", "fitted"]].sum()
    table["actual"] = table["claims"] / table["exposure"]
    table["expected"] = table["fitted"] / table["exposure"]
    return table[["exposure", "actual", "expected"]].reset_index()


def plot_actual_vs_expected(table, variable):
    labels = table[variable].astype(str)
    x = np.arange(len(table))

    fig, ax = plt.subplots(figsize=config.PLOT_FIGSIZE)
    # exposure bars on a secondary axis, rates on top
    ax_exp = ax.twinx()
    ax_exp.bar(x, table["exposure"], color="#d9d9d9", alpha=0.6)
    ax_exp.set_ylabel("Exposure")
    ax.set_zorder(ax_exp.get_zorder() + 1)
    ax.patch.set_visible(False)

    ax.plot(x, table["actual"], marker="o", label="Actual", color="#2c7fb8")
    ax.plot(x, table["expected"], marker="x", linestyle="--", label="Expected", color="#d7191c")
    ax.set_xticks(x)
    ax.set_xticklabels(labels, rotation=30, ha="right")
    ax.set_xlabel(variable)
    ax.set_ylabel("Claim frequency")
    ax.set_title(f"Actual vs Expected - {variable}")
    ax.legend()
    ax.grid(alpha=0.3)
    fig.tight_layout()
    return fig
