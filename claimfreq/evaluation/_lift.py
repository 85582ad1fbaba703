import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from claimfreq import config


def assign_buckets(predicted, exposure, n_buckets=config.LIFT_BUCKETS):
    """Equal-exposure buckets of rows sorted by ascending prediction.

    Returns bucket numbers ``1..n_buckets`` aligned with the input order.
    The bucket of a row is ``ceil(cumulative_exposure * n / total)``, so
    the row whose cumulative exposure reaches the total lands in bucket
    ``n`` and never in an extra one. Leading zero-exposure rows go to
    bucket 1.
    """
    predicted = np.asarray(predicted, dtype=float)
    exposure = np.asarray(exposure, dtype=float)

    order = np.argsort(predicted, kind="mergesort")
    cum_exposure = np.cumsum(exposure[order])
    total = cum_exposure[-1]
    if total <= 0:
        raise ValueError("Total exposure must be positive")

    # rounding absorbs cumsum error so rows on a bucket edge stay in the lower bucket
    sorted_buckets = np.ceil(np.round(cum_exposure * n_buckets / total, 9)).astype(int)
    sorted_buckets = np.clip(sorted_buckets, 1, n_buckets)

    buckets = np.empty_like(sorted_buckets)
    buckets[order] = sorted_buckets
    return buckets


def lift_table(observed, predicted, exposure, n_buckets=config.LIFT_BUCKETS):
    """Observed vs predicted frequency per prediction bucket.

    Parameters
    ----------
    observed : array-like
        Observed claim counts.
    predicted : array-like
        Predicted claim frequency per unit exposure.
    exposure : array-like
        Exposure of each row.

    Returns
    -------
    pd.DataFrame
        Indexed by bucket with ``exposure``, ``observed`` and ``predicted``
        exposure-weighted rates.
    """
    exposure = np.asarray(exposure, dtype=float)
    predicted = np.asarray(predicted, dtype=float)
    df = pd.DataFrame(
        {
            "bucket": assign_buckets(predicted, exposure, n_buckets),
            "exposure": exposure,
            "claims": np.asarray(observed, dtype=float),
            "expected": predicted * exposure,
        }
    )
    table = df.groupby("bucket")[["exposure", "claims", "expected"]].sum()
    table["observed"] = table["claims"] / table["exposure"]
    table["predicted"] = table["expected"] / table["exposure"]
    return table[["exposure", "observed", "predicted"]]


def plot_lift_chart(table, title="Decile Lift Chart (Test)"):
    fig, ax = plt.subplots(figsize=config.PLOT_FIGSIZE)
    ax.plot(table.index, table["observed"], marker="o", label="Observed", color="#2c7fb8")
    ax.plot(table.index, table["predicted"], marker="x", linestyle="--", label="Predicted", color="#d7191c")
    ax.set_xticks(table.index)
    ax.set_xlabel("Bucket (ascending predicted frequency)")
    ax.set_ylabel("Claim frequency")
    ax.set_title(title)
    ax.legend()
    ax.grid(alpha=0.3)
    fig.tight_layout()
    return fig
