import logging
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from claimfreq import config

logger = logging.getLogger(__name__)

PREDICTION_COLUMN = "predicted_rate"


def save_figure(fig, output_dir, name):
    """Save ``fig`` as ``<output_dir>/<name>.png`` and close it."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{name}.png"
    fig.savefig(path, dpi=120)
    plt.close(fig)
    return path


def render_feature_reports(report, features, output_dir=None, name=None):
    """Run one plotting report for each feature.

    Parameters
    ----------
    report : callable
        ``report(feature) -> Figure``; bind any other arguments with
        ``functools.partial``.
    features : iterable of str
        Features to report on, in order.
    output_dir : str or Path, optional
        When given, each figure is saved as ``<name>_<feature>.png``.
    name : str, optional
        File name prefix, by default the report's ``__name__``.

    Returns
    -------
    dict
        Feature -> figure.
    """
    name = name or getattr(report, "__name__", None) or report.func.__name__
    figures = {}
    for feature in features:
        fig = report(feature)
        if output_dir is not None:
            save_figure(fig, output_dir, f"{name}_{feature}")
        figures[feature] = fig
    return figures


def plot_loss_curve(loss_log, title="Learning Curve (Poisson negative log-likelihood)"):
    fig, ax = plt.subplots(figsize=config.PLOT_FIGSIZE)
    ax.plot(loss_log["round"], loss_log["train"], label="Train", color="#1b9e77")
    ax.plot(loss_log["round"], loss_log["test"], label="Test", color="#d95f02")
    ax.set_xlabel("Boosting Round")
    ax.set_ylabel("Poisson negative log-likelihood")
    ax.set_title(title)
    ax.legend()
    ax.grid(alpha=0.3)
    fig.tight_layout()
    return fig


def plot_tuning_results(results, x="rounds", hue="max_depth", loss_col="test_negative_log_likelihood"):
    """Best held-out loss along ``x`` for each value of ``hue``.

    Every other hyperparameter is minimised out, so each line is the sweep
    of ``x`` at the best setting of the rest.
    """
    best = results.groupby([hue, x])[loss_col].min().reset_index()
    fig, ax = plt.subplots(figsize=config.PLOT_FIGSIZE)
    for level, curve in best.groupby(hue):
        ax.plot(curve[x], curve[loss_col], marker="o", linewidth=1, label=f"{hue}={level}")
    ax.set_xlabel(x)
    ax.set_ylabel("Test negative log-likelihood")
    ax.set_title(f"Hyperparameter Sweep: {x} by {hue}")
    ax.legend(fontsize=8)
    ax.grid(alpha=0.3)
    fig.tight_layout()
    return fig


def document_predictions(fitted, matrices, path=None):
    """Predicted rate for every distinct feature vector observed in ``matrices``.

    Only combinations that occur in the data are listed, not the full
    cartesian product of feature values.

    Parameters
    ----------
    fitted : FittedModel
    matrices : iterable of DesignMatrix
        Usually the train and test matrices.
    path : str or Path, optional
        CSV destination.

    Returns
    -------
    pd.DataFrame
    """
    X = pd.concat([m.X[fitted.feature_names] for m in matrices], ignore_index=True)
    distinct = (
        X.drop_duplicates()
        .sort_values(fitted.feature_names, kind="mergesort")
        .reset_index(drop=True)
    )
    documented = distinct.assign(**{PREDICTION_COLUMN: np.asarray(fitted.predict_rate(distinct))})

    if path is not None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        documented.to_csv(path, index=False)
        logger.info("Documented %d distinct feature vectors in %s", len(documented), path)
    return documented
