"""Partial dependence and Shapley dependence for the fitted ensemble.

Partial dependence comes from DALEX (``model_profile(type='partial')``):
the target feature is swept over a grid while the others keep their
empirical values, and predictions are averaged. It assumes the swept
feature is independent of the rest.

Shapley contributions come from LightGBM's own TreeSHAP
(``pred_contrib=True``), which stays valid under correlated features. They
are computed in row batches since the full matrix is large; contributions
are on the log (raw score) scale.
"""

import dalex as dx
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from claimfreq import config

BIAS_COLUMN = "expected_value"


def make_explainer(fitted, matrix, label="LGBM Poisson"):
    """DALEX explainer over the rate predictor, using ``matrix`` as background data."""
    return dx.Explainer(
        model=fitted.model,
        data=matrix.X[fitted.feature_names],
        y=matrix.y / matrix.exposure,
        label=label,
        verbose=False,
    )


def partial_dependence(
    explainer,
    features,
    grid_points=config.PDP_GRID_POINTS,
    n_samples=config.PDP_SAMPLE_SIZE,
    seed=config.RANDOM_STATE,
):
    """Averaged prediction over a grid of each feature.

    Returns
    -------
    pd.DataFrame
        Columns ``feature``, ``value``, ``prediction``.
    """
    profile = explainer.model_profile(
        type="partial",
        variables=list(features),
        N=n_samples,
        grid_points=grid_points,
        random_state=seed,
        center=False,
        verbose=False,
    )
    return (
        profile.result.rename(columns={"_vname_": "feature", "_x_": "value", "_yhat_": "prediction"})
        [["feature", "value", "prediction"]]
        .reset_index(drop=True)
    )


def shap_values(fitted, X, batch_size=config.SHAP_BATCH_SIZE):
    """Per-row feature contributions plus the expected value column.

    Each row sums to the raw (log-rate) prediction.
    """
    X = X[fitted.feature_names]
    batches = [
        fitted.model.predict(X.iloc[start:start + batch_size], pred_contrib=True)
        for start in range(0, len(X), batch_size)
    ]
    n_columns = len(fitted.feature_names) + 1
    return pd.DataFrame(
        np.vstack(batches) if batches else np.empty((0, n_columns)),
        index=X.index,
        columns=fitted.feature_names + [BIAS_COLUMN],
    )


def shap_dependence(shap, X, feature):
    """Feature value against its contribution, sorted by value."""
    return (
        pd.DataFrame({"value": X[feature].to_numpy(), "contribution": shap[feature].to_numpy()})
        .sort_values("value", kind="mergesort")
        .reset_index(drop=True)
    )


def explain_observation(explainer, row, n_orderings=10, seed=config.RANDOM_STATE):
    """DALEX Shapley breakdown of one prediction, largest contribution first."""
    parts = explainer.predict_parts(row, type="shap", B=n_orderings, random_state=seed)
    result = parts.result[parts.result["B"] == 0]
    return result.sort_values("contribution", ascending=False, key=abs)[
        ["variable_name", "variable_value", "contribution"]
    ]


def plot_partial_dependence(pdp, feature):
    curve = pdp[pdp["feature"] == feature]
    fig, ax = plt.subplots(figsize=config.PLOT_FIGSIZE)
    ax.plot(curve["value"], curve["prediction"], marker="o", linewidth=1, color="#2c7fb8")
    ax.set_title(f"Partial Dependence - {feature}")
    ax.set_xlabel(feature)
    ax.set_ylabel("Average predicted frequency")
    ax.grid(alpha=0.3)
    fig.tight_layout()
    return fig


def plot_shap_dependence(shap, X, feature):
    dependence = shap_dependence(shap, X, feature)
    fig, ax = plt.subplots(figsize=config.PLOT_FIGSIZE)
    ax.scatter(dependence["value"], dependence["contribution"], alpha=0.15, s=10, color="#d7191c")
    ax.axhline(0, color="black", linewidth=0.8)
    ax.set_title(f"SHAP Dependence - {feature}")
    ax.set_xlabel(feature)
    ax.set_ylabel("Contribution (log frequency)")
    ax.grid(alpha=0.3)
    fig.tight_layout()
    return fig
