"""Evaluation subpackage exports.

Provides a clean import surface:

	from claimfreq.evaluation import evaluate_predictions, lift_table

Avoid importing analysis scripts here to keep dependency one-way (library -> analyses).
"""

from ._actual_vs_expected import actual_vs_expected, plot_actual_vs_expected
from ._dependence import (
    BIAS_COLUMN,
    explain_observation,
    make_explainer,
    partial_dependence,
    plot_partial_dependence,
    plot_shap_dependence,
    shap_dependence,
    shap_values,
)
from ._evaluate_predictions import evaluate_predictions, lorenz_curve
from ._importance import feature_importance, plot_feature_importance
from ._lift import assign_buckets, lift_table, plot_lift_chart
from ._reporting import (
    PREDICTION_COLUMN,
    document_predictions,
    plot_loss_curve,
    plot_tuning_results,
    render_feature_reports,
    save_figure,
)
from ._trees import render_tree, render_trees, tree_table

__all__ = [
    "BIAS_COLUMN",
    "PREDICTION_COLUMN",
    "actual_vs_expected",
    "assign_buckets",
    "document_predictions",
    "evaluate_predictions",
    "explain_observation",
    "feature_importance",
    "lift_table",
    "lorenz_curve",
    "make_explainer",
    "partial_dependence",
    "plot_actual_vs_expected",
    "plot_feature_importance",
    "plot_lift_chart",
    "plot_loss_curve",
    "plot_partial_dependence",
    "plot_shap_dependence",
    "plot_tuning_results",
    "render_feature_reports",
    "render_tree",
    "render_trees",
    "save_figure",
    "shap_dependence",
    "shap_values",
    "tree_table",
]
