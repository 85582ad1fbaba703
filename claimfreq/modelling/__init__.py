"""Modelling subpackage exports.

	from claimfreq.modelling import build_matrix, grid_search, train_model
"""

from ._matrix import DesignMatrix, build_matrix, feature_columns
from ._training import FittedModel, booster_params, fit_booster, train_model
from ._tuning import (
    GRID_COLUMNS,
    LOSS_COLUMN,
    RESULT_COLUMNS,
    evaluate_configuration,
    grid_search,
    load_or_run,
    load_results,
    rank_configurations,
    save_results,
    select_configuration,
)

__all__ = [
    "DesignMatrix",
    "FittedModel",
    "GRID_COLUMNS",
    "LOSS_COLUMN",
    "RESULT_COLUMNS",
    "booster_params",
    "build_matrix",
    "evaluate_configuration",
    "feature_columns",
    "fit_booster",
    "grid_search",
    "load_or_run",
    "load_results",
    "rank_configurations",
    "save_results",
    "select_configuration",
    "train_model",
]
