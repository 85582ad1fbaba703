"""Exhaustive hyperparameter search for the Poisson ensemble.

Every configuration is trained on the training matrix and scored by the
Poisson negative log-likelihood on the held-out matrix at the final round.
The search is slow on the full dataset, so results are cached as a CSV and
reloaded instead of re-running it.

Picking the final configuration is left to the analyst: ``rank_configurations``
produces the ordered candidate list and ``select_configuration`` takes the
chosen rank as an explicit input.
"""

import logging
from pathlib import Path

import pandas as pd
from joblib import Parallel, delayed
from sklearn.model_selection import ParameterGrid

from claimfreq import config
from claimfreq.data import check_columns

from ._training import METRIC, fit_booster

logger = logging.getLogger(__name__)

GRID_COLUMNS = ["rounds", "max_depth", "learning_rate", "column_subsample", "row_subsample"]
LOSS_COLUMN = "test_negative_log_likelihood"
RESULT_COLUMNS = GRID_COLUMNS + [LOSS_COLUMN]


def evaluate_configuration(train, test, params, seed=config.RANDOM_STATE):
    """Held-out Poisson negative log-likelihood of one configuration."""
    model = fit_booster(train, test, params, seed)
    return float(model.evals_result_["test"][METRIC][-1])


def _run_one(train, test, params, seed):
    loss = evaluate_configuration(train, test, params, seed)
    logger.info("%s -> %.6f", params, loss)
    return tuple(params[col] for col in GRID_COLUMNS), loss


def grid_search(train, test, param_grid=None, seed=config.RANDOM_STATE, n_jobs=1):
    """Train and score every combination of ``param_grid``.

    Parameters
    ----------
    train, test : DesignMatrix
        Training and held-out matrices.
    param_grid : dict, optional
        Lists of values keyed by ``GRID_COLUMNS``, by default ``config.PARAM_GRID``.
    seed : int, optional
        Seed used for every run.
    n_jobs : int, optional
        Number of joblib workers. Runs share no state; results are keyed by
        configuration.

    Returns
    -------
    pd.DataFrame
        One row per configuration with ``RESULT_COLUMNS``.
    """
    param_grid = param_grid or config.PARAM_GRID
    missing = [col for col in GRID_COLUMNS if col not in param_grid]
    if missing:
        raise ValueError(f"param_grid is missing {missing}")

    grid = list(ParameterGrid(param_grid))
    logger.info("Grid search over %d configurations", len(grid))

    runs = Parallel(n_jobs=n_jobs)(
        delayed(_run_one)(train, test, params, seed) for params in grid
    )
    losses = dict(runs)

    keys = [tuple(params[col] for col in GRID_COLUMNS) for params in grid]
    return pd.DataFrame([key + (losses[key],) for key in keys], columns=RESULT_COLUMNS)


def save_results(results, path):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    results[RESULT_COLUMNS].to_csv(path, index=False)
    logger.info("Saved %d tuning results to %s", len(results), path)


def load_results(path):
    """Read a cached results table, failing on missing columns."""
    results = pd.read_csv(path)
    check_columns(results, RESULT_COLUMNS, f"tuning results {path}")
    return results[RESULT_COLUMNS]


def load_or_run(train, test, path, param_grid=None, seed=config.RANDOM_STATE, n_jobs=1):
    """Use the cached results at ``path`` if present, otherwise search and cache."""
    path = Path(path)
    if path.exists():
        logger.info("Loading cached tuning results from %s", path)
        return load_results(path)
    results = grid_search(train, test, param_grid, seed, n_jobs)
    save_results(results, path)
    return results


def rank_configurations(results):
    """Order configurations by held-out loss, fewer rounds first on ties.

    Adds a 1-based ``rank`` column.
    """
    ranked = results.sort_values(
        [LOSS_COLUMN, "rounds"], ascending=True, kind="mergesort"
    ).reset_index(drop=True)
    ranked.insert(0, "rank", range(1, len(ranked) + 1))
    return ranked


def select_configuration(ranked, rank=config.SELECTED_RANK):
    """Hyperparameters at the 1-based ``rank`` of a ranked results table."""
    if not 1 <= rank <= len(ranked):
        raise IndexError(f"rank {rank} outside 1..{len(ranked)}")
    row = ranked.iloc[rank - 1]
    params = {col: row[col] for col in GRID_COLUMNS}
    params["rounds"] = int(params["rounds"])
    params["max_depth"] = int(params["max_depth"])
    return params
