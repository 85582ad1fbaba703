"""Fit the final Poisson boosted-tree ensemble.

The model is a LightGBM regressor on the Poisson objective (log link). It
fits claim frequency (count / exposure) weighted by exposure, which gives the
same Poisson likelihood as modelling counts with a log-exposure offset, so
predictions are claim frequencies per unit of exposure.
"""

import logging

import pandas as pd
from lightgbm import LGBMRegressor

from claimfreq import config

from ._matrix import DesignMatrix

logger = logging.getLogger(__name__)

METRIC = "poisson"


def booster_params(params, seed=config.RANDOM_STATE):
    """Map a hyperparameter row onto ``LGBMRegressor`` keyword arguments.

    Parameters
    ----------
    params : mapping
        Needs ``rounds``, ``max_depth``, ``learning_rate``,
        ``column_subsample`` and ``row_subsample``. ``gamma`` and
        ``min_child_weight`` default to the fixed config values.
    seed : int
        Seed for row and column subsampling.

    Returns
    -------
    dict
    """
    max_depth = int(params["max_depth"])
    return {
        "objective": "poisson",
        "metric": METRIC,
        "n_estimators": int(params["rounds"]),
        "max_depth": max_depth,
        # depth-limited trees: allow every leaf a full binary tree can have
        "num_leaves": 2 ** max_depth,
        "learning_rate": float(params["learning_rate"]),
        "colsample_bytree": float(params["column_subsample"]),
        "subsample": float(params["row_subsample"]),
        "subsample_freq": 1,
        "min_split_gain": float(params.get("gamma", config.GAMMA)),
        "min_child_weight": float(params.get("min_child_weight", config.MIN_CHILD_WEIGHT)),
        "random_state": seed,
        "deterministic": True,
        "force_col_wise": True,
        "verbose": -1,
    }


def fit_booster(train, test, params, seed=config.RANDOM_STATE):
    """Fit an ``LGBMRegressor`` and record train/test loss every round.

    ``train`` and ``test`` are ``DesignMatrix`` instances with identical
    feature columns.
    """
    model = LGBMRegressor(**booster_params(params, seed))
    # same object for fit and eval_set so LightGBM reuses the training Dataset
    train_y = train.frequency
    model.fit(
        train.X,
        train_y,
        sample_weight=train.exposure,
        eval_set=[(train.X, train_y), (test.X, test.frequency)],
        eval_sample_weight=[train.exposure, test.exposure],
        eval_names=["train", "test"],
    )
    return model


class FittedModel:
    """
    A fitted ensemble together with its feature order and loss history.

    Attributes:
        model: Fitted ``LGBMRegressor``
        feature_names: Feature columns in training order
        loss_log: DataFrame with one row per boosting round (round, train, test)
        params: Hyperparameters the model was fitted with
    """

    def __init__(self, model, feature_names, loss_log, params):
        self.model = model
        self.feature_names = list(feature_names)
        self.loss_log = loss_log
        self.params = dict(params)

    @property
    def booster(self):
        return self.model.booster_

    def _features(self, data):
        X = data.X if isinstance(data, DesignMatrix) else data
        # positional binding: reorder (or fail) to the training columns
        return X[self.feature_names]

    def predict_rate(self, data):
        """Predicted claim frequency per unit exposure."""
        return self.model.predict(self._features(data))

    def predict_count(self, matrix):
        """Expected claim count given the matrix's exposure."""
        return self.predict_rate(matrix) * matrix.exposure.to_numpy(dtype=float)

    def save(self, path):
        """Write the booster in LightGBM's native text format."""
        self.booster.save_model(str(path))
        logger.info("Saved model to %s", path)


def train_model(train, test, params, seed=config.RANDOM_STATE):
    """Fit the final model with fixed hyperparameters.

    Parameters
    ----------
    train, test : DesignMatrix
        Training and held-out matrices.
    params : mapping
        Selected hyperparameters (see ``booster_params``).
    seed : int, optional
        Subsampling seed.

    Returns
    -------
    FittedModel
    """
    if train.feature_names != test.feature_names:
        raise ValueError("Train and test matrices have different feature columns")

    logger.info("Training final model with %s", dict(params))
    model = fit_booster(train, test, params, seed)

    history = model.evals_result_
    loss_log = pd.DataFrame(
        {
            "round": range(1, len(history["train"][METRIC]) + 1),
            "train": history["train"][METRIC],
            "test": history["test"][METRIC],
        }
    )
    logger.info(
        "Final round Poisson loss: train %.5f, test %.5f",
        loss_log["train"].iloc[-1], loss_log["test"].iloc[-1],
    )
    return FittedModel(model, train.feature_names, loss_log, params)
