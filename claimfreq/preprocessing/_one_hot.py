import logging

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.utils.validation import check_is_fitted

from claimfreq import config

logger = logging.getLogger(__name__)


class ReferenceLevelEncoder(BaseEstimator, TransformerMixin):
    """One-hot encode categorical fields, dropping a declared reference level.

    Each field in ``reference_levels`` becomes one ``<field>_<level>``
    indicator per observed level except the reference level, which is
    represented by all indicators of that field being zero. Categories and
    output columns are fixed at ``fit`` so train, test and any later scoring
    batch get identical column names in identical order.

    Rows with a negative ``claim_amount`` are removed by ``transform``.

    Parameters
    ----------
    reference_levels : dict
        Field name -> level to drop.
    amount_column : str, optional
        Column checked for negative values, by default ``claim_amount``.
    """

    def __init__(self, reference_levels, amount_column=config.AMOUNT_COLUMN):
        self.reference_levels = reference_levels
        self.amount_column = amount_column

    def fit(self, X, y=None):

        self.categories_ = {}
        for field, reference in self.reference_levels.items():
            if field not in X.columns:
                raise ValueError(f"Categorical field {field!r} not found in input")
            # raw values: a field coded 0.0/1.0 matches a reference of 0
            levels = sorted(X[field].dropna().unique().tolist())
            if reference not in levels:
                raise ValueError(
                    f"Reference level {reference!r} of {field!r} was not observed; "
                    f"levels are {levels}"
                )
            self.categories_[field] = levels

        self.feature_names_out_ = np.array(
            [
                f"{field}_{level}"
                for field, levels in self.categories_.items()
                for level in levels
                if level != self.reference_levels[field]
            ],
            dtype=object,
        )
        return self

    def indicator_frame(self, X):
        """All indicators of every field, reference levels included."""
        check_is_fitted(self, ["categories_"])

        frames = []
        for field, levels in self.categories_.items():
            values = X[field]
            unseen = sorted(set(values.dropna().unique().tolist()) - set(levels), key=str)
            if unseen:
                raise ValueError(f"Unseen levels {unseen} in field {field!r}")
            dummies = pd.get_dummies(
                pd.Series(pd.Categorical(values, categories=levels), index=X.index),
                prefix=field,
                prefix_sep="_",
                dtype=np.uint8,
            )
            frames.append(dummies)
        return pd.concat(frames, axis=1)

    def transform(self, X):

        check_is_fitted(self, ["categories_", "feature_names_out_"])

        if self.amount_column in X.columns:
            negative = X[self.amount_column] < 0
            if negative.any():
                logger.info(
                    "Removed %d rows with negative %s", int(negative.sum()), self.amount_column
                )
            X = X.loc[~negative]

        indicators = self.indicator_frame(X)[list(self.feature_names_out_)]
        kept = X.drop(columns=list(self.categories_))
        return pd.concat([kept, indicators], axis=1)

    def get_feature_names_out(self, input_features=None):
        check_is_fitted(self, ["feature_names_out_"])
        return self.feature_names_out_.copy()


def encode(df, reference_levels=None):
    """Fit a ``ReferenceLevelEncoder`` on ``df`` and return ``(encoded, encoder)``."""
    encoder = ReferenceLevelEncoder(reference_levels or config.REFERENCE_LEVELS)
    return encoder.fit_transform(df), encoder
