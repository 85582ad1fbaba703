from typing import List, NamedTuple, Optional

import pandas as pd

from claimfreq import config


class DesignMatrix(NamedTuple):
    """Features, label and exposure in the column order the booster sees."""

    X: pd.DataFrame
    y: pd.Series
    exposure: pd.Series

    @property
    def feature_names(self) -> List[str]:
        return list(self.X.columns)

    @property
    def frequency(self) -> pd.Series:
        """Claim count per unit exposure, the target the booster fits."""
        return self.y / self.exposure


def feature_columns(encoded: pd.DataFrame) -> List[str]:
    """Numeric features in config order, then everything else in frame order."""
    excluded = set(config.NON_FEATURE_COLUMNS)
    numeric = [col for col in config.NUMERIC_FEATURES if col in encoded.columns]
    others = [
        col for col in encoded.columns
        if col not in excluded and col not in numeric
    ]
    return numeric + others


def build_matrix(encoded: pd.DataFrame, feature_names: Optional[List[str]] = None) -> DesignMatrix:
    """Split an encoded table into feature matrix, label and exposure.

    Pass the training matrix's ``feature_names`` when building test or
    scoring matrices so columns line up positionally. A missing column
    raises ``KeyError``.
    """
    if feature_names is None:
        feature_names = feature_columns(encoded)

    X = encoded[list(feature_names)].astype(float)
    y = encoded[config.TARGET_COLUMN].astype(float)
    exposure = encoded[config.EXPOSURE_COLUMN].astype(float)
    return DesignMatrix(X=X, y=y, exposure=exposure)
