"""
Evaluation metrics for claim frequency models.

This module provides a reusable function to compute the headline metrics of
a frequency model on held-out data.
"""

import numpy as np
from sklearn.metrics import auc


def lorenz_curve(y_true, y_pred, exposure):
    """Calculate Lorenz curve (cumulative claims vs exposure) ordered by predictions.

    Returns (cumulative_exposure_fraction, cumulative_claim_fraction).
    """
    y_true, y_pred = np.asarray(y_true), np.asarray(y_pred)
    exposure = np.asarray(exposure)

    # Sort policies from safest (lowest predicted frequency) to riskiest
    ranking = np.argsort(y_pred, kind="mergesort")
    ranked_exposure = exposure[ranking]
    ranked_frequency = y_true[ranking]

    cum_claims = np.cumsum(ranked_frequency * ranked_exposure)
    total_claims = cum_claims[-1]
    if total_claims > 0:
        cum_claims = cum_claims / total_claims
    else:
        cum_claims = np.zeros_like(cum_claims, dtype=float)

    cum_exposure = np.cumsum(ranked_exposure) / np.sum(ranked_exposure)
    return cum_exposure, cum_claims


def evaluate_predictions(y_true, y_pred, sample_weight, distribution=None):
    """
    Evaluate frequency predictions with insurance-specific metrics.

    Parameters
    ----------
    y_true : array-like
        Observed claim frequency (claim count / exposure)
    y_pred : array-like
        Predicted claim frequency (same shape as y_true)
    sample_weight : array-like
        Exposure of each policy term
    distribution : object, optional
        Distribution object with a .deviance() method (e.g. glum's
        PoissonDistribution). If None, deviance is skipped.

    Returns
    -------
    dict
        - 'deviance': Weighted deviance per unit exposure (if distribution provided)
        - 'gini': Gini coefficient from Lorenz curve (0=random, 1=perfect)
        - 'mae': Mean absolute error, weighted by exposure
        - 'total_actual': Observed claim count
        - 'total_predicted': Predicted claim count

    Examples
    --------
    >>> from glum import PoissonDistribution
    >>> metrics = evaluate_predictions(
    ...     y_true=test.y / test.exposure,
    ...     y_pred=fitted.predict_rate(test),
    ...     sample_weight=test.exposure,
    ...     distribution=PoissonDistribution(),
    ... )
    >>> print(f"Gini: {metrics['gini']:.3f}")
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    sample_weight = np.asarray(sample_weight, dtype=float)

    metrics = {}

    # Lower deviance = better fit, normalised by total exposure
    if distribution is not None:
        dev = distribution.deviance(y_true, y_pred, sample_weight=sample_weight)
        metrics["deviance"] = dev / np.sum(sample_weight)

    # Gini = 1 - 2 * area under the Lorenz curve
    cum_exposure, cum_claims = lorenz_curve(y_true, y_pred, sample_weight)
    metrics["gini"] = 1 - 2 * auc(cum_exposure, cum_claims)

    metrics["mae"] = np.average(np.abs(y_true - y_pred), weights=sample_weight)

    # Checks whether the model over/under-predicts the portfolio as a whole
    metrics["total_actual"] = np.sum(y_true * sample_weight)
    metrics["total_predicted"] = np.sum(y_pred * sample_weight)

    return metrics
