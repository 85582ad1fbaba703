import matplotlib.pyplot as plt
import pandas as pd


def feature_importance(fitted, importance_type="gain"):
    """Features ordered by the booster's native importance, largest first."""
    values = fitted.booster.feature_importance(importance_type=importance_type)
    return (
        pd.Series(values, index=fitted.feature_names, name=importance_type)
        .sort_values(ascending=False, kind="mergesort")
    )


def plot_feature_importance(importance, top=15):
    top_k = importance.head(top)[::-1]
    fig, ax = plt.subplots(figsize=(8, 6))
    ax.barh(top_k.index, top_k.values, color="#6a3d9a")
    ax.set_title(f"Feature Importances (Top {min(top, len(importance))})")
    ax.set_xlabel(f"Importance ({importance.name}-based)")
    fig.tight_layout()
    return fig
