# %%
# Claim frequency with a Poisson gradient-boosted ensemble
# Run top to bottom; each cell works on the previous cell's output.

import logging
from functools import partial

import matplotlib.pyplot as plt  # For plotting graphs
from glum import PoissonDistribution  # Poisson deviance for the headline metrics

from claimfreq import config
from claimfreq.data import assemble, create_sample_split, load_raw, split_frame
from claimfreq.evaluation import (
    actual_vs_expected,
    document_predictions,
    evaluate_predictions,
    explain_observation,
    feature_importance,
    lift_table,
    make_explainer,
    partial_dependence,
    plot_actual_vs_expected,
    plot_feature_importance,
    plot_lift_chart,
    plot_loss_curve,
    plot_partial_dependence,
    plot_shap_dependence,
    plot_tuning_results,
    render_feature_reports,
    render_trees,
    save_figure,
    shap_values,
)
from claimfreq.modelling import (
    build_matrix,
    load_or_run,
    rank_configurations,
    select_configuration,
    train_model,
)
from claimfreq.preprocessing import encode

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s | %(levelname)s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

OUTPUT_DIR = config.OUTPUT_DIR

# %%
# Load the policy and claim tables and join claims onto policy terms
policies, claims = load_raw()
df = assemble(policies, claims)

print(df.shape)
df.head()

# %%
# One-hot encode categoricals; the reference level of each field is declared
# in config.REFERENCE_LEVELS and shows up as all indicators being zero
df_encoded, encoder = encode(df)
print("Reference levels:", config.REFERENCE_LEVELS)
print("Indicator columns:", list(encoder.get_feature_names_out()))

# %%
# Split by client so no client contributes rows to both partitions
df_encoded = create_sample_split(df_encoded, config.ID_COLUMN)
df_train, df_test = split_frame(df_encoded)
print(f"train rows: {len(df_train)}, test rows: {len(df_test)}")

train = build_matrix(df_train)
test = build_matrix(df_test, train.feature_names)

# %%
# Hyperparameter search. The full grid takes a long time, so the results are
# cached in outputs/ and reloaded on later runs.
results = load_or_run(train, test, OUTPUT_DIR / config.TUNING_RESULTS_FILE, n_jobs=-1)
ranked = rank_configurations(results)
print(ranked.head(10))

for hue in ["max_depth", "learning_rate"]:
    save_figure(plot_tuning_results(results, x="rounds", hue=hue), OUTPUT_DIR, f"tuning_rounds_by_{hue}")

# Picking a configuration is a judgement call: the top ranks differ by very
# little loss, so we take the candidate at config.SELECTED_RANK which has
# fewer rounds. Change SELECTED_RANK after reviewing the table above.
params = select_configuration(ranked, config.SELECTED_RANK)
print("Selected:", params)

# %%
# Fit the final model and check convergence
fitted = train_model(train, test, params)
save_figure(plot_loss_curve(fitted.loss_log), OUTPUT_DIR, "loss_curve")
fitted.save(OUTPUT_DIR / "model.txt")

df_test["predicted_rate"] = fitted.predict_rate(test)

metrics = evaluate_predictions(
    y_true=test.y / test.exposure,
    y_pred=df_test["predicted_rate"],
    sample_weight=test.exposure,
    distribution=PoissonDistribution(),
)
print(
    "Test Poisson deviance: {:.5f}, Gini: {:.3f}, claims observed = {:.0f}, predicted = {:.1f}".format(
        metrics["deviance"], metrics["gini"], metrics["total_actual"], metrics["total_predicted"]
    )
)

# %%
# Variable importance (gain)
importance = feature_importance(fitted)
print(importance.head(15))
save_figure(plot_feature_importance(importance), OUTPUT_DIR, "feature_importance")

# %%
# Partial dependence (assumes independence between features) and SHAP
# dependence (valid under correlation) for the top numeric drivers
top_features = [f for f in importance.index if f in config.NUMERIC_FEATURES][:5]

explainer = make_explainer(fitted, train)
pdp = partial_dependence(explainer, top_features)
render_feature_reports(partial(plot_partial_dependence, pdp), top_features, OUTPUT_DIR)

shap = shap_values(fitted, test.X)
render_feature_reports(partial(plot_shap_dependence, shap, test.X), top_features, OUTPUT_DIR)

print(explain_observation(explainer, test.X.iloc[[0]]))

# %%
# Decile lift chart: buckets of equal exposure sorted by predicted frequency.
# We want observed frequency to rise across buckets with a clear gap between
# the first and last.
lift = lift_table(test.y, df_test["predicted_rate"], test.exposure)
print(lift)
save_figure(plot_lift_chart(lift), OUTPUT_DIR, "lift_chart")

# %%
# Actual vs expected on the raw (pre-encoding) variables of the test rows
raw_test = df.loc[df_test.index]


def _ave_report(variable):
    table = actual_vs_expected(raw_test, df_test["predicted_rate"], variable)
    return plot_actual_vs_expected(table, variable)


render_feature_reports(
    _ave_report,
    config.CATEGORICAL_FEATURES + config.NUMERIC_FEATURES,
    OUTPUT_DIR,
    name="actual_vs_expected",
)

# %%
# Tree diagrams, one text file per tree
tree_dir = OUTPUT_DIR / "trees"
tree_dir.mkdir(parents=True, exist_ok=True)
for i, diagram in enumerate(render_trees(fitted)):
    (tree_dir / f"tree_{i:04d}.txt").write_text(diagram)

print(next(render_trees(fitted, limit=1)))

# %%
# Predictions documentation: every observed feature combination with its rate
documented = document_predictions(fitted, [train, test], OUTPUT_DIR / config.PREDICTIONS_FILE)
print(f"{len(documented)} distinct feature vectors documented")
plt.close("all")
