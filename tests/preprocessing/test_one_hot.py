import numpy as np
import pandas as pd
import pytest

from claimfreq import config
from claimfreq.preprocessing import ReferenceLevelEncoder, encode


def test_reference_level_dropped_and_raw_columns_removed(assembled):
    encoded, encoder = encode(assembled)

    names = list(encoder.get_feature_names_out())
    assert "second_driver_No" not in names
    assert "driver_gender_M" not in names
    assert "second_driver_Yes" in names
    assert "driver_gender_F" in names
    for field in config.CATEGORICAL_FEATURES:
        assert field not in encoded.columns
    assert list(encoded.columns[-len(names):]) == names


def test_full_indicators_sum_to_one(assembled):
    encoder = ReferenceLevelEncoder(config.REFERENCE_LEVELS).fit(assembled)
    indicators = encoder.indicator_frame(assembled)

    for field, levels in encoder.categories_.items():
        columns = [f"{field}_{level}" for level in levels]
        assert (indicators[columns].sum(axis=1) == 1).all()


def test_at_most_one_indicator_per_field(assembled):
    encoded, encoder = encode(assembled)

    for field, reference in config.REFERENCE_LEVELS.items():
        columns = [c for c in encoder.get_feature_names_out() if c.startswith(f"{field}_")]
        total = encoded[columns].sum(axis=1)
        is_reference = assembled.loc[encoded.index, field] == reference
        assert (total[is_reference] == 0).all()
        assert (total[~is_reference] == 1).all()


def test_columns_stable_between_partitions(assembled):
    encoder = ReferenceLevelEncoder(config.REFERENCE_LEVELS).fit(assembled)

    # a slice missing some levels still gets every column, in the same order
    subset = assembled[assembled["fuel"] != "Hybrid"]
    a = encoder.transform(assembled)
    b = encoder.transform(subset)

    assert list(a.columns) == list(b.columns)
    assert (b["fuel_Hybrid"] == 0).all()


def test_negative_claim_amount_filtered(assembled):
    df = assembled.copy()
    df.loc[df.index[:3], "claim_amount"] = -10.0

    encoded, _ = encode(df)

    assert len(encoded) == len(df) - 3
    assert (encoded["claim_amount"] >= 0).all()


def test_unobserved_reference_level_raises(assembled):
    levels = dict(config.REFERENCE_LEVELS, fuel="Electric")
    with pytest.raises(ValueError, match="Electric"):
        ReferenceLevelEncoder(levels).fit(assembled)


def test_unseen_level_at_transform_raises(assembled):
    encoder = ReferenceLevelEncoder(config.REFERENCE_LEVELS).fit(assembled)
    other = assembled.head(5).assign(fuel="Electric")
    with pytest.raises(ValueError, match="Unseen"):
        encoder.transform(other)


def test_indicators_are_binary(encoded):
    indicators = encoded.filter(regex="^(coverage|fuel|usage)_")
    assert set(np.unique(indicators.to_numpy())) <= {0, 1}


def test_input_not_modified(assembled):
    before = assembled.copy()
    encode(assembled)
    pd.testing.assert_frame_equal(assembled, before)


def test_numeric_coded_field_matches_reference(assembled):
    df = assembled.assign(second_driver=(assembled["second_driver"] == "Yes").astype(float))
    levels = dict(config.REFERENCE_LEVELS, second_driver=0)

    encoded, encoder = encode(df, levels)

    names = list(encoder.get_feature_names_out())
    assert "second_driver_1.0" in names
    assert "second_driver_0.0" not in names
    np.testing.assert_array_equal(encoded["second_driver_1.0"], df["second_driver"].astype(np.uint8))
