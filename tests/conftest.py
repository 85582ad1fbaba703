import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from claimfreq import config
from claimfreq.data import assemble, create_sample_split, split_frame
from claimfreq.modelling import build_matrix, train_model
from claimfreq.preprocessing import encode

LEVELS = {
    "coverage": ["Mini", "Median1", "Median2", "Maxi"],
    "pay_frequency": ["Yearly", "Biannual", "Quarterly", "Monthly"],
    "usage": ["WorkPrivate", "Retired", "Professional", "AllTrips"],
    "fuel": ["Gasoline", "Diesel", "Hybrid"],
    "vehicle_type": ["Tourism", "Commercial"],
    "second_driver": ["No", "Yes"],
    "driver_gender": ["M", "F"],
}


def make_policies(n_clients=500, n_years=2, seed=0):
    """Synthetic policy terms with canonical column names."""
    rng = np.random.default_rng(seed)
    n = n_clients * n_years
    policies = pd.DataFrame(
        {
            "client_id": np.repeat(np.arange(1, n_clients + 1), n_years),
            "year": np.tile(np.arange(2016, 2016 + n_years), n_clients),
            "bonus_malus": rng.integers(50, 150, n),
            "duration": rng.integers(0, 30, n),
            "driver_age": rng.integers(18, 90, n),
            "licence_age": rng.integers(0, 60, n),
            "vehicle_age": rng.integers(0, 25, n),
            "vehicle_power": rng.integers(40, 250, n),
            "vehicle_value": rng.integers(5_000, 60_000, n),
        }
    )
    for field, levels in LEVELS.items():
        policies[field] = rng.choice(levels, n)
    return policies


def make_claims(policies, seed=1):
    """Poisson claim counts rising with bonus_malus, one row per claim."""
    rng = np.random.default_rng(seed)
    rate = 0.1 * np.exp((policies["bonus_malus"] - 100) / 25)
    counts = rng.poisson(rate)
    rows = policies.loc[policies.index.repeat(counts), ["client_id", "year"]]
    return rows.assign(claim_amount=rng.gamma(2.0, 800.0, len(rows))).reset_index(drop=True)


@pytest.fixture
def policies():
    return make_policies()


@pytest.fixture
def claims(policies):
    return make_claims(policies)


@pytest.fixture
def assembled(policies, claims):
    return assemble(policies, claims)


@pytest.fixture
def encoded(assembled):
    df, _ = encode(assembled)
    return df


@pytest.fixture
def matrices(encoded):
    df_train, df_test = split_frame(create_sample_split(encoded, config.ID_COLUMN))
    train = build_matrix(df_train)
    return train, build_matrix(df_test, train.feature_names)


SMALL_PARAMS = {
    "rounds": 20,
    "max_depth": 2,
    "learning_rate": 0.1,
    "column_subsample": 1.0,
    "row_subsample": 1.0,
}


@pytest.fixture
def fitted(matrices):
    train, test = matrices
    return train_model(train, test, SMALL_PARAMS)
