import numpy as np
import pandas as pd
import pytest

from claimfreq.modelling import (
    RESULT_COLUMNS,
    grid_search,
    load_or_run,
    load_results,
    rank_configurations,
    save_results,
    select_configuration,
)

GRID = {
    "rounds": [10, 20],
    "max_depth": [2, 3],
    "learning_rate": [0.1],
    "column_subsample": [1.0],
    "row_subsample": [0.8],
}


def test_two_by_two_grid_gives_four_finite_rows(matrices):
    train, test = matrices

    results = grid_search(train, test, GRID, seed=5)

    assert list(results.columns) == RESULT_COLUMNS
    assert len(results) == 4
    assert np.isfinite(results["test_negative_log_likelihood"]).all()
    assert set(zip(results["rounds"], results["max_depth"])) == {(10, 2), (10, 3), (20, 2), (20, 3)}


def test_grid_search_deterministic(matrices):
    train, test = matrices

    first = grid_search(train, test, GRID, seed=5)
    second = grid_search(train, test, GRID, seed=5)

    pd.testing.assert_frame_equal(first, second)


def test_parallel_matches_sequential(matrices):
    train, test = matrices

    sequential = grid_search(train, test, GRID, seed=5, n_jobs=1)
    parallel = grid_search(train, test, GRID, seed=5, n_jobs=2)

    pd.testing.assert_frame_equal(sequential, parallel)


def test_incomplete_grid_rejected(matrices):
    train, test = matrices
    grid = {k: v for k, v in GRID.items() if k != "row_subsample"}
    with pytest.raises(ValueError, match="row_subsample"):
        grid_search(train, test, grid)


@pytest.fixture
def results():
    return pd.DataFrame(
        {
            "rounds": [500, 100, 300, 200, 400],
            "max_depth": [3, 3, 4, 2, 5],
            "learning_rate": [0.05, 0.1, 0.05, 0.1, 0.01],
            "column_subsample": [0.8, 1.0, 0.8, 0.6, 1.0],
            "row_subsample": [0.8, 0.8, 1.0, 0.6, 1.0],
            "test_negative_log_likelihood": [0.30, 0.31, 0.30, 0.32, 0.29],
        }
    )


def test_rank_by_loss_then_fewer_rounds(results):
    ranked = rank_configurations(results)

    assert list(ranked["rank"]) == [1, 2, 3, 4, 5]
    assert list(ranked["rounds"]) == [400, 300, 500, 100, 200]


def test_select_configuration_by_rank(results):
    ranked = rank_configurations(results)

    params = select_configuration(ranked, 4)

    assert params == {
        "rounds": 100,
        "max_depth": 3,
        "learning_rate": 0.1,
        "column_subsample": 1.0,
        "row_subsample": 0.8,
    }


@pytest.mark.parametrize("rank", [0, 6])
def test_select_configuration_out_of_range(results, rank):
    with pytest.raises(IndexError):
        select_configuration(rank_configurations(results), rank)


def test_results_cache_round_trip(results, tmp_path):
    path = tmp_path / "cache" / "tuning.csv"
    save_results(results, path)

    pd.testing.assert_frame_equal(load_results(path), results)


def test_cache_with_wrong_schema_is_fatal(results, tmp_path):
    path = tmp_path / "tuning.csv"
    results.drop(columns=["row_subsample"]).to_csv(path, index=False)

    with pytest.raises(ValueError, match="row_subsample"):
        load_results(path)


def test_load_or_run_prefers_cache(results, tmp_path):
    path = tmp_path / "tuning.csv"
    save_results(results, path)

    # matrices are never touched when the cache exists
    loaded = load_or_run(None, None, path)

    pd.testing.assert_frame_equal(loaded, results)


def test_load_or_run_writes_cache(matrices, tmp_path):
    train, test = matrices
    path = tmp_path / "tuning.csv"

    results = load_or_run(train, test, path, GRID)

    assert path.exists()
    pd.testing.assert_frame_equal(load_results(path), results)
