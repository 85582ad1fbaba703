import numpy as np
import pytest

from claimfreq.evaluation import assign_buckets, lift_table, plot_lift_chart


@pytest.mark.parametrize("n_rows", [10, 37, 100, 1001])
def test_exactly_ten_non_empty_buckets(n_rows):
    rng = np.random.default_rng(n_rows)
    predicted = rng.gamma(2.0, 0.05, n_rows)
    exposure = np.ones(n_rows)

    buckets = assign_buckets(predicted, exposure)

    assert set(buckets) == set(range(1, 11))


def test_row_reaching_total_goes_to_last_bucket():
    predicted = np.arange(20, dtype=float)[::-1]
    exposure = np.ones(20)

    buckets = assign_buckets(predicted, exposure)

    # highest prediction is the first input row and closes the cumulative sum
    assert buckets[0] == 10
    assert buckets.max() == 10


@pytest.mark.parametrize("row_exposure", [1.0, 0.1, 0.3])
def test_equal_exposure_gives_equal_buckets(row_exposure):
    predicted = np.linspace(0.01, 0.5, 100)
    buckets = assign_buckets(predicted, np.full(100, row_exposure))

    assert np.bincount(buckets)[1:].tolist() == [10] * 10
    # ascending predictions -> non-decreasing buckets
    assert (np.diff(buckets) >= 0).all()


def test_buckets_follow_input_order():
    predicted = np.array([0.9, 0.1, 0.5, 0.3])
    buckets = assign_buckets(predicted, np.ones(4), n_buckets=4)
    assert buckets.tolist() == [4, 1, 3, 2]


def test_zero_exposure_rejected():
    with pytest.raises(ValueError):
        assign_buckets([0.1, 0.2], [0.0, 0.0])


def test_lift_table_rates():
    predicted = np.repeat([0.1, 0.2], 10)
    observed = np.repeat([1, 3], 10) * np.tile([1, 0], 10)
    exposure = np.ones(20)

    table = lift_table(observed, predicted, exposure, n_buckets=2)

    assert table.index.tolist() == [1, 2]
    np.testing.assert_allclose(table["exposure"], [10, 10])
    np.testing.assert_allclose(table["observed"], [0.5, 1.5])
    np.testing.assert_allclose(table["predicted"], [0.1, 0.2])


def test_lift_chart_on_fitted_model(fitted, matrices):
    _, test = matrices
    table = lift_table(test.y, fitted.predict_rate(test), test.exposure)

    assert len(table) == 10
    np.testing.assert_allclose(table["exposure"].sum(), test.exposure.sum())
    fig = plot_lift_chart(table)
    assert fig.axes[0].get_title()
