import numpy as np

from claimfreq import config


def create_sample_split(df, id_column, training_frac=config.TRAINING_FRAC, seed=config.RANDOM_STATE):
    """Create sample split based on ID column.

    Every row of a given id lands in the same partition, so partition sizes
    are only approximately ``training_frac`` by row count.

    Parameters
    ----------
    df : pd.DataFrame
        Training data
    id_column : str or list of str
        Name of ID column(s). Several columns are joined into one key.
    training_frac : float, optional
        Fraction of distinct ids to use for training, by default 0.8
    seed : int, optional
        Seed for the id permutation, by default ``config.RANDOM_STATE``

    Returns
    -------
    pd.DataFrame
        Copy of the data with a ``sample`` column containing train/test.
    """
    if not 0 < training_frac < 1:
        raise ValueError(f"training_frac must be in (0, 1), got {training_frac}")

    if isinstance(id_column, str):
        ids = df[id_column]
    else:
        # several columns -> one string key per row
        ids = df[list(id_column)].astype(str).agg("_".join, axis=1)

    # sort first so the permutation only depends on the seed, not on row order
    unique_ids = np.sort(ids.unique())
    rng = np.random.default_rng(seed)
    shuffled = rng.permutation(unique_ids)

    n_train = int(round(training_frac * len(unique_ids)))
    train_ids = shuffled[:n_train]

    sample = np.where(ids.isin(train_ids), "train", "test")
    return df.assign(**{config.SAMPLE_COLUMN: sample})


def split_frame(df, sample_column=config.SAMPLE_COLUMN):
    """Return ``(train, test)`` copies of a frame carrying a sample column."""
    train = df[df[sample_column] == "train"].copy()
    test = df[df[sample_column] == "test"].copy()
    return train, test
