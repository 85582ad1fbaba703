"""Join claims onto policy terms.

The claim table has one row per claim; we aggregate it per (client, year)
and left-join onto the policy table so every policy term carries its claim
count and total claim amount.
"""

import logging

from claimfreq import config

logger = logging.getLogger(__name__)


def aggregate_claims(claims, keys=None):
    """Count and sum claims per policy term.

    Parameters
    ----------
    claims : pd.DataFrame
        One row per claim with the key columns and ``claim_amount``.
    keys : list of str, optional
        Grouping columns, by default ``config.KEY_COLUMNS``.

    Returns
    -------
    pd.DataFrame
        One row per key with ``claim_count`` and ``claim_amount``.
    """
    keys = keys or config.KEY_COLUMNS
    return (
        claims.groupby(keys, sort=True)[config.AMOUNT_COLUMN]
        .agg(["size", "sum"])
        .rename(columns={"size": config.TARGET_COLUMN, "sum": config.AMOUNT_COLUMN})
        .reset_index()
    )


def assemble(policies, claims, keys=None):
    """Build one row per policy term with claim count, amount and exposure.

    Policy terms without claims get ``claim_count = 0`` and
    ``claim_amount = 0.0``. Terms that still have a missing field after the
    join are dropped; this loses a small share of the data and is logged,
    not raised.
    """
    keys = keys or config.KEY_COLUMNS
    aggregated = aggregate_claims(claims, keys)

    df = policies.merge(aggregated, on=keys, how="left", validate="many_to_one")

    # no claim -> 0
    df = df.fillna(value={config.TARGET_COLUMN: 0, config.AMOUNT_COLUMN: 0.0})

    n_before = len(df)
    df = df.dropna(how="any")
    n_dropped = n_before - len(df)
    if n_dropped:
        logger.info(
            "Dropped %d of %d policy terms with missing fields (%.2f%%)",
            n_dropped, n_before, 100 * n_dropped / n_before,
        )

    return df.assign(
        **{
            config.TARGET_COLUMN: df[config.TARGET_COLUMN].astype("int64"),
            config.AMOUNT_COLUMN: df[config.AMOUNT_COLUMN].astype(float),
            config.EXPOSURE_COLUMN: config.DEFAULT_EXPOSURE,
        }
    ).reset_index(drop=True)
