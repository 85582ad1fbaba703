"""Loader for the motor policy and claim tables.

Design notes:
- Both sources are plain CSV exports of the packaged motor pricing dataset:
    one row per (client, year) policy term and one row per claim event.
- Raw column names are mapped to the canonical names in ``config`` right
    after reading, so nothing downstream depends on the export's naming.
- A missing column is a schema mismatch and fails immediately.
"""

import logging
from pathlib import Path

import pandas as pd

from claimfreq import config

logger = logging.getLogger(__name__)


def check_columns(df, expected, source):
    """Raise ``ValueError`` if any of ``expected`` is missing from ``df``."""
    missing = [col for col in expected if col not in df.columns]
    if missing:
        raise ValueError(
            f"{source} is missing expected columns {missing}; "
            f"found {list(df.columns)}"
        )


def _read_table(path, columns, source):
    # Quotes around header names show up in some exports ('"id_client"')
    df = pd.read_csv(path)
    df = df.rename(lambda x: x.replace('"', ""), axis="columns")
    check_columns(df, list(columns), source)
    return df[list(columns)].rename(columns=columns)


def load_raw(policy_path=None, claim_path=None):
    """Load the policy and claim tables with canonical column names.

    Parameters
    ----------
    policy_path : str or Path, optional
        Policy CSV, by default ``config.DATA_DIR / config.POLICY_FILE``.
    claim_path : str or Path, optional
        Claim CSV, by default ``config.DATA_DIR / config.CLAIM_FILE``.

    Returns
    -------
    tuple of pd.DataFrame
        ``(policies, claims)``.
    """
    policy_path = Path(policy_path or config.DATA_DIR / config.POLICY_FILE)
    claim_path = Path(claim_path or config.DATA_DIR / config.CLAIM_FILE)

    policies = _read_table(policy_path, config.POLICY_COLUMNS, "policy table")
    claims = _read_table(claim_path, config.CLAIM_COLUMNS, "claim table")

    logger.info(
        "Loaded %d policy terms from %s and %d claims from %s",
        len(policies), policy_path, len(claims), claim_path,
    )
    return policies, claims
