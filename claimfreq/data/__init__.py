from ._assemble import aggregate_claims, assemble
from ._load import check_columns, load_raw
from ._sample_split import create_sample_split, split_frame

__all__ = [
    "aggregate_claims",
    "assemble",
    "check_columns",
    "create_sample_split",
    "load_raw",
    "split_frame",
]
