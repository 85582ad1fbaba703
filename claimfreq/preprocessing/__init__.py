from ._one_hot import ReferenceLevelEncoder, encode

__all__ = ["ReferenceLevelEncoder", "encode"]
