from .share import (
    DecodePolicy,
    Share,
    ShareEntry,
    ShareSet,
    ThresholdKeys,
    decode_share,
    load_share_document,
    parse_share_document,
)

__all__ = [
    "DecodePolicy",
    "Share",
    "ShareEntry",
    "ShareSet",
    "ThresholdKeys",
    "decode_share",
    "load_share_document",
    "parse_share_document",
]
