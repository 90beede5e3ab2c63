"""Share records and ingestion of the share document."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError

from threshold_recovery.crypto.digits import MAX_BASE, MIN_BASE, decode
from threshold_recovery.crypto.field import Arithmetic, ExactArithmetic
from threshold_recovery.errors import DegenerateInputError, ShareDecodeError, ShareFormatError
from threshold_recovery.utils import get_logger

logger = get_logger(__name__)

METADATA_KEY = "keys"


class DecodePolicy(str, Enum):
    STRICT = "strict"
    PERMISSIVE = "permissive"


@dataclass(frozen=True)
class Share:
    """A decoded point on the secret polynomial."""

    x: int
    y: int
    base: int = 10


@dataclass(frozen=True)
class ShareSet:
    declared_n: int
    threshold: int
    shares: Tuple[Share, ...]
    dropped: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    @property
    def xs(self) -> List[int]:
        return [share.x for share in self.shares]


class ThresholdKeys(BaseModel):
    """Metadata entry: total share count (informational) and threshold."""

    n: int = Field(ge=0)
    k: int = Field(ge=1)


class ShareEntry(BaseModel):
    """One share entry: base as a decimal string (or int) and the digit string."""

    base: int = Field(ge=MIN_BASE, le=MAX_BASE)
    value: str


def _parse_x(key: str) -> int:
    text = str(key).strip()
    if not (text.isascii() and text.isdigit()):
        raise ShareFormatError(f"Share key {key!r} is not a decimal x-coordinate")
    x = int(text)
    if x < 1:
        raise ShareFormatError(f"Share key {key!r} must be >= 1")
    return x


def decode_share(key: str, entry: Any, arithmetic: Arithmetic) -> Share:
    """Validate and decode a single share entry keyed by its x-coordinate."""
    x = _parse_x(key)
    try:
        record = ShareEntry.model_validate(entry)
    except ValidationError as exc:
        raise ShareFormatError(f"Share {key!r} is malformed: {exc.errors()}") from exc
    y = decode(record.value, record.base, arithmetic.modulus)
    return Share(x=x, y=y, base=record.base)


def parse_threshold_keys(data: Mapping[str, Any]) -> ThresholdKeys:
    if METADATA_KEY not in data:
        raise ShareFormatError(f"Share document is missing the '{METADATA_KEY}' entry")
    try:
        return ThresholdKeys.model_validate(data[METADATA_KEY])
    except ValidationError as exc:
        raise ShareFormatError(f"Invalid '{METADATA_KEY}' entry: {exc.errors()}") from exc


def parse_share_document(
    data: Mapping[str, Any],
    arithmetic: Optional[Arithmetic] = None,
    policy: DecodePolicy | str = DecodePolicy.STRICT,
) -> ShareSet:
    """
    Turn a raw share document into a ShareSet sorted by x.

    In strict mode the first undecodable share aborts ingestion. In permissive
    mode it is dropped, logged and recorded in ``ShareSet.dropped``. Duplicate
    x-coordinates always raise ``DegenerateInputError``.
    """
    if not isinstance(data, Mapping):
        raise ShareFormatError("Share document must be a JSON object")
    arithmetic = arithmetic or ExactArithmetic()
    policy = DecodePolicy(policy)
    keys = parse_threshold_keys(data)

    by_x: Dict[int, Share] = {}
    dropped: List[Tuple[str, str]] = []
    for key, entry in data.items():
        if key == METADATA_KEY:
            continue
        try:
            share = decode_share(key, entry, arithmetic)
        except ShareDecodeError as exc:
            if policy is DecodePolicy.STRICT:
                raise
            logger.warning("Dropping share %s: %s", key, exc)
            dropped.append((str(key), str(exc)))
            continue
        if share.x in by_x:
            raise DegenerateInputError(f"Duplicate x-coordinate {share.x} (key {key!r})")
        by_x[share.x] = share

    total_entries = len(by_x) + len(dropped)
    if keys.n != total_entries:
        logger.warning("Document declares n=%d but contains %d share entries", keys.n, total_entries)
    shares = tuple(by_x[x] for x in sorted(by_x))
    return ShareSet(declared_n=keys.n, threshold=keys.k, shares=shares, dropped=tuple(dropped))


def load_share_document(
    path: Path,
    arithmetic: Optional[Arithmetic] = None,
    policy: DecodePolicy | str = DecodePolicy.STRICT,
) -> ShareSet:
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ShareFormatError(f"Invalid share document JSON at {path}: {exc}") from exc
    return parse_share_document(data, arithmetic, policy)
