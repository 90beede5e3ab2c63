"""End-to-end recovery: share document -> decoded shares -> consistent subset -> secret."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

from threshold_recovery.config import RecoveryConfig
from threshold_recovery.models.share import ShareSet, load_share_document, parse_share_document
from threshold_recovery.search import ConsistencySearch, ReconstructionResult
from threshold_recovery.utils import MetricsSink, get_logger

logger = get_logger(__name__)


def _search_for(config: RecoveryConfig, metrics: Optional[MetricsSink]) -> ConsistencySearch:
    return ConsistencySearch(
        config.arithmetic(),
        max_corrupted=config.max_corrupted,
        detect_ambiguity=config.detect_ambiguity,
        metrics=metrics,
    )


def recover_from_share_set(
    share_set: ShareSet,
    config: Optional[RecoveryConfig] = None,
    metrics: Optional[MetricsSink] = None,
) -> ReconstructionResult:
    config = config or RecoveryConfig()
    logger.info(
        "Recovering secret from %d shares (threshold %d, %s mode)",
        len(share_set.shares),
        share_set.threshold,
        config.mode.value,
    )
    return _search_for(config, metrics).run(share_set.shares, share_set.threshold)


def recover_secret(
    data: Mapping[str, Any],
    config: Optional[RecoveryConfig] = None,
    metrics: Optional[MetricsSink] = None,
) -> ReconstructionResult:
    config = config or RecoveryConfig()
    share_set = parse_share_document(data, config.arithmetic(), config.decode_policy)
    return recover_from_share_set(share_set, config, metrics)


def recover_from_file(
    path: Path,
    config: Optional[RecoveryConfig] = None,
    metrics: Optional[MetricsSink] = None,
) -> ReconstructionResult:
    config = config or RecoveryConfig()
    share_set = load_share_document(path, config.arithmetic(), config.decode_policy)
    return recover_from_share_set(share_set, config, metrics)
