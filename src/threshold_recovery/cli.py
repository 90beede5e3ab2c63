"""
Recover secrets from one or more share documents.

Usage:
    threshold-recover testcase1.json
    threshold-recover shares.json --mode prime_field --modulus 0x7fffffffffffffffffffffffffffffff
    threshold-recover shares.json --policy permissive --max-corrupted 1 --detect-ambiguity
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from threshold_recovery.config import RecoveryConfig, load_config
from threshold_recovery.errors import (
    DegenerateInputError,
    InsufficientSharesError,
    NoConsistentSubsetError,
    ShareDecodeError,
)
from threshold_recovery.recovery import recover_from_file
from threshold_recovery.utils import configure_logging, get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_CONFIG = 1
EXIT_MALFORMED = 2
EXIT_INSUFFICIENT = 3
EXIT_NO_CONSISTENT_SUBSET = 4


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="threshold-recover",
        description="Recover a threshold secret from base-encoded shares.",
    )
    parser.add_argument("inputs", nargs="+", type=Path, help="Share document(s) in JSON")
    parser.add_argument("--config", type=Path, default=None, help="Config file (JSON or YAML)")
    parser.add_argument(
        "--mode",
        choices=["exact", "prime_field"],
        default=None,
        help="Arithmetic mode (default: exact)",
    )
    parser.add_argument("--modulus", default=None, help="Field prime for prime_field mode, e.g. 0x7f...")
    parser.add_argument(
        "--policy",
        choices=["strict", "permissive"],
        default=None,
        help="strict aborts on an undecodable share, permissive drops it",
    )
    parser.add_argument(
        "--max-corrupted",
        type=int,
        default=None,
        help="Shares allowed to disagree with the accepted polynomial (default: (n-k)//2)",
    )
    parser.add_argument(
        "--detect-ambiguity",
        action="store_true",
        help="Keep searching after the first match and flag conflicting secrets",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO)")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    return parser


def config_from_args(args: argparse.Namespace) -> RecoveryConfig:
    """Load the config file (if any) and apply command-line overrides."""
    base = load_config(args.config)
    overrides = {
        "mode": args.mode,
        "modulus": args.modulus,
        "decode_policy": args.policy,
        "max_corrupted": args.max_corrupted,
        "log_level": args.log_level,
        "log_file": args.log_file,
    }
    data = {
        "mode": base.mode,
        "modulus": base.modulus,
        "decode_policy": base.decode_policy,
        "max_corrupted": base.max_corrupted,
        "detect_ambiguity": base.detect_ambiguity or args.detect_ambiguity,
        "log_level": base.log_level,
        "json_logs": base.json_logs or args.json_logs,
        "log_file": base.log_file,
    }
    data.update({key: value for key, value in overrides.items() if value is not None})
    return RecoveryConfig.from_dict(data)


def _recover_one(path: Path, config: RecoveryConfig) -> int:
    try:
        result = recover_from_file(path, config)
    except (ShareDecodeError, DegenerateInputError, OSError) as exc:
        logger.error("%s: malformed input: %s", path, exc)
        return EXIT_MALFORMED
    except InsufficientSharesError as exc:
        logger.error("%s: %s", path, exc)
        return EXIT_INSUFFICIENT
    except NoConsistentSubsetError as exc:
        logger.error("%s: %s", path, exc)
        return EXIT_NO_CONSISTENT_SUBSET
    line = f"{path}: {result.secret} (shares x={result.subset_xs}"
    if result.suspect_xs:
        line += f", suspected corrupt x={list(result.suspect_xs)}"
    line += ")"
    if result.ambiguous:
        line += f" AMBIGUOUS, alternatives: {list(result.alternative_secrets)}"
    print(line)
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = config_from_args(args)
    except (ValueError, FileNotFoundError) as exc:
        print(f"threshold-recover: invalid configuration: {exc}", file=sys.stderr)
        return EXIT_CONFIG
    configure_logging(config.log_level, json_output=config.json_logs, log_file=config.log_file)

    codes: List[int] = [_recover_one(path, config) for path in args.inputs]
    return next((code for code in codes if code != EXIT_OK), EXIT_OK)


if __name__ == "__main__":
    sys.exit(main())
