import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from threshold_recovery.crypto.field import (
    DEFAULT_PRIME,
    Arithmetic,
    ArithmeticMode,
    arithmetic_for,
    is_probable_prime,
)
from threshold_recovery.models.share import DecodePolicy

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _parse_modulus(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("modulus must be an integer")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip(), 0)
    except ValueError as exc:
        raise ValueError(f"modulus {value!r} is not an integer literal") from exc


def _parse_flag(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be true or false, got {value!r}")
    return value


def _parse_count(name: str, value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    return value


def _parse_optional_str(name: str, value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} must be a non-empty string, got {value!r}")
    return value.strip()


@dataclass
class RecoveryConfig:
    mode: ArithmeticMode = ArithmeticMode.EXACT
    modulus: int = DEFAULT_PRIME
    decode_policy: DecodePolicy = DecodePolicy.STRICT
    max_corrupted: Optional[int] = None
    detect_ambiguity: bool = False
    log_level: str = "INFO"
    json_logs: bool = False
    log_file: Optional[str] = None

    @classmethod
    def from_file(cls, path: Path) -> "RecoveryConfig":
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
            if path.suffix.lower() in {".yaml", ".yml"}:
                data = yaml.safe_load(text) or {}
            else:
                data = json.loads(text)
        except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ValueError(f"Invalid recovery config at {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"Recovery config at {path} must be a mapping")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict) -> "RecoveryConfig":
        base = cls()
        unknown = set(data) - set(base.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown config key(s): {', '.join(sorted(unknown))}")
        try:
            mode = ArithmeticMode(data.get("mode", base.mode))
            decode_policy = DecodePolicy(data.get("decode_policy", base.decode_policy))
        except ValueError as exc:
            raise ValueError(f"Invalid recovery config: {exc}") from exc
        modulus = _parse_modulus(data.get("modulus", base.modulus))
        max_corrupted = _parse_count("max_corrupted", data.get("max_corrupted"))
        log_level = data.get("log_level", base.log_level)
        if not isinstance(log_level, str):
            raise ValueError(f"log_level must be a string, got {log_level!r}")
        cfg = cls(
            mode=mode,
            modulus=modulus,
            decode_policy=decode_policy,
            max_corrupted=max_corrupted,
            detect_ambiguity=_parse_flag("detect_ambiguity", data.get("detect_ambiguity", False)),
            log_level=log_level.upper(),
            json_logs=_parse_flag("json_logs", data.get("json_logs", False)),
            log_file=_parse_optional_str("log_file", data.get("log_file")),
        )
        cfg.validate()
        return cfg

    def validate(self) -> None:
        if self.mode is ArithmeticMode.PRIME_FIELD and not is_probable_prime(self.modulus):
            raise ValueError(f"modulus {self.modulus} is not prime")
        if self.max_corrupted is not None and self.max_corrupted < 0:
            raise ValueError("max_corrupted must be non-negative")
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level '{self.log_level}'")

    def arithmetic(self) -> Arithmetic:
        return arithmetic_for(self.mode, self.modulus)
