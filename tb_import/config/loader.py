from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.validation_result import DEFAULT_TOLERANCE
from ..services.mapper import CoercionPolicy, RowSkipPolicy

"""Config loader for the trial-balance import tool.

Responsibilities:
- Load YAML config (default config/ingest.yml)
- Validate against the bundled JSON schema (ingest_schema.json)
- Apply defaults for every omitted key
- Build the immutable IngestSettings handed to the pipeline
"""

__all__ = [
    "ConfigError",
    "IngestSettings",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/ingest.yml")
SCHEMA_PATH = Path(__file__).with_name("ingest_schema.json")

DEFAULT_SAMPLE_SIZE = 8000
DEFAULT_ISSUE_LOG_DIR = "logs"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class IngestSettings:
    """Everything the pipeline can be tuned with. Defaults match the stock import."""
    tolerance: Decimal = DEFAULT_TOLERANCE
    sample_size: int = DEFAULT_SAMPLE_SIZE  # Leading characters inspected by the sniffer
    coercion: CoercionPolicy = CoercionPolicy.LENIENT
    skip_policy: RowSkipPolicy = field(default_factory=RowSkipPolicy)
    issue_log_dir: str = DEFAULT_ISSUE_LOG_DIR


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: If the schema file is missing or unreadable, or the
            config data violates it (unknown keys, wrong types, bad ranges)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> IngestSettings:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    defaults = RowSkipPolicy()
    try:
        skip_policy = RowSkipPolicy(
            skip_summary_lines=data.get("skip_summary_lines", defaults.skip_summary_lines),
            summary_pattern=data.get("summary_pattern", defaults.summary_pattern),
            skip_zero_amount_rows=data.get("skip_zero_amount_rows", defaults.skip_zero_amount_rows),
        )
    except re.error as e:
        raise ConfigError(f"invalid summary_pattern: {e}") from e
    # str() first: YAML floats such as 0.01 must not leak binary noise into Decimal
    tolerance = Decimal(str(data.get("tolerance", DEFAULT_TOLERANCE)))
    return IngestSettings(
        tolerance=tolerance,
        sample_size=data.get("sample_size", DEFAULT_SAMPLE_SIZE),
        coercion=CoercionPolicy(data.get("coercion", CoercionPolicy.LENIENT.value)),
        skip_policy=skip_policy,
        issue_log_dir=data.get("issue_log_dir", DEFAULT_ISSUE_LOG_DIR),
    )
