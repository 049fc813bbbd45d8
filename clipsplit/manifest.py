"""JSON manifest schema — the contract between CLI/API and engine."""

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from clipsplit.errors import ValidationError
from clipsplit.models import TimeRange
from clipsplit.utils import gb_to_bytes, is_valid_partition_size, parse_timestamp

DEFAULT_TARGET_SIZE_GB = 4.0


@dataclass
class Manifest:
    """A split request: where to read, where to write, how big, what to skip."""

    input: Path
    output_dir: Path
    target_size_bytes: int = gb_to_bytes(DEFAULT_TARGET_SIZE_GB)
    exclusions: list[TimeRange] = field(default_factory=list)
    version: str = "1"


def parse_exclusion(data: Any) -> TimeRange:
    """Build a TimeRange from ``{"start": ..., "end": ...}``.

    Either bound may be seconds or a ``[HH:]MM:SS[.fff]`` timestamp.
    """
    if not isinstance(data, dict) or "start" not in data or "end" not in data:
        raise ValidationError(f"Exclusion must have 'start' and 'end': {data!r}")

    try:
        start = parse_timestamp(data["start"])
        end = parse_timestamp(data["end"])
    except (TypeError, ValueError) as e:
        raise ValidationError(str(e)) from e

    if not (math.isfinite(start) and math.isfinite(end)):
        raise ValidationError(f"Exclusion bounds must be finite, got {start}-{end}")
    if start < 0 or end < start:
        raise ValidationError(
            f"Exclusion must satisfy 0 <= start <= end, got {start}-{end}"
        )
    return TimeRange(start=start, end=end)


def _target_size_bytes(data: dict) -> int:
    if "target_size_bytes" in data and "target_size_gb" in data:
        raise ValidationError("Give either 'target_size_bytes' or 'target_size_gb', not both")

    if "target_size_bytes" in data:
        try:
            size = int(data["target_size_bytes"])
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid target_size_bytes: {data['target_size_bytes']!r}") from e
        if size <= 0:
            raise ValidationError("target_size_bytes must be positive")
        return size

    try:
        size_gb = float(data.get("target_size_gb", DEFAULT_TARGET_SIZE_GB))
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid target_size_gb: {data['target_size_gb']!r}") from e
    if not is_valid_partition_size(size_gb):
        raise ValidationError(f"target_size_gb must be in (0, 100], got {size_gb}")
    return gb_to_bytes(size_gb)


def manifest_from_dict(data: dict) -> Manifest:
    """Validate a decoded manifest and build a Manifest from it."""
    if not isinstance(data, dict) or "input" not in data:
        raise ValidationError("Manifest must contain an 'input' field")

    input_path = Path(data["input"])
    output_dir = Path(data["output_dir"]) if data.get("output_dir") else input_path.parent

    exclusions = data.get("exclusions") or []
    if not isinstance(exclusions, list):
        raise ValidationError("'exclusions' must be a list")

    return Manifest(
        version=str(data.get("version", "1")),
        input=input_path,
        output_dir=output_dir,
        target_size_bytes=_target_size_bytes(data),
        exclusions=[parse_exclusion(e) for e in exclusions],
    )


def load_manifest(path: str | Path) -> Manifest:
    """Load and validate a manifest from a JSON file."""
    path = Path(path)
    data = json.loads(path.read_text())
    return manifest_from_dict(data)
