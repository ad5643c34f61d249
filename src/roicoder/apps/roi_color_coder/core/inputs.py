"""Readers for the command line inputs: region lists and measurement tables."""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from .models import Region

logger = logging.getLogger(__name__)


def load_regions(path: Path) -> List[Region]:
    """Read ``[{"id": ..., "points": [[x, y], ...]}, ...]`` from a JSON file.

    A top-level object with a ``regions`` key is accepted as well.
    """

    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("regions", [])
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of regions")

    regions: List[Region] = []
    seen: set[str] = set()
    for index, entry in enumerate(data):
        if not isinstance(entry, dict) or "id" not in entry:
            raise ValueError(f"Region #{index} in {path} has no 'id'")
        region_id = str(entry["id"])
        if region_id in seen:
            raise ValueError(f"Duplicate region id '{region_id}' in {path}")
        seen.add(region_id)
        points = entry.get("points") or []
        try:
            regions.append(Region.from_points(region_id, points))
        except (TypeError, ValueError, IndexError) as exc:
            raise ValueError(f"Region '{region_id}' has invalid points: {exc}") from exc
    return regions


def _parse_value(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def load_measurements(
    path: Path, column: str, *, id_column: str = "id"
) -> Dict[str, Optional[float]]:
    """Read one numeric *column* of a CSV table keyed by *id_column*.

    Empty or non-numeric cells become ``None`` (missing).
    """

    with Path(path).open("r", encoding="utf-8", newline="") as handle:
        reader = csv.DictReader(handle)
        fieldnames = reader.fieldnames or []
        if id_column not in fieldnames:
            raise ValueError(f"Column '{id_column}' not found in {path}")
        if column not in fieldnames:
            raise ValueError(
                f"Column '{column}' not found in {path}. Available: {', '.join(fieldnames)}"
            )
        measurements: Dict[str, Optional[float]] = {}
        for row in reader:
            region_id = (row.get(id_column) or "").strip()
            if not region_id:
                continue
            measurements[region_id] = _parse_value(row.get(column))

    missing = sum(1 for value in measurements.values() if value is None)
    if missing:
        logger.debug("%d row(s) in %s have no usable '%s' value", missing, path, column)
    return measurements
