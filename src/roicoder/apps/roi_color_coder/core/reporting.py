"""Report generation for the ROI color coder."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping, Sequence

from .colorizer import index_measurements
from .models import ColorCodingResult, Region


def _hex(color: Sequence[int]) -> str:
    return "#{:02x}{:02x}{:02x}".format(*color)


def region_records(
    result: ColorCodingResult,
    regions: Sequence[Region],
    measurements_by_id: Mapping[object, object],
) -> list[dict[str, object]]:
    assignment = result.assignment
    values = index_measurements(measurements_by_id)
    records = []
    for region in regions:
        color = assignment.get(region.id)
        if region.id in assignment.skipped:
            status = "skipped"
        elif region.id in assignment.no_data:
            status = "no_data"
        else:
            status = "colored"
        records.append(
            {
                "type": "region",
                "id": region.id,
                "value": values.get(region.id)
                if status == "colored"
                else None,
                "t": assignment.normalized.get(region.id),
                "color": list(color) if color else None,
                "hex": _hex(color) if color else None,
                "status": status,
            }
        )
    return records


def write_jsonl(
    result: ColorCodingResult,
    regions: Sequence[Region],
    measurements_by_id: Mapping[object, object],
    path: Path,
) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        for record in region_records(result, regions, measurements_by_id):
            handle.write(json.dumps(record, ensure_ascii=False))
            handle.write("\n")
        legend = {"type": "legend", **result.legend.to_json()}
        handle.write(json.dumps(legend, ensure_ascii=False))
        handle.write("\n")


def write_markdown(
    result: ColorCodingResult,
    regions: Sequence[Region],
    measurements_by_id: Mapping[object, object],
    path: Path,
) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    value_range = result.value_range

    if value_range.overridden:
        range_source = "fixed override"
    elif value_range.clamp_percentile:
        low, high = value_range.clamp_percentile
        range_source = f"percentiles {low:g}–{high:g}"
    else:
        range_source = "data extremes"

    lines = ["# ROI Color Coder Report", ""]
    lines.append(f"- **LUT:** {result.lut.name} ({len(result.lut)} entries)")
    lines.append(f"- **Mode:** {result.legend.mode.value}")
    lines.append(
        f"- **Range:** {value_range.minimum:g} – {value_range.maximum:g} ({range_source})"
    )
    lines.append(f"- **Regions:** {len(regions)}")
    lines.append("")

    lines.append("## Legend")
    lines.append("")
    lines.append("| Position | Value | Label | Color |")
    lines.append("| ---: | ---: | ---: | :---: |")
    for tick in result.legend.ticks:
        lines.append(
            f"| {tick.position:.3f} | {tick.value:g} | {tick.label} | `{_hex(tick.color)}` |"
        )
    lines.append("")

    lines.append("## Regions")
    lines.append("")
    if not regions:
        lines.append("No regions were processed.")
    else:
        lines.append("| Region | Value | t | Color | Status |")
        lines.append("| --- | ---: | ---: | :---: | --- |")
        for record in region_records(result, regions, measurements_by_id):
            value = record["value"]
            t = record["t"]
            lines.append(
                "| {id} | {value} | {t} | {hex} | {status} |".format(
                    id=record["id"],
                    value=f"{value:g}" if isinstance(value, (int, float)) else "—",
                    t=f"{t:.3f}" if isinstance(t, float) else "—",
                    hex=f"`{record['hex']}`" if record["hex"] else "—",
                    status=str(record["status"]).upper(),
                )
            )

    if result.notes:
        lines.append("")
        lines.append("## Notes")
        lines.append("")
        for note in result.notes:
            lines.append(f"- {note}")

    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
